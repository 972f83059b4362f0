# core/punch/landmarks.py

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence

# MediaPipe Pose indices for the 17 keypoints we classify on
MEDIAPIPE_INDEX: Dict[str, int] = {
    "nose": 0,
    "left_eye": 2,
    "right_eye": 5,
    "left_ear": 7,
    "right_ear": 8,
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
    "left_knee": 25,
    "right_knee": 26,
    "left_ankle": 27,
    "right_ankle": 28,
}

LANDMARK_NAMES = tuple(MEDIAPIPE_INDEX)


@dataclass(frozen=True)
class Keypoint:
    x: float            # pixels
    y: float            # pixels, grows downward
    confidence: float   # 0..1, not necessarily calibrated


@dataclass(frozen=True)
class LandmarkFrame:
    width: int
    height: int
    landmarks: Mapping[str, Keypoint] = field(default_factory=dict)
    timestamp: Optional[float] = None

    def __post_init__(self):
        unknown = sorted(set(self.landmarks) - set(LANDMARK_NAMES))
        if unknown:
            raise ValueError(f"Unknown landmark names: {', '.join(unknown)}")
        # Read-only copy of the caller's mapping
        object.__setattr__(self, "landmarks", MappingProxyType(dict(self.landmarks)))

    def get(self, name: str) -> Optional[Keypoint]:
        return self.landmarks.get(name)

    @classmethod
    def from_mediapipe(cls, landmarks: Sequence, width: int, height: int,
                       timestamp: Optional[float] = None) -> "LandmarkFrame":
        """
        Pass MediaPipe landmarks directly:
          LandmarkFrame.from_mediapipe(res.pose_landmarks.landmark, w, h, t=now)

        MediaPipe coordinates are normalised to 0..1; they are scaled to pixels here
        so every downstream threshold is in the frame's own pixel space.
        """
        points: Dict[str, Keypoint] = {}
        for name, idx in MEDIAPIPE_INDEX.items():
            if idx >= len(landmarks):
                continue
            lm = landmarks[idx]
            points[name] = Keypoint(
                x=float(lm.x) * width,
                y=float(lm.y) * height,
                confidence=float(getattr(lm, "visibility", 0.0)),
            )
        return cls(width=width, height=height, landmarks=points, timestamp=timestamp)
