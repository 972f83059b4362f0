import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union


@dataclass
class PunchConfig:
    # Visibility gate
    confidence_threshold: float = 0.4
    frame_margin: float = 0.1          # fraction of W/H trimmed off each edge
    min_frames_in_frame: int = 4

    # Punch trigger
    velocity_threshold: float = 35.0   # pixels per frame
    extension_threshold: float = 0.12  # wrist-shoulder / frame diagonal
    arm_retraction_threshold: float = 0.08
    cooldown_period: int = 12          # frames

    # Forward-motion vote (calibrated by hand, tune as you go)
    forward_quorum: int = 2
    toward_camera_margin_px: float = 3.0
    arm_length_growth: float = 1.05
    differential_movement_ratio: float = 1.2
    alignment_fraction: float = 0.15
    shoulder_distance_growth: float = 1.03

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            # int fields take ints only; float fields also accept a JSON integer such as 50
            allowed = (int,) if f.type is int else (int, float)
            if isinstance(value, bool) or not isinstance(value, allowed):
                raise ValueError(f"{f.name} must be {f.type.__name__}, got {value!r}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(f"confidence_threshold must be in [0, 1], got {self.confidence_threshold}")
        if not 0.0 <= self.frame_margin < 0.5:
            raise ValueError(f"frame_margin must be in [0, 0.5), got {self.frame_margin}")
        if self.min_frames_in_frame < 0:
            raise ValueError(f"min_frames_in_frame must be >= 0, got {self.min_frames_in_frame}")
        if self.cooldown_period < 0:
            raise ValueError(f"cooldown_period must be >= 0, got {self.cooldown_period}")
        if self.velocity_threshold < 0:
            raise ValueError(f"velocity_threshold must be >= 0, got {self.velocity_threshold}")
        if self.extension_threshold < 0 or self.arm_retraction_threshold < 0:
            raise ValueError("extension thresholds must be >= 0")
        if self.forward_quorum < 1:
            raise ValueError(f"forward_quorum must be >= 1, got {self.forward_quorum}")
        if self.alignment_fraction <= 0:
            raise ValueError(f"alignment_fraction must be > 0, got {self.alignment_fraction}")
        if self.toward_camera_margin_px < 0:
            raise ValueError(f"toward_camera_margin_px must be >= 0, got {self.toward_camera_margin_px}")
        for name in ("arm_length_growth", "differential_movement_ratio", "shoulder_distance_growth"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PunchConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: Union[str, Path]) -> PunchConfig:
    """Read a JSON object of overrides; missing keys keep their defaults."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return PunchConfig.from_dict(data)
