import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.punch.landmarks import Keypoint, LandmarkFrame  # noqa: E402

WIDTH, HEIGHT = 640, 480  # diagonal is exactly 800 px

Arm = Dict[str, Tuple[float, float]]

# Left arm, shoulder fixed at (300, 150).
# REST: extension 50/800 = 0.0625 (below the retraction threshold).
# PUNCH: wrist moves 70 px, extension 120/800 = 0.15, all five forward signals agree.
LEFT_REST: Arm = {"wrist": (300, 200), "elbow": (330, 190), "shoulder": (300, 150)}
LEFT_PUNCH: Arm = {"wrist": (300, 270), "elbow": (320, 215), "shoulder": (300, 150)}

# Right arm, same geometry mirrored around x = 350.
RIGHT_REST: Arm = {"wrist": (400, 200), "elbow": (370, 190), "shoulder": (400, 150)}
RIGHT_PUNCH: Arm = {"wrist": (400, 270), "elbow": (380, 215), "shoulder": (400, 150)}


def build_frame(left: Optional[Arm] = None, right: Optional[Arm] = None,
                confidence: float = 0.9, width: int = WIDTH, height: int = HEIGHT,
                timestamp: Optional[float] = None) -> LandmarkFrame:
    points = {}
    for side, arm in (("left", left), ("right", right)):
        if not arm:
            continue
        for joint, (x, y) in arm.items():
            points[f"{side}_{joint}"] = Keypoint(float(x), float(y), confidence)
    return LandmarkFrame(width=width, height=height, landmarks=points, timestamp=timestamp)


@pytest.fixture
def make_frame():
    return build_frame
