# core/punch/signals.py

from dataclasses import dataclass
from typing import Optional
import math

from .config import PunchConfig
from .landmarks import Keypoint


@dataclass(frozen=True)
class ArmSnapshot:
    wrist: Optional[Keypoint]
    elbow: Optional[Keypoint]
    shoulder: Optional[Keypoint]

    def complete(self) -> bool:
        return self.wrist is not None and self.elbow is not None and self.shoulder is not None


@dataclass(frozen=True)
class Velocity:
    dx: float
    dy: float
    magnitude: float


ZERO_VELOCITY = Velocity(0.0, 0.0, 0.0)


def distance(a: Keypoint, b: Keypoint) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def compute_velocity(current: Optional[Keypoint], previous: Optional[Keypoint]) -> Velocity:
    # Raw one-step difference, no smoothing: latency matters more than jitter here.
    if current is None or previous is None:
        return ZERO_VELOCITY
    dx = current.x - previous.x
    dy = current.y - previous.y
    return Velocity(dx, dy, math.hypot(dx, dy))


def arm_extension(wrist: Optional[Keypoint], shoulder: Optional[Keypoint],
                  width: float, height: float) -> Optional[float]:
    """Wrist-shoulder distance over the frame diagonal (roughly 0..0.7)."""
    if wrist is None or shoulder is None:
        return None
    diagonal = math.hypot(width, height)
    if diagonal < 1e-12:
        return None
    return distance(wrist, shoulder) / diagonal


def in_frame(point: Keypoint, width: float, height: float, margin: float) -> bool:
    return (
        width * margin <= point.x <= width * (1 - margin)
        and height * margin <= point.y <= height * (1 - margin)
    )


def wrist_is_usable(wrist: Optional[Keypoint], width: float, height: float, cfg: PunchConfig) -> bool:
    """
    Shared gate for the visibility counter and the punch precondition:
    confident and away from the frame edges.
    """
    if wrist is None or width <= 0 or height <= 0:
        return False
    if not wrist.confidence > cfg.confidence_threshold:
        return False
    return in_frame(wrist, width, height, cfg.frame_margin)
