# core/punch/forward_motion.py
"""
2D landmarks cannot see motion along the camera axis, so a forward punch is
inferred from several weak 2D proxies. Each predicate votes independently and
the motion counts as forward once `quorum` of them agree.

Predicates take (current, previous, width, height, cfg) where current and
previous are complete ArmSnapshots of the same arm.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging

from .config import PunchConfig
from .signals import ArmSnapshot, distance

logger = logging.getLogger(__name__)

Predicate = Callable[[ArmSnapshot, ArmSnapshot, float, float, PunchConfig], bool]


def moving_toward_camera(cur: ArmSnapshot, prev: ArmSnapshot, width: float, height: float,
                         cfg: PunchConfig) -> bool:
    # Foreshortening: the fist drops in image y faster than the elbow when thrown at the lens
    wrist_dy = cur.wrist.y - prev.wrist.y
    elbow_dy = cur.elbow.y - prev.elbow.y
    return wrist_dy > elbow_dy + cfg.toward_camera_margin_px


def arm_length_increasing(cur: ArmSnapshot, prev: ArmSnapshot, width: float, height: float,
                          cfg: PunchConfig) -> bool:
    return distance(cur.wrist, cur.elbow) > distance(prev.wrist, prev.elbow) * cfg.arm_length_growth


def wrist_outpacing_elbow(cur: ArmSnapshot, prev: ArmSnapshot, width: float, height: float,
                          cfg: PunchConfig) -> bool:
    wrist_move = distance(cur.wrist, prev.wrist)
    elbow_move = distance(cur.elbow, prev.elbow)
    return wrist_move > elbow_move * cfg.differential_movement_ratio


def wrist_aligned_with_shoulder(cur: ArmSnapshot, prev: ArmSnapshot, width: float, height: float,
                                cfg: PunchConfig) -> bool:
    # Straight punches land in front of the body, not out to the side
    return abs(cur.wrist.x - cur.shoulder.x) < width * cfg.alignment_fraction


def wrist_moving_forward(cur: ArmSnapshot, prev: ArmSnapshot, width: float, height: float,
                         cfg: PunchConfig) -> bool:
    # Written as a product so a zero previous distance cannot divide by zero
    return distance(cur.wrist, cur.shoulder) > distance(prev.wrist, prev.shoulder) * cfg.shoulder_distance_growth


DEFAULT_PREDICATES: Tuple[Tuple[str, Predicate], ...] = (
    ("toward_camera", moving_toward_camera),
    ("arm_length", arm_length_increasing),
    ("wrist_movement", wrist_outpacing_elbow),
    ("aligned", wrist_aligned_with_shoulder),
    ("z_movement", wrist_moving_forward),
)


@dataclass(frozen=True)
class ForwardVerdict:
    votes: int
    signals: Dict[str, bool]
    is_forward: bool


class ForwardMotionClassifier:
    def __init__(self, cfg: PunchConfig,
                 predicates: Sequence[Tuple[str, Predicate]] = DEFAULT_PREDICATES,
                 quorum: Optional[int] = None):
        self.cfg = cfg
        self.predicates: List[Tuple[str, Predicate]] = list(predicates)
        self.quorum = cfg.forward_quorum if quorum is None else quorum
        if not 1 <= self.quorum <= len(self.predicates):
            raise ValueError(
                f"quorum must be between 1 and {len(self.predicates)}, got {self.quorum}"
            )

    def evaluate(self, current: ArmSnapshot, previous: Optional[ArmSnapshot],
                 width: float, height: float) -> ForwardVerdict:
        if previous is None or not current.complete() or not previous.complete():
            return ForwardVerdict(votes=0, signals={}, is_forward=False)

        results = [
            (name, bool(pred(current, previous, width, height, self.cfg)))
            for name, pred in self.predicates
        ]
        # Every predicate votes, even under a repeated name; signals keeps the last per name
        votes = sum(ok for _, ok in results)
        signals = dict(results)
        verdict = ForwardVerdict(votes=votes, signals=signals, is_forward=votes >= self.quorum)
        logger.debug("forward vote %d/%d (quorum %d): %s",
                     votes, len(self.predicates), self.quorum, signals)
        return verdict
