# core/punch/punch_detector.py
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging
import math

from .config import PunchConfig
from .forward_motion import ForwardMotionClassifier
from .landmarks import LandmarkFrame
from .signals import ArmSnapshot, arm_extension, compute_velocity, wrist_is_usable

logger = logging.getLogger(__name__)

SIDES = ("left", "right")

READY = "READY"
COOLDOWN = "COOLDOWN"


@dataclass(frozen=True)
class PunchEvent:
    side: str              # "left" or "right"
    frame_index: int
    timestamp: Optional[float]
    velocity: float        # px / frame
    extension: float       # wrist-shoulder / frame diagonal
    votes: int             # forward-motion signals that agreed


@dataclass
class LimbContext:
    side: str
    phase: str = READY
    cooldown_remaining: int = 0
    retracted: bool = True
    frames_visible: int = 0
    previous_snapshot: Optional[ArmSnapshot] = None
    last_verdict: Optional[str] = None   # why the last classified frame did or did not fire

    def reset(self):
        self.phase = READY
        self.cooldown_remaining = 0
        self.retracted = True
        self.frames_visible = 0
        self.previous_snapshot = None
        self.last_verdict = None

    def tick_cooldown(self):
        self.cooldown_remaining -= 1
        if self.cooldown_remaining <= 0:
            self.cooldown_remaining = 0
            self.phase = READY


class PunchDetector:
    """
    Per-arm punch state machine: READY -> COOLDOWN -> READY.

    Frames must be fed in capture order, one call per frame. Frames that carry a
    timestamp are checked for that; a frame that is not newer than the last one
    accepted is dropped without touching any state.
    """

    def __init__(self, cfg: Optional[PunchConfig] = None,
                 classifier: Optional[ForwardMotionClassifier] = None,
                 sink: Optional[Callable[[PunchEvent], None]] = None):
        self.cfg = cfg or PunchConfig()
        self.classifier = classifier or ForwardMotionClassifier(self.cfg)
        self.sink = sink
        self.limbs: Dict[str, LimbContext] = {side: LimbContext(side) for side in SIDES}
        self.frame_index = 0
        self._last_timestamp: Optional[float] = None

    def reset(self):
        for limb in self.limbs.values():
            limb.reset()
        self.frame_index = 0
        self._last_timestamp = None
        logger.info("Punch detector reset")

    def update(self, frame: Optional[LandmarkFrame]) -> List[PunchEvent]:
        """
        Classify one frame. Pass None when the pose estimator found nobody; that
        clears both visibility counters but still counts toward cooldowns.
        """
        if frame is not None and frame.timestamp is not None:
            if not math.isfinite(frame.timestamp):
                logger.warning("Dropping frame with non-finite timestamp (t=%r)", frame.timestamp)
                return []
            if self._last_timestamp is not None and frame.timestamp <= self._last_timestamp:
                logger.warning(
                    "Dropping out-of-order frame (t=%.4f, last accepted t=%.4f)",
                    frame.timestamp, self._last_timestamp,
                )
                return []
            self._last_timestamp = frame.timestamp

        self.frame_index += 1
        events: List[PunchEvent] = []

        for side in SIDES:
            limb = self.limbs[side]
            if frame is None:
                limb.frames_visible = 0
                limb.last_verdict = "not visible"
                if limb.phase == COOLDOWN:
                    limb.tick_cooldown()
                continue

            event = self._update_limb(limb, frame)
            if event is not None:
                events.append(event)

        # Both arms have seen the frame before anything reaches the sink
        if self.sink is not None:
            for event in events:
                self.sink(event)

        return events

    def _update_limb(self, limb: LimbContext, frame: LandmarkFrame) -> Optional[PunchEvent]:
        side = limb.side
        wrist = frame.get(f"{side}_wrist")
        elbow = frame.get(f"{side}_elbow")
        shoulder = frame.get(f"{side}_shoulder")

        # Tracking runs every frame, in either phase
        usable = wrist_is_usable(wrist, frame.width, frame.height, self.cfg)
        limb.frames_visible = limb.frames_visible + 1 if usable else 0

        extension = arm_extension(wrist, shoulder, frame.width, frame.height)
        if extension is not None and extension < self.cfg.arm_retraction_threshold:
            limb.retracted = True

        if limb.phase == COOLDOWN:
            limb.tick_cooldown()
            return None

        if wrist is None or shoulder is None:
            limb.last_verdict = "not visible"
            return None

        current = ArmSnapshot(wrist=wrist, elbow=elbow, shoulder=shoulder)
        previous = limb.previous_snapshot
        if previous is not None:
            event = self._classify(limb, frame, current, previous, usable, extension)
            if event is not None:
                # Keep the pre-punch snapshot: the next comparison after cooldown
                # is made against the frame that preceded this punch.
                return event

        limb.previous_snapshot = current
        return None

    def _classify(self, limb: LimbContext, frame: LandmarkFrame, current: ArmSnapshot,
                  previous: ArmSnapshot, usable: bool, extension: Optional[float]) -> Optional[PunchEvent]:
        cfg = self.cfg

        if not usable or limb.frames_visible < cfg.min_frames_in_frame:
            limb.last_verdict = "not visible"
            return None

        velocity = compute_velocity(current.wrist, previous.wrist)
        if velocity.magnitude < cfg.velocity_threshold:
            limb.last_verdict = "too slow"
            return None

        if extension is None or extension < cfg.extension_threshold:
            limb.last_verdict = "arm not extended"
            return None

        verdict = self.classifier.evaluate(current, previous, frame.width, frame.height)
        if not verdict.is_forward:
            limb.last_verdict = "sideways"
            return None

        if not limb.retracted:
            limb.last_verdict = "not retracted"
            return None

        event = PunchEvent(
            side=limb.side,
            frame_index=self.frame_index,
            timestamp=frame.timestamp,
            velocity=velocity.magnitude,
            extension=extension,
            votes=verdict.votes,
        )

        limb.last_verdict = "punch"
        limb.retracted = False
        if cfg.cooldown_period > 0:
            limb.phase = COOLDOWN
            limb.cooldown_remaining = cfg.cooldown_period

        logger.info(
            "%s punch at frame %d (speed %.1f px, extension %.3f, votes %d)",
            limb.side, event.frame_index, event.velocity, event.extension, event.votes,
        )
        return event
