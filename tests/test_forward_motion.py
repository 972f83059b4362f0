"""Forward-motion vote: individual signals and the quorum boundary."""

from __future__ import annotations

import pytest

from core.punch.config import PunchConfig
from core.punch.forward_motion import (
    DEFAULT_PREDICATES,
    ForwardMotionClassifier,
    arm_length_increasing,
    moving_toward_camera,
    wrist_aligned_with_shoulder,
    wrist_moving_forward,
    wrist_outpacing_elbow,
)
from core.punch.landmarks import Keypoint
from core.punch.signals import ArmSnapshot

W, H = 640, 480
CFG = PunchConfig()


def snap(wrist, elbow=(300, 200), shoulder=(300, 150)) -> ArmSnapshot:
    return ArmSnapshot(
        wrist=Keypoint(*wrist, 0.9),
        elbow=Keypoint(*elbow, 0.9),
        shoulder=Keypoint(*shoulder, 0.9),
    )


def test_default_predicates_are_ordered() -> None:
    assert [name for name, _ in DEFAULT_PREDICATES] == [
        "toward_camera", "arm_length", "wrist_movement", "aligned", "z_movement",
    ]


def test_exactly_one_signal_is_not_forward() -> None:
    still = snap((320, 250))

    verdict = ForwardMotionClassifier(CFG).evaluate(still, still, W, H)

    assert verdict.votes == 1
    assert verdict.signals["aligned"] is True
    assert verdict.is_forward is False


def test_exactly_two_signals_is_forward() -> None:
    previous = snap((320, 250))
    current = snap((310, 250))

    verdict = ForwardMotionClassifier(CFG).evaluate(current, previous, W, H)

    assert verdict.votes == 2
    assert verdict.signals == {
        "toward_camera": False,
        "arm_length": False,
        "wrist_movement": True,
        "aligned": True,
        "z_movement": False,
    }
    assert verdict.is_forward is True


def test_toward_camera_needs_margin() -> None:
    previous = snap((300, 250), elbow=(300, 200))
    assert not moving_toward_camera(snap((300, 253), elbow=(300, 200)), previous, W, H, CFG)
    assert moving_toward_camera(snap((300, 254), elbow=(300, 200)), previous, W, H, CFG)


def test_arm_length_growth_threshold() -> None:
    previous = snap((300, 300), elbow=(300, 200))
    assert not arm_length_increasing(snap((300, 305), elbow=(300, 200)), previous, W, H, CFG)
    assert arm_length_increasing(snap((300, 306), elbow=(300, 200)), previous, W, H, CFG)


def test_wrist_outpacing_elbow_ratio() -> None:
    previous = snap((300, 300), elbow=(300, 200))
    moved_together = snap((310, 300), elbow=(310, 200))
    wrist_led = snap((325, 300), elbow=(310, 200))

    assert not wrist_outpacing_elbow(moved_together, previous, W, H, CFG)
    assert wrist_outpacing_elbow(wrist_led, previous, W, H, CFG)


def test_alignment_uses_frame_width() -> None:
    previous = snap((300, 300))
    assert wrist_aligned_with_shoulder(snap((395, 300)), previous, W, H, CFG)
    assert not wrist_aligned_with_shoulder(snap((397, 300)), previous, W, H, CFG)


def test_shoulder_distance_growth_handles_zero_previous_distance() -> None:
    on_shoulder = snap((300, 150))
    assert wrist_moving_forward(snap((300, 160)), on_shoulder, W, H, CFG)
    assert not wrist_moving_forward(on_shoulder, on_shoulder, W, H, CFG)


def test_incomplete_snapshot_is_never_forward() -> None:
    current = ArmSnapshot(wrist=Keypoint(300, 270, 0.9), elbow=None, shoulder=Keypoint(300, 150, 0.9))
    classifier = ForwardMotionClassifier(CFG)

    assert classifier.evaluate(current, snap((300, 200)), W, H).is_forward is False
    assert classifier.evaluate(snap((300, 270)), None, W, H).is_forward is False


def test_custom_predicates_and_quorum() -> None:
    yes = ("yes", lambda cur, prev, w, h, cfg: True)
    no = ("no", lambda cur, prev, w, h, cfg: False)
    pose = snap((300, 250))

    strict = ForwardMotionClassifier(CFG, predicates=[yes, yes, no], quorum=3)
    lenient = ForwardMotionClassifier(CFG, predicates=[yes, yes, no], quorum=2)

    assert strict.evaluate(pose, pose, W, H).is_forward is False
    assert lenient.evaluate(pose, pose, W, H).is_forward is True


def test_predicates_sharing_a_name_each_vote() -> None:
    yes = ("yes", lambda cur, prev, w, h, cfg: True)
    no = ("no", lambda cur, prev, w, h, cfg: False)
    pose = snap((300, 250))

    verdict = ForwardMotionClassifier(CFG, predicates=[yes, yes, no], quorum=2).evaluate(pose, pose, W, H)

    assert verdict.votes == 2
    assert verdict.signals == {"yes": True, "no": False}
    assert verdict.is_forward is True


def test_quorum_follows_config() -> None:
    assert ForwardMotionClassifier(PunchConfig(forward_quorum=4)).quorum == 4


@pytest.mark.parametrize("quorum", [0, 6])
def test_quorum_out_of_range_is_rejected(quorum: int) -> None:
    with pytest.raises(ValueError):
        ForwardMotionClassifier(CFG, quorum=quorum)
