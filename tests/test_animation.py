"""Tests for envelope following, blinking and pose aggregation."""

import math

import numpy as np
import pytest

from mouthsync.animation.blink import BlinkTimer
from mouthsync.animation.envelope import EnvelopeFollower, follow_envelope
from mouthsync.animation.state import SHAPE_ATTACK_S, AnimationState
from mouthsync.core.pose import AnimationPose


class TestFollowEnvelope:
    def test_one_time_constant(self):
        value = follow_envelope(0.0, 1.0, 0.05, 0.05, 0.3)
        assert value == pytest.approx(1.0 - math.exp(-1.0))

    def test_converges_monotonically(self):
        value = 0.0
        history = []
        for _ in range(30):
            value = follow_envelope(value, 1.0, 0.05, 0.05, 0.3)
            history.append(value)

        assert all(b > a for a, b in zip(history, history[1:]))
        assert all(v < 1.0 for v in history[:10])
        assert history[-1] == pytest.approx(1.0, abs=1e-6)

    @pytest.mark.parametrize("x", [0.0, 0.37, 1.0])
    @pytest.mark.parametrize("dt", [0.0, 0.016, 5.0])
    def test_fixed_point_at_target(self, x, dt):
        assert follow_envelope(x, x, dt, 0.02, 0.4) == x

    def test_release_used_when_falling(self):
        fast = follow_envelope(1.0, 0.0, 0.02, attack_s=0.5, release_s=0.02)
        slow = follow_envelope(1.0, 0.0, 0.02, attack_s=0.02, release_s=0.5)
        assert fast == pytest.approx(math.exp(-1.0))
        assert slow > fast

    def test_degenerate_time_constants_snap(self):
        assert follow_envelope(0.0, 1.0, 0.05, 0.0, 0.0) == pytest.approx(1.0)

    def test_huge_dt_reaches_target(self):
        assert follow_envelope(0.2, 0.9, 1e6, 0.1, 0.1) == pytest.approx(0.9)

    def test_negative_dt_holds_value(self):
        assert follow_envelope(0.4, 1.0, -1.0, 0.1, 0.1) == 0.4


class TestEnvelopeFollower:
    def test_keeps_value_between_steps(self):
        follower = EnvelopeFollower(attack_s=0.05, release_s=0.15)
        first = follower.step(1.0, 0.02)
        second = follower.step(1.0, 0.02)
        assert 0.0 < first < second < 1.0
        assert follower.value == second

    def test_reset(self):
        follower = EnvelopeFollower(0.05, 0.15, initial=0.5)
        follower.step(1.0, 0.1)
        follower.reset()
        assert follower.value == 0.5
        follower.reset(0.2)
        assert follower.value == 0.2

    def test_rejects_invalid_constants(self):
        with pytest.raises(ValueError):
            EnvelopeFollower(attack_s=-0.1, release_s=0.1)
        follower = EnvelopeFollower(0.05, 0.15)
        with pytest.raises(ValueError):
            follower.release_s = float("nan")
        assert follower.release_s == 0.15

    def test_silence_converges_to_closed(self):
        follower = EnvelopeFollower(attack_s=0.01, release_s=0.4, initial=0.9)
        for _ in range(300):
            follower.step(0.0, 0.02)
        assert follower.value == pytest.approx(0.0, abs=1e-6)


class TestBlinkTimer:
    def test_first_blink_scheduled_in_range(self):
        timer = BlinkTimer(rng=np.random.default_rng(3))
        assert 1200.0 <= timer.next_blink_ms <= 3700.0

    def test_no_blink_before_minimum_gap(self):
        timer = BlinkTimer(rng=np.random.default_rng(3))
        for _ in range(23):
            assert timer.update(0.05) == 0.0

    def test_blink_fires_then_decays_linearly(self):
        timer = BlinkTimer(rng=np.random.default_rng(11))
        scheduled = timer.next_blink_ms

        value = 0.0
        while value == 0.0:
            value = timer.update(0.05)

        assert timer.elapsed_ms > scheduled
        assert value == pytest.approx(1.0 - 0.05 * 6.0)
        assert timer.next_blink_ms >= timer.elapsed_ms + 1200.0

        assert timer.update(0.05) == pytest.approx(0.4)
        assert timer.update(0.05) == pytest.approx(0.1)
        assert timer.update(0.05) == 0.0

    def test_seeded_sequence_is_reproducible(self):
        a = BlinkTimer(rng=np.random.default_rng(42))
        b = BlinkTimer(rng=np.random.default_rng(42))
        seq_a = [a.update(0.02) for _ in range(1000)]
        seq_b = [b.update(0.02) for _ in range(1000)]
        assert seq_a == seq_b
        assert max(seq_a) > 0.0

    def test_interval_bounds_validated(self):
        with pytest.raises(ValueError):
            BlinkTimer(min_interval_ms=500, max_interval_ms=100)


class TestAnimationState:
    def test_initial_pose(self):
        state = AnimationState(rng=np.random.default_rng(0))
        pose = state.current_pose()
        assert pose.openness == 0.0
        assert pose.shape == 0.5
        assert pose.blink == 0.0

    def test_openness_follows_target(self):
        state = AnimationState(attack_s=0.05, release_s=0.15, rng=np.random.default_rng(0))
        pose = state.update(1.0, 0.5, 0.05, frame_id=3, timestamp_ms=60)

        assert isinstance(pose, AnimationPose)
        assert pose.openness == pytest.approx(1.0 - math.exp(-1.0))
        assert pose.frame_id == 3
        assert pose.timestamp_ms == 60

    def test_shape_tracks_inverted_centroid(self):
        state = AnimationState(rng=np.random.default_rng(0))

        dark = state.update(0.0, 0.0, SHAPE_ATTACK_S)
        assert dark.shape == pytest.approx(0.5 + 0.5 * (1.0 - math.exp(-1.0)))

        for _ in range(50):
            bright = state.update(0.0, 1.0, 0.05)
        assert bright.shape == pytest.approx(0.0, abs=1e-3)

    def test_pose_always_in_range(self):
        state = AnimationState(rng=np.random.default_rng(5))
        rng = np.random.default_rng(6)
        for _ in range(500):
            pose = state.update(rng.uniform(0, 1), rng.uniform(0, 1), 0.05)
            for value in (pose.openness, pose.shape, pose.blink):
                assert 0.0 <= value <= 1.0

    def test_reset(self):
        state = AnimationState(rng=np.random.default_rng(0))
        for _ in range(10):
            state.update(1.0, 0.0, 0.05)
        state.reset()
        pose = state.current_pose()
        assert pose.openness == 0.0
        assert pose.shape == 0.5
