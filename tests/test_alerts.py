"""Tests for warning gating, minimum speed latch and countdown timer in alerts.py"""

import logging

import pytest

from talking_airplane.alerts import AlertGate, threshold_warnings, TIMER_MESSAGE
from talking_airplane.domain import AlertHistory, Sample, WarningProfile


@pytest.fixture
def history():
    """Session that started at t=0."""
    return AlertHistory.start(0.0)


@pytest.fixture
def gate(history):
    return AlertGate(history)


def sample(airspeed=100.0, bank=0.0, pitch=0.0, t=0.0):
    return Sample(altitude=5000.0, airspeed=airspeed, bank=bank, pitch=pitch, timestamp=t)


class TestSayOrSuppress:
    """Tests for the shared warning quiet period."""

    def test_suppressed_right_after_start(self, gate):
        """The quiet period also runs from session start."""
        assert gate.say_or_suppress(3.0, "Bank angle too high: 40 degrees.") is None

    def test_spoken_after_interval(self, gate, history):
        assert gate.say_or_suppress(10.0, "warn") == "warn"
        assert history.last_warning_time == 10.0

    def test_three_seconds_apart_speaks_once(self, gate):
        spoken = [gate.say_or_suppress(t, "warn") for t in (10.0, 13.0)]
        assert spoken == ["warn", None]

    def test_six_seconds_apart_speaks_twice(self, gate):
        spoken = [gate.say_or_suppress(t, "warn") for t in (10.0, 16.0)]
        assert spoken == ["warn", "warn"]

    def test_exactly_five_seconds_is_suppressed(self, gate):
        gate.say_or_suppress(10.0, "warn")
        assert gate.say_or_suppress(15.0, "warn") is None

    def test_suppressed_warning_does_not_reset_clock(self, gate, history):
        gate.say_or_suppress(10.0, "a")
        gate.say_or_suppress(13.0, "b")
        assert history.last_warning_time == 10.0
        assert gate.say_or_suppress(15.5, "c") == "c"

    def test_different_warnings_share_the_gate(self, gate):
        assert gate.say_or_suppress(10.0, "Airspeed too high: 150 knots.") is not None
        assert gate.say_or_suppress(11.0, "Bank angle too high: 40 degrees.") is None


class TestMinSpeedLatch:
    """Tests for AlertGate.check_minspeed."""

    def test_disabled_without_minimum(self, gate):
        assert gate.check_minspeed(100.0, 10.0, None) is None

    def test_never_warns_before_latch(self, gate, history):
        """Sitting below the minimum from the first sample stays silent."""
        for t in range(10, 200, 10):
            assert gate.check_minspeed(float(t), 20.0, 55.0) is None
        assert history.minspeed_latched is False

    def test_latching_is_logged_not_spoken(self, gate, history, caplog):
        caplog.set_level(logging.INFO, logger="talking_airplane")
        assert gate.check_minspeed(10.0, 60.0, 55.0) is None
        assert history.minspeed_latched is True
        assert "Minimum speed warning is now enabled." in caplog.text

    def test_equal_speed_does_not_latch(self, gate, history):
        gate.check_minspeed(10.0, 55.0, 55.0)
        assert history.minspeed_latched is False

    def test_warns_below_minimum_once_latched(self, gate):
        gate.check_minspeed(10.0, 60.0, 55.0)
        assert gate.check_minspeed(20.0, 50.0, 55.0) == "Airspeed below 55"

    def test_fractional_minimum_in_message(self, gate):
        gate.check_minspeed(10.0, 60.0, 52.5)
        assert gate.check_minspeed(20.0, 50.0, 52.5) == "Airspeed below 52.5"

    def test_minimum_keeps_all_its_digits(self, gate):
        gate.check_minspeed(10.0, 130.0, 123.4567)
        assert gate.check_minspeed(20.0, 100.0, 123.4567) == "Airspeed below 123.4567"

    def test_low_speed_warning_is_rate_limited(self, gate):
        gate.check_minspeed(10.0, 60.0, 55.0)
        assert gate.check_minspeed(20.0, 50.0, 55.0) is not None
        assert gate.check_minspeed(22.0, 50.0, 55.0) is None
        assert gate.check_minspeed(26.0, 50.0, 55.0) is not None

    def test_latch_is_one_way(self, gate, history):
        gate.check_minspeed(10.0, 60.0, 55.0)
        gate.check_minspeed(20.0, 0.0, 55.0)
        gate.check_minspeed(30.0, 0.0, 55.0)
        assert history.minspeed_latched is True

    def test_no_warning_above_minimum_when_latched(self, gate):
        gate.check_minspeed(10.0, 60.0, 55.0)
        assert gate.check_minspeed(20.0, 70.0, 55.0) is None


class TestCountdownTimer:
    """Tests for AlertGate.check_timer."""

    def test_no_timer_configured(self, gate):
        assert gate.check_timer(10_000.0) is None

    def test_fires_once_at_deadline(self):
        history = AlertHistory.start(100.0, countdown_minutes=2)
        gate = AlertGate(history)
        assert history.countdown_deadline == pytest.approx(220.0)

        assert gate.check_timer(219.0) is None
        assert gate.check_timer(220.0) == TIMER_MESSAGE
        assert history.countdown_deadline is None

        for t in (221.0, 300.0, 10_000.0):
            assert gate.check_timer(t) is None

    def test_not_rate_limited(self):
        history = AlertHistory.start(0.0, countdown_minutes=1)
        gate = AlertGate(history)
        gate.say_or_suppress(59.0, "warn")
        assert gate.check_timer(60.0) == "Timer elapsed"


class TestThresholdWarnings:
    """Tests for the threshold_warnings function."""

    @pytest.fixture
    def profile(self):
        return WarningProfile(max_speed_warning=150.0, max_bank_warning=30.0, max_pitch_warning=15.0)

    def test_no_limits_no_warnings(self):
        assert threshold_warnings(sample(airspeed=400.0, bank=80.0, pitch=40.0), WarningProfile()) == []

    def test_within_limits(self, profile):
        assert threshold_warnings(sample(airspeed=150.0, bank=30.0, pitch=-15.0), profile) == []

    def test_overspeed(self, profile):
        assert threshold_warnings(sample(airspeed=163.8), profile) == ["Airspeed too high: 163 knots."]

    def test_bank_uses_magnitude(self, profile):
        assert threshold_warnings(sample(bank=-35.7), profile) == ["Bank angle too high: -35 degrees."]

    def test_pitch_uses_magnitude(self, profile):
        assert threshold_warnings(sample(pitch=-18.2), profile) == ["Pitch angle too high: -18 degrees."]

    def test_order_speed_bank_pitch(self, profile):
        warnings = threshold_warnings(sample(airspeed=170.0, bank=45.0, pitch=20.0), profile)
        assert warnings == [
            "Airspeed too high: 170 knots.",
            "Bank angle too high: 45 degrees.",
            "Pitch angle too high: 20 degrees.",
        ]
