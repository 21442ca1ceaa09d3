"""Threshold warnings, rate limiting, minimum speed latch and countdown timer."""

from __future__ import annotations
import logging
from typing import Optional

from .domain import AlertHistory, Sample, WarningProfile

logger = logging.getLogger(__name__)


# Repeated warnings share this quiet period
WARNING_INTERVAL_S = 5.0

TIMER_MESSAGE = "Timer elapsed"
MINSPEED_ARMED_MESSAGE = "Minimum speed warning is now enabled."


def _format_limit(value: float) -> str:
    # 80.0 -> "80", 123.4567 -> "123.4567"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def threshold_warnings(sample: Sample, profile: WarningProfile) -> list[str]:
    """
    Candidate warnings for the configured max speed / bank / pitch limits.

    Bank and pitch are compared by magnitude. Values are spoken truncated
    to whole units.
    """
    warnings: list[str] = []

    if profile.max_speed_warning is not None and sample.airspeed > profile.max_speed_warning:
        warnings.append(f"Airspeed too high: {int(sample.airspeed)} knots.")

    if profile.max_bank_warning is not None and abs(sample.bank) > profile.max_bank_warning:
        warnings.append(f"Bank angle too high: {int(sample.bank)} degrees.")

    if profile.max_pitch_warning is not None and abs(sample.pitch) > profile.max_pitch_warning:
        warnings.append(f"Pitch angle too high: {int(sample.pitch)} degrees.")

    return warnings


class AlertGate:
    """
    Decides which warnings get spoken.

    All threshold warnings share one quiet period: a warning is spoken only
    when more than WARNING_INTERVAL_S has passed since the last spoken one.
    Phase and altitude announcements never go through the gate.
    """

    def __init__(self, history: AlertHistory, interval_s: float = WARNING_INTERVAL_S):
        self.history = history
        self.interval_s = interval_s

    def say_or_suppress(self, now: float, text: str) -> Optional[str]:
        if now - self.history.last_warning_time > self.interval_s:
            self.history.last_warning_time = now
            return text
        return None

    def check_minspeed(self, now: float, airspeed_kt: float, min_speed: Optional[float]) -> Optional[str]:
        """
        Low speed warning, armed only once the aircraft has flown faster
        than the minimum. Arming is one-way and is logged, not spoken.
        """
        if min_speed is None:
            return None

        if not self.history.minspeed_latched:
            if airspeed_kt > min_speed:
                self.history.minspeed_latched = True
                logger.info(MINSPEED_ARMED_MESSAGE)
            return None

        if airspeed_kt < min_speed:
            return self.say_or_suppress(now, f"Airspeed below {_format_limit(min_speed)}")
        return None

    def check_timer(self, now: float) -> Optional[str]:
        deadline = self.history.countdown_deadline
        if deadline is None or now < deadline:
            return None
        self.history.countdown_deadline = None
        return TIMER_MESSAGE
