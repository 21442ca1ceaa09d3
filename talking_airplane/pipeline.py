"""Per-sample orchestration: telemetry in, spoken-alert requests out."""

from __future__ import annotations
import logging
import math
from typing import Optional, Protocol

from .alerts import AlertGate, threshold_warnings
from .domain import Alert, AlertHistory, Cruise, FlightPhase, Sample, WarningProfile
from .phase import altitude_callout, infer_phase
from .preprocess import MovingAverage, update_vertical_speed

logger = logging.getLogger(__name__)


def _is_finite(sample: Sample) -> bool:
    return all(
        math.isfinite(v)
        for v in (sample.altitude, sample.airspeed, sample.bank, sample.pitch, sample.timestamp)
    )


class Voice(Protocol):
    def speak(self, text: str) -> None: ...


class AlertPipeline:
    """
    Owns all mutable session state and threads each sample through it.

    One instance per session. process() runs to completion before the next
    sample is accepted; nothing else writes the history, the smoother or
    the phase.
    """

    def __init__(self, profile: WarningProfile, start_time: float, voice: Optional[Voice] = None):
        self.profile = profile
        self.voice = voice
        self.history = AlertHistory.start(start_time, profile.countdown_minutes)
        self.smoother = MovingAverage(profile.vertical_speed_window_size)
        self.phase: FlightPhase = Cruise(0.0, 0.0)
        self.gate = AlertGate(self.history)

    @property
    def smoothed_vertical_speed(self) -> float:
        return self.smoother.average

    def process(self, sample: Sample) -> list[Alert]:
        """
        Run one telemetry sample through the pipeline.

        Order:
        1. vertical speed estimate -> smoother, last altitude advanced
        2. countdown timer
        3. max speed / bank / pitch and minimum speed, through the gate
        4. phase transition
        5. thousand-foot boundary callout

        Returns the alerts in generation order. If a voice is attached each
        one is spoken as soon as it is generated.
        A sample with a NaN or infinite field is dropped without touching
        any state.
        """
        if not _is_finite(sample):
            logger.warning("Skipping non-finite telemetry sample: %s", sample)
            return []

        now = sample.timestamp
        profile = self.profile
        alerts: list[Alert] = []

        def emit(text: Optional[str], kind: str) -> None:
            if text is None:
                return
            alerts.append(Alert(t=now, text=text, kind=kind))
            if self.voice is not None:
                self.voice.speak(text)

        previous_altitude = self.history.last_altitude
        update_vertical_speed(
            self.history, self.smoother, sample, profile.vertical_speed_discard_threshold
        )
        smoothed = self.smoother.average

        emit(self.gate.check_timer(now), "timer")

        for text in threshold_warnings(sample, profile):
            emit(self.gate.say_or_suppress(now, text), "warning")
        emit(self.gate.check_minspeed(now, sample.airspeed, profile.min_speed_warning), "warning")

        self.phase, message = infer_phase(
            self.phase,
            smoothed,
            sample.airspeed,
            sample.altitude,
            profile.descent_threshold,
            profile.climb_threshold,
        )
        emit(message, "phase")

        emit(altitude_callout(previous_altitude, sample.altitude, self.phase), "altitude")

        return alerts
