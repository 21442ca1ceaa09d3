from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union


# -----------------------------
# Telemetry
# -----------------------------
@dataclass(frozen=True)
class Sample:
    altitude: float     # indicated altitude (ft)
    airspeed: float     # indicated airspeed (kt)
    bank: float         # attitude indicator bank (deg)
    pitch: float        # attitude indicator pitch (deg)
    timestamp: float    # seconds, same clock as the pipeline start_time


# -----------------------------
# Flight phase (tagged union)
# -----------------------------
@dataclass
class Cruise:
    # baseline used to detect cruise changes worth announcing
    baseline_airspeed: float = 0.0
    baseline_altitude: float = 0.0


@dataclass(frozen=True)
class Climb:
    pass


@dataclass(frozen=True)
class Descent:
    pass


FlightPhase = Union[Cruise, Climb, Descent]


def phase_name(phase: FlightPhase) -> str:
    if isinstance(phase, Cruise):
        return "Cruise"
    if isinstance(phase, Climb):
        return "Climb"
    return "Descent"


# -----------------------------
# Configuration / "Warning Profile"
# -----------------------------
@dataclass(frozen=True)     # resolved once at startup, never changes afterwards
class WarningProfile:
    name: str = "Default"

    min_speed_warning: Optional[float] = None   # kt, None disables the warning
    max_speed_warning: Optional[float] = None   # kt
    max_bank_warning: Optional[float] = None    # deg, compared against |bank|
    max_pitch_warning: Optional[float] = None   # deg, compared against |pitch|
    countdown_minutes: Optional[int] = None

    vertical_speed_discard_threshold: float = 1000.0    # |fpm| at or above this is a glitch
    descent_threshold: float = -200.0   # smoothed fpm below this is a descent
    climb_threshold: float = 200.0      # smoothed fpm above this is a climb
    vertical_speed_window_size: int = 30

    def __post_init__(self) -> None:
        if isinstance(self.vertical_speed_window_size, bool) or not isinstance(self.vertical_speed_window_size, int):
            raise ValueError(
                f"vertical_speed_window_size must be an integer, got {self.vertical_speed_window_size!r}"
            )
        if self.vertical_speed_window_size < 1:
            raise ValueError(
                f"vertical_speed_window_size must be positive, got {self.vertical_speed_window_size}"
            )
        if self.vertical_speed_discard_threshold <= 0:
            raise ValueError(
                f"vertical_speed_discard_threshold must be positive, got {self.vertical_speed_discard_threshold}"
            )
        if self.descent_threshold >= self.climb_threshold:
            raise ValueError(
                f"descent_threshold ({self.descent_threshold}) must be below climb_threshold ({self.climb_threshold})"
            )
        if self.countdown_minutes is not None and self.countdown_minutes < 0:
            raise ValueError(f"countdown_minutes must not be negative, got {self.countdown_minutes}")


# -----------------------------
# Mutable per-session history
# -----------------------------
@dataclass
class AlertHistory:
    last_altitude: float
    last_sample_time: float
    last_warning_time: float
    minspeed_latched: bool = False
    countdown_deadline: Optional[float] = None

    @classmethod
    def start(cls, start_time: float, countdown_minutes: Optional[int] = None) -> "AlertHistory":
        deadline = None
        if countdown_minutes is not None:
            deadline = start_time + countdown_minutes * 60.0
        return cls(
            last_altitude=0.0,
            last_sample_time=start_time,
            last_warning_time=start_time,
            countdown_deadline=deadline,
        )


@dataclass(frozen=True)
class Alert:    # one spoken-alert request, in the order the pipeline generated it
    t: float
    text: str
    kind: str   # "phase", "altitude", "timer" or "warning"
