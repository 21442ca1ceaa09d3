"""Flight phase inference and altitude callouts."""

from __future__ import annotations
from typing import Optional

from .domain import Climb, Cruise, Descent, FlightPhase


# A cruise change is only worth announcing past these deltas
CRUISE_AIRSPEED_DELTA_KT = 10.0
CRUISE_ALTITUDE_DELTA_FT = 500.0

CRUISE_ALTITUDE_ROUNDING_FT = 500


def altitude_thousands(altitude_ft: float) -> int:
    return int(round(altitude_ft)) // 1000


def cruise_message(altitude_ft: float, airspeed_kt: float) -> str:
    rounded_alt = int(round(altitude_ft / CRUISE_ALTITUDE_ROUNDING_FT)) * CRUISE_ALTITUDE_ROUNDING_FT
    return f"Now cruising at {rounded_alt} feet and {int(round(airspeed_kt))} knots."


def infer_phase(
    phase: FlightPhase,
    smoothed_rate: float,
    airspeed_kt: float,
    altitude_ft: float,
    descent_threshold: float,
    climb_threshold: float,
) -> tuple[FlightPhase, Optional[str]]:
    """
    One step of the hysteretic phase state machine.

    Args:
        phase: Current phase
        smoothed_rate: Smoothed vertical speed (ft/min)
        airspeed_kt: Current indicated airspeed
        altitude_ft: Current indicated altitude
        descent_threshold: Smoothed rate below this is a descent
        climb_threshold: Smoothed rate above this is a climb

    Returns:
        Tuple of (next_phase, message). message is None when nothing is
        worth saying. While cruising, the Cruise object's baseline may be
        updated in place; every other transition returns a new object.
    """
    descending = smoothed_rate < descent_threshold
    climbing = smoothed_rate > climb_threshold

    if isinstance(phase, Cruise) and descending:
        return Descent(), "Started descent."

    if isinstance(phase, Cruise) and climbing:
        return Climb(), "Climbing."

    if isinstance(phase, Cruise) and not descending and not climbing:
        if (
            abs(airspeed_kt - phase.baseline_airspeed) > CRUISE_AIRSPEED_DELTA_KT
            or abs(altitude_ft - phase.baseline_altitude) > CRUISE_ALTITUDE_DELTA_FT
        ):
            phase.baseline_airspeed = airspeed_kt
            phase.baseline_altitude = altitude_ft
            return phase, cruise_message(altitude_ft, airspeed_kt)
        # Continuing cruise. Nothing to say.
        return phase, None

    if not descending and not climbing:
        return Cruise(baseline_airspeed=airspeed_kt, baseline_altitude=altitude_ft), "Leveling off."

    # Strange readings, or still climbing/descending: stay silent.
    return phase, None


def altitude_callout(previous_altitude_ft: float, altitude_ft: float, phase: FlightPhase) -> Optional[str]:
    """
    Announce a thousand-foot boundary crossing while climbing or descending.

    A climb names the band entered, a descent names the band left, so
    9,950 -> 10,050 ft in a climb and 10,050 -> 9,950 ft in a descent both
    say "Passing 10 thousand feet."
    """
    previous = altitude_thousands(previous_altitude_ft)
    current = altitude_thousands(altitude_ft)
    if previous == current:
        return None

    if isinstance(phase, Climb):
        return f"Passing {current} thousand feet."
    if isinstance(phase, Descent):
        return f"Passing {previous} thousand feet."
    return None
