"""
Talking Airplane - Spoken Flight Alerts

Turns a ~1 Hz aircraft telemetry stream (altitude, airspeed, bank, pitch)
into spoken situational alerts: flight phase changes, thousand-foot
callouts and rate-limited speed, bank and pitch warnings.
"""

from .domain import Alert, AlertHistory, Climb, Cruise, Descent, Sample, WarningProfile
from .preprocess import MovingAverage, estimate_vertical_speed, update_vertical_speed, load_telemetry, iter_samples
from .phase import infer_phase, altitude_callout
from .alerts import AlertGate, threshold_warnings
from .pipeline import AlertPipeline
from .analyze import replay, replay_frame
from .profiles import PRESET_PROFILES

__all__ = [
    # Domain models
    "Alert",
    "AlertHistory",
    "Climb",
    "Cruise",
    "Descent",
    "Sample",
    "WarningProfile",
    # Signal processing
    "MovingAverage",
    "estimate_vertical_speed",
    "update_vertical_speed",
    "load_telemetry",
    "iter_samples",
    # Phase inference
    "infer_phase",
    "altitude_callout",
    # Alert gating
    "AlertGate",
    "threshold_warnings",
    # Pipeline
    "AlertPipeline",
    "replay",
    "replay_frame",
    # Presets
    "PRESET_PROFILES",
]

__version__ = "0.1.0"
