from __future__ import annotations
from typing import Dict

from .domain import WarningProfile

# -----------------------------
# Preset warning profiles
# -----------------------------
PRESET_PROFILES: Dict[str, WarningProfile] = {
    "Default": WarningProfile(),
    "C172 trainer": WarningProfile(
        name="C172 trainer",
        min_speed_warning=55.0,     # a little above the clean stall
        max_speed_warning=129.0,    # Vno
        max_bank_warning=30.0,
        max_pitch_warning=15.0,
    ),
    "Light twin": WarningProfile(
        name="Light twin",
        min_speed_warning=85.0,     # blue line margin
        max_speed_warning=169.0,
        max_bank_warning=30.0,
        max_pitch_warning=15.0,
        descent_threshold=-300.0,
        climb_threshold=300.0,
    ),
    "Airliner": WarningProfile(
        name="Airliner",
        min_speed_warning=140.0,
        max_speed_warning=340.0,
        max_bank_warning=30.0,
        max_pitch_warning=20.0,
        vertical_speed_discard_threshold=6000.0,
        descent_threshold=-500.0,
        climb_threshold=500.0,
        vertical_speed_window_size=20,
    ),
}
