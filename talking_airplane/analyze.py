"""Replay of recorded telemetry logs through the alert pipeline."""

from __future__ import annotations
from typing import Optional

import pandas as pd

from .domain import Alert, WarningProfile, phase_name
from .pipeline import AlertPipeline, Voice
from .preprocess import CSVSource, load_telemetry
from .telemetry import ReplaySource


# Type alias for replay result
ReplayResult = tuple[pd.DataFrame, list[Alert]]


def replay_frame(
    df: pd.DataFrame,
    profile: WarningProfile,
    voice: Optional[Voice] = None,
    realtime: bool = False,
    speed: float = 1.0,
) -> ReplayResult:
    """
    Feed every row of a loaded log through a fresh pipeline.

    With realtime=True rows are fed at the recorded pace (scaled by speed).

    The session starts at the first row's time. Adds per-row columns:
      vs_s   smoothed vertical speed after the row (ft/min)
      phase  inferred phase after the row
    """
    if len(df) == 0:
        return df.copy(), []

    pipeline = AlertPipeline(profile, start_time=float(df["t"].iloc[0]), voice=voice)

    alerts: list[Alert] = []
    vs_s: list[float] = []
    phases: list[str] = []
    for sample in ReplaySource(df, realtime=realtime, speed=speed):
        alerts += pipeline.process(sample)
        vs_s.append(pipeline.smoothed_vertical_speed)
        phases.append(phase_name(pipeline.phase))

    out = df.copy()
    out["vs_s"] = vs_s
    out["phase"] = phases
    return out, alerts


def replay(
    csv_source: CSVSource,
    profile: WarningProfile,
    voice: Optional[Voice] = None,
) -> tuple[Optional[ReplayResult], Optional[str]]:
    """
    Load a telemetry CSV and replay it.

    Args:
        csv_source: Path or file-like object containing the telemetry log
        profile: Warning thresholds to replay with
        voice: Optional voice; alerts are spoken as they are generated

    Returns:
        Tuple of (result, error):
        - On success: ((frame, alerts), None)
        - On failure: (None, error_message)
    """
    try:
        df = load_telemetry(csv_source)
        return replay_frame(df, profile, voice=voice), None
    except Exception as e:
        return None, str(e)


def alerts_frame(alerts: list[Alert]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"t": a.t, "kind": a.kind, "text": a.text} for a in alerts],
        columns=["t", "kind", "text"],
    )
