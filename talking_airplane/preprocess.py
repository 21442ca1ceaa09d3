from __future__ import annotations
from pathlib import Path
from typing import IO, Iterator, Optional, Union

import numpy as np
import pandas as pd

from .domain import AlertHistory, Sample

FT_PER_M = 3.28084

# -----------------------------
# Smoothing filter
# -----------------------------

class MovingAverage:
    """
    Incremental average of the last `window_size` values, O(1) memory.

    While fewer than `window_size` values have been added this is the exact
    mean of everything seen. Afterwards the weight of the newest value stays
    at 1/window_size, so older values are never evicted, their influence just
    decays geometrically (an exponential moving average).

    Derivation, with n the number of values tracked:
        approximate sum of the last n - 1 values and x = (n - 1) * average + x
        new average = ((n - 1) * average + x) / n
                    = average + (x - average) / n
    """

    def __init__(self, window_size: int):
        if window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self.count = 0
        self.average = 0.0

    def add(self, x: float) -> float:
        n = min(self.count + 1, self.window_size)
        self.count = n
        self.average = self.average + (x - self.average) / n
        return self.average

    def __repr__(self) -> str:
        return f"MovingAverage(window_size={self.window_size}, count={self.count}, average={self.average:.3f})"


# -----------------------------
# Vertical speed estimation
# -----------------------------

def estimate_vertical_speed(altitude: float, last_altitude: float, elapsed_s: float) -> Optional[float]:
    """Instantaneous vertical speed in ft/min, or None when no time has elapsed."""
    if not elapsed_s > 0:
        return None
    return (altitude - last_altitude) / elapsed_s * 60.0


def update_vertical_speed(
    history: AlertHistory,
    smoother: MovingAverage,
    sample: Sample,
    discard_threshold: float,
) -> Optional[float]:
    """
    Feed one sample's vertical speed into the smoother.

    Returns the instantaneous rate that was accepted, or None if the tick
    produced no usable estimate (non-positive elapsed time, or a rate at or
    above the discard threshold).

    last_altitude always advances. last_sample_time only advances when the
    rate is accepted, so the elapsed time after a discarded glitch spans
    the whole gap since the last good reading.
    """
    elapsed = sample.timestamp - history.last_sample_time
    rate = estimate_vertical_speed(sample.altitude, history.last_altitude, elapsed)
    history.last_altitude = sample.altitude

    # NaN rates fail the comparison and are discarded too
    if rate is None or not abs(rate) < discard_threshold:
        return None

    history.last_sample_time = sample.timestamp
    smoother.add(rate)
    return rate


# -----------------------------
# Telemetry logs
# -----------------------------

def _normalize_col(c: str) -> str:
    return c.strip().lower().replace(" ", "").replace("_", "")

def _pick_col(df: pd.DataFrame, candidates: list[str]) -> str | None:
    # match by normalized name
    norm_map = {_normalize_col(c): c for c in df.columns}
    for cand in candidates:
        key = _normalize_col(cand)
        if key in norm_map:
            return norm_map[key]
    return None


CSVSource = Union[str, Path, IO[bytes], IO[str]]


def load_telemetry(csv_source: CSVSource) -> pd.DataFrame:
    """
    Load a recorded telemetry log into the columns the pipeline needs.

    Accepted CSV columns (aliases in brackets):
      t [Time], alt_ft [alt_msl_ft, altitude_ft, alt_msl_m], ias_kt [airspeed_kt],
      bank_deg [roll_deg], pitch_deg

    Returns a DataFrame with columns t, alt_ft, ias_kt, bank_deg, pitch_deg.
    Rows are stable-sorted by time. Repeated timestamps with different
    values are kept; the vertical speed estimator skips those ticks on
    its own.
    """
    df = pd.read_csv(csv_source)

    time_col = _pick_col(df, ["t", "Time"])
    if time_col is None:
        raise ValueError(f"No time column found. Expected 't' or 'Time'. Found: {list(df.columns)}")

    alt_ft_col = _pick_col(df, ["alt_ft", "alt_msl_ft", "altitude_ft"])
    alt_m_col = _pick_col(df, ["alt_msl_m", "alt_m"])
    if alt_ft_col is not None:
        alt_ft = pd.to_numeric(df[alt_ft_col], errors="coerce").astype(float)
    elif alt_m_col is not None:
        alt_ft = pd.to_numeric(df[alt_m_col], errors="coerce").astype(float) * FT_PER_M
    else:
        raise ValueError(
            f"No altitude column found. Expected 'alt_ft', 'alt_msl_ft' or 'alt_msl_m'. Found: {list(df.columns)}"
        )

    ias_col = _pick_col(df, ["ias_kt", "airspeed_kt"])
    bank_col = _pick_col(df, ["bank_deg", "roll_deg"])
    pitch_col = _pick_col(df, ["pitch_deg"])
    missing = [
        name for name, col in (("ias_kt", ias_col), ("bank_deg", bank_col), ("pitch_deg", pitch_col))
        if col is None
    ]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Found columns: {list(df.columns)}")

    out = pd.DataFrame(
        {
            "t": pd.to_numeric(df[time_col], errors="coerce").astype(float),
            "alt_ft": alt_ft,
            "ias_kt": pd.to_numeric(df[ias_col], errors="coerce").astype(float),
            "bank_deg": pd.to_numeric(df[bank_col], errors="coerce").astype(float),
            "pitch_deg": pd.to_numeric(df[pitch_col], errors="coerce").astype(float),
        }
    )

    # Unparseable or infinite cells cannot be spoken about
    out = out.replace([np.inf, -np.inf], np.nan).dropna().reset_index(drop=True)

    # Drop only *exact* duplicate rows (same time + same telemetry)
    out = out.drop_duplicates(keep="first").reset_index(drop=True)

    # Stable sort keeps equal timestamps in recorded order
    out = out.sort_values("t", kind="stable").reset_index(drop=True)

    if len(out) == 0:
        raise ValueError("Telemetry log contains no usable rows.")

    dts = np.diff(out["t"].to_numpy(dtype=float))
    dts = dts[dts > 0]
    out.attrs["dt"] = float(np.median(dts)) if len(dts) else float("nan")

    return out


def iter_samples(df: pd.DataFrame) -> Iterator[Sample]:
    """Yield one Sample per row of a DataFrame produced by load_telemetry."""
    for row in df.itertuples(index=False):
        yield Sample(
            altitude=float(row.alt_ft),
            airspeed=float(row.ias_kt),
            bank=float(row.bank_deg),
            pitch=float(row.pitch_deg),
            timestamp=float(row.t),
        )
