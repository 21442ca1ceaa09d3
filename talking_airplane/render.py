from __future__ import annotations
from typing import List
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .domain import Alert, WarningProfile


KIND_COLORS = {
    "phase": "tab:blue",
    "altitude": "tab:green",
    "timer": "tab:purple",
    "warning": "tab:red",
}


def make_replay_figure(
    replayed: pd.DataFrame,
    alerts: List[Alert],
    profile: WarningProfile,
):
    t = replayed["t"].to_numpy(float)
    alt = replayed["alt_ft"].to_numpy(float)
    vs = replayed["vs_s"].to_numpy(float)
    ias = replayed["ias_kt"].to_numpy(float)
    bank = replayed["bank_deg"].to_numpy(float)
    pitch = replayed["pitch_deg"].to_numpy(float)

    fig, axes = plt.subplots(
        nrows=5,
        ncols=1,
        figsize=(14, 11),
        sharex=True,
        gridspec_kw={"height_ratios": [1.4, 1.2, 1.0, 1.0, 1.0]},
    )
    ax_alt, ax_vs, ax_ias, ax_bank, ax_pitch = axes

    # --- Altitude ---
    ax_alt.plot(t, alt, linewidth=2.0, label="Altitude (ft)")
    if len(alt):
        lo = int(np.floor(np.nanmin(alt) / 1000.0))
        hi = int(np.ceil(np.nanmax(alt) / 1000.0))
        for k in range(lo, hi + 1):
            ax_alt.axhline(k * 1000.0, linestyle=":", linewidth=0.8, color="grey", alpha=0.5)
    ax_alt.set_ylabel("Altitude (ft)")
    ax_alt.grid(True, alpha=0.2)
    ax_alt.legend(loc="upper right")

    # --- Smoothed V/S ---
    ax_vs.plot(t, vs, linewidth=2.0, label="Smoothed V/S (fpm)")
    ax_vs.axhline(profile.climb_threshold, linestyle=":", linewidth=1.5, label="Climb threshold")
    ax_vs.axhline(profile.descent_threshold, linestyle=":", linewidth=1.5, label="Descent threshold")
    ax_vs.set_ylabel("V/S (fpm)")
    ax_vs.grid(True, alpha=0.2)
    ax_vs.legend(loc="upper right")

    # --- IAS ---
    ax_ias.plot(t, ias, linewidth=2.0, label="IAS (kt)")
    if profile.max_speed_warning is not None:
        ax_ias.axhline(profile.max_speed_warning, linestyle=":", linewidth=1.5, label="Max speed")
    if profile.min_speed_warning is not None:
        ax_ias.axhline(profile.min_speed_warning, linestyle=":", linewidth=1.5, label="Min speed")
    ax_ias.set_ylabel("IAS (kt)")
    ax_ias.grid(True, alpha=0.2)
    ax_ias.legend(loc="upper right")

    # --- Bank ---
    ax_bank.plot(t, bank, linewidth=2.0, label="Bank (deg)")
    if profile.max_bank_warning is not None:
        ax_bank.axhline(profile.max_bank_warning, linestyle=":", linewidth=1.5, label="Bank limit")
        ax_bank.axhline(-profile.max_bank_warning, linestyle=":", linewidth=1.5)
    ax_bank.set_ylabel("Bank (deg)")
    ax_bank.grid(True, alpha=0.2)
    ax_bank.legend(loc="upper right")

    # --- Pitch ---
    ax_pitch.plot(t, pitch, linewidth=2.0, linestyle="-.", label="Pitch (deg)")
    if profile.max_pitch_warning is not None:
        ax_pitch.axhline(profile.max_pitch_warning, linestyle=":", linewidth=1.5, label="Pitch limit")
        ax_pitch.axhline(-profile.max_pitch_warning, linestyle=":", linewidth=1.5)
    ax_pitch.set_ylabel("Pitch (deg)")
    ax_pitch.set_xlabel("Time (s)")
    ax_pitch.grid(True, alpha=0.2)
    ax_pitch.legend(loc="upper right")

    # One marker per spoken alert, on every panel, labelled on the altitude panel
    for a in alerts:
        color = KIND_COLORS.get(a.kind, "grey")
        for ax in axes:
            ax.axvline(a.t, alpha=0.25, color=color, linewidth=1.0)
        ax_alt.annotate(
            a.text,
            xy=(a.t, 1.0),
            xycoords=("data", "axes fraction"),
            rotation=90,
            fontsize=7,
            va="top",
            ha="right",
            color=color,
        )

    fig.suptitle(f"Telemetry replay - profile {profile.name}", y=0.995)
    fig.tight_layout(rect=(0.0, 0.0, 1.0, 0.98))
    return fig
