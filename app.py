import streamlit as st
import pandas as pd

from talking_airplane.domain import WarningProfile
from talking_airplane.analyze import replay, alerts_frame
from talking_airplane.render import make_replay_figure
from talking_airplane.profiles import PRESET_PROFILES


# -----------------------------
# Streamlit page setup
# -----------------------------
st.set_page_config(page_title="Talking Airplane Replay", layout="wide")
st.title("✈️ Talking Airplane - Alert Replay")
st.write("Upload a telemetry CSV, choose warning thresholds, and see which alerts would have been spoken.")


def _optional(label: str, value, step: float, key: str):
    """Checkbox + number input; returns None when the warning is disabled."""
    enabled = st.checkbox(label, value=value is not None, key=f"{key}_on")
    if not enabled:
        return None
    return float(st.number_input(f"{label} value", value=float(value or 0.0), step=step, key=key))


# -----------------------------
# Sidebar: profile selection/edit
# -----------------------------
with st.sidebar:
    st.header("Warning profile")

    profile_name = st.selectbox("Preset", options=list(PRESET_PROFILES.keys()), index=0)
    preset = PRESET_PROFILES[profile_name]

    edit = st.checkbox("Edit profile", value=False)

    if edit:
        st.subheader("Warnings")
        min_speed = _optional("Min speed (kt)", preset.min_speed_warning, 1.0, "p_min_speed")
        max_speed = _optional("Max speed (kt)", preset.max_speed_warning, 1.0, "p_max_speed")
        max_bank = _optional("Max bank (deg)", preset.max_bank_warning, 1.0, "p_max_bank")
        max_pitch = _optional("Max pitch (deg)", preset.max_pitch_warning, 1.0, "p_max_pitch")
        countdown = _optional("Countdown (min)", preset.countdown_minutes, 1.0, "p_countdown")

        st.subheader("Vertical speed")
        discard = st.number_input("Discard threshold (fpm)", value=float(preset.vertical_speed_discard_threshold), step=50.0)
        descent = st.number_input("Descent threshold (fpm)", value=float(preset.descent_threshold), step=50.0)
        climb = st.number_input("Climb threshold (fpm)", value=float(preset.climb_threshold), step=50.0)
        window = st.number_input("Window size (samples)", value=int(preset.vertical_speed_window_size), min_value=1, step=1)
    else:
        st.subheader("Preset values (read-only)")
        st.write(
            {
                "name": preset.name,
                "min_speed_warning": preset.min_speed_warning,
                "max_speed_warning": preset.max_speed_warning,
                "max_bank_warning": preset.max_bank_warning,
                "max_pitch_warning": preset.max_pitch_warning,
                "countdown_minutes": preset.countdown_minutes,
                "vertical_speed_discard_threshold": preset.vertical_speed_discard_threshold,
                "descent_threshold": preset.descent_threshold,
                "climb_threshold": preset.climb_threshold,
                "vertical_speed_window_size": preset.vertical_speed_window_size,
            }
        )


# Build the profile object AFTER sidebar widgets exist
if edit:
    try:
        profile = WarningProfile(
            name=f"{preset.name} (edited)",
            min_speed_warning=min_speed,
            max_speed_warning=max_speed,
            max_bank_warning=max_bank,
            max_pitch_warning=max_pitch,
            countdown_minutes=int(countdown) if countdown is not None else None,
            vertical_speed_discard_threshold=float(discard),
            descent_threshold=float(descent),
            climb_threshold=float(climb),
            vertical_speed_window_size=int(window),
        )
    except ValueError as e:
        st.error(f"Invalid profile: {e}")
        st.stop()
else:
    profile = preset

st.caption(f"Active profile: **{profile.name}**")


# -----------------------------
# Upload + preview
# -----------------------------
uploaded = st.file_uploader("Upload CSV", type=["csv"])

if uploaded is None:
    st.info("Upload a CSV with columns t, alt_ft (or alt_msl_ft / alt_msl_m), ias_kt, bank_deg (or roll_deg), pitch_deg.")
    st.stop()

uploaded.seek(0)
df_preview = pd.read_csv(uploaded, nrows=20)
st.subheader("Raw preview (as uploaded)")
st.dataframe(df_preview, use_container_width=True)
uploaded.seek(0)


# -----------------------------
# Run replay
# -----------------------------
result, err = replay(uploaded, profile)

if err or result is None:
    st.error(err or "Replay failed (no result returned).")
    st.stop()

replayed, alerts = result


# -----------------------------
# Display results
# -----------------------------
df_alerts = alerts_frame(alerts)

col1, col2, col3 = st.columns([1, 1, 1])
col1.metric("Alerts spoken", len(alerts))
col2.metric("Warnings", int((df_alerts["kind"] == "warning").sum()))
col3.metric("Final phase", replayed["phase"].iloc[-1] if len(replayed) else "N/A")

st.subheader("Spoken alerts")
if len(alerts) == 0:
    st.success("Nothing would have been said.")
else:
    st.dataframe(df_alerts, use_container_width=True)

st.subheader("Replay plot")
fig = make_replay_figure(replayed, alerts, profile)
st.pyplot(fig, clear_figure=True)
