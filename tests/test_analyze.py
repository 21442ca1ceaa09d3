"""Tests for log replay in analyze.py"""

from io import StringIO

import pytest

from talking_airplane.analyze import replay, replay_frame, alerts_frame
from talking_airplane.domain import WarningProfile
from talking_airplane.preprocess import load_telemetry


def climb_and_level_csv() -> StringIO:
    """
    5 s level at 5000 ft, 70 s climbing at 900 fpm to 6050 ft,
    then 40 s level.
    """
    rows = ["t,alt_ft,ias_kt,bank_deg,pitch_deg"]
    t = 0
    for _ in range(5):
        rows.append(f"{t},5000.0,100.0,0.0,0.0")
        t += 1
    alt = 5000.0
    for _ in range(70):
        alt += 15.0
        rows.append(f"{t},{alt},100.0,0.0,5.0")
        t += 1
    for _ in range(40):
        rows.append(f"{t},{alt},100.0,0.0,0.0")
        t += 1
    return StringIO("\n".join(rows) + "\n")


class TestReplay:
    """Tests for the replay function."""

    @pytest.fixture
    def profile(self):
        return WarningProfile(vertical_speed_window_size=3)

    def test_returns_result_and_no_error(self, profile):
        result, err = replay(climb_and_level_csv(), profile)
        assert err is None
        assert result is not None

    def test_climb_and_level_off_script(self, profile):
        (replayed, alerts), _ = replay(climb_and_level_csv(), profile)
        assert [a.text for a in alerts] == [
            "Now cruising at 5000 feet and 100 knots.",
            "Climbing.",
            "Passing 6 thousand feet.",
            "Leveling off.",
        ]
        assert [a.t for a in alerts] == [0.0, 5.0, 71.0, 78.0]

    def test_adds_replay_columns(self, profile):
        (replayed, _), _ = replay(climb_and_level_csv(), profile)
        assert "vs_s" in replayed.columns
        assert "phase" in replayed.columns
        assert replayed["phase"].iloc[10] == "Climb"
        assert replayed["phase"].iloc[-1] == "Cruise"
        assert replayed["vs_s"].iloc[40] == pytest.approx(900.0, abs=0.01)

    def test_voice_hears_every_alert(self, profile):
        spoken = []

        class Voice:
            def speak(self, text):
                spoken.append(text)

        (_, alerts), _ = replay(climb_and_level_csv(), profile, voice=Voice())
        assert spoken == [a.text for a in alerts]

    def test_error_returned_not_raised(self, profile):
        bad_csv = StringIO("""t,ias_kt
0.0,100.0
""")
        result, err = replay(bad_csv, profile)
        assert result is None
        assert "No altitude column found" in err


class TestReplayFrame:
    def test_empty_frame(self):
        df = load_telemetry(StringIO("t,alt_ft,ias_kt,bank_deg,pitch_deg\n0,1000,0,0,0\n")).iloc[0:0]
        replayed, alerts = replay_frame(df, WarningProfile())
        assert alerts == []
        assert len(replayed) == 0


    def test_realtime_matches_instant_replay(self):
        df = load_telemetry(climb_and_level_csv())
        profile = WarningProfile(vertical_speed_window_size=3)
        _, instant = replay_frame(df, profile)
        paced, alerts = replay_frame(df, profile, realtime=True, speed=1000.0)
        assert alerts == instant
        assert len(paced) == len(df)


class TestAlertsFrame:
    def test_columns(self):
        (_, alerts), _ = replay(climb_and_level_csv(), WarningProfile(vertical_speed_window_size=3))
        df = alerts_frame(alerts)
        assert list(df.columns) == ["t", "kind", "text"]
        assert len(df) == len(alerts)

    def test_empty(self):
        df = alerts_frame([])
        assert len(df) == 0
        assert list(df.columns) == ["t", "kind", "text"]
