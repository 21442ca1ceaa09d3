from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional

import matplotlib.pyplot as plt

from .analyze import replay_frame
from .domain import Alert, Sample, WarningProfile
from .pipeline import AlertPipeline, Voice
from .preprocess import load_telemetry
from .render import make_replay_figure
from .telemetry import FlightGearSource
from .voice import MIN_UTTERANCE_S, ConsoleVoice, VoiceBox


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="talking-airplane",
        description="Speak flight phase changes, altitude callouts and threshold warnings from live or recorded telemetry.",
    )

    warn = parser.add_argument_group("warnings")
    warn.add_argument("--min-speed-warning", "--minspeed-warning", type=float, default=None,
                      help="Warn when indicated speed drops below this value (kt)")
    warn.add_argument("--max-speed-warning", "--maxspeed-warning", type=float, default=None,
                      help="Warn when indicated speed exceeds this value (kt)")
    warn.add_argument("--max-bank-warning", "--maxbank-warning", type=float, default=None,
                      help="Warn when bank angle exceeds this value (deg)")
    warn.add_argument("--max-pitch-warning", "--maxpitch-warning", type=float, default=None,
                      help="Warn when pitch angle exceeds this value (deg)")
    warn.add_argument("--countdown-minutes", "--minute-timer", type=int, default=None,
                      help="Announce once after this many minutes")

    vs = parser.add_argument_group("vertical speed")
    vs.add_argument("--vertical-speed-discard-threshold", type=float, default=1000.0,
                    help="Discard computed vertical speeds with magnitude at or above this value (fpm)")
    vs.add_argument("--descent-threshold", type=float, default=-200.0,
                    help="Average vertical speed below this value is a descent (fpm)")
    vs.add_argument("--climb-threshold", type=float, default=200.0,
                    help="Average vertical speed above this value is a climb (fpm)")
    vs.add_argument("--vertical-speed-window-size", type=int, default=30,
                    help="Number of vertical speed measurements averaged")

    src = parser.add_argument_group("telemetry source")
    src.add_argument("--replay", type=str, default=None, help="Replay a recorded telemetry CSV instead of listening live")
    src.add_argument("--realtime", action="store_true", help="Replay at the recorded pace")
    src.add_argument("--speed", type=float, default=1.0, help="Replay pace multiplier with --realtime")
    src.add_argument("--fg-host", type=str, default="127.0.0.1", help="Address to receive FlightGear UDP telemetry on")
    src.add_argument("--fg-port", type=int, default=5500, help="Port to receive FlightGear UDP telemetry on")

    out = parser.add_argument_group("output")
    out.add_argument("--voice", choices=["tts", "console"], default="tts", help="Speak alerts or print them")
    out.add_argument("--min-utterance-s", type=float, default=MIN_UTTERANCE_S,
                     help="Minimum time each alert occupies the voice (s)")
    out.add_argument("--plot", type=str, default=None, help="With --replay: save a timeline plot to this PNG path")

    return parser


def profile_from_args(args: argparse.Namespace) -> WarningProfile:
    return WarningProfile(
        name="Command line",
        min_speed_warning=args.min_speed_warning,
        max_speed_warning=args.max_speed_warning,
        max_bank_warning=args.max_bank_warning,
        max_pitch_warning=args.max_pitch_warning,
        countdown_minutes=args.countdown_minutes,
        vertical_speed_discard_threshold=args.vertical_speed_discard_threshold,
        descent_threshold=args.descent_threshold,
        climb_threshold=args.climb_threshold,
        vertical_speed_window_size=args.vertical_speed_window_size,
    )


def make_voice(kind: str, min_duration_s: float) -> Voice:
    if kind == "console":
        return ConsoleVoice(min_duration_s=min_duration_s)
    return VoiceBox(min_duration_s=min_duration_s)


def run(samples: Iterable[Sample], profile: WarningProfile, voice: Optional[Voice] = None) -> list[Alert]:
    """
    Drive a pipeline from a stream of samples until the stream ends.

    The session clock starts at the first sample, so the first tick never
    produces a vertical speed estimate.
    """
    pipeline: Optional[AlertPipeline] = None
    alerts: list[Alert] = []
    for sample in samples:
        if pipeline is None:
            pipeline = AlertPipeline(profile, start_time=sample.timestamp, voice=voice)
        alerts += pipeline.process(sample)
    return alerts


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        profile = profile_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    voice = make_voice(args.voice, args.min_utterance_s)

    if args.replay is None:
        if args.plot:
            parser.error("--plot requires --replay")
        with FlightGearSource(args.fg_host, args.fg_port) as source:
            run(source, profile, voice=voice)
        return 0

    if args.speed <= 0:
        parser.error("--speed must be positive")
    df = load_telemetry(Path(args.replay))
    print("Rows after cleanup:", len(df))

    replayed, alerts = replay_frame(df, profile, voice=voice, realtime=args.realtime, speed=args.speed)

    print(f"Done. {len(alerts)} alerts.")

    if args.plot:
        fig = make_replay_figure(replayed, alerts, profile)
        fig.savefig(args.plot, dpi=150)
        plt.close(fig)
        print(f"Plot:   {args.plot}")

    return 0
