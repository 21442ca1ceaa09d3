"""Speech output. Every speak() call blocks for at least a minimum duration."""

from __future__ import annotations
import time

import pyttsx3

MIN_UTTERANCE_S = 2.0


def _hold(started: float, min_duration_s: float) -> None:
    remaining = min_duration_s - (time.monotonic() - started)
    if remaining > 0:
        time.sleep(remaining)


class VoiceBox:
    """
    Text-to-speech through pyttsx3.

    speak() returns only after the utterance has played and at least
    min_duration_s has passed, so alerts never overlap and come out in the
    order they were generated.
    """

    def __init__(self, min_duration_s: float = MIN_UTTERANCE_S, rate: int | None = None):
        self.engine = pyttsx3.init()
        if rate is not None:
            self.engine.setProperty("rate", rate)
        self.min_duration_s = min_duration_s

    def speak(self, text: str) -> None:
        started = time.monotonic()
        self.engine.say(text)
        self.engine.runAndWait()
        _hold(started, self.min_duration_s)


class ConsoleVoice:
    """Prints alerts instead of speaking them. Same blocking contract as VoiceBox."""

    def __init__(self, min_duration_s: float = MIN_UTTERANCE_S):
        self.min_duration_s = min_duration_s

    def speak(self, text: str) -> None:
        started = time.monotonic()
        print(f"[say] {text}")
        _hold(started, self.min_duration_s)
