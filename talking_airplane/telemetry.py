"""Telemetry sources: live FlightGear UDP feed and recorded log replay."""

from __future__ import annotations
import logging
import math
import socket
import time
from typing import Iterator, Optional

import pandas as pd

from .domain import Sample
from .preprocess import iter_samples

logger = logging.getLogger(__name__)

# FlightGear generic protocol output, one line per datagram:
#   [t,]altitude-ft,airspeed-kt,roll-deg,pitch-deg
# e.g. fgfs --generic=socket,out,1,127.0.0.1,5500,udp,talking-airplane
FIELDS_WITHOUT_TIME = 4
FIELDS_WITH_TIME = 5


def parse_line(line: str, now: float) -> Optional[Sample]:
    """
    Parse one generic-protocol line. Lines without a leading time field are
    stamped with `now`. Returns None for malformed lines, including any
    NaN or infinite value.
    """
    parts = [p.strip() for p in line.strip().split(",") if p.strip() != ""]
    try:
        values = [float(p) for p in parts]
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in values):
        return None

    if len(values) == FIELDS_WITH_TIME:
        t, alt, ias, bank, pitch = values
    elif len(values) == FIELDS_WITHOUT_TIME:
        alt, ias, bank, pitch = values
        t = now
    else:
        return None

    return Sample(altitude=alt, airspeed=ias, bank=bank, pitch=pitch, timestamp=t)


class FlightGearSource:
    """
    Blocking UDP receiver for FlightGear's generic protocol.

    Iterating yields one Sample per valid datagram. FlightGear is expected
    to send at about 1 Hz. Socket errors propagate to the caller.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 5500, bufsize: int = 1024):
        self.host = host
        self.port = port
        self.bufsize = bufsize
        self.sock: Optional[socket.socket] = None

    def open(self) -> "FlightGearSource":
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind((self.host, self.port))
        logger.info("Listening for FlightGear telemetry on udp://%s:%s", self.host, self.port)
        return self

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def __enter__(self) -> "FlightGearSource":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def __iter__(self) -> Iterator[Sample]:
        if self.sock is None:
            raise RuntimeError("FlightGearSource is not open; use it in a with block or call open() first")
        while True:
            data, _ = self.sock.recvfrom(self.bufsize)
            line = data.decode("ascii", errors="replace")
            sample = parse_line(line, time.monotonic())
            if sample is None:
                logger.warning("Skipping malformed telemetry line: %r", line.strip())
                continue
            yield sample


class ReplaySource:
    """
    Yields the rows of a loaded telemetry log as Samples.

    With realtime=True the replay sleeps between rows so samples arrive at
    the recorded pace (scaled by `speed`).
    """

    def __init__(self, df: pd.DataFrame, realtime: bool = False, speed: float = 1.0):
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")
        self.df = df
        self.realtime = realtime
        self.speed = speed

    def __iter__(self) -> Iterator[Sample]:
        last_t: Optional[float] = None
        for sample in iter_samples(self.df):
            if self.realtime and last_t is not None:
                gap = (sample.timestamp - last_t) / self.speed
                if gap > 0:
                    time.sleep(gap)
            last_t = sample.timestamp
            yield sample
