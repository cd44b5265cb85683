"""
Latency readout for the preview server.

Three timestamps are kept: the last file change, the last rebuilt output and
the last acknowledgment from a browser. From them we show how long the
rebuild took, how long the round trip to the browser took, and the sum.

The last change is paired with the last output whether or not that output
came from that change; with fast repeated edits the number is approximate.
"""
import sys
import time
from dataclasses import dataclass
from typing import Any, Optional, Tuple

FIELD_WIDTH = 6
LABELS = ("rebuild", "network", "total")


def now() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000


@dataclass(frozen=True)
class Timed:
    what: Any
    when: float


def _since(earlier: Optional[Timed], later: Optional[Timed]) -> Optional[float]:
    if earlier is None or later is None:
        return None
    elapsed = later.when - earlier.when
    # a newer event than the one it is paired with: nothing sensible to show
    if elapsed < 0:
        return None
    return elapsed


def latencies(
    fs_event: Optional[Timed],
    output: Optional[Timed],
    ack: Optional[Timed],
) -> Tuple[Optional[float], Optional[float], Optional[float]]:
    rebuild = _since(fs_event, output)
    round_trip = _since(output, ack)
    if rebuild is None and round_trip is None:
        total = None
    else:
        total = (rebuild or 0) + (round_trip or 0)
    return rebuild, round_trip, total


def format_field(milliseconds: Optional[float]) -> str:
    if milliseconds is None:
        return " " * (FIELD_WIDTH + 3)
    return f"{round(milliseconds):>{FIELD_WIDTH}} ms"


def format_status(rebuild, round_trip, total) -> str:
    values = (rebuild, round_trip, total)
    width = max(len(label) for label in LABELS)
    return "\n".join(
        f"{label:<{width}} {format_field(value)}"
        for label, value in zip(LABELS, values)
    ) + "\n"


class StatusLine:
    """Re-renders a block of text in place, like a progress display."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._lines = 0
        self._text = ""

    def _erase(self):
        if self._lines:
            # cursor up to the start of the previous block, clear to the end
            self.stream.write(f"\x1b[{self._lines}A\x1b[J")
        self._lines = 0

    def update(self, text: str):
        self._erase()
        self.stream.write(text)
        self.stream.flush()
        self._text = text
        self._lines = text.count("\n")

    def log(self, text: str, stream=None):
        """Print a line of other output, then redraw the block below it."""
        stream = stream or sys.stderr
        self._erase()
        self.stream.flush()
        stream.write(text if text.endswith("\n") else text + "\n")
        stream.flush()
        if self._text:
            self.update(self._text)


class Latency:
    def __init__(self, status: Optional[StatusLine] = None, clock=now):
        self.status = status or StatusLine()
        self.clock = clock
        self.last_fs_event: Optional[Timed] = None
        self.last_output: Optional[Timed] = None
        self.last_ack: Optional[Timed] = None

    def file_changed(self, path: str, kind: str):
        self.last_fs_event = Timed((path, kind), self.clock())
        self.render()

    def output(self, body: str, milliseconds: Optional[float] = None):
        self.last_output = Timed((body, milliseconds), self.clock())
        self.render()

    def acked(self):
        self.last_ack = Timed(True, self.clock())
        self.render()

    def current(self):
        return latencies(self.last_fs_event, self.last_output, self.last_ack)

    def render(self):
        self.status.update(format_status(*self.current()))
