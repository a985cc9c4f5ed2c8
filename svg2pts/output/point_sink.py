"""Buffered point writer -- points to ``"<x> <y>\\n"`` bytes.

Output format (bit-exact):
    One point per line, X and Y separated by a single space, ``\\n``
    terminated, no header or footer.  Each coordinate is the shortest
    decimal text that parses back to the same IEEE-754 double (Python's
    ``repr``), with a trailing ``.0`` dropped for integral values.

Y-axis flip:
    Documents use a top-left origin with +Y down.  The sink writes
    ``page_height - y`` so the output uses a bottom-left origin.

Buffering:
    Points are formatted into a private fixed-size ``bytearray``.  Before
    each point, if fewer than ``MAX_POINT_BYTES`` bytes are free, the
    buffer is written to the stream and the cursor reset.  ``finalize()``
    writes whatever is left exactly once.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import BinaryIO

from svg2pts.geometry.types import Point

logger = logging.getLogger(__name__)

MAX_COORD_BYTES = 32
"""Upper bound for one formatted double (``repr`` needs at most 24)."""

MAX_POINT_BYTES = 2 * MAX_COORD_BYTES + 2
"""Worst case for one line: two coordinates, a space and a newline."""

DEFAULT_CAPACITY = 8192


def format_coord(value: float) -> str:
    """Shortest round-trip decimal text for *value*.

    >>> format_coord(3.0), format_coord(-4.0), format_coord(0.1)
    ('3', '-4', '0.1')
    """
    text = repr(value)
    if text.endswith(".0"):
        return text[:-2]
    return text


class PointSink:
    """Fixed-capacity buffered writer of flipped points.

    Parameters
    ----------
    stream : BinaryIO
        Destination byte stream.  Owned exclusively by the sink for the
        duration of the run (the sink does not close it).
    page_height : float
        Emitted Y is ``page_height - y``.
    capacity : int
        Buffer size in bytes, at least ``MAX_POINT_BYTES``.

    Notes
    -----
    Use as a context manager so the buffer is flushed even when the run
    terminates early::

        with PointSink(sys.stdout.buffer, page_height=h) as sink:
            sink.write(Point(0.0, 0.0))
    """

    def __init__(
        self,
        stream: BinaryIO,
        page_height: float = 0.0,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        if capacity < MAX_POINT_BYTES:
            raise ValueError(
                f"capacity must be >= {MAX_POINT_BYTES} bytes, got {capacity}"
            )
        self.page_height = page_height
        self._stream = stream
        self._buf = bytearray(capacity)
        self._view = memoryview(self._buf)
        self._pos = 0
        self._finalized = False
        self.count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def write(self, point: Point) -> None:
        """Format one point into the buffer, flushing first if needed.

        Raises
        ------
        ValueError
            If the sink has already been finalized.
        OSError
            If a capacity flush fails.
        """
        if self._finalized:
            raise ValueError("write to a finalized PointSink")
        if len(self._buf) - self._pos < MAX_POINT_BYTES:
            self._drain()

        x, y = point.as_tuple()
        data = f"{format_coord(x)} {format_coord(self.page_height - y)}\n".encode("ascii")
        end = self._pos + len(data)
        self._buf[self._pos:end] = data
        self._pos = end
        self.count += 1

    def finalize(self) -> None:
        """Flush remaining bytes and the stream (idempotent).

        The sink is marked finalized before the flush is attempted, so a
        failed finalization is reported once and never retried.
        """
        if self._finalized:
            return
        self._finalized = True
        self._drain()
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()
        logger.debug("PointSink finalized after %d points", self.count)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> PointSink:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            self.finalize()
            return
        try:
            self.finalize()
        except OSError as flush_err:
            logger.debug("Final flush failed during error unwind: %s", flush_err)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _drain(self) -> None:
        if self._pos == 0:
            return
        pos, self._pos = self._pos, 0
        self._stream.write(self._view[:pos])
