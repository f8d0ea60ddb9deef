"""Incremental decoder for ``event:``/``data:`` frames carried over a raw byte stream.

Frames are separated by a blank line. Each frame names its type on an
``event: <token>`` line and carries a JSON object on a ``data: <json>`` line::

    event: progress
    data: {"percent": 50, "status": "running", "message": "halfway"}

Bytes may arrive split at any boundary; the parser keeps the trailing partial
frame until the rest of it shows up. Whatever is still buffered when the
stream ends is discarded, so a stream cut mid-frame yields a truncated event
sequence rather than a half-parsed event.
"""

import codecs
import json
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from planscan.logging.logger import Log

FRAME_DELIMITER = "\n\n"

EVENT_PROGRESS = "progress"
EVENT_RESULT = "result"
EVENT_ERROR = "error"
EVENT_DONE = "done"
TERMINAL_EVENTS = frozenset({EVENT_RESULT, EVENT_ERROR})

_EVENT_LINE = re.compile(r"^event: (\w+)$", re.MULTILINE)
_DATA_LINE = re.compile(r"^data: (.+)$", re.MULTILINE)


@dataclass(frozen=True)
class StreamEvent:
    """One decoded frame: its event type and parsed JSON payload."""

    type: str
    data: dict[str, Any]

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENTS


def parse_frame(frame: str) -> StreamEvent | None:
    """Decode a single complete frame, or return None if it must be dropped."""
    if not frame.strip():
        return None
    event_match = _EVENT_LINE.search(frame)
    data_match = _DATA_LINE.search(frame)
    if event_match is None or data_match is None:
        Log.debug(f"Dropping frame without event/data lines: {frame!r}")
        return None
    event_type = event_match.group(1)
    try:
        payload = json.loads(data_match.group(1))
    except json.JSONDecodeError as exc:
        Log.warning(f"Dropping '{event_type}' frame with invalid JSON payload: {exc}")
        return None
    if not isinstance(payload, dict):
        Log.warning(f"Dropping '{event_type}' frame: payload must be a JSON object")
        return None
    return StreamEvent(type=event_type, data=payload)


class FrameParser:
    """Pull-based frame decoder: feed bytes in, pull complete events out."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received so far that does not yet form a complete frame."""
        return self._buffer

    def feed(self, chunk: bytes) -> None:
        """Append a raw chunk; a multibyte character split across chunks is held back."""
        self._buffer += self._decoder.decode(chunk)

    def next_event(self) -> StreamEvent | None:
        """Return the next complete event, or None when more bytes are needed."""
        while True:
            end = self._buffer.find(FRAME_DELIMITER)
            if end < 0:
                return None
            frame = self._buffer[:end]
            self._buffer = self._buffer[end + len(FRAME_DELIMITER):]
            event = parse_frame(frame)
            if event is not None:
                return event

    def close(self) -> str:
        """Discard and return whatever partial frame is still buffered."""
        residual = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        self._decoder.reset()
        if residual.strip():
            Log.debug(f"Discarding {len(residual)} chars of incomplete frame at end of stream")
        return residual


def parse_events(chunks: Iterable[bytes]) -> Iterator[StreamEvent]:
    """Lazily decode events from an iterable of byte chunks."""
    parser = FrameParser()
    for chunk in chunks:
        parser.feed(chunk)
        while (event := parser.next_event()) is not None:
            yield event
    parser.close()
