# backend/sse.py
"""Incremental parser for the chat completion event stream.

Only ``data: `` frames carrying ``choices[0].delta.content`` produce text.
A frame whose JSON does not parse is dropped; frames are never reassembled
across lines.
"""

import codecs
import json
from typing import Iterable, Iterator, List, Optional

DATA_PREFIX = "data: "
DONE_TOKEN = "[DONE]"


def extract_delta(line: str) -> Optional[str]:
    """Return the text delta carried by one complete line, if any."""
    line = line.strip()
    if not line or line.startswith(":"):
        return None
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_TOKEN:
        return None

    try:
        parsed = json.loads(payload)
        delta = parsed["choices"][0]["delta"].get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return None
    if not isinstance(delta, str) or not delta:
        return None
    return delta


class DeltaDecoder:
    """Feeds raw byte chunks and yields text deltas from complete lines.

    The trailing partial line stays buffered until a later chunk completes it.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: bytes) -> List[str]:
        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()

        deltas = []
        for line in lines:
            delta = extract_delta(line)
            if delta is not None:
                deltas.append(delta)
        return deltas


def iter_deltas(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield deltas until the byte stream closes; [DONE] does not stop it."""
    decoder = DeltaDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
