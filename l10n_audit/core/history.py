"""
History Index — Latest revision per source document

Builds {path -> latest revision} from the newest-first history stream of
the source subtree:

    ::: <hash>          marker line, one per commit
    files/en-us/a.md    paths touched by that commit
    <blank>             separator

The first revision that names a path wins. Later (older) occurrences are
ignored; reversing the scan or overwriting entries would make every
document look current against an outdated revision.

The stream is consumed chunk by chunk. Bytes are buffered until a newline
so records, and multi-byte characters, split across reads are reassembled
before decoding. A stream that ends without a final newline was cut short
and is rejected rather than parsed as a path.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from ..errors import HistoryFeedError
from ..services.git import RevisionQuery, HISTORY_MARKER


_MARKER_BYTES = HISTORY_MARKER.encode("utf-8")


class HistoryStreamParser:
    """
    Incremental parser for the history stream.

    Usage:
        parser = HistoryStreamParser()
        for chunk in stream:
            parser.feed(chunk)
        index = parser.close()
    """

    def __init__(self):
        self._buffer = b""
        self._current: Optional[str] = None
        self._latest: Dict[str, str] = {}
        self._records = 0
        self._line_no = 0
        self._closed = False

    @property
    def record_count(self) -> int:
        """Commit markers seen so far."""
        return self._records

    def feed(self, chunk: bytes) -> None:
        """Consume one chunk of raw stream output."""
        if self._closed:
            raise HistoryFeedError("History parser already closed")
        if not chunk:
            return

        self._buffer += chunk
        lines = self._buffer.split(b"\n")
        # Last element is an incomplete line (or b"" after a trailing newline)
        self._buffer = lines.pop()
        for line in lines:
            self._consume_line(line)

    def close(self) -> Mapping[str, str]:
        """
        Finish the stream and return the read-only index.

        Raises:
            HistoryFeedError: if trailing bytes lack a line terminator
        """
        if self._closed:
            return MappingProxyType(self._latest)
        self._closed = True

        if self._buffer:
            tail = self._buffer[:60].decode("utf-8", errors="replace")
            raise HistoryFeedError(
                f"History stream ended mid-line after line {self._line_no}: {tail!r}"
            )
        return MappingProxyType(self._latest)

    def _consume_line(self, raw: bytes) -> None:
        self._line_no += 1
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        if not raw:
            return

        if raw.startswith(_MARKER_BYTES):
            revision = raw[len(_MARKER_BYTES):].decode("ascii", errors="replace").strip()
            if not revision or any(c.isspace() for c in revision):
                raise HistoryFeedError(
                    f"Malformed revision marker on line {self._line_no}: {raw!r}"
                )
            self._current = revision
            self._records += 1
            return

        if self._current is None:
            raise HistoryFeedError(
                f"Path before any revision marker on line {self._line_no}"
            )

        try:
            path = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HistoryFeedError(f"Undecodable path on line {self._line_no}: {e}")

        if path not in self._latest:
            self._latest[path] = self._current


def build_index(chunks: Iterable[bytes]) -> Mapping[str, str]:
    """Build an index from any iterable of history stream chunks."""
    parser = HistoryStreamParser()
    for chunk in chunks:
        parser.feed(chunk)
    return parser.close()


class HistoryIndexBuilder:
    """Streams git history for a subtree into a HistoryIndex."""

    def __init__(self, query: RevisionQuery):
        self.query = query
        self.record_count = 0

    def build(self, subtree: str) -> Mapping[str, str]:
        """
        Build {path -> latest revision} for every path under `subtree`.

        Raises:
            HistoryFeedError: if git fails or the stream is malformed.
                No partial index is returned.
        """
        parser = HistoryStreamParser()

        with self.query.stream_history(subtree) as stream:
            for chunk in stream:
                parser.feed(chunk)

        if stream.returncode != 0:
            raise HistoryFeedError(
                f"git log failed for {subtree}: {stream.error or 'unknown error'}"
            )

        index = parser.close()
        self.record_count = parser.record_count
        return index
