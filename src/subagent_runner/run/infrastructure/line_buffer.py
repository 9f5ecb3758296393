"""LineBuffer — reassembles newline-delimited text from arbitrary byte chunks."""

import codecs


class LineBuffer:
    """Splits a byte stream into complete lines, holding back the trailing fragment.

    Decoding is incremental, so a multi-byte character split across two chunks
    is reassembled rather than replaced.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Append *chunk* and return every line it completed, without newlines."""
        self._pending += self._decoder.decode(chunk)
        *lines, self._pending = self._pending.split("\n")
        return lines

    def flush(self) -> str | None:
        """Return the unterminated remainder (if it has content) and reset the buffer."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return tail if tail.strip() else None
