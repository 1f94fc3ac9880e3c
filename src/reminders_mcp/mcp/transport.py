"""Server-side line transport for the MCP stdio protocol.

Messages are newline-delimited: one JSON document per line in each
direction.  The transport deals in raw lines so that undecodable input can
still be answered with a parse error.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import TextIO


@runtime_checkable
class LineTransport(Protocol):
    """Reads request lines and writes response lines."""

    async def read_line(self) -> str | None: ...
    async def write_line(self, line: str) -> None: ...


class StdioServerTransport:
    """Reads from a text input stream and writes to a text output stream.

    Defaults to the process's stdin/stdout.  Reads run in a worker thread so
    the event loop is never blocked on input; every written line is flushed
    immediately.  When the input stream exposes its byte buffer, lines are
    read as bytes and decoded leniently, so invalid UTF-8 becomes U+FFFD
    instead of an exception.
    """

    def __init__(self, instream: TextIO | None = None, outstream: TextIO | None = None) -> None:
        self._in = instream if instream is not None else sys.stdin
        self._out = outstream if outstream is not None else sys.stdout

    async def read_line(self) -> str | None:
        """The next line without its terminator, or ``None`` at end of input."""
        buffer = getattr(self._in, "buffer", None)
        if buffer is not None:
            raw = await asyncio.to_thread(buffer.readline)
            if not raw:
                return None
            line = raw.decode("utf-8", errors="replace")
        else:
            line = await asyncio.to_thread(self._in.readline)
            if not line:
                return None
        return line.rstrip("\r\n")

    async def write_line(self, line: str) -> None:
        """Write *line* plus a newline and flush."""
        self._out.write(line + "\n")
        self._out.flush()
