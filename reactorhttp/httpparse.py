"""Parsing of the HTTP request line and header block."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

_CR = 0x0D
_LF = 0x0A
_COLON = 0x3A
_SPACE = 0x20

MAX_HEADER_VALUE = 256
DEFAULT_FILE = "index.html"


class Method(enum.Enum):
    POST = "POST"
    GET = "GET"


class HttpVersion(enum.Enum):
    HTTP_10 = "1.0"
    HTTP_11 = "1.1"


class HeaderState(enum.IntEnum):
    START = 0
    KEY = 1
    COLON = 2
    SPACES_AFTER_COLON = 3
    VALUE = 4
    CR = 5
    LF = 6
    END_CR = 7
    END_LF = 8


class ParseError(ValueError):
    """The request line or a header is malformed."""


@dataclass(frozen=True)
class RequestLine:
    method: Method
    filename: str
    version: HttpVersion


def _decode(raw: bytes) -> str:
    return raw.decode("latin-1")


def parse_request_line(buffer: bytes) -> Optional[tuple[RequestLine, bytes]]:
    """Parse the request line at the start of ``buffer``.

    Returns None while no carriage return has arrived yet. Otherwise returns
    the parsed line and the bytes that follow the carriage return. Raises
    ParseError when the line is malformed.
    """
    cr = buffer.find(b"\r")
    if cr < 0:
        return None
    line = buffer[:cr]
    rest = buffer[cr + 1:]

    pos = line.find(b"GET")
    if pos >= 0:
        method = Method.GET
    else:
        pos = line.find(b"POST")
        if pos < 0:
            raise ParseError("unsupported request method")
        method = Method.POST

    slash = line.find(b"/", pos)
    if slash < 0:
        raise ParseError("missing request target")
    space = line.find(b" ", slash)
    if space < 0:
        raise ParseError("missing space after request target")
    if space - slash > 1:
        name = line[slash + 1:space]
        query = name.find(b"?")
        if query >= 0:
            name = name[:query]
        filename = _decode(name)
    else:
        filename = DEFAULT_FILE

    version_slash = line.find(b"/", space)
    if version_slash < 0:
        raise ParseError("missing HTTP version")
    if len(line) - version_slash <= 3:
        raise ParseError("truncated HTTP version")
    try:
        version = HttpVersion(_decode(line[version_slash + 1:version_slash + 4]))
    except ValueError:
        raise ParseError("unsupported HTTP version") from None

    return RequestLine(method, filename, version), rest


class HeaderParser:
    """Incremental parser for a block of ``Key: value`` lines ending in a blank line.

    Headers are collected in ``headers``. Across calls the parser resumes
    from the start of the first incomplete line.
    """

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.state = HeaderState.START

    def reset(self) -> None:
        """Forget all headers and start over."""
        self.headers = {}
        self.state = HeaderState.START

    @property
    def complete(self) -> bool:
        return self.state is HeaderState.END_LF

    def feed(self, buffer: bytes) -> tuple[bool, bytes]:
        """Consume header bytes from ``buffer``.

        Returns ``(True, rest)`` once the blank line ending the block has been
        read, where ``rest`` is what follows it, or ``(False, rest)`` where
        ``rest`` must be handed back, with more data appended, on the next call.
        Raises ParseError on a malformed header.
        """
        if self.complete:
            return True, buffer

        state = self.state
        resume_state = state
        checkpoint = 0
        key_start = key_end = value_start = -1

        for i, byte in enumerate(buffer):
            if state is HeaderState.START:
                if byte in (_CR, _LF):
                    checkpoint = i + 1
                    continue
                state = HeaderState.KEY
                key_start = i
            elif state is HeaderState.KEY:
                if byte == _COLON:
                    key_end = i
                    if key_end - key_start <= 0:
                        raise ParseError("empty header name")
                    state = HeaderState.COLON
                elif byte in (_CR, _LF):
                    raise ParseError("line break inside header name")
            elif state is HeaderState.COLON:
                if byte != _SPACE:
                    raise ParseError("expected a space after the colon")
                state = HeaderState.SPACES_AFTER_COLON
            elif state is HeaderState.SPACES_AFTER_COLON:
                state = HeaderState.VALUE
                value_start = i
            elif state is HeaderState.VALUE:
                if byte == _CR:
                    if i - value_start <= 0:
                        raise ParseError("empty header value")
                    self._pending = (buffer[key_start:key_end], buffer[value_start:i])
                    state = HeaderState.CR
                elif i - value_start >= MAX_HEADER_VALUE:
                    raise ParseError("header value too long")
            elif state is HeaderState.CR:
                if byte != _LF:
                    raise ParseError("expected a line feed after the carriage return")
                key, value = self._pending
                self.headers[_decode(key)] = _decode(value)
                state = HeaderState.LF
                resume_state = HeaderState.LF
                checkpoint = i + 1
            elif state is HeaderState.LF:
                if byte == _CR:
                    state = HeaderState.END_CR
                else:
                    key_start = i
                    state = HeaderState.KEY
            elif state is HeaderState.END_CR:
                if byte != _LF:
                    raise ParseError("expected a line feed ending the header block")
                self.state = HeaderState.END_LF
                return True, buffer[i + 1:]

        self.state = resume_state
        return False, buffer[checkpoint:]