"""
Error types raised by the RFC search index.

Every failure surfaces as an RfseeError carrying a kind tag and a
human-readable message.
"""

PARSE_ERROR = 'ParseError'
FETCH_ERROR = 'FetchError'
IO_ERROR = 'IOError'
RUNTIME_ERROR = 'RuntimeError'


class RfseeError(Exception):
    """Base error with a kind tag."""
    kind = None

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.kind}: {self.message}"


class ParseError(RfseeError):
    """Malformed URL, RFC index, RFC record or index file."""
    kind = PARSE_ERROR


class FetchError(RfseeError):
    """TLS setup, connect, handshake or socket failure."""
    kind = FETCH_ERROR


class RfseeIOError(RfseeError):
    """Filesystem failure or no usable default index location."""
    kind = IO_ERROR


class RfseeRuntimeError(RfseeError):
    """Work submitted to a stopped pool or a broken pipeline."""
    kind = RUNTIME_ERROR
