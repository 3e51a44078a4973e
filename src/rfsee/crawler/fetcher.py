"""
HTTPS fetcher for the RFC index and RFC documents.

Each fetch opens its own TLS connection, sends a single HTTP/1.1 GET
with ``Connection: close`` and reads the response until the server
closes the stream. The raw response (status line, headers and body) is
returned; status handling is left to the caller.
"""
import logging
import re
import socket
import ssl

from rfsee.common.config import (
    HTTPS_PORT, READ_CHUNK_SIZE, RFC_INDEX_URL, TITLE_CONTINUATION, USER_AGENT
)
from rfsee.common.errors import FetchError, ParseError
from rfsee.common.models import RfcEntry
from rfsee.common.utils import rfc_url
from rfsee.crawler.rfc_index import parse_rfc_details

logger = logging.getLogger(__name__)

STATUS_LINE_REGEX = re.compile(r'^HTTP/\d(?:\.\d)? (\d{3})(?: .*)?$')


def split_url(url):
    """Split ``scheme://host/path`` into ``(host, path)``."""
    parts = url.split('://')
    if len(parts) != 2:
        raise ParseError(f"Invalid URL: {url}")

    host, sep, path = parts[1].partition('/')
    if not sep or not host:
        raise ParseError(f"Unable to parse domain and path: {url}")
    return host, path


def build_request(host, path):
    """Build the GET request sent for ``/<path>`` on ``host``."""
    return (
        f"GET /{path} HTTP/1.1\r\n"
        f"Host: {host}\r\n"
        f"User-Agent: {USER_AGENT}\r\n"
        f"Connection: close\r\n"
        f"\r\n"
    ).encode('ascii')


def fetch(url):
    """Download ``url`` over HTTPS and return the whole response as text."""
    host, path = split_url(url)

    try:
        context = ssl.create_default_context()
    except ssl.SSLError as e:
        raise FetchError(f"Unable to create TLS context: {e}") from e

    try:
        with socket.create_connection((host, HTTPS_PORT)) as sock:
            with context.wrap_socket(sock, server_hostname=host) as stream:
                stream.sendall(build_request(host, path))
                chunks = []
                while True:
                    chunk = stream.recv(READ_CHUNK_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
    except ssl.SSLError as e:
        raise FetchError(f"TLS failure for {host}: {e}") from e
    except OSError as e:
        raise FetchError(f"Connection to {host} failed: {e}") from e

    raw = b''.join(chunks)
    logger.debug(f"Fetched {len(raw)} bytes from {url}")
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise FetchError(f"Response from {url} is not valid UTF-8: {e}") from e


def response_status(response):
    """Return the numeric status code from a raw HTTP response."""
    status_line = response.split('\r\n', 1)[0].split('\n', 1)[0]
    match = STATUS_LINE_REGEX.match(status_line)
    if not match:
        raise ParseError(f"Invalid status line: {status_line[:80]!r}")
    return int(match.group(1))


def fetch_rfc_index():
    """Return the raw contents of the IETF RFC index."""
    logger.info(f"Fetching RFC index from {RFC_INDEX_URL}")
    return fetch(RFC_INDEX_URL)


def fetch_rfc(raw_rfc):
    """Fetch the RFC described by one RFC index record."""
    number, title = parse_rfc_details(raw_rfc)
    url = rfc_url(number)
    content = fetch(url)

    status = response_status(content)
    if status != 200:
        raise FetchError(f"Unable to fetch RFC {number}: HTTP {status}")

    return RfcEntry(
        number=number,
        url=url,
        title=title.replace(TITLE_CONTINUATION, ' '),
        content=content,
    )
