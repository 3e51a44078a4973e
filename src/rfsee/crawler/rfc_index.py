"""
Parsing of the IETF RFC index (rfc-index.txt).

Records start at the first "0001" entry and are separated by blank
lines. Each record begins with the zero-padded RFC number followed by
the title, authors, date and format information, wrapped onto
continuation lines indented by five spaces.
"""
import re

from rfsee.common.config import RFC_DELIMITER, RFC_INDEX_START
from rfsee.common.errors import ParseError

RFC_NUMBER_REGEX = re.compile(r'[+-]?[0-9]+')


def parse_rfc_index(content):
    """Split the RFC index into raw records, header stripped."""
    idx = content.find(RFC_INDEX_START)
    if idx == -1:
        raise ParseError("Unable to parse RFC index")
    return content[idx:].split(RFC_DELIMITER)


def parse_rfc_details(raw_rfc):
    """Return ``(number, title)`` for a raw RFC record."""
    rfc_num, sep, title = raw_rfc.partition(' ')
    if not sep:
        raise ParseError(f"Unable to parse RFC number {raw_rfc!r}")
    # plain ASCII digits only: no whitespace, no digit separators
    if not RFC_NUMBER_REGEX.fullmatch(rfc_num):
        raise ParseError(f"Invalid RFC number {rfc_num!r}")
    number = int(rfc_num)
    return number, title
