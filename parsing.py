# parsing.py
import logging
import re
from typing import List, MutableMapping, Optional

from constants import NO_VALID_DATA_MESSAGE, PARSE_ERROR_MESSAGE
from errors import ParseError
from models import ContentRow

logger = logging.getLogger(__name__)

HEADER_TOKENS = ("url", "headline")
_LINE_BREAK = re.compile(r"\r?\n")
_LEADING_DIGITS = re.compile(r"([0-9]+)")


def split_csv_line(line: str) -> List[str]:
    """
    Splits a line on commas that sit outside double quotes.

    A comma is a delimiter only when an even number of '"' characters precedes
    it. Escaped quotes ("") inside a quoted field are not understood.
    """
    fields = []
    current = []
    quote_count = 0
    for char in line:
        if char == '"':
            quote_count += 1
        if char == ',' and quote_count % 2 == 0:
            fields.append(''.join(current))
            current = []
        else:
            current.append(char)
    fields.append(''.join(current))
    return fields


def _clean_field(value: str) -> str:
    """Trims a field and drops one leading and one trailing double quote."""
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def _parse_user_count(value: str) -> Optional[int]:
    """
    Reads the leading integer of a users field.

    Trailing text after the digits is ignored ("1500.0" reads as 1500). A sign
    or any other leading character rejects the field.
    """
    cleaned = _clean_field(value.strip().replace(',', '')).strip()
    match = _LEADING_DIGITS.match(cleaned)
    if match is None:
        return None
    return int(match.group(1))


def is_header_line(line: str) -> bool:
    lowered = line.lower()
    return any(token in lowered for token in HEADER_TOKENS)


def parse_content_row(line: str) -> Optional[ContentRow]:
    """Parses one data line. Returns None when the line is unusable."""
    parts = split_csv_line(line)
    if len(parts) < 3:
        return None

    url = _clean_field(parts[0])
    headline = _clean_field(parts[1])
    total_users = _parse_user_count(parts[2])

    if not url or not headline or total_users is None:
        return None
    return ContentRow(url=url, headline=headline, total_users=total_users)


def parse_content_csv(text: str) -> List[ContentRow]:
    """
    Turns pasted or uploaded CSV text into validated content rows.

    Expected columns: URL, Headline, Users. The first line is skipped when it
    looks like a header. Malformed lines are dropped without stopping the
    batch; order among the surviving rows is preserved.

    Raises:
        ParseError: if no line yields a valid row.
    """
    lines = _LINE_BREAK.split((text or "").strip())

    rows = []
    dropped = 0
    for index, line in enumerate(lines):
        if index == 0 and is_header_line(line):
            continue
        row = parse_content_row(line)
        if row is None:
            dropped += 1
            continue
        rows.append(row)

    if not rows:
        raise ParseError(NO_VALID_DATA_MESSAGE)

    if dropped:
        logger.debug("Dropped %d malformed line(s) while parsing CSV input", dropped)
    return rows


def decode_upload(data: bytes) -> str:
    """Decodes uploaded file bytes, trying common encodings in order."""
    for encoding in ("utf-8-sig", "utf-8"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 decodes any byte sequence
    return data.decode("latin-1")


def ingest_text(state: MutableMapping, text: str) -> bool:
    """
    Parses text into the session's row collection.

    On success the held rows are replaced and any error is cleared. On failure
    the held rows are left as they were and a format hint is set instead.
    Returns True when rows were replaced.
    """
    try:
        rows = parse_content_csv(text)
    except ParseError:
        state['error_message'] = PARSE_ERROR_MESSAGE
        return False

    state['content_rows'] = rows
    state['error_message'] = None
    return True
