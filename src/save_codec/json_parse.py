"""Lenient JSON parsing for exported save files.

Some games export JSON with a trailing comma before a closing brace
(e.g. Supermarket Together). That one failure is repaired, everything else
is reported as a ParseError.
"""

import json
import logging
import re
from typing import Any, Optional, Union

from .errors import ParseError

log = logging.getLogger(__name__)

TRAILING_COMMA_RE = re.compile(r",\s*}")
_WHITESPACE = " \t\n\r"

# json.decoder messages for a comma that is followed by "}" instead of a key.
# Older interpreters point at the brace, newer ones at the comma.
_EXPECTED_PROPERTY_NAME = "Expecting property name enclosed in double quotes"
_ILLEGAL_TRAILING_COMMA = "Illegal trailing comma before end of object"


def _to_text(data: Union[bytes, bytearray, str]) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Invalid UTF-8: {e.reason}", offset=e.start) from e


def _is_trailing_comma_error(error: json.JSONDecodeError) -> bool:
    """Check whether a decoder error is a ``,`` directly before ``}``."""
    doc, pos = error.doc, error.pos

    if error.msg == _ILLEGAL_TRAILING_COMMA:
        if doc[pos:pos + 1] != ",":
            return False
        closing = len(doc) - len(doc[pos + 1:].lstrip(_WHITESPACE))
        return doc[closing:closing + 1] == "}"

    if error.msg == _EXPECTED_PROPERTY_NAME:
        if doc[pos:pos + 1] != "}":
            return False
        return doc[:pos].rstrip(_WHITESPACE).endswith(",")

    return False


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are accepted by Python but are not JSON
    raise ValueError(f"Invalid JSON constant {name}")


def _loads(text: str) -> Any:
    """Strictly parse standard JSON.

    Decoder errors propagate as JSONDecodeError for repair inspection, every
    other failure (non-standard constants, oversized integers, nesting too
    deep) becomes a ParseError.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError:
        raise
    except (ValueError, RecursionError) as e:
        raise ParseError(str(e)) from e


def _parse_error(error: json.JSONDecodeError) -> ParseError:
    return ParseError(error.msg, offset=error.pos, lineno=error.lineno, colno=error.colno)


def parse_json(data: Union[bytes, bytearray, str], allow_comma_repair: bool = True) -> Any:
    """Parse JSON, repairing trailing commas before ``}`` when allowed.

    Args:
        data: Raw bytes (UTF-8) or text
        allow_comma_repair: Retry once with trailing commas removed

    Returns:
        The parsed document

    Raises:
        ParseError: With the original decoder message and position
    """
    text = _to_text(data)

    try:
        return _loads(text)
    except json.JSONDecodeError as e:
        original = e

    if not allow_comma_repair or not _is_trailing_comma_error(original):
        raise _parse_error(original)

    repaired = TRAILING_COMMA_RE.sub("}", text)
    try:
        document = _loads(repaired)
    except (json.JSONDecodeError, ParseError):
        raise _parse_error(original) from None

    log.debug("Parsed JSON after removing trailing commas")
    return document


def is_well_formed(data: Union[bytes, bytearray, str]) -> bool:
    """Return True if the data parses as (lenient) JSON."""
    try:
        parse_json(data)
    except ParseError:
        return False
    return True


def get_parse_error(data: Union[bytes, bytearray, str]) -> Optional[ParseError]:
    """Return the strict parse failure for the data, or None if it is valid JSON."""
    try:
        parse_json(data, allow_comma_repair=False)
    except ParseError as e:
        return e
    return None


def serialize_document(document: Any, indent: Optional[int] = None) -> bytes:
    """Serialize a document the way the editor writes it back (UTF-8)."""
    if indent is None:
        text = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    else:
        text = json.dumps(document, ensure_ascii=False, indent=indent)
    return text.encode("utf-8")
