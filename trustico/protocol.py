"""Codec for the pipe-delimited ``Name|Value|`` response format."""
from __future__ import annotations

from typing import Mapping

from .exceptions import ApplicationError, ProtocolError
from .models import SuccessCode

DELIMITER = "|"
SUCCESS_FIELD = "SuccessCode"
ERROR_FIELD = "Error"
CONTROL_FIELDS = (SUCCESS_FIELD, ERROR_FIELD)
UNKNOWN_ERROR = "Unknown error"


def parse_records(body: str) -> dict[str, str]:
    """Parse a response body into a flat mapping; the last duplicate key wins.

    The value is the text between the first and second delimiter. Anything
    after the second delimiter is ignored and never unescaped.
    """

    fields: dict[str, str] = {}
    for raw_line in body.split("\n"):
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue
        parts = line.split(DELIMITER, 2)
        if len(parts) < 3:
            raise ProtocolError(f"Malformed response record: {line!r}", line=line)
        name, value = parts[0], parts[1]
        if not name:
            raise ProtocolError(f"Response record without a name: {line!r}", line=line)
        fields[name] = value
    return fields


def format_records(fields: Mapping[str, str]) -> str:
    """Serialise *fields* using the response format, one record per line."""

    lines = []
    for name, value in fields.items():
        if not name:
            raise ValueError("Cannot encode a record without a name")
        for text in (name, value):
            if any(char in text for char in (DELIMITER, "\n", "\r")):
                raise ValueError(f"Cannot encode {text!r}: contains a reserved character")
        lines.append(f"{name}{DELIMITER}{value}{DELIMITER}\n")
    return "".join(lines)


def parse_success_code(fields: Mapping[str, str]) -> SuccessCode:
    """Return the strict success indicator carried by *fields*."""

    raw = fields.get(SUCCESS_FIELD)
    if raw is None:
        raise ProtocolError(f"Response does not include a {SUCCESS_FIELD} record")
    try:
        return SuccessCode(raw)
    except ValueError:
        raise ProtocolError(f"Unexpected {SUCCESS_FIELD} value: {raw!r}") from None


def interpret_response(fields: Mapping[str, str]) -> dict[str, str]:
    """Raise :class:`ApplicationError` for rejections, otherwise strip the control fields."""

    if parse_success_code(fields) is SuccessCode.FAILURE:
        raise ApplicationError(fields.get(ERROR_FIELD, UNKNOWN_ERROR))
    return {name: value for name, value in fields.items() if name not in CONTROL_FIELDS}


__all__ = [
    "CONTROL_FIELDS",
    "ERROR_FIELD",
    "SUCCESS_FIELD",
    "format_records",
    "interpret_response",
    "parse_records",
    "parse_success_code",
]
