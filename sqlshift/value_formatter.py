#!/usr/bin/env python3
"""
SQLShift Value Formatter
========================

Renders data values and DDL default values as SQL literals for a target
dialect: NULL handling, boolean spelling, unquoted numerics, quoted and
escaped strings.
"""

import datetime
import json
import logging
import math
import re
import uuid
from decimal import Decimal
from typing import Any, Optional, Tuple, Union

from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.errors import FormatError
from sqlshift.schema_ir import NormalizedType

logger = logging.getLogger(__name__)

DialectLike = Union[DialectTag, str]

TRUE_STRINGS = ('1', 'true', 'TRUE')

_NUMBER = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$')
_BIT_LITERAL = re.compile(r"^[bB]'([01]*)'$")
_FUNCTION_CALL = re.compile(r'^[A-Za-z_][A-Za-z0-9_.]*\s*\(.*\)$', re.DOTALL)
_CAST_SUFFIX = re.compile(r'^\s*::\s*[A-Za-z_][A-Za-z0-9_ ]*(\([\d,\s]*\))?(\[\])?\s*$')

_CURRENT_TIMESTAMP = re.compile(
    r'^(current_timestamp|now|localtimestamp|localtime|getdate|getutcdate|sysdatetime|'
    r'sysutcdatetime|sysdatetimeoffset|utc_timestamp|transaction_timestamp|'
    r'statement_timestamp|clock_timestamp)(\s*\(\s*\d*\s*\))?$'
    r"|^datetime\s*\(\s*'now'(\s*,\s*'localtime')?\s*\)$",
    re.IGNORECASE)
_CURRENT_DATE = re.compile(r"^(current_date|curdate\s*\(\s*\)|date\s*\(\s*'now'\s*\))$", re.IGNORECASE)
_CURRENT_TIME = re.compile(r"^(current_time|curtime\s*\(\s*\)|time\s*\(\s*'now'\s*\))$", re.IGNORECASE)
_UUID_FUNCTION = re.compile(r'^(uuid|gen_random_uuid|newid|uuid_generate_v4|newsequentialid)\s*\(\s*\)$',
                            re.IGNORECASE)
_NEXTVAL = re.compile(r'^nextval\s*\(', re.IGNORECASE)
_SESSION_USER = re.compile(
    r'^(current_user|session_user|system_user|user(?=\s*\())(\s*\(\s*\))?$', re.IGNORECASE)

UUID_DEFAULTS = {
    DialectTag.MYSQL: '(uuid())',
    DialectTag.POSTGRESQL: 'gen_random_uuid()',
    DialectTag.SQLSERVER: 'newid()',
}

# Session user keywords each dialect accepts as a column default
USER_DEFAULTS = {
    DialectTag.POSTGRESQL: ('CURRENT_USER', 'SESSION_USER'),
    DialectTag.SQLSERVER: ('CURRENT_USER', 'SESSION_USER', 'SYSTEM_USER'),
}


def to_boolean(value: Any) -> bool:
    """Treat 1, "1", True, "true" and "TRUE" as true; everything else is false."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip() in TRUE_STRINGS
    return False


def escape_sql_string(value: str) -> str:
    """Standard SQL string escaping: single quotes are doubled."""
    return value.replace("'", "''")


def quote_string(value: str) -> str:
    return f"'{escape_sql_string(value)}'"


def boolean_literal(value: bool, dialect: DialectLike) -> str:
    """PostgreSQL and MySQL spell booleans as keywords, SQLite and SQL Server as 1/0."""
    family = normalize_dialect(dialect).family
    if family in (DialectTag.SQLITE, DialectTag.SQLSERVER):
        return '1' if value else '0'
    return 'true' if value else 'false'


def binary_literal(data: bytes, dialect: DialectLike) -> str:
    family = normalize_dialect(dialect).family
    hexed = data.hex()
    if family is DialectTag.POSTGRESQL:
        return f"'\\x{hexed}'"
    if family is DialectTag.SQLSERVER:
        return f"0x{hexed}"
    return f"X'{hexed}'"


def _numeric_literal(value: Any, normalized_type: NormalizedType) -> str:
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise FormatError(f"Cannot store non-finite number {value!r}", value, normalized_type)
        return repr(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise FormatError(f"Cannot store non-finite number {value!r}", value, normalized_type)
        return str(value)
    if isinstance(value, str):
        text = value.strip()
        if text == '':
            return 'NULL'
        if _NUMBER.match(text):
            return text
        raise FormatError(f"Non-numeric value {value!r} for {normalized_type.value} column",
                          value, normalized_type)
    raise FormatError(f"Unexpected {type(value).__name__} value for {normalized_type.value} column",
                      value, normalized_type)


def format_value(value: Any, normalized_type: NormalizedType, dialect: DialectLike) -> str:
    """
    Render a data value as a SQL literal for the target dialect.

    Args:
        value: None, bool, int, float, Decimal, str, bytes, date/time, or
            dict/list for json columns
        normalized_type: Semantic class of the target column
        dialect: Target dialect

    Returns:
        SQL literal text

    Raises:
        FormatError: If the value has an unexpected shape for the column
    """
    dialect = normalize_dialect(dialect)
    if value is None:
        return 'NULL'
    if isinstance(value, str) and value.strip().upper() == 'NULL':
        return 'NULL'

    if normalized_type is NormalizedType.BOOLEAN:
        if not isinstance(value, (bool, int, float, Decimal, str)):
            raise FormatError(f"Unexpected {type(value).__name__} value for boolean column",
                              value, normalized_type)
        return boolean_literal(to_boolean(value), dialect)

    if normalized_type.is_numeric:
        return _numeric_literal(value, normalized_type)

    if isinstance(value, (bytes, bytearray, memoryview)):
        if normalized_type is NormalizedType.BINARY:
            return binary_literal(bytes(value), dialect)
        raise FormatError(f"Binary value for {normalized_type.value} column", value, normalized_type)

    if isinstance(value, (dict, list)):
        if normalized_type is NormalizedType.JSON:
            return quote_string(json.dumps(value, ensure_ascii=False))
        raise FormatError(f"Unexpected {type(value).__name__} value for {normalized_type.value} column",
                          value, normalized_type)

    if isinstance(value, bool):
        text = '1' if value else '0'
    elif isinstance(value, datetime.datetime):
        text = value.isoformat(sep=' ')
    elif isinstance(value, (datetime.date, datetime.time)):
        text = value.isoformat()
    elif isinstance(value, (str, int, float, Decimal, uuid.UUID)):
        text = str(value)
    else:
        raise FormatError(f"Unexpected {type(value).__name__} value for {normalized_type.value} column",
                          value, normalized_type)
    return quote_string(text)


def _strip_wrapping_parens(text: str) -> str:
    while text.startswith('(') and text.endswith(')'):
        depth = 0
        quote = None
        for index, char in enumerate(text):
            if quote:
                if char == quote:
                    quote = None
            elif char == "'":
                quote = char
            elif char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
                if depth == 0 and index != len(text) - 1:
                    return text
        text = text[1:-1].strip()
    return text


def _split_quoted_literal(text: str) -> Tuple[Optional[str], str]:
    """Split ``'it''s'::text`` into (``it's``, ``::text``); (None, text) if not quoted."""
    if text[:2] in ("N'", "n'", "E'", "e'"):
        text = text[1:]
    if not text.startswith("'"):
        return None, text
    chars = []
    index = 1
    while index < len(text):
        char = text[index]
        if char == "'":
            if index + 1 < len(text) and text[index + 1] == "'":
                chars.append("'")
                index += 2
                continue
            return ''.join(chars), text[index + 1:]
        if char == '\\' and index + 1 < len(text):
            chars.append(text[index + 1])
            index += 2
            continue
        chars.append(char)
        index += 1
    return None, text


def unquote_default(raw: str) -> Tuple[str, bool]:
    """Remove source decoration from a DEFAULT literal.

    Returns:
        (text, was_quoted)
    """
    text = _strip_wrapping_parens(raw.strip())
    literal, rest = _split_quoted_literal(text)
    if literal is not None and (not rest.strip() or _CAST_SUFFIX.match(rest)):
        return literal, True
    if '::' in text and not text.startswith("'"):
        head, _, tail = text.rpartition('::')
        if _CAST_SUFFIX.match('::' + tail):
            return _strip_wrapping_parens(head.strip()), False
    return text, False


def _expression_default(text: str, dialect: DialectTag) -> Tuple[bool, Optional[str]]:
    """Translate well-known function defaults. Returns (handled, rendered)."""
    if _CURRENT_TIMESTAMP.match(text):
        return True, 'CURRENT_TIMESTAMP'
    if _CURRENT_DATE.match(text):
        return True, 'CAST(GETDATE() AS DATE)' if dialect is DialectTag.SQLSERVER else 'CURRENT_DATE'
    if _CURRENT_TIME.match(text):
        return True, 'CAST(GETDATE() AS TIME)' if dialect is DialectTag.SQLSERVER else 'CURRENT_TIME'
    if _UUID_FUNCTION.match(text):
        rendered = UUID_DEFAULTS.get(dialect)
        if rendered is None:
            logger.warning(f"UUID default '{text}' has no {dialect.value} equivalent; default dropped")
        return True, rendered
    if _NEXTVAL.match(text):
        return True, None
    match = _SESSION_USER.match(text)
    if match:
        accepted = USER_DEFAULTS.get(dialect)
        if accepted is None:
            logger.warning(f"User default '{text}' has no {dialect.value} equivalent; default dropped")
            return True, None
        keyword = match.group(1).upper()
        return True, keyword if keyword in accepted else 'CURRENT_USER'
    return False, None


def format_default(default_value: Optional[str], normalized_type: NormalizedType,
                   dialect: DialectLike) -> Optional[str]:
    """
    Render a DDL default value for the target dialect.

    The literal strings "NULL" and "null" always produce NULL. Source
    decoration (quotes, ``::type`` casts, wrapping parentheses) is removed
    before the value is formatted by its column class.

    Returns:
        The text to place after DEFAULT, or None when the default has no
        equivalent in the target dialect and must be dropped
    """
    dialect = normalize_dialect(dialect).family
    if default_value is None:
        return 'NULL'
    raw = default_value.strip()
    if raw == 'NULL' or raw.lower() == 'null':
        return 'NULL'

    text, quoted = unquote_default(raw)
    if not quoted:
        if text.upper() == 'NULL':
            return 'NULL'
        handled, rendered = _expression_default(text, dialect)
        if handled:
            return rendered

    if normalized_type is NormalizedType.BOOLEAN:
        bit = _BIT_LITERAL.match(text)
        if bit:
            truth = bit.group(1).lstrip('0') != ''
        else:
            truth = text.strip().lower() in ('1', 'true')
        return boolean_literal(truth, dialect)

    if normalized_type.is_numeric:
        if _NUMBER.match(text.strip()):
            return text.strip()
        if not quoted and _FUNCTION_CALL.match(text):
            return text
        logger.warning(f"Non-numeric default {raw!r} for {normalized_type.value} column kept as string")
        return quote_string(text)

    if not quoted and _FUNCTION_CALL.match(text):
        logger.debug(f"Passing default expression through unchanged: {text}")
        return text
    return quote_string(text)
