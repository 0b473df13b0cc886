#!/usr/bin/env python3
"""
SQLShift Error Hierarchy
Canonical exception classes for the translator.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    UNKNOWN = "UNKNOWN_ERROR"
    SYNTAX_ERROR = "SYNTAX_ERROR"
    UNSUPPORTED_DIALECT = "UNSUPPORTED_DIALECT"
    FORMAT_ERROR = "FORMAT_ERROR"
    SCHEMA_ERROR = "SCHEMA_ERROR"


class SQLShiftError(Exception):
    """Base class for all SQLShift exceptions"""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ParseError(SQLShiftError):
    """Raised when DDL text cannot be parsed"""
    def __init__(self, message: str, statement: str = None, clause: str = None):
        details = {'statement': statement, 'clause': clause}
        super().__init__(message, ErrorCode.SYNTAX_ERROR, details)


class UnsupportedDialectError(SQLShiftError):
    """Raised when a dialect has no registered strategy"""
    def __init__(self, dialect: Any):
        super().__init__(f"Unsupported database dialect: {dialect}",
                         ErrorCode.UNSUPPORTED_DIALECT, {'dialect': dialect})
        self.dialect = dialect


class FormatError(SQLShiftError):
    """Raised when a value cannot be rendered as a SQL literal"""
    def __init__(self, message: str, value: Any = None, normalized_type: Optional[Any] = None):
        details = {'value': value, 'normalized_type': normalized_type}
        super().__init__(message, ErrorCode.FORMAT_ERROR, details)


class SchemaError(SQLShiftError):
    """Raised when a schema description violates its invariants"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.SCHEMA_ERROR, details)
