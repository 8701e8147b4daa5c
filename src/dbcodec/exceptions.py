"""
Codec-specific exception classes.
"""
import sqlite3
from typing import Any

import psycopg


class CodecError(Exception):
    """Base class for all codec errors.
    """


class UnsupportedType(CodecError):
    """A native SQL type or value kind has no mapping.

    Raised when a column's native type code is unknown or has no portable
    kind, and when a non-scalar kind reaches the binary serializer.
    """

    def __init__(self, message: str, column: str | None = None,
                 sql_type: Any = None, kind: Any = None) -> None:
        super().__init__(message)
        self.column = column
        self.sql_type = sql_type
        self.kind = kind


class SchemaError(CodecError):
    """A record, schema or column type table is inconsistent.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ResourceError(CodecError):
    """Failure while streaming a large-object value.

    Always raised after the large-object handle has been released.
    """


class RangeError(CodecError, ValueError):
    """A value does not fit the integer width of its binding target.
    """

    def __init__(self, message: str, value: int | None = None,
                 lower: int | None = None, upper: int | None = None) -> None:
        super().__init__(message)
        self.value = value
        self.lower = lower
        self.upper = upper


DriverError = (
    psycopg.Error,
    sqlite3.Error,
    )

LobReadError = (
    OSError,
    psycopg.Error,
    sqlite3.Error,
    )
