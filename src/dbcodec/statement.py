"""
Typed parameter binding for a prepared SQL statement.

DB-API 2.0 cursors take a flat parameter sequence and infer SQL types from
Python types. :class:`Statement` gives the codec an explicit, typed binding
surface (one setter per native binding, positions 1..N) and turns the result
into a DB-API parameter tuple when the caller executes it.

Usage:
    stmt = Statement('INSERT INTO t (id, name) VALUES (?, ?)', 2, dialect='sqlite')
    stmt.set_int(1, 7)
    stmt.set_string(2, 'ann')
    stmt.execute(cursor)
"""
import datetime
import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any

import numpy as np

from dbcodec.exceptions import RangeError
from dbcodec.sqltypes import SqlType

logger = logging.getLogger(__name__)

SHORT_RANGE = (-(2 ** 15), 2 ** 15 - 1)
INT_RANGE = (-(2 ** 31), 2 ** 31 - 1)
LONG_RANGE = (-(2 ** 63), 2 ** 63 - 1)

_UNSET = object()


def check_range(value: int, lower: int, upper: int, target: str) -> int:
    """Return value if it lies in [lower, upper], else raise RangeError.
    """
    if not lower <= value <= upper:
        raise RangeError(f'Value {value} out of range [{lower}, {upper}] for {target}',
                         value=value, lower=lower, upper=upper)
    return value


@dataclass(frozen=True, slots=True)
class Binding:
    """One setter call recorded on a statement."""
    method: str
    index: int
    value: Any
    sql_type: SqlType | None = None


class Blob:
    """In-memory binary large object bound to a statement.

    Positions are 1-based, as for driver LOB handles.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._freed = False

    def _check(self) -> None:
        if self._freed:
            raise ValueError('Blob has been freed')

    def length(self) -> int:
        self._check()
        return len(self._data)

    def get_bytes(self, pos: int, length: int) -> bytes:
        self._check()
        if pos < 1:
            raise ValueError(f'Blob position must be >= 1, got {pos}')
        return self._data[pos - 1:pos - 1 + length]

    def read(self) -> bytes:
        self._check()
        return self._data

    def free(self) -> None:
        self._freed = True

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self._data == other._data

    __hash__ = None

    def __repr__(self) -> str:
        return f'Blob({len(self._data)} bytes)'


def dumpsql(func):
    """Decorator for logging statement execution."""
    @wraps(func)
    def wrapper(self, cursor: Any, *args: Any, **kwargs: Any):
        start = time.time()
        logger.debug(f'SQL:\n{self.sql}\nargs: {self.bindings}')
        try:
            return func(self, cursor, *args, **kwargs)
        except Exception:
            logger.error(f'Error with statement:\nSQL:\n{self.sql}\nargs: {self.bindings}')
            raise
        finally:
            logger.debug(f'Statement time: {time.time() - start:.4f}s')
    return wrapper


def _adapt_sqlite(value: Any) -> Any:
    """SQLite has no temporal storage class; store ISO 8601 text."""
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    return value


class Statement:
    """Prepared statement with 1-based typed parameter setters
    """

    def __init__(self, sql: str, parameter_count: int, dialect: str | None = None) -> None:
        self.sql = sql
        self.parameter_count = parameter_count
        self.dialect = dialect
        self.bindings: list[Binding] = []
        self._params: list[Any] = [_UNSET] * parameter_count

    def _bind(self, method: str, index: int, value: Any, sql_type: SqlType | None = None) -> None:
        if not 1 <= index <= self.parameter_count:
            raise IndexError(f'Parameter index {index} out of range 1..{self.parameter_count}')
        self._params[index - 1] = value
        self.bindings.append(Binding(method, index, value, sql_type))

    def set_null(self, index: int, sql_type: SqlType) -> None:
        self._bind('null', index, None, SqlType.coerce(sql_type))

    def set_string(self, index: int, value: str) -> None:
        self._bind('string', index, str(value))

    def set_boolean(self, index: int, value: bool) -> None:
        self._bind('boolean', index, bool(value))

    def set_short(self, index: int, value: int) -> None:
        self._bind('short', index, check_range(int(value), *SHORT_RANGE, target='short'))

    def set_int(self, index: int, value: int) -> None:
        self._bind('int', index, check_range(int(value), *INT_RANGE, target='int'))

    def set_long(self, index: int, value: int) -> None:
        self._bind('long', index, check_range(int(value), *LONG_RANGE, target='long'))

    def set_float(self, index: int, value: float) -> None:
        self._bind('float', index, float(np.float32(value)))

    def set_double(self, index: int, value: float) -> None:
        self._bind('double', index, float(value))

    def set_bytes(self, index: int, value: bytes) -> None:
        self._bind('bytes', index, bytes(value))

    def set_blob(self, index: int, value: Blob) -> None:
        self._bind('blob', index, value)

    def set_date(self, index: int, value: datetime.date) -> None:
        self._bind('date', index, value)

    def set_time(self, index: int, value: datetime.time) -> None:
        self._bind('time', index, value)

    def set_timestamp(self, index: int, value: datetime.datetime) -> None:
        self._bind('timestamp', index, value)

    def clear_parameters(self) -> None:
        self._params = [_UNSET] * self.parameter_count
        self.bindings = []

    @property
    def is_complete(self) -> bool:
        return all(p is not _UNSET for p in self._params)

    @property
    def parameters(self) -> tuple:
        """DB-API parameter tuple for the bound values.

        Raises
            ValueError: if any parameter has not been bound
        """
        missing = [i + 1 for i, p in enumerate(self._params) if p is _UNSET]
        if missing:
            raise ValueError(f'No value specified for parameters {missing}')
        params = [bytes(p) if isinstance(p, Blob) else p for p in self._params]
        if self.dialect == 'sqlite':
            params = [_adapt_sqlite(p) for p in params]
        return tuple(params)

    @dumpsql
    def execute(self, cursor: Any) -> Any:
        """Execute the statement on a DB-API cursor with the bound parameters.

        Driver errors propagate unchanged.
        """
        return cursor.execute(self.sql, self.parameters)

    def __repr__(self) -> str:
        return f'Statement({self.sql!r}, {self.parameter_count})'
