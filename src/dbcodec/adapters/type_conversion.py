"""
Value normalization for values read from a database cursor.

This module handles the Database → portable value direction: a native driver
value plus the column's native SQL type becomes one of the portable Python
values described in :mod:`dbcodec.values`.

Conversions:

1. NUMERIC/DECIMAL to float. Precision beyond float64 is lost; this is an
   accepted, lossy conversion.
2. DATE/TIME/TIMESTAMP to integer epoch milliseconds. Naive values are taken
   as UTC, aware values are shifted by their offset. ISO text (as stored by
   SQLite) is parsed with dateutil.
3. BLOB handles are read in full into bytes; CLOB handles are read in full
   and their lines rejoined with a single newline. Handles are released
   before the call returns, on every exit path.
4. Small fixes for driver representations: integer booleans, integer floats,
   memoryview binaries and NumPy scalars.

Everything else passes through unchanged; the record's schema catches
mismatches.
"""
import datetime
import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from numbers import Number
from typing import Any

import dateutil.parser

from dbcodec.exceptions import LobReadError, ResourceError
from dbcodec.sqltypes import SqlType
from dbcodec.values import unwrap_scalar

logger = logging.getLogger(__name__)

EPOCH = datetime.datetime(1970, 1, 1)
MILLISECOND = datetime.timedelta(milliseconds=1)

_LINE_BREAK = re.compile(r'\r\n|\r|\n')
_isoparser = dateutil.parser.isoparser()


@contextmanager
def scoped_lob(handle: Any) -> Iterator[Any]:
    """Yield a large-object handle and release it on exit.

    Handles are released with ``free()`` (JDBC-style LOBs) or ``close()``
    (file-like and oracledb LOBs), whichever exists.
    """
    try:
        yield handle
    finally:
        _release(handle)


def _is_handle(value: Any) -> bool:
    return callable(getattr(value, 'read', None))


def _release(handle: Any) -> None:
    for name in ('free', 'close'):
        release = getattr(handle, name, None)
        if callable(release):
            release()
            return


def read_blob(value: Any) -> Any:
    """Read a binary large object in full.

    Values that are neither bytes-like nor readable handles are returned
    unchanged.

    Raises
        ResourceError: if reading the handle fails
    """
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    if not _is_handle(value):
        return value
    try:
        with scoped_lob(value) as lob:
            data = lob.read()
    except LobReadError as e:
        raise ResourceError(f'Failed to read BLOB value: {e}') from e
    logger.debug(f'Read BLOB of {len(data)} bytes')
    return bytes(data)


def read_clob(value: Any) -> Any:
    """Read a character large object in full and normalize its line breaks.

    Values that are neither text nor readable handles are returned unchanged.

    Raises
        ResourceError: if reading the handle fails
    """
    if isinstance(value, str):
        return join_lines(value)
    if not _is_handle(value):
        return value
    try:
        with scoped_lob(value) as lob:
            text = lob.read()
    except LobReadError as e:
        raise ResourceError(f'Failed to read CLOB value: {e}') from e
    logger.debug(f'Read CLOB of {len(text)} characters')
    return join_lines(text)


def join_lines(text: str) -> str:
    """Split text into lines and rejoin them with a single newline.

    Lines end at ``\\r\\n``, ``\\r`` or ``\\n``. A terminator at the very end
    does not start a new line, so it is dropped. The original terminator
    bytes are not preserved.

    >>> join_lines('a\\r\\nb\\rc\\n')
    'a\\nb\\nc'
    >>> join_lines('')
    ''
    >>> join_lines('a\\n\\nb')
    'a\\n\\nb'
    """
    if not text:
        return ''
    lines = _LINE_BREAK.split(text)
    if lines[-1] == '':
        lines.pop()
    return '\n'.join(lines)


def to_epoch_millis(value: Any, sql_type: SqlType) -> Any:
    """Convert a date, time or datetime value to epoch milliseconds.

    Times count milliseconds since midnight. Values that are neither temporal
    nor ISO text are returned unchanged.

    >>> to_epoch_millis(datetime.datetime(2021, 1, 1), SqlType.TIMESTAMP)
    1609459200000
    >>> to_epoch_millis(datetime.date(1970, 1, 2), SqlType.DATE)
    86400000
    >>> to_epoch_millis(datetime.time(0, 0, 1, 500000), SqlType.TIME)
    1500
    """
    if isinstance(value, str):
        value = _parse_temporal_text(value, sql_type)

    if isinstance(value, datetime.datetime):
        if value.utcoffset() is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return (value - EPOCH) // MILLISECOND

    if isinstance(value, datetime.date):
        return (datetime.datetime.combine(value, datetime.time()) - EPOCH) // MILLISECOND

    if isinstance(value, datetime.time):
        delta = datetime.timedelta(hours=value.hour, minutes=value.minute,
                                   seconds=value.second, microseconds=value.microsecond)
        offset = value.utcoffset()
        if offset is not None:
            delta -= offset
        return delta // MILLISECOND

    return value


def _parse_temporal_text(value: str, sql_type: SqlType) -> Any:
    try:
        if sql_type is SqlType.TIME:
            return _isoparser.parse_isotime(value)
        return dateutil.parser.isoparse(value)
    except ValueError:
        logger.debug(f'Could not parse {value!r} as {sql_type.name}')
        return value


def normalize_value(value: Any, sql_type: SqlType) -> Any:
    """Convert one native driver value into a portable value.

    Args:
        value: Value as returned by the driver
        sql_type: Native SQL type of the originating column

    Returns
        Portable Python value (None, bool, int, float, str or bytes) or the
        original value when no conversion applies
    """
    value = unwrap_scalar(value)
    if value is None:
        return None

    match sql_type:
        case SqlType.NUMERIC | SqlType.DECIMAL:
            if isinstance(value, Number) and not isinstance(value, bool):
                return float(value)
        case SqlType.DATE | SqlType.TIME | SqlType.TIMESTAMP:
            return to_epoch_millis(value, sql_type)
        case SqlType.BLOB:
            return read_blob(value)
        case SqlType.CLOB | SqlType.NCLOB:
            return read_clob(value)
        case SqlType.BIT | SqlType.BOOLEAN:
            if isinstance(value, int):
                return bool(value)
        case SqlType.REAL | SqlType.FLOAT | SqlType.DOUBLE:
            if isinstance(value, Number) and not isinstance(value, bool):
                return float(value)
        case SqlType.BINARY | SqlType.VARBINARY | SqlType.LONGVARBINARY:
            if isinstance(value, bytearray | memoryview):
                return bytes(value)

    return value
