"""
Native-type-aware binding of portable values into a statement.

The binding for a value depends on both its portable kind and the native SQL
type of the destination column, because the portable kinds collapse
distinctions the database still needs:

    kind     destination column        binding
    -------  ------------------------  -----------------------------------
    STRING   any                       set_string
    BOOLEAN  any                       set_boolean
    INT32    TINYINT, SMALLINT         set_short (range checked per column)
    INT32    other                     set_int
    INT64    DATE / TIME / TIMESTAMP   set_date / set_time / set_timestamp
    INT64    other                     set_long
    FLOAT32  any                       set_float
    FLOAT64  any                       set_double
    BYTES    BLOB                      set_blob
    BYTES    other                     set_bytes
    null     any                       set_null typed by the column

Non-scalar kinds are rejected by :meth:`~dbcodec.values.Field.non_nullable_kind`
before dispatch. Dispatch is a ``match`` over the scalar kinds closed with
``assert_never``.
"""
import datetime
import logging
from typing import Any, assert_never

from dbcodec.exceptions import RangeError
from dbcodec.sqltypes import NARROW_INTEGER_RANGES, SqlType
from dbcodec.statement import Blob, Statement, check_range
from dbcodec.values import Field, Kind

logger = logging.getLogger(__name__)

EPOCH = datetime.datetime(1970, 1, 1)
MILLISECOND = datetime.timedelta(milliseconds=1)
MIN_MILLIS = (datetime.datetime.min - EPOCH) // MILLISECOND
MAX_MILLIS = (datetime.datetime.max - EPOCH) // MILLISECOND


def from_epoch_millis(millis: int) -> datetime.datetime:
    """Naive UTC datetime for a count of epoch milliseconds.

    >>> from_epoch_millis(1609459200000)
    datetime.datetime(2021, 1, 1, 0, 0)

    Raises
        RangeError: if the instant is outside the years 1 to 9999
    """
    try:
        return EPOCH + datetime.timedelta(milliseconds=millis)
    except OverflowError as e:
        raise RangeError(f'Epoch milliseconds {millis} out of range [{MIN_MILLIS}, {MAX_MILLIS}]',
                         value=millis, lower=MIN_MILLIS, upper=MAX_MILLIS) from e


def bind_field(statement: Statement, position: int, field: Field,
               sql_type: SqlType, value: Any) -> None:
    """Bind one field value at a 1-based statement position.

    Args:
        statement: Target statement
        position: 1-based parameter position
        field: Schema field the value belongs to
        sql_type: Native SQL type of the destination column
        value: Portable value, or None

    Raises
        SchemaError: if the field kind is not a scalar kind (nothing is bound)
        RangeError: if an integer does not fit its binding target, or epoch
            milliseconds fall outside the datetime range
    """
    kind = field.non_nullable_kind()
    if value is None:
        statement.set_null(position, sql_type)
        return

    match kind:
        case Kind.NULL:
            statement.set_null(position, sql_type)
        case Kind.STRING:
            statement.set_string(position, value)
        case Kind.BOOLEAN:
            statement.set_boolean(position, value)
        case Kind.INT32:
            _write_int(statement, position, sql_type, value)
        case Kind.INT64:
            _write_long(statement, position, sql_type, value)
        case Kind.FLOAT32:
            statement.set_float(position, value)
        case Kind.FLOAT64:
            statement.set_double(position, value)
        case Kind.BYTES:
            _write_bytes(statement, position, sql_type, value)
        case _:
            assert_never(kind)


def _write_int(statement: Statement, position: int, sql_type: SqlType, value: int) -> None:
    if sql_type in NARROW_INTEGER_RANGES:
        lower, upper = NARROW_INTEGER_RANGES[sql_type]
        statement.set_short(position, check_range(value, lower, upper, sql_type.name))
        return
    statement.set_int(position, value)


def _write_long(statement: Statement, position: int, sql_type: SqlType, value: int) -> None:
    match sql_type:
        case SqlType.DATE:
            statement.set_date(position, from_epoch_millis(value).date())
        case SqlType.TIME:
            statement.set_time(position, from_epoch_millis(value).time())
        case SqlType.TIMESTAMP:
            statement.set_timestamp(position, from_epoch_millis(value))
        case _:
            statement.set_long(position, value)


def _write_bytes(statement: Statement, position: int, sql_type: SqlType, value: bytes) -> None:
    if sql_type is SqlType.BLOB:
        statement.set_blob(position, Blob(value))
        return
    # BINARY, VARBINARY and LONGVARBINARY
    statement.set_bytes(position, value)
