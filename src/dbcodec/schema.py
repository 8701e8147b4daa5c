"""
Schema inference from cursor column metadata.
"""
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from dbcodec.adapters.column_info import ColumnInfo, columns_from_cursor_description
from dbcodec.exceptions import UnsupportedType
from dbcodec.sqltypes import SqlType
from dbcodec.values import Field, Kind, Schema

logger = logging.getLogger(__name__)

DEFAULT_RECORD_NAME = 'dbRecord'

KIND_BY_SQL_TYPE: dict[SqlType, Kind] = {
    SqlType.NULL: Kind.NULL,

    SqlType.ROWID: Kind.STRING,
    SqlType.CHAR: Kind.STRING,
    SqlType.VARCHAR: Kind.STRING,
    SqlType.LONGVARCHAR: Kind.STRING,
    SqlType.NCHAR: Kind.STRING,
    SqlType.NVARCHAR: Kind.STRING,
    SqlType.LONGNVARCHAR: Kind.STRING,
    SqlType.CLOB: Kind.STRING,
    SqlType.NCLOB: Kind.STRING,

    SqlType.BIT: Kind.BOOLEAN,
    SqlType.BOOLEAN: Kind.BOOLEAN,

    SqlType.TINYINT: Kind.INT32,
    SqlType.SMALLINT: Kind.INT32,
    SqlType.INTEGER: Kind.INT32,

    SqlType.BIGINT: Kind.INT64,
    SqlType.DATE: Kind.INT64,
    SqlType.TIME: Kind.INT64,
    SqlType.TIMESTAMP: Kind.INT64,

    SqlType.REAL: Kind.FLOAT32,
    SqlType.FLOAT: Kind.FLOAT32,

    SqlType.NUMERIC: Kind.FLOAT64,
    SqlType.DECIMAL: Kind.FLOAT64,
    SqlType.DOUBLE: Kind.FLOAT64,

    SqlType.BINARY: Kind.BYTES,
    SqlType.VARBINARY: Kind.BYTES,
    SqlType.LONGVARBINARY: Kind.BYTES,
    SqlType.BLOB: Kind.BYTES,
    }


def kind_for_sql_type(sql_type: SqlType, column_name: str | None = None) -> Kind:
    """Map a native SQL type to its portable kind.

    Raises
        UnsupportedType: for ARRAY, STRUCT, OTHER and the other unmapped codes
    """
    try:
        return KIND_BY_SQL_TYPE[sql_type]
    except KeyError:
        raise UnsupportedType(
            f'Unsupported SQL type {sql_type.name} ({int(sql_type)}) for column {column_name!r}',
            column=column_name, sql_type=sql_type) from None


def infer_schema(columns: Iterable[ColumnInfo], name: str = DEFAULT_RECORD_NAME) -> Schema:
    """Build a schema from ordered column metadata.

    Field order is the column order; a ColumnTypeTable for the same columns
    aligns with it position by position.
    """
    fields = [Field(c.name, kind_for_sql_type(c.sql_type, c.name), c.nullable) for c in columns]
    schema = Schema(name, fields)
    logger.debug(f'Inferred {schema}')
    return schema


def infer_schema_from_cursor(cursor: Any, dialect: str,
                             name: str = DEFAULT_RECORD_NAME,
                             table_name: str | None = None,
                             type_names: Sequence[str] | None = None) -> tuple[Schema, list[ColumnInfo]]:
    """Infer a schema from an executed cursor's description.

    Returns
        (schema, columns) where columns carry the native types used to
        normalize values of each row
    """
    columns = columns_from_cursor_description(cursor, dialect, table_name, type_names)
    return infer_schema(columns, name), columns
