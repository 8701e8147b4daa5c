"""
Native type resolution for database columns.

DB-API drivers report column types in different shapes: PostgreSQL gives
type OIDs, SQLite gives nothing in ``cursor.description`` (callers supply
declared type names), ODBC-style drivers give the standard integer codes.
This module translates all of them into :class:`~dbcodec.sqltypes.SqlType`.

Resolution order:

1. Configuration-based per-column overrides (TypeMappingConfig)
2. A SqlType already supplied by the caller
3. The dialect's type code map
4. The declared type name, if any

The module only identifies types; value conversion lives in
:mod:`dbcodec.adapters.type_conversion`.
"""
import logging
from typing import Any

from psycopg.postgres import types

from dbcodec.config.type_mapping import TypeMappingConfig
from dbcodec.exceptions import UnsupportedType
from dbcodec.sqltypes import SqlType

logger = logging.getLogger(__name__)

SUPPORTED_DIALECTS = ('postgresql', 'sqlite', 'sqlserver', 'odbc', 'jdbc')

oid = lambda x: types.get(x).oid
aoid = lambda x: types.get(x).array_oid

_postgres_names = {
    '"char"': SqlType.CHAR,
    'bpchar': SqlType.CHAR,
    'varchar': SqlType.VARCHAR,
    'text': SqlType.VARCHAR,
    'name': SqlType.VARCHAR,
    'int2': SqlType.SMALLINT,
    'int4': SqlType.INTEGER,
    'int8': SqlType.BIGINT,
    'float4': SqlType.REAL,
    'float8': SqlType.DOUBLE,
    'numeric': SqlType.NUMERIC,
    'bool': SqlType.BOOLEAN,
    'date': SqlType.DATE,
    'time': SqlType.TIME,
    'timetz': SqlType.TIME,
    'timestamp': SqlType.TIMESTAMP,
    'timestamptz': SqlType.TIMESTAMP,
    'bytea': SqlType.BINARY,
    }

postgres_types = {oid(name): sql_type for name, sql_type in _postgres_names.items()}
for name in _postgres_names:
    postgres_types[aoid(name)] = SqlType.ARRAY

sqlite_types = {
    'INTEGER': SqlType.INTEGER,
    'INT': SqlType.INTEGER,
    'TINYINT': SqlType.TINYINT,
    'SMALLINT': SqlType.SMALLINT,
    'MEDIUMINT': SqlType.INTEGER,
    'BIGINT': SqlType.BIGINT,
    'REAL': SqlType.REAL,
    'FLOAT': SqlType.FLOAT,
    'DOUBLE': SqlType.DOUBLE,
    'DOUBLE PRECISION': SqlType.DOUBLE,
    'NUMERIC': SqlType.NUMERIC,
    'DECIMAL': SqlType.DECIMAL,
    'BOOLEAN': SqlType.BOOLEAN,
    'TEXT': SqlType.VARCHAR,
    'VARCHAR': SqlType.VARCHAR,
    'CHAR': SqlType.CHAR,
    'NCHAR': SqlType.NCHAR,
    'NVARCHAR': SqlType.NVARCHAR,
    'CLOB': SqlType.CLOB,
    'BLOB': SqlType.BLOB,
    'VARBINARY': SqlType.VARBINARY,
    'DATE': SqlType.DATE,
    'TIME': SqlType.TIME,
    'DATETIME': SqlType.TIMESTAMP,
    'TIMESTAMP': SqlType.TIMESTAMP,
    }


def _resolve_postgres(type_code: Any) -> SqlType | None:
    return postgres_types.get(type_code)


def _resolve_sqlite(type_code: Any) -> SqlType | None:
    if isinstance(type_code, str):
        return sqlite_types.get(type_code.split('(')[0].strip().upper())
    return None


def _resolve_odbc(type_code: Any) -> SqlType | None:
    if isinstance(type_code, int) and not isinstance(type_code, bool):
        try:
            return SqlType(type_code)
        except ValueError:
            return None
    return None


_dialect_resolvers = {
    'postgresql': _resolve_postgres,
    'sqlite': _resolve_sqlite,
    'sqlserver': _resolve_odbc,
    'odbc': _resolve_odbc,
    'jdbc': _resolve_odbc,
    }


def is_supported_dialect(dialect: str) -> bool:
    return dialect in _dialect_resolvers


def resolve_sql_type(
    dialect: str,
    type_code: Any,
    column_name: str | None = None,
    table_name: str | None = None,
    type_name: str | None = None,
) -> SqlType:
    """Resolve a driver-reported type code to a native SQL type.

    Args:
        dialect: Database dialect ('postgresql', 'sqlite', 'sqlserver', 'odbc', 'jdbc')
        type_code: Driver type code from ``cursor.description``
        column_name: Column name, for overrides and error messages
        table_name: Optional table name for configuration lookup
        type_name: Optional declared type name (e.g. from ``PRAGMA table_info``)

    Returns
        SqlType

    Raises
        UnsupportedType: if no mapping exists
    """
    if dialect not in _dialect_resolvers:
        raise ValueError(f'dialect must be one of: {list(_dialect_resolvers)}')

    configured = TypeMappingConfig.get_instance().get_type_for_column(dialect, table_name, column_name)
    if configured:
        logger.debug(f'Using configured type {configured} for column {column_name!r}')
        return SqlType.coerce(configured, column_name)

    if isinstance(type_code, SqlType):
        return type_code

    sql_type = _dialect_resolvers[dialect](type_code)
    if sql_type is not None:
        return sql_type

    if type_name:
        return _resolve_sqlite(type_name) or SqlType.coerce(type_name, column_name)

    raise UnsupportedType(
        f'Unsupported {dialect} type code {type_code!r} for column {column_name!r}',
        column=column_name, sql_type=type_code)
