"""
Native SQL type codes.

The codes are the standard JDBC/ODBC type identifiers. SQL Server and other
ODBC drivers report them directly; other dialects are translated by
:mod:`dbcodec.adapters.type_mapping`.
"""
from enum import IntEnum
from typing import Any

from dbcodec.exceptions import UnsupportedType


class SqlType(IntEnum):
    """Native SQL type identifier."""
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    BLOB = 2004
    CLOB = 2005
    NCLOB = 2011
    BOOLEAN = 16
    NULL = 0
    ROWID = -8
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    REF = 2006
    DATALINK = 70
    SQLXML = 2009

    @classmethod
    def coerce(cls, code: Any, column: str | None = None) -> 'SqlType':
        """Turn an int code, a type name or a SqlType into a SqlType.

        >>> SqlType.coerce(93)
        <SqlType.TIMESTAMP: 93>
        >>> SqlType.coerce('varchar(20)')
        <SqlType.VARCHAR: 12>
        """
        if isinstance(code, cls):
            return code
        if isinstance(code, str):
            name = code.split('(')[0].strip().upper().replace(' ', '')
            name = TYPE_NAME_ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
        elif isinstance(code, int) and not isinstance(code, bool):
            try:
                return cls(code)
            except ValueError:
                pass
        raise UnsupportedType(f'Unsupported SQL type {code!r} for column {column!r}',
                              column=column, sql_type=code)

    @property
    def is_narrow_integer(self) -> bool:
        return self in NARROW_INTEGER_TYPES

    @property
    def is_temporal(self) -> bool:
        return self in TEMPORAL_TYPES


TYPE_NAME_ALIASES = {
    'INT': 'INTEGER',
    'INT2': 'SMALLINT',
    'INT4': 'INTEGER',
    'INT8': 'BIGINT',
    'FLOAT4': 'REAL',
    'FLOAT8': 'DOUBLE',
    'DOUBLEPRECISION': 'DOUBLE',
    'BOOL': 'BOOLEAN',
    'TEXT': 'VARCHAR',
    'CHARACTER': 'CHAR',
    'CHARACTERVARYING': 'VARCHAR',
    'NTEXT': 'LONGNVARCHAR',
    'DATETIME': 'TIMESTAMP',
    'DATETIME2': 'TIMESTAMP',
    'TIMESTAMPTZ': 'TIMESTAMP',
    'TIMESTAMPWITHTIMEZONE': 'TIMESTAMP',
    'TIMESTAMPWITHOUTTIMEZONE': 'TIMESTAMP',
    'TIMETZ': 'TIME',
    'TIMEWITHTIMEZONE': 'TIME',
    'TIMEWITHOUTTIMEZONE': 'TIME',
    'BYTEA': 'BINARY',
    'IMAGE': 'LONGVARBINARY',
    }

NARROW_INTEGER_TYPES = frozenset({SqlType.TINYINT, SqlType.SMALLINT})

NARROW_INTEGER_RANGES = {
    SqlType.TINYINT: (-(2 ** 7), 2 ** 7 - 1),
    SqlType.SMALLINT: (-(2 ** 15), 2 ** 15 - 1),
    }

TEMPORAL_TYPES = frozenset({SqlType.DATE, SqlType.TIME, SqlType.TIMESTAMP})

CHARACTER_LOB_TYPES = frozenset({SqlType.CLOB, SqlType.NCLOB})

BINARY_TYPES = frozenset({
    SqlType.BINARY,
    SqlType.VARBINARY,
    SqlType.LONGVARBINARY,
    SqlType.BLOB,
    })
