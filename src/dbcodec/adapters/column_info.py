"""
Column metadata extracted from cursor descriptions.
"""
import logging
from collections.abc import Sequence
from typing import Any, Self

from dbcodec.adapters.type_mapping import resolve_sql_type
from dbcodec.sqltypes import SqlType

logger = logging.getLogger(__name__)


class ColumnInfo:
    """Name, native SQL type and nullability of one result or table column

    Technical implementation details:
    - Built from a DB-API 2.0 ``cursor.description`` item (7-sequence)
    - ``type_code`` keeps the driver's raw code; ``sql_type`` is the resolved SqlType
    - Unknown nullability (``null_ok`` of None) is treated as nullable
    """

    def __init__(self,
                 name: str,
                 sql_type: SqlType,
                 nullable: bool = True,
                 type_code: Any = None,
                 display_size: int | None = None,
                 internal_size: int | None = None,
                 precision: int | None = None,
                 scale: int | None = None):
        self.name = name
        self.sql_type = sql_type
        self.nullable = nullable
        self.type_code = type_code
        self.display_size = display_size
        self.internal_size = internal_size
        self.precision = precision
        self.scale = scale

    @classmethod
    def from_cursor_description(cls, description_item: Sequence[Any], dialect: str,
                                table_name: str | None = None,
                                type_name: str | None = None) -> Self:
        """Create a ColumnInfo from one cursor description item.

        Args:
            description_item: One item from cursor.description
            dialect: Database dialect ('postgresql', 'sqlite', ...)
            table_name: Optional table name for configured overrides
            type_name: Optional declared type name, required for SQLite

        Returns
            ColumnInfo instance
        """
        item = tuple(description_item) + (None,) * (7 - len(description_item))
        name, type_code, display_size, internal_size, precision, scale, null_ok = item[:7]
        sql_type = resolve_sql_type(dialect, type_code, column_name=name,
                                    table_name=table_name, type_name=type_name)
        return cls(name=name,
                   sql_type=sql_type,
                   nullable=True if null_ok is None else bool(null_ok),
                   type_code=type_code,
                   display_size=display_size,
                   internal_size=internal_size,
                   precision=precision,
                   scale=scale)

    def __repr__(self) -> str:
        return (f'ColumnInfo(name={self.name!r}, sql_type={self.sql_type.name}, '
                f'nullable={self.nullable})')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnInfo):
            return NotImplemented
        return (self.name, self.sql_type, self.nullable) == (other.name, other.sql_type, other.nullable)

    __hash__ = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.
        """
        return {
            'name': self.name,
            'sql_type': self.sql_type.name,
            'nullable': self.nullable,
            'type_code': self.type_code,
            'display_size': self.display_size,
            'internal_size': self.internal_size,
            'precision': self.precision,
            'scale': self.scale,
            }


def columns_from_cursor_description(cursor: Any, dialect: str,
                                    table_name: str | None = None,
                                    type_names: Sequence[str] | None = None) -> list[ColumnInfo]:
    """Create ColumnInfo objects from a cursor description.

    Args:
        cursor: Database cursor with a description attribute
        dialect: Database dialect
        table_name: Optional table name for configured overrides
        type_names: Optional declared type names, positionally aligned

    Returns
        List of ColumnInfo objects, in cursor column order
    """
    if cursor.description is None:
        return []

    if type_names is not None and len(type_names) != len(cursor.description):
        raise ValueError(f'Expected {len(cursor.description)} type names, got {len(type_names)}')

    columns = []
    for i, desc_item in enumerate(cursor.description):
        type_name = type_names[i] if type_names is not None else None
        columns.append(ColumnInfo.from_cursor_description(desc_item, dialect, table_name, type_name))
    logger.debug(f'Columns from cursor description: {columns}')
    return columns


def sqlite_declared_types(connection: Any, table: str) -> list[ColumnInfo]:
    """Read declared column types of a SQLite table via ``PRAGMA table_info``.

    SQLite cursors carry no type information, so both the read-side schema and
    the write-side column type table are captured from the table declaration.
    """
    cursor = connection.execute(f'PRAGMA table_info("{table}")')
    try:
        rows = cursor.fetchall()
    finally:
        cursor.close()
    columns = []
    for _, name, type_name, notnull, _, _ in rows:
        sql_type = resolve_sql_type('sqlite', type_name, column_name=name, table_name=table)
        columns.append(ColumnInfo(name=name, sql_type=sql_type, nullable=not notnull,
                                  type_code=type_name))
    return columns
