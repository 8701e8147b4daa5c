"""
Record codec: cursor rows to records and records to statement parameters.

The read path consumes exactly one positioned row per call; advancing the
cursor is the caller's job. The write path binds one record's fields at
positions 1..N in schema order; executing the statement is the caller's job.

A :class:`DBRecord` instance serves one cursor or one statement at a time and
keeps no state beyond its current record and column type table, so separate
instances may run concurrently on separate cursors.
"""
import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, BinaryIO

from dbcodec.adapters.column_info import ColumnInfo
from dbcodec.adapters.type_conversion import normalize_value
from dbcodec.exceptions import SchemaError
from dbcodec.options import CodecOptions
from dbcodec.schema import infer_schema, infer_schema_from_cursor
from dbcodec.serialize import dump_record
from dbcodec.sqltypes import SqlType
from dbcodec.statement import Statement
from dbcodec.values import ColumnTypeTable, Kind, Record, RecordBuilder, Schema
from dbcodec.writer import bind_field

logger = logging.getLogger(__name__)

# Native types assumed for reading when no column metadata is at hand.
DEFAULT_SQL_TYPES = {
    Kind.NULL: SqlType.NULL,
    Kind.BOOLEAN: SqlType.BOOLEAN,
    Kind.INT32: SqlType.INTEGER,
    Kind.INT64: SqlType.BIGINT,
    Kind.FLOAT32: SqlType.REAL,
    Kind.FLOAT64: SqlType.DOUBLE,
    Kind.STRING: SqlType.VARCHAR,
    Kind.BYTES: SqlType.VARBINARY,
    }


def _as_column_types(schema: Schema, column_types: Any) -> ColumnTypeTable:
    if isinstance(column_types, ColumnTypeTable):
        table = column_types
    elif column_types and isinstance(column_types[0], ColumnInfo):
        table = ColumnTypeTable.from_columns(column_types)
    else:
        table = ColumnTypeTable.for_schema(schema, column_types)
    table.validate(schema)
    return table


def _default_column_types(schema: Schema) -> ColumnTypeTable:
    return ColumnTypeTable((f.name, DEFAULT_SQL_TYPES.get(f.kind, SqlType.OTHER)) for f in schema)


def _row_values(row: Any, schema: Schema) -> list[Any]:
    if isinstance(row, Mapping) or (hasattr(row, 'keys') and callable(row.keys)):
        try:
            return [row[name] for name in schema.names]
        except (KeyError, IndexError) as e:
            raise SchemaError(f'Row has no column {e.args[0]!r} for schema {schema.name!r}') from e
    if len(row) != len(schema):
        raise SchemaError(f'Row has {len(row)} columns but schema {schema.name!r} has {len(schema)} fields')
    return list(row)


def read(row: Any, schema: Schema,
         column_types: ColumnTypeTable | Sequence[Any] | None = None) -> Record:
    """Build a record from one cursor row.

    Args:
        row: Positional sequence, mapping or sqlite3.Row for one result row
        schema: Schema of the row, normally inferred from the same cursor
        column_types: Native types of the result columns (ColumnTypeTable,
            list of ColumnInfo, or list of codes). Without it, temporal and
            large-object columns are not recognized.

    Returns
        Immutable Record
    """
    table = _default_column_types(schema) if column_types is None else _as_column_types(schema, column_types)
    builder = RecordBuilder(schema)
    for field, sql_type, value in zip(schema, table, _row_values(row, schema)):
        builder.set(field.name, normalize_value(value, sql_type))
    return builder.build()


def write(record: Record, schema: Schema,
          column_types: ColumnTypeTable | Sequence[Any],
          statement: Statement) -> None:
    """Bind a record's fields into a statement at positions 1..N.

    On failure, parameters already bound for earlier fields stay bound; the
    caller should not execute the statement.

    Raises
        SchemaError: column types do not align with the schema, the record
            does not conform to the schema, or a field kind is not scalar
        RangeError: an integer does not fit a narrow binding target
    """
    table = _as_column_types(schema, column_types)
    if record.get_schema() != schema:
        raise SchemaError(f'Record schema {record.get_schema()!r} does not match {schema!r}')
    for i, field in enumerate(schema):
        bind_field(statement, i + 1, field, table[i], record[field.name])
    logger.debug(f'Bound {len(schema)} parameters for {schema.name!r}')


class DBRecord:
    """A record together with the native column types needed to write it.
    """

    def __init__(self, record: Record | None = None,
                 column_types: ColumnTypeTable | Sequence[Any] | None = None) -> None:
        self.record = record
        self.column_types = None
        if record is not None and column_types is not None:
            self.column_types = _as_column_types(record.get_schema(), column_types)

    def get_record(self) -> Record | None:
        return self.record

    def read_fields(self, row: Any, schema: Schema,
                    column_types: ColumnTypeTable | Sequence[Any] | None = None) -> Record:
        """Replace the held record with one built from ``row``."""
        self.record = read(row, schema, column_types)
        self.column_types = None if column_types is None else _as_column_types(schema, column_types)
        return self.record

    def write(self, statement: Statement) -> None:
        """Bind the held record into ``statement``."""
        if self.record is None or self.column_types is None:
            raise SchemaError('DBRecord needs a record and column types to write')
        write(self.record, self.record.get_schema(), self.column_types, statement)

    def write_to(self, stream: BinaryIO) -> None:
        """Serialize the held record to a binary stream."""
        if self.record is None:
            raise SchemaError('DBRecord has no record to serialize')
        dump_record(self.record, stream)

    def __repr__(self) -> str:
        return f'DBRecord({self.record!r}, {self.column_types!r})'


def read_cursor(cursor: Any, options: CodecOptions | None = None,
                schema: Schema | None = None,
                columns: Sequence[ColumnInfo] | None = None,
                type_names: Sequence[str] | None = None) -> Record | None:
    """Fetch and decode the cursor's next row, or return None at the end.

    The schema and native column types are inferred from the cursor
    description when not supplied.
    """
    options = options or CodecOptions()
    if columns is None:
        inferred, columns = infer_schema_from_cursor(cursor, options.dialect, options.record_name,
                                                     options.table_name, type_names)
        if schema is None:
            schema = inferred
    elif schema is None:
        schema = infer_schema(columns, options.record_name)
    row = cursor.fetchone()
    if row is None:
        return None
    return read(row, schema, columns)


def iter_records(cursor: Any, options: CodecOptions | None = None,
                 columns: Sequence[ColumnInfo] | None = None,
                 type_names: Sequence[str] | None = None) -> Iterator[Record]:
    """Decode every remaining row of an executed cursor.

    The schema is inferred once from the cursor description (or from
    ``columns``) and reused for each row.
    """
    options = options or CodecOptions()
    if columns is None:
        schema, columns = infer_schema_from_cursor(cursor, options.dialect, options.record_name,
                                                   options.table_name, type_names)
    else:
        schema = infer_schema(columns, options.record_name)
    table = ColumnTypeTable.from_columns(columns)
    while (row := cursor.fetchone()) is not None:
        yield read(row, schema, table)
