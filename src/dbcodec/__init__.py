"""
Record codec between schema-described records and relational database rows.

Read path:  cursor row + schema (+ native column types) -> Record
Write path: Record + schema + ColumnTypeTable -> bound Statement

Both directions can be used as module functions:
- dbcodec.read(row, schema, column_types)
- dbcodec.write(record, schema, column_types, statement)

or through a DBRecord holding one record and its column types.
"""
__version__ = '0.1.0'

from dbcodec.adapters.column_info import ColumnInfo, columns_from_cursor_description
from dbcodec.adapters.column_info import sqlite_declared_types
from dbcodec.adapters.type_conversion import normalize_value
from dbcodec.adapters.type_mapping import resolve_sql_type
from dbcodec.exceptions import CodecError, DriverError, RangeError
from dbcodec.exceptions import ResourceError, SchemaError, UnsupportedType
from dbcodec.frame import dataframe_to_records, records_to_dataframe
from dbcodec.options import CodecOptions
from dbcodec.record import DBRecord, iter_records, read, read_cursor, write
from dbcodec.schema import infer_schema, infer_schema_from_cursor
from dbcodec.serialize import dump_record, dumps_record
from dbcodec.sqltypes import SqlType
from dbcodec.statement import Binding, Blob, Statement
from dbcodec.values import ColumnTypeTable, Field, Kind, Record, RecordBuilder
from dbcodec.values import Schema

__all__ = [
    'read',
    'write',
    'read_cursor',
    'iter_records',
    'DBRecord',
    'Record',
    'RecordBuilder',
    'Schema',
    'Field',
    'Kind',
    'ColumnTypeTable',
    'SqlType',
    'ColumnInfo',
    'columns_from_cursor_description',
    'sqlite_declared_types',
    'resolve_sql_type',
    'infer_schema',
    'infer_schema_from_cursor',
    'normalize_value',
    'Statement',
    'Binding',
    'Blob',
    'dump_record',
    'dumps_record',
    'records_to_dataframe',
    'dataframe_to_records',
    'CodecOptions',
    'CodecError',
    'UnsupportedType',
    'SchemaError',
    'ResourceError',
    'RangeError',
    'DriverError',
]
