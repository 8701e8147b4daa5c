"""
Database adapters package.

This package provides the following components:

- column_info: Column metadata from cursor descriptions
- type_mapping: Driver type code → native SQL type resolution (no conversion)
- type_conversion: Native driver value → portable value normalization

Type conversion principles:
1. Database → portable: normalize_value, driven by the column's native SQL type
2. Portable → Database: dbcodec.writer, driven by the destination column type table
"""
from dbcodec.adapters.column_info import ColumnInfo, columns_from_cursor_description
from dbcodec.adapters.column_info import sqlite_declared_types
from dbcodec.adapters.type_conversion import join_lines, normalize_value
from dbcodec.adapters.type_conversion import read_blob, read_clob, scoped_lob
from dbcodec.adapters.type_conversion import to_epoch_millis
from dbcodec.adapters.type_mapping import SUPPORTED_DIALECTS, is_supported_dialect
from dbcodec.adapters.type_mapping import resolve_sql_type
