"""
Tests for schema inference from column metadata.
"""
import pytest
from dbcodec import ColumnInfo, Kind, SqlType, UnsupportedType, infer_schema
from dbcodec import infer_schema_from_cursor
from dbcodec.schema import KIND_BY_SQL_TYPE, kind_for_sql_type


@pytest.mark.parametrize(('sql_type', 'kind'), [
    (SqlType.NULL, Kind.NULL),
    (SqlType.CHAR, Kind.STRING),
    (SqlType.VARCHAR, Kind.STRING),
    (SqlType.LONGNVARCHAR, Kind.STRING),
    (SqlType.CLOB, Kind.STRING),
    (SqlType.ROWID, Kind.STRING),
    (SqlType.BIT, Kind.BOOLEAN),
    (SqlType.BOOLEAN, Kind.BOOLEAN),
    (SqlType.TINYINT, Kind.INT32),
    (SqlType.SMALLINT, Kind.INT32),
    (SqlType.INTEGER, Kind.INT32),
    (SqlType.BIGINT, Kind.INT64),
    (SqlType.DATE, Kind.INT64),
    (SqlType.TIME, Kind.INT64),
    (SqlType.TIMESTAMP, Kind.INT64),
    (SqlType.REAL, Kind.FLOAT32),
    (SqlType.FLOAT, Kind.FLOAT32),
    (SqlType.NUMERIC, Kind.FLOAT64),
    (SqlType.DECIMAL, Kind.FLOAT64),
    (SqlType.DOUBLE, Kind.FLOAT64),
    (SqlType.BINARY, Kind.BYTES),
    (SqlType.LONGVARBINARY, Kind.BYTES),
    (SqlType.BLOB, Kind.BYTES),
])
def test_kind_table(sql_type, kind):
    """Test each supported native type maps to its portable kind"""
    assert kind_for_sql_type(sql_type) is kind


@pytest.mark.parametrize('sql_type', [SqlType.ARRAY, SqlType.STRUCT, SqlType.OTHER, SqlType.JAVA_OBJECT])
def test_unsupported_types(sql_type):
    """Test unmapped native types are rejected naming the column"""
    assert sql_type not in KIND_BY_SQL_TYPE
    with pytest.raises(UnsupportedType) as exc_info:
        infer_schema([ColumnInfo('ok', SqlType.INTEGER), ColumnInfo('tags', sql_type)])
    assert exc_info.value.column == 'tags'
    assert 'tags' in str(exc_info.value)


def test_order_and_nullability():
    """Test fields follow column order and nullability"""
    schema = infer_schema([
        ColumnInfo('z', SqlType.VARCHAR, nullable=False),
        ColumnInfo('a', SqlType.DATE),
        ColumnInfo('m', SqlType.NULL, nullable=False),
        ])
    assert schema.name == 'dbRecord'
    assert schema.names == ['z', 'a', 'm']
    assert [f.nullable for f in schema] == [False, True, True]
    assert [f.kind for f in schema] == [Kind.STRING, Kind.INT64, Kind.NULL]


def test_record_name():
    schema = infer_schema([ColumnInfo('a', SqlType.INTEGER)], name='people')
    assert schema.name == 'people'


def test_from_cursor(make_cursor, people_description, people_schema):
    """Test inference from a cursor description"""
    schema, columns = infer_schema_from_cursor(make_cursor(people_description), 'jdbc')
    assert schema == people_schema
    assert [c.sql_type for c in columns] == [SqlType.INTEGER, SqlType.VARCHAR, SqlType.TIMESTAMP, SqlType.BLOB]


def test_from_postgres_cursor(make_cursor):
    """Test inference from PostgreSQL OIDs"""
    description = [
        ('id', 20, None, None, None, None, None),
        ('at', 1184, None, None, None, None, None),
        ('ok', 16, None, None, None, None, None),
        ]
    schema, _ = infer_schema_from_cursor(make_cursor(description), 'postgresql')
    assert [f.kind for f in schema] == [Kind.INT64, Kind.INT64, Kind.BOOLEAN]


def test_postgres_array_column(make_cursor):
    """Test array-valued columns are rejected"""
    description = [('tags', 1009, None, None, None, None, None)]  # text[]
    with pytest.raises(UnsupportedType) as exc_info:
        infer_schema_from_cursor(make_cursor(description), 'postgresql')
    assert exc_info.value.column == 'tags'


if __name__ == '__main__':
    __import__('pytest').main([__file__])
