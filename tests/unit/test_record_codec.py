"""
Tests for reading cursor rows into records and writing records into statements.
"""
import datetime
import io
from decimal import Decimal

import pytest
from dbcodec import Binding, Blob, CodecOptions, ColumnTypeTable, DBRecord, Field
from dbcodec import Kind, RangeError, Record, Schema, SchemaError, SqlType
from dbcodec import Statement, dumps_record, iter_records, read, read_cursor
from dbcodec import write
from tests.fixtures.values import CREATED, CREATED_MILLIS


def test_end_to_end(make_cursor, make_lob, people_description, people_schema):
    """Test reading a people row and writing it back"""
    photo = make_lob(b'\x01\x02')
    cursor = make_cursor(people_description, [(7, 'ann', CREATED, photo)])

    record = read_cursor(cursor, CodecOptions(dialect='jdbc'))

    assert record.get_schema() == people_schema
    assert dict(record) == {'id': 7, 'name': 'ann', 'created': CREATED_MILLIS, 'photo': b'\x01\x02'}
    assert photo.released

    stmt = Statement('INSERT INTO people VALUES (?, ?, ?, ?)', 4)
    write(record, people_schema, [SqlType.INTEGER, SqlType.VARCHAR, SqlType.TIMESTAMP, SqlType.BLOB], stmt)

    assert stmt.bindings == [
        Binding('int', 1, 7),
        Binding('string', 2, 'ann'),
        Binding('timestamp', 3, datetime.datetime(2021, 1, 1)),
        Binding('blob', 4, Blob(b'\x01\x02')),
        ]


class TestRead:
    """Test building records from rows"""

    def test_nulls(self, people_schema, people_column_types):
        record = read((1, None, None, None), people_schema, people_column_types)
        assert dict(record) == {'id': 1, 'name': None, 'created': None, 'photo': None}

    def test_null_in_non_nullable(self, people_schema, people_column_types):
        with pytest.raises(SchemaError) as exc_info:
            read((None, 'a', None, None), people_schema, people_column_types)
        assert exc_info.value.field == 'id'

    def test_row_length_mismatch(self, people_schema, people_column_types):
        with pytest.raises(SchemaError):
            read((1, 'a', None), people_schema, people_column_types)

    def test_mapping_row(self, people_schema, people_column_types):
        row = {'photo': None, 'created': datetime.datetime(1970, 1, 1, 0, 0, 1), 'name': 'b', 'id': 2}
        record = read(row, people_schema, people_column_types)
        assert list(record.values()) == [2, 'b', 1000, None]

    def test_mapping_row_missing_column(self, people_schema, people_column_types):
        with pytest.raises(SchemaError, match='photo'):
            read({'id': 1, 'name': None, 'created': None}, people_schema, people_column_types)

    def test_column_types_as_codes(self, people_schema):
        record = read((1, None, datetime.date(1970, 1, 2), None), people_schema, [4, 12, 91, 2004])
        assert record['created'] == 86400000

    def test_without_column_types(self):
        """Test plain scalar rows without native type metadata"""
        schema = Schema.record_of('r', Field('n', Kind.INT64), Field('x', Kind.FLOAT64, True))
        record = read((5, 2), schema)
        assert record['x'] == 2.0

    def test_decimal_lossy(self):
        schema = Schema.record_of('r', Field('price', Kind.FLOAT64, True))
        record = read((Decimal('19.99'),), schema, [SqlType.NUMERIC])
        assert record['price'] == pytest.approx(19.99)

    def test_misaligned_column_types(self, people_schema):
        table = ColumnTypeTable([('id', SqlType.INTEGER), ('name', SqlType.VARCHAR)])
        with pytest.raises(SchemaError):
            read((1, None, None, None), people_schema, table)

    def test_clob_column(self, make_lob):
        schema = Schema.record_of('r', Field('notes', Kind.STRING, True))
        lob = make_lob('a\r\nb\rc\n')
        record = read((lob,), schema, [SqlType.CLOB])
        assert record['notes'] == 'a\nb\nc'
        assert lob.released


class TestRoundTrip:
    """Test write then read yields the same record"""

    @staticmethod
    def roundtrip(record, schema, column_types):
        stmt = Statement('?' * len(schema), len(schema))
        write(record, schema, column_types, stmt)
        return read(stmt.parameters, schema, column_types)

    def test_scalars(self, scalar_schema, scalar_column_types):
        record = Record(scalar_schema, {
            'flag': True,
            'small': -300,
            'count': 2 ** 31 - 1,
            'total': -(2 ** 63),
            'ratio': 1.25,
            'amount': 0.1,
            'label': 'héllo',
            'payload': b'\x00\xff',
            })
        assert self.roundtrip(record, scalar_schema, scalar_column_types) == record

    def test_nulls(self, scalar_schema, scalar_column_types):
        record = Record(scalar_schema, dict.fromkeys(scalar_schema.names))
        assert self.roundtrip(record, scalar_schema, scalar_column_types) == record

    @pytest.mark.parametrize(('sql_type', 'millis'), [
        (SqlType.TIMESTAMP, CREATED_MILLIS + 45_000_123),
        (SqlType.DATE, CREATED_MILLIS),
        (SqlType.TIME, 45_000_123),
    ])
    def test_temporal(self, sql_type, millis):
        """Test values representable in the column type survive unchanged"""
        schema = Schema.record_of('r', Field('at', Kind.INT64, True))
        record = Record(schema, {'at': millis})
        assert self.roundtrip(record, schema, [sql_type]) == record

    def test_blob_bytes(self, people_schema, people_column_types):
        data = bytes(range(256))
        record = Record(people_schema, {'id': 1, 'name': None, 'created': None, 'photo': data})
        assert self.roundtrip(record, people_schema, people_column_types)['photo'] == data

    def test_narrow_integers(self):
        schema = Schema.record_of('r', Field('t', Kind.INT32), Field('s', Kind.INT32))
        types = [SqlType.TINYINT, SqlType.SMALLINT]
        for t, s in ((-128, -32768), (127, 32767)):
            record = Record(schema, {'t': t, 's': s})
            assert self.roundtrip(record, schema, types) == record
        with pytest.raises(RangeError):
            self.roundtrip(Record(schema, {'t': 128, 's': 0}), schema, types)


class TestDBRecord:
    """Test the record holder"""

    def test_read_then_write(self, people_schema, people_column_types):
        holder = DBRecord()
        assert holder.get_record() is None
        record = holder.read_fields((3, 'c', None, b'x'), people_schema, people_column_types)
        assert holder.get_record() is record

        stmt = Statement('?, ?, ?, ?', 4)
        holder.write(stmt)
        assert [b.method for b in stmt.bindings] == ['int', 'string', 'null', 'blob']

    def test_write_needs_column_types(self, people_schema):
        record = Record(people_schema, {'id': 1, 'name': None, 'created': None, 'photo': None})
        with pytest.raises(SchemaError):
            DBRecord(record).write(Statement('?, ?, ?, ?', 4))

    def test_column_types_validated(self, people_schema):
        record = Record(people_schema, {'id': 1, 'name': None, 'created': None, 'photo': None})
        with pytest.raises(SchemaError):
            DBRecord(record, [SqlType.INTEGER])

    def test_write_to(self, people_schema, people_column_types):
        record = Record(people_schema, {'id': 1, 'name': 'a', 'created': None, 'photo': None})
        stream = io.BytesIO()
        DBRecord(record, people_column_types).write_to(stream)
        assert stream.getvalue() == dumps_record(record)


class TestCursor:
    """Test cursor-level helpers"""

    def test_read_cursor_exhausted(self, make_cursor, people_description):
        assert read_cursor(make_cursor(people_description), CodecOptions(dialect='jdbc')) is None

    def test_iter_records(self, make_cursor, people_description):
        rows = [(1, 'a', None, None), (2, 'b', CREATED, b'\x05')]
        records = list(iter_records(make_cursor(people_description, rows), CodecOptions(dialect='jdbc')))
        assert [r['id'] for r in records] == [1, 2]
        assert records[1]['created'] == CREATED_MILLIS
        assert records[0].get_schema() is records[1].get_schema()

    def test_record_name_option(self, make_cursor, people_description):
        cursor = make_cursor(people_description, [(1, None, None, None)])
        record = read_cursor(cursor, CodecOptions(dialect='jdbc', record_name='people'))
        assert record.get_schema().name == 'people'

    def test_explicit_schema(self, make_cursor, people_description, people_schema):
        cursor = make_cursor(people_description, [(1, None, None, None)])
        record = read_cursor(cursor, CodecOptions(dialect='jdbc'), schema=people_schema)
        assert record.get_schema() is people_schema


if __name__ == '__main__':
    __import__('pytest').main([__file__])
