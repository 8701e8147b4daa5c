"""
Tests for the compact binary record layout.
"""
import io
import struct

import pytest
from dbcodec import DBRecord, Field, Kind, RangeError, Record, Schema, SchemaError
from dbcodec import UnsupportedType, dump_record, dumps_record


def test_layout(scalar_schema):
    """Test each kind is written big-endian in schema order"""
    record = Record(scalar_schema, {
        'flag': True,
        'small': -2,
        'count': 7,
        'total': 2 ** 40,
        'ratio': 0.5,
        'amount': 1.5,
        'label': 'hé',
        'payload': b'\xde\xad',
        })
    expected = (
        b'\x01'
        + struct.pack('>i', -2)
        + struct.pack('>i', 7)
        + struct.pack('>q', 2 ** 40)
        + struct.pack('>f', 0.5)
        + struct.pack('>d', 1.5)
        + b'\x00\x03' + 'hé'.encode()
        + b'\xde\xad'
        )
    assert dumps_record(record) == expected


def test_nulls_are_skipped(scalar_schema):
    record = Record(scalar_schema, {**dict.fromkeys(scalar_schema.names), 'count': 1})
    assert dumps_record(record) == struct.pack('>i', 1)


def test_null_kind():
    schema = Schema.record_of('r', Field('nothing', Kind.NULL), Field('n', Kind.INT64))
    assert dumps_record(Record(schema, {'nothing': None, 'n': 1})) == struct.pack('>q', 1)


def test_stream():
    schema = Schema.record_of('r', Field('s', Kind.STRING))
    stream = io.BytesIO()
    dump_record(Record(schema, {'s': ''}), stream)
    assert stream.getvalue() == b'\x00\x00'


def test_string_limit():
    schema = Schema.record_of('r', Field('s', Kind.STRING))
    assert len(dumps_record(Record(schema, {'s': 'x' * 0xFFFF}))) == 0xFFFF + 2
    with pytest.raises(RangeError):
        dumps_record(Record(schema, {'s': 'x' * 0x10000}))


def test_nested_kind_rejected():
    schema = Schema.record_of('r', Field('m', Kind.MAP))
    with pytest.raises(UnsupportedType) as exc_info:
        dumps_record(Record(schema, {'m': {'a': 1}}))
    assert exc_info.value.column == 'm'
    assert exc_info.value.kind is Kind.MAP


def test_empty_holder():
    with pytest.raises(SchemaError):
        DBRecord().write_to(io.BytesIO())


if __name__ == '__main__':
    __import__('pytest').main([__file__])
