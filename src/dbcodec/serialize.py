"""
Compact binary serialization of a record.

Each non-null field is written in schema order, big-endian:

    STRING   unsigned 2-byte length, then UTF-8 bytes
    BOOLEAN  1 byte (0 or 1)
    INT32    4-byte signed
    INT64    8-byte signed
    FLOAT32  4-byte IEEE 754
    FLOAT64  8-byte IEEE 754
    BYTES    raw bytes, no length prefix

Null values write nothing, so the layout is only decodable together with
the record itself. This is a spill/transport format, not a storage format.
"""
import io
import logging
import struct
from typing import BinaryIO

from dbcodec.exceptions import RangeError, UnsupportedType
from dbcodec.values import Kind, Record

logger = logging.getLogger(__name__)

MAX_STRING_BYTES = 0xFFFF

_formats = {
    Kind.BOOLEAN: struct.Struct('>?'),
    Kind.INT32: struct.Struct('>i'),
    Kind.INT64: struct.Struct('>q'),
    Kind.FLOAT32: struct.Struct('>f'),
    Kind.FLOAT64: struct.Struct('>d'),
    }
_length = struct.Struct('>H')


def dump_record(record: Record, stream: BinaryIO) -> None:
    """Write a record's non-null field values to a binary stream.

    Raises
        UnsupportedType: for fields of a non-scalar kind
        RangeError: for strings longer than 65535 encoded bytes
    """
    for field in record.get_schema():
        value = record[field.name]
        if not field.kind.is_scalar:
            raise UnsupportedType(f'Unsupported datatype: {field.kind.value} with value: {value!r}',
                                  column=field.name, kind=field.kind)
        if value is None or field.kind is Kind.NULL:
            continue
        if field.kind is Kind.STRING:
            data = value.encode('utf-8')
            if len(data) > MAX_STRING_BYTES:
                raise RangeError(f'String for field {field.name!r} is {len(data)} bytes, '
                                 f'limit is {MAX_STRING_BYTES}',
                                 value=len(data), lower=0, upper=MAX_STRING_BYTES)
            stream.write(_length.pack(len(data)))
            stream.write(data)
        elif field.kind is Kind.BYTES:
            stream.write(value)
        else:
            stream.write(_formats[field.kind].pack(value))


def dumps_record(record: Record) -> bytes:
    """Serialize a record to bytes.
    """
    buf = io.BytesIO()
    dump_record(record, buf)
    return buf.getvalue()
