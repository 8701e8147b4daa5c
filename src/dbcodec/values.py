"""
Portable value model: kinds, fields, schemas and records.

Values are plain Python objects. A field's :class:`Kind` decides which Python
objects are representable:

    NULL     None
    BOOLEAN  bool
    INT32    int in [-2**31, 2**31 - 1]
    INT64    int in [-2**63, 2**63 - 1]
    FLOAT32  float
    FLOAT64  float
    STRING   str
    BYTES    bytes

ARRAY, MAP, RECORD and UNION exist so that schemas produced upstream can be
described, but they never reach a statement.
"""
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Self

import numpy as np

from dbcodec.exceptions import SchemaError
from dbcodec.sqltypes import SqlType

logger = logging.getLogger(__name__)

INT32_RANGE = (-(2 ** 31), 2 ** 31 - 1)
INT64_RANGE = (-(2 ** 63), 2 ** 63 - 1)


class Kind(Enum):
    """Portable value kind."""
    NULL = 'null'
    BOOLEAN = 'boolean'
    INT32 = 'int'
    INT64 = 'long'
    FLOAT32 = 'float'
    FLOAT64 = 'double'
    STRING = 'string'
    BYTES = 'bytes'
    ARRAY = 'array'
    MAP = 'map'
    RECORD = 'record'
    UNION = 'union'

    @property
    def is_scalar(self) -> bool:
        return self not in {Kind.ARRAY, Kind.MAP, Kind.RECORD, Kind.UNION}

    def accepts(self, value: Any) -> bool:
        """Check whether a (non-null) Python value is representable by this kind.
        """
        match self:
            case Kind.NULL:
                return value is None
            case Kind.BOOLEAN:
                return isinstance(value, bool)
            case Kind.INT32:
                return _is_int(value) and INT32_RANGE[0] <= value <= INT32_RANGE[1]
            case Kind.INT64:
                return _is_int(value) and INT64_RANGE[0] <= value <= INT64_RANGE[1]
            case Kind.FLOAT32 | Kind.FLOAT64:
                return isinstance(value, float) or _is_int(value)
            case Kind.STRING:
                return isinstance(value, str)
            case Kind.BYTES:
                return isinstance(value, bytes | bytearray | memoryview)
            case Kind.ARRAY:
                return isinstance(value, list | tuple)
            case Kind.MAP | Kind.RECORD:
                return isinstance(value, Mapping)
            case Kind.UNION:
                return True


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def unwrap_scalar(value: Any) -> Any:
    """Convert NumPy scalars to their Python equivalents.

    >>> unwrap_scalar(np.int32(7))
    7
    >>> unwrap_scalar('abc')
    'abc'
    """
    if isinstance(value, np.generic):
        return value.item()
    return value


def _canonical(kind: Kind, value: Any) -> Any:
    if kind in {Kind.FLOAT32, Kind.FLOAT64}:
        return float(value)
    if kind is Kind.BYTES:
        return bytes(value)
    return value


@dataclass(frozen=True, slots=True)
class Field:
    """A named, typed schema field."""
    name: str
    kind: Kind
    nullable: bool = False

    def __post_init__(self):
        if not self.name:
            raise SchemaError('Field name must not be empty')
        if self.kind is Kind.NULL and not self.nullable:
            object.__setattr__(self, 'nullable', True)

    def non_nullable_kind(self) -> Kind:
        """Return the underlying kind, validating that it can be written.
        """
        if not self.kind.is_scalar:
            raise SchemaError(
                f'Only simple types are supported (boolean, int, long, float, double, '
                f'string, bytes) for writing a record, but found {self.kind.value!r} as '
                f'the type for column {self.name!r}. Remove this column or transform it '
                f'to a simple type.', field=self.name)
        return self.kind


class Schema:
    """Ordered, named collection of fields.
    """

    def __init__(self, name: str, fields: Iterable[Field]) -> None:
        self.name = name
        self.fields = tuple(fields)
        self._positions: dict[str, int] = {}
        for i, field in enumerate(self.fields):
            if field.name in self._positions:
                raise SchemaError(f'Duplicate field {field.name!r} in schema {name!r}',
                                  field=field.name)
            self._positions[field.name] = i

    @classmethod
    def record_of(cls, name: str, *fields: Field) -> Self:
        return cls(name, fields)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> Field:
        return self.fields[self.index(name)]

    def index(self, name: str) -> int:
        try:
            return self._positions[name]
        except KeyError:
            raise SchemaError(f'Field {name!r} not in schema {self.name!r}', field=name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self.name == other.name and self.fields == other.fields

    def __hash__(self) -> int:
        return hash((self.name, self.fields))

    def __repr__(self) -> str:
        fields = ', '.join(f'{f.name}:{f.kind.value}{"?" if f.nullable else ""}' for f in self.fields)
        return f'Schema({self.name!r}, [{fields}])'


class Record(Mapping[str, Any]):
    """Immutable mapping of field name to value, conforming to one schema.
    """

    __slots__ = ('_schema', '_values')

    def __init__(self, schema: Schema, values: Mapping[str, Any]) -> None:
        unknown = [name for name in values if name not in schema]
        if unknown:
            raise SchemaError(f'Fields {unknown} are not in schema {schema.name!r}',
                              field=unknown[0])
        checked = {}
        for field in schema:
            if field.name not in values:
                raise SchemaError(f'Missing value for field {field.name!r}', field=field.name)
            checked[field.name] = _check_value(field, values[field.name])
        self._schema = schema
        self._values = MappingProxyType(checked)

    def get_schema(self) -> Schema:
        return self._schema

    schema = property(get_schema)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._schema == other._schema and dict(self._values) == dict(other._values)
        return super().__eq__(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f'Record({self._schema.name!r}, {dict(self._values)!r})'


def _check_value(field: Field, value: Any) -> Any:
    value = unwrap_scalar(value)
    if value is None:
        if not field.nullable:
            raise SchemaError(f'Null value for non-nullable field {field.name!r}', field=field.name)
        return None
    if not field.kind.accepts(value):
        raise SchemaError(
            f'Value {value!r} of type {type(value).__name__} is not valid for field '
            f'{field.name!r} of kind {field.kind.value!r}', field=field.name)
    return _canonical(field.kind, value)


class RecordBuilder:
    """Incrementally collects values for one record."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self._values: dict[str, Any] = {}

    def set(self, name: str, value: Any) -> Self:
        self.schema.index(name)
        self._values[name] = value
        return self

    def build(self) -> Record:
        values = {f.name: self._values.get(f.name) for f in self.schema}
        return Record(self.schema, values)


class ColumnTypeTable(Sequence[SqlType]):
    """Native SQL types of a destination table, one per schema field.

    Stored as ordered ``(field_name, SqlType)`` pairs so that alignment with a
    schema is checked by name as well as by position. Indexing returns the
    SqlType at a field position.
    """

    def __init__(self, pairs: Iterable[tuple[str, Any]]) -> None:
        self._pairs = tuple((name, SqlType.coerce(code, name)) for name, code in pairs)

    @classmethod
    def for_schema(cls, schema: Schema, types: Sequence[Any]) -> Self:
        """Pair a positional list of native types with a schema's fields.
        """
        if len(types) != len(schema):
            raise SchemaError(
                f'Schema {schema.name!r} has {len(schema)} fields but {len(types)} '
                f'column types were supplied')
        return cls(zip(schema.names, types))

    @classmethod
    def from_columns(cls, columns: Iterable[Any]) -> Self:
        """Capture the table from destination column metadata (ColumnInfo).
        """
        return cls((c.name, c.sql_type) for c in columns)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._pairs]

    @property
    def pairs(self) -> tuple[tuple[str, SqlType], ...]:
        return self._pairs

    def validate(self, schema: Schema) -> None:
        """Check that this table aligns with ``schema`` by length and names.
        """
        if len(self._pairs) != len(schema):
            raise SchemaError(
                f'Schema {schema.name!r} has {len(schema)} fields but the column type '
                f'table has {len(self._pairs)} entries')
        for i, (field, (name, _)) in enumerate(zip(schema, self._pairs)):
            if field.name != name:
                raise SchemaError(
                    f'Column type table entry {i} is for {name!r} but schema field {i} '
                    f'is {field.name!r}', field=field.name)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [code for _, code in self._pairs[index]]
        return self._pairs[index][1]

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnTypeTable):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __repr__(self) -> str:
        return 'ColumnTypeTable([' + ', '.join(f'({n!r}, {t.name})' for n, t in self._pairs) + '])'
