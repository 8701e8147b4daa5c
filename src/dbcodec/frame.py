"""
Conversion between batches of records and pandas DataFrames.
"""
import logging
from collections.abc import Iterable, Mapping

import pandas as pd

from dbcodec.values import Kind, Record, Schema

logger = logging.getLogger(__name__)

__all__ = ['records_to_dataframe', 'dataframe_to_records']

_PANDAS_DTYPES = {
    Kind.BOOLEAN: 'boolean',
    Kind.INT32: 'Int32',
    Kind.INT64: 'Int64',
    Kind.FLOAT32: 'Float32',
    Kind.FLOAT64: 'Float64',
    Kind.STRING: 'string',
    }


def _column_types(schema: Schema) -> dict[str, dict]:
    return {f.name: {'kind': f.kind.value, 'nullable': f.nullable} for f in schema}


def records_to_dataframe(records: Iterable[Record], schema: Schema) -> pd.DataFrame:
    """Build a DataFrame with one column per schema field, in schema order.

    Always returns a DataFrame, never None, with columns preserved for empty
    input. Scalar columns use pandas nullable dtypes; BYTES and non-scalar
    columns stay ``object``. Field kinds are kept in ``df.attrs['column_types']``.
    """
    rows = [[record[name] for name in schema.names] for record in records]
    df = pd.DataFrame.from_records(rows, columns=schema.names)
    for field in schema:
        dtype = _PANDAS_DTYPES.get(field.kind)
        if dtype is not None:
            df[field.name] = df[field.name].astype(dtype)
    df.attrs['column_types'] = _column_types(schema)
    logger.debug(f'Built DataFrame of {len(df)} rows for {schema.name!r}')
    return df


def _from_cell(value):
    if not isinstance(value, list | tuple | Mapping | bytes) and pd.isna(value):
        return None
    return value


def dataframe_to_records(df: pd.DataFrame, schema: Schema) -> list[Record]:
    """Turn DataFrame rows back into records of ``schema``.

    Missing values (None, NaN, NaT, pd.NA) become null.
    """
    frame = df[schema.names].astype(object)
    return [
        Record(schema, {name: _from_cell(value) for name, value in zip(schema.names, row)})
        for row in frame.itertuples(index=False, name=None)
        ]
