"""
Tests for codec options.
"""
import json

import pytest
from dbcodec import CodecOptions, SqlType, resolve_sql_type


def test_defaults():
    options = CodecOptions()
    assert options.dialect == 'postgresql'
    assert options.record_name == 'dbRecord'
    assert options.table_name is None


def test_bad_dialect():
    with pytest.raises(ValueError, match='dialect'):
        CodecOptions(dialect='mysql')


def test_type_mapping_file(tmp_path):
    """Test that a mapping file given in options is merged into the shared config"""
    path = tmp_path / 'overrides.json'
    path.write_text(json.dumps({'sqlite': {'columns': {'orders.placed': 'DATE'}}}))

    options = CodecOptions(dialect='sqlite', table_name='orders', type_mapping_file=str(path))

    assert resolve_sql_type(options.dialect, 'TEXT', 'placed', options.table_name) is SqlType.DATE
    assert resolve_sql_type(options.dialect, 'TEXT', 'placed') is SqlType.VARCHAR


if __name__ == '__main__':
    __import__('pytest').main([__file__])
