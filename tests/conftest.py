import pytest
from dbcodec.config.type_mapping import TypeMappingConfig


@pytest.fixture(autouse=True)
def clear_type_mapping_config(tmp_path, monkeypatch):
    """Give each test a fresh, empty type mapping configuration."""
    monkeypatch.chdir(tmp_path)
    TypeMappingConfig.reset_instance()
    yield
    TypeMappingConfig.reset_instance()


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.values',
    'tests.fixtures.sqlite',
]
