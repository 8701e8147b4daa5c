"""
Configuration for per-column native SQL type overrides.

File format::

    {
        "sqlite": {
            "columns": {"events.created": "TIMESTAMP", "flag": "BOOLEAN"},
            "patterns": {"_at$": "TIMESTAMP"}
        }
    }
"""
import json
import logging
import pathlib
import re

logger = logging.getLogger(__name__)

DEFAULT_LOCATIONS = (
    '~/.config/dbcodec/type_mapping.json',
    '/etc/dbcodec/type_mapping.json',
    'type_mapping.json',
    )


class TypeMappingConfig:
    """Configuration for custom native type mappings"""

    _instance = None

    @classmethod
    def get_instance(cls):
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    def __init__(self, config_file=None):
        self._mappings = {}

        if config_file:
            self.load_config(config_file)
            return

        for location in DEFAULT_LOCATIONS:
            path = pathlib.Path(location).expanduser()
            if path.exists():
                self.load_config(path)
                break

    def _section(self, dialect):
        return self._mappings.setdefault(dialect, {'patterns': {}, 'columns': {}})

    def load_config(self, config_file):
        """Load configuration from file, merging into the current mappings"""
        try:
            with pathlib.Path(config_file).open() as f:
                config = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f'Failed to load type mapping config {config_file}: {e}')
            return

        for dialect, mappings in config.items():
            section = self._section(dialect)
            section['patterns'].update(mappings.get('patterns', {}))
            section['columns'].update({k.lower(): v for k, v in mappings.get('columns', {}).items()})

        logger.info(f'Loaded type mapping configuration from {config_file}')

    def get_type_for_column(self, dialect, table_name, column_name):
        """Get the configured native type name for a column, or None"""
        if dialect not in self._mappings or not column_name:
            return None

        columns = self._mappings[dialect]['columns']
        name = column_name.lower()

        if table_name:
            key = f'{table_name.lower()}.{name}'
            if key in columns:
                return columns[key]

        if name in columns:
            return columns[name]

        for pattern, type_name in self._mappings[dialect]['patterns'].items():
            if re.search(pattern, name):
                return type_name

        return None

    def add_column_mapping(self, dialect, table_name, column_name, type_name):
        """Add a specific column mapping"""
        key = f'{table_name.lower()}.{column_name.lower()}' if table_name else column_name.lower()
        self._section(dialect)['columns'][key] = type_name

    def add_pattern_mapping(self, dialect, pattern, type_name):
        """Add a column name pattern mapping"""
        self._section(dialect)['patterns'][pattern] = type_name
