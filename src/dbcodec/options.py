import logging
from dataclasses import dataclass

from dbcodec.adapters.type_mapping import SUPPORTED_DIALECTS, is_supported_dialect
from dbcodec.config.type_mapping import TypeMappingConfig
from dbcodec.schema import DEFAULT_RECORD_NAME

logger = logging.getLogger(__name__)

__all__ = ['CodecOptions']


@dataclass
class CodecOptions:
    """Options

    supported dialects: `postgresql`, `sqlite`, `sqlserver`, `odbc`, `jdbc`

    - record_name: Name given to inferred schemas (default: dbRecord)
    - table_name: Table used to look up configured column type overrides
    - type_mapping_file: JSON file of column type overrides, merged into the
      shared TypeMappingConfig when given
    """
    dialect: str = 'postgresql'
    record_name: str = DEFAULT_RECORD_NAME
    table_name: str | None = None
    type_mapping_file: str | None = None

    def __post_init__(self):
        if not is_supported_dialect(self.dialect):
            raise ValueError(f'dialect must be one of: {list(SUPPORTED_DIALECTS)}')
        if self.type_mapping_file:
            TypeMappingConfig.get_instance().load_config(self.type_mapping_file)
