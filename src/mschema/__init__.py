"""mschema - Compact database schema descriptions for text-to-SQL prompts."""

__version__ = "0.1.0"

# Connectors
from mschema.connectors import (
    BaseConnector,
    DBConnector,
    SampleFetchResult,
    build_mschema_from_database,
)

# Core modules
from mschema.core import (
    FieldInfo,
    MSchema,
    TableInfo,
    examples_to_str,
    render_schema,
    render_table,
)

# Utils
from mschema.utils.config import Config, get_config, load_config

__all__ = [
    # Version
    "__version__",
    # Core
    "FieldInfo",
    "MSchema",
    "TableInfo",
    "examples_to_str",
    "render_schema",
    "render_table",
    # Connectors
    "BaseConnector",
    "DBConnector",
    "SampleFetchResult",
    "build_mschema_from_database",
    # Config
    "Config",
    "get_config",
    "load_config",
]
