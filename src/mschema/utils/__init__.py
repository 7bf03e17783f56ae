"""Utility modules for mschema."""

from mschema.utils.config import Config, get_config, load_config, set_config
from mschema.utils.logging import get_logger, setup_logging

__all__ = [
    "Config",
    "get_config",
    "get_logger",
    "load_config",
    "set_config",
    "setup_logging",
]
