from .loader import default_config, load_config
from .types import ConfigError, IndexConfig, UnsupportedConfigFormatError

__all__ = [
    "load_config",
    "default_config",
    "IndexConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
