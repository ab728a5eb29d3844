"""Module de configuration."""

from exec_python_utils.config.loader import (
    ConfigLoader,
    FileConfigLoader,
    ConfigFileLoader,
)

__all__ = [
    "ConfigLoader",
    "FileConfigLoader",
    "ConfigFileLoader",
]
