"""Module de logging."""

from exec_python_utils.logging.base import Logger
from exec_python_utils.logging.file_logger import FileLogger

__all__ = [
    "Logger",
    "FileLogger",
]
