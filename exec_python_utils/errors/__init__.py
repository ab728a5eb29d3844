"""Module de gestion des errors."""

from exec_python_utils.errors.base import ErrorHandler, ErrorHandlerChain
from exec_python_utils.errors.exceptions import (ApplicationError,
                                                 ConfigurationError,
                                                 FileConfigurationError,
                                                 ValidationError,
                                                 InvalidCommandRequestError,
                                                 CommandError,
                                                 CommandLaunchError,
                                                 CommandFailedError,
                                                 FieldNotSetError,
                                                 CommandOutputParseError,
                                                 UnexpectedProbeOutputError,
                                                 HostUnreachableError,
                                                 ReachabilityTimeoutError)
from exec_python_utils.errors.console_handler import ConsoleErrorHandler
from exec_python_utils.errors.logger_handler import LoggerErrorHandler
from exec_python_utils.errors.fail_fast import build_error_chain, fail_fast


__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "FileConfigurationError",
    "ValidationError",
    "InvalidCommandRequestError",
    "CommandError",
    "CommandLaunchError",
    "CommandFailedError",
    "FieldNotSetError",
    "CommandOutputParseError",
    "UnexpectedProbeOutputError",
    "HostUnreachableError",
    "ReachabilityTimeoutError",
    "ErrorHandler",
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    "ErrorHandlerChain",
    "build_error_chain",
    "fail_fast",
]
