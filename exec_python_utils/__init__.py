"""
Exec Python Utils - Exécution de commandes locales, shell et SSH.

Modules disponibles:
- logging: Gestion des logs (Logger, FileLogger)
- errors: Exceptions et chaîne de gestion d'erreurs
- config: Chargement de configuration (TOML, JSON)
- commands: Contrat d'exécution et backends locaux
  (ExecCommandExecutor, BashCommandExecutor, PowerShellCommandExecutor)
- hosts: Exécution distante et sondes (SSHClient, Host)
"""

__version__ = "1.0.0"

from exec_python_utils.logging import Logger, FileLogger
from exec_python_utils.errors import (
    ApplicationError,
    ValidationError,
    InvalidCommandRequestError,
    CommandError,
    CommandLaunchError,
    CommandFailedError,
    FieldNotSetError,
    CommandOutputParseError,
    UnexpectedProbeOutputError,
    HostUnreachableError,
    ReachabilityTimeoutError,
    ErrorHandlerChain,
    ConsoleErrorHandler,
    LoggerErrorHandler,
)
from exec_python_utils.config import (
    ConfigLoader,
    FileConfigLoader,
    ConfigFileLoader,
)
from exec_python_utils.commands import (
    CommandOutput,
    TIMEOUT_EXIT_CODE,
    RunCommandOptions,
    CommandExecutor,
    ExecCommandExecutor,
    BashCommandExecutor,
    PowerShellCommandExecutor,
    CommandFormatter,
    PlainCommandFormatter,
    AnsiCommandFormatter,
    ExecutorSettings,
    load_executor_settings,
    shell_line,
)
from exec_python_utils.hosts import (
    SSHClient,
    Host,
    get_host_by_hostname,
    wait_until,
)

__all__ = [
    # Logging
    "Logger",
    "FileLogger",
    # Errors
    "ApplicationError",
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
    "ErrorHandlerChain",
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    # Config
    "ConfigLoader",
    "FileConfigLoader",
    "ConfigFileLoader",
    # Commands
    "CommandOutput",
    "TIMEOUT_EXIT_CODE",
    "RunCommandOptions",
    "CommandExecutor",
    "ExecCommandExecutor",
    "BashCommandExecutor",
    "PowerShellCommandExecutor",
    "CommandFormatter",
    "PlainCommandFormatter",
    "AnsiCommandFormatter",
    "ExecutorSettings",
    "load_executor_settings",
    "shell_line",
    # Hosts
    "SSHClient",
    "Host",
    "get_host_by_hostname",
    "wait_until",
]
