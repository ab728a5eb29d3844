"""Module d'exécution de commandes.

Ce module fournit un contrat unique d'exécution (CommandExecutor)
et plusieurs backends interchangeables produisant tous un
CommandOutput.

Classes disponibles :
    CommandOutput : Résultat d'une exécution (code, stdout, stderr).
    RunCommandOptions : Requête d'exécution (argv, timeout, stdin...).
    CommandExecutor : Interface abstraite pour les exécuteurs.
    ExecCommandExecutor : Processus local lancé sans shell.
    BashCommandExecutor : Commande enveloppée dans ``bash -c``.
    PowerShellCommandExecutor : Commande enveloppée dans PowerShell.
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Formatage texte brut (logs fichier).
    AnsiCommandFormatter : Formatage ANSI coloré (console).
    ExecutorSettings : Réglages des binaires et des sondes.
"""

from exec_python_utils.commands import shell_line
from exec_python_utils.commands.duration import (
    duration_to_seconds_string,
    format_seconds,
    parse_duration_seconds,
)
from exec_python_utils.commands.output import (
    EXIT_CODE_OK,
    TIMEOUT_EXIT_CODE,
    CommandOutput,
    split_lines,
)
from exec_python_utils.commands.options import RunCommandOptions
from exec_python_utils.commands.platform_text import (
    decode_output,
    decode_utf16,
    is_running_on_windows,
)
from exec_python_utils.commands.formatter import (
    CommandFormatter,
    PlainCommandFormatter,
    AnsiCommandFormatter,
)
from exec_python_utils.commands.settings import (
    DEFAULT_SETTINGS,
    ExecutorSettings,
    ExecutorSettingsLoader,
    load_executor_settings,
)
from exec_python_utils.commands.base import LOCALHOST, CommandExecutor
from exec_python_utils.commands.runner import ExecCommandExecutor
from exec_python_utils.commands.shell import (
    ShellCommandExecutor,
    BashCommandExecutor,
    PowerShellCommandExecutor,
)

__all__ = [
    # Résultat et options
    "CommandOutput",
    "EXIT_CODE_OK",
    "TIMEOUT_EXIT_CODE",
    "split_lines",
    "RunCommandOptions",
    # Utilitaires
    "shell_line",
    "parse_duration_seconds",
    "format_seconds",
    "duration_to_seconds_string",
    "decode_output",
    "decode_utf16",
    "is_running_on_windows",
    # Interface abstraite
    "LOCALHOST",
    "CommandExecutor",
    # Formateurs
    "CommandFormatter",
    "PlainCommandFormatter",
    "AnsiCommandFormatter",
    # Configuration
    "DEFAULT_SETTINGS",
    "ExecutorSettings",
    "ExecutorSettingsLoader",
    "load_executor_settings",
    # Backends
    "ExecCommandExecutor",
    "ShellCommandExecutor",
    "BashCommandExecutor",
    "PowerShellCommandExecutor",
]
