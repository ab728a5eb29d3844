"""Exécuteurs enveloppant la commande dans un shell.

BashCommandExecutor et PowerShellCommandExecutor transforment l'argv
demandé en une ligne shell unique puis délèguent l'exécution au
backend processus (ExecCommandExecutor). Les options de l'appelant
(timeout, stdin, verbosité...) sont conservées telles quelles sur la
copie transmise.

Example :
    Utilisation des redirections et des pipes :

        bash = BashCommandExecutor(logger=logger)
        count = bash.run_one_liner_and_get_stdout_as_string(
            "ls /etc | wc -l", verbose=False
        )
"""

from abc import abstractmethod
from typing import List, Optional

from exec_python_utils.commands import shell_line
from exec_python_utils.commands.base import LOCALHOST, CommandExecutor
from exec_python_utils.commands.options import RunCommandOptions
from exec_python_utils.commands.output import CommandOutput
from exec_python_utils.commands.runner import ExecCommandExecutor
from exec_python_utils.commands.settings import (
    DEFAULT_SETTINGS,
    ExecutorSettings,
)
from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.exceptions import InvalidCommandRequestError
from exec_python_utils.logging.base import Logger


class ShellCommandExecutor(CommandExecutor):
    """Base commune des exécuteurs passant par un shell local.

    run_command quote et joint l'argv ; run_one_liner transmet la
    ligne telle quelle. Les sous-classes fournissent _wrap(), qui
    construit l'argv du shell à partir de la ligne.

    Attributes:
        _settings: Réglages (noms des binaires).
        _executor: Backend processus recevant la commande enveloppée.
    """

    def __init__(
        self,
        logger: Optional[Logger] = None,
        settings: ExecutorSettings = DEFAULT_SETTINGS,
        executor: Optional[CommandExecutor] = None,
        error_handlers: Optional[ErrorHandlerChain] = None,
    ) -> None:
        """Initialise l'exécuteur shell.

        Args:
            logger: Logger optionnel.
            settings: Réglages des binaires.
            executor: Backend processus (ExecCommandExecutor par défaut).
            error_handlers: Chaîne de handlers des variantes « must ».
        """
        super().__init__(logger=logger, error_handlers=error_handlers)
        self._settings = settings
        self._executor = executor or ExecCommandExecutor(
            logger=logger, settings=settings
        )

    @abstractmethod
    def _wrap(self, line: str, options: RunCommandOptions) -> List[str]:
        """Retourne l'argv du shell exécutant la ligne."""
        pass

    def get_host_description(self) -> str:
        return LOCALHOST

    def run_command(self, options: RunCommandOptions) -> CommandOutput:
        """Exécute la commande dans le shell.

        Raises:
            InvalidCommandRequestError: Options absentes ou commande vide.
            CommandLaunchError: Le shell n'a pas pu être lancé.
            CommandFailedError: Code retour non nul non autorisé.
        """
        self._check_options(options)
        return self._run_line(shell_line.join(options.command), options)

    def _run_line(
        self, line: str, options: RunCommandOptions
    ) -> CommandOutput:
        to_use = options.get_deep_copy()
        to_use.command = self._wrap(line, to_use)
        return self._executor.run_command(to_use)

    def run_one_liner(
        self, one_liner: str, verbose: bool = False
    ) -> CommandOutput:
        """Exécute une ligne shell brute (pipes, redirections...).

        La sortie est affichée en direct lorsque verbose est actif.

        Raises:
            InvalidCommandRequestError: Si la ligne est vide.
        """
        if not one_liner or not one_liner.strip():
            raise InvalidCommandRequestError("La ligne shell est vide")
        return self._run_line(
            one_liner,
            RunCommandOptions(
                command=[one_liner],
                verbose=verbose,
                live_output_on_stdout=verbose,
            ),
        )

    def run_one_liner_and_get_stdout_as_string(
        self, one_liner: str, verbose: bool = False
    ) -> str:
        return self.run_one_liner(one_liner, verbose).get_stdout_as_string()

    def run_one_liner_and_get_stdout_as_lines(
        self, one_liner: str, verbose: bool = False
    ) -> List[str]:
        """Exécute la ligne et retourne stdout en lignes.

        Une éventuelle ligne vide finale est conservée.
        """
        output = self.run_one_liner(one_liner, verbose)
        return output.get_stdout_as_lines(False)

    def must_run_one_liner(
        self, one_liner: str, verbose: bool = False
    ) -> CommandOutput:
        return self._must(self.run_one_liner, one_liner, verbose)

    def must_run_one_liner_and_get_stdout_as_string(
        self, one_liner: str, verbose: bool = False
    ) -> str:
        return self._must(
            self.run_one_liner_and_get_stdout_as_string, one_liner, verbose
        )

    def must_run_one_liner_and_get_stdout_as_lines(
        self, one_liner: str, verbose: bool = False
    ) -> List[str]:
        return self._must(
            self.run_one_liner_and_get_stdout_as_lines, one_liner, verbose
        )


class BashCommandExecutor(ShellCommandExecutor):
    """Exécute les commandes via ``bash -c``."""

    def _wrap(self, line: str, options: RunCommandOptions) -> List[str]:
        return [self._settings.bash_binary, "-c", line]


class PowerShellCommandExecutor(ShellCommandExecutor):
    """Exécute les commandes via ``powershell -Command``.

    Avec run_as_root, la ligne est relancée dans une session élevée
    (Start-Process -Verb runAs) ; l'élévation est alors entièrement
    prise en charge par PowerShell.
    """

    def _wrap(self, line: str, options: RunCommandOptions) -> List[str]:
        if options.run_as_root:
            line = (
                f"Start-Process {self._settings.powershell_binary} "
                f"-Verb runAs -Wait -ArgumentList "
                f"{_powershell_quote(line)}"
            )
            options.run_as_root = False
        return [self._settings.powershell_binary, "-Command", line]


def _powershell_quote(value: str) -> str:
    """Quote une chaîne littérale PowerShell ('' échappe ')."""
    return "'" + value.replace("'", "''") + "'"
