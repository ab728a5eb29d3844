"""Interface abstraite des exécuteurs de commandes.

Ce module définit CommandExecutor, le contrat commun à tous les
backends (processus local, shell, SSH). Chaque backend implémente
deux primitives :

    - run_command(options) -> CommandOutput
    - get_host_description() -> str

et hérite des opérations dérivées (stdout en octets, texte, lignes,
nombres) ainsi que de leurs variantes « must » qui arrêtent le
programme au lieu de lever une exception.
"""

import copy
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, TypeVar

from exec_python_utils.commands.options import RunCommandOptions
from exec_python_utils.commands.output import CommandOutput
from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.exceptions import InvalidCommandRequestError
from exec_python_utils.errors.fail_fast import build_error_chain, fail_fast
from exec_python_utils.logging.base import Logger

LOCALHOST = "localhost"

R = TypeVar("R")


class CommandExecutor(ABC):
    """Interface abstraite pour l'exécution de commandes.

    Attributes:
        _logger: Logger optionnel pour les messages d'exécution.
        error_handlers: Chaîne utilisée par les variantes « must ».
    """

    def __init__(
        self,
        logger: Optional[Logger] = None,
        error_handlers: Optional[ErrorHandlerChain] = None,
    ) -> None:
        """Initialise l'exécuteur.

        Args:
            logger: Logger optionnel.
            error_handlers: Chaîne de handlers des variantes « must »
                (console + logger par défaut).
        """
        self._logger = logger
        self.error_handlers = error_handlers or build_error_chain(logger)

    @property
    def logger(self) -> Optional[Logger]:
        return self._logger

    @abstractmethod
    def run_command(self, options: RunCommandOptions) -> CommandOutput:
        """Exécute une commande et retourne son résultat.

        Args:
            options: Requête d'exécution (jamais modifiée).

        Returns:
            Résultat complet de l'exécution.

        Raises:
            InvalidCommandRequestError: Options absentes ou commande vide.
            CommandLaunchError: Le processus n'a pas pu être lancé.
            CommandFailedError: Code retour non nul non autorisé.
        """
        pass

    @abstractmethod
    def get_host_description(self) -> str:
        """Décrit l'hôte sur lequel les commandes s'exécutent."""
        pass

    def get_deep_copy(self) -> "CommandExecutor":
        """Retourne un exécuteur indépendant utilisable en parallèle.

        Les backends sans état propre se contentent d'une copie
        superficielle ; ceux qui portent une identité la redéfinissent.
        """
        return copy.copy(self)

    # --- Helpers ---

    @staticmethod
    def _check_options(options: Optional[RunCommandOptions]) -> None:
        """Vérifie la présence des options.

        Raises:
            InvalidCommandRequestError: Si options est None.
        """
        if options is None:
            raise InvalidCommandRequestError("Les options sont requises")

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log_info(message)

    def _log_debug(self, message: str) -> None:
        if self._logger:
            self._logger.log_debug(message)

    def _log_warning(self, message: str) -> None:
        if self._logger:
            self._logger.log_warning(message)

    def _log_error(self, message: str) -> None:
        if self._logger:
            self._logger.log_error(message)

    def _must(self, func: Callable[..., R], *args) -> R:
        """Appelle une opération faillible ou arrête le programme."""
        return fail_fast(self.error_handlers, func, *args)

    # --- Opérations dérivées ---

    def is_running_on_localhost(self) -> bool:
        return self.get_host_description() == LOCALHOST

    def run_command_and_get_stdout_as_bytes(
        self, options: RunCommandOptions
    ) -> bytes:
        self._check_options(options)
        return self.run_command(options).get_stdout_as_bytes()

    def run_command_and_get_stdout_as_string(
        self, options: RunCommandOptions
    ) -> str:
        self._check_options(options)
        return self.run_command(options).get_stdout_as_string()

    def run_command_and_get_stdout_as_lines(
        self, options: RunCommandOptions
    ) -> List[str]:
        """Exécute et retourne stdout découpé en lignes.

        La suppression de la ligne vide finale suit
        options.remove_last_line_if_empty.
        """
        self._check_options(options)
        return self.run_command(options).get_stdout_as_lines(
            options.remove_last_line_if_empty
        )

    def run_command_and_get_stdout_as_float64(
        self, options: RunCommandOptions
    ) -> float:
        """Exécute et interprète stdout (espaces retirés) en flottant.

        Raises:
            CommandOutputParseError: Si stdout n'est pas un nombre.
        """
        self._check_options(options)
        return self.run_command(options).get_stdout_as_float64()

    def run_command_and_get_stdout_as_int64(
        self, options: RunCommandOptions
    ) -> int:
        """Exécute et interprète stdout (espaces retirés) en entier.

        Raises:
            CommandOutputParseError: Si stdout n'est pas un entier.
        """
        self._check_options(options)
        return self.run_command(options).get_stdout_as_int64()

    # --- Variantes « must » ---

    def must_run_command(self, options: RunCommandOptions) -> CommandOutput:
        return self._must(self.run_command, options)

    def must_get_host_description(self) -> str:
        return self._must(self.get_host_description)

    def must_is_running_on_localhost(self) -> bool:
        return self._must(self.is_running_on_localhost)

    def must_run_command_and_get_stdout_as_bytes(
        self, options: RunCommandOptions
    ) -> bytes:
        return self._must(self.run_command_and_get_stdout_as_bytes, options)

    def must_run_command_and_get_stdout_as_string(
        self, options: RunCommandOptions
    ) -> str:
        return self._must(self.run_command_and_get_stdout_as_string, options)

    def must_run_command_and_get_stdout_as_lines(
        self, options: RunCommandOptions
    ) -> List[str]:
        return self._must(self.run_command_and_get_stdout_as_lines, options)

    def must_run_command_and_get_stdout_as_float64(
        self, options: RunCommandOptions
    ) -> float:
        return self._must(
            self.run_command_and_get_stdout_as_float64, options
        )

    def must_run_command_and_get_stdout_as_int64(
        self, options: RunCommandOptions
    ) -> int:
        return self._must(self.run_command_and_get_stdout_as_int64, options)
