"""Exécution de commandes sur un hôte distant via le client ssh.

SSHClient joint l'argv demandé en une ligne shell, l'exécute à
distance avec ``ssh [user@]host '<ligne>'`` et délègue le lancement
du client ssh au backend processus local. Les codes retour, le
streaming et le timeout se comportent donc exactement comme pour une
commande locale.
"""

from typing import List, Optional

from exec_python_utils.commands import shell_line
from exec_python_utils.commands.base import CommandExecutor
from exec_python_utils.commands.options import RunCommandOptions
from exec_python_utils.commands.output import CommandOutput
from exec_python_utils.commands.runner import ExecCommandExecutor
from exec_python_utils.commands.settings import (
    DEFAULT_SETTINGS,
    ExecutorSettings,
)
from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.exceptions import (
    HostUnreachableError,
    UnexpectedProbeOutputError,
)
from exec_python_utils.hosts.validators import (
    validate_hostname,
    validate_ssh_user_name,
)
from exec_python_utils.logging.base import Logger

PROBE_COMMAND = ["echo", "hello"]
PROBE_EXPECTED_STDOUT = "hello"


class SSHClient(CommandExecutor):
    """Exécuteur de commandes sur un hôte distant.

    Attributes:
        _hostname: Nom ou adresse de l'hôte distant.
        _ssh_user_name: Utilisateur distant (None = config ssh locale).
        _settings: Réglages (binaire ssh, timeout de la sonde).
        _executor: Backend local lançant le client ssh.
    """

    def __init__(
        self,
        hostname: str,
        ssh_user_name: Optional[str] = None,
        logger: Optional[Logger] = None,
        settings: ExecutorSettings = DEFAULT_SETTINGS,
        executor: Optional[CommandExecutor] = None,
        error_handlers: Optional[ErrorHandlerChain] = None,
    ) -> None:
        """Initialise le client SSH.

        Args:
            hostname: Nom ou adresse de l'hôte distant.
            ssh_user_name: Utilisateur distant optionnel.
            logger: Logger optionnel.
            settings: Réglages des binaires et de la sonde.
            executor: Backend local (ExecCommandExecutor par défaut).
            error_handlers: Chaîne de handlers des variantes « must ».

        Raises:
            ValidationError: Si le nom d'hôte ou d'utilisateur est invalide.
        """
        super().__init__(logger=logger, error_handlers=error_handlers)
        self._hostname = validate_hostname(hostname.strip())
        self._ssh_user_name = (
            validate_ssh_user_name(ssh_user_name)
            if ssh_user_name is not None
            else None
        )
        self._settings = settings
        self._executor = executor or ExecCommandExecutor(
            logger=logger, settings=settings
        )

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def ssh_user_name(self) -> Optional[str]:
        return self._ssh_user_name

    def is_ssh_user_name_set(self) -> bool:
        return self._ssh_user_name is not None

    def get_user_at_host(self) -> str:
        """Retourne la destination ssh (``user@host`` ou ``host``)."""
        if self.is_ssh_user_name_set():
            return f"{self._ssh_user_name}@{self._hostname}"
        return self._hostname

    def get_host_description(self) -> str:
        return self._hostname

    def get_deep_copy(self) -> "SSHClient":
        """Retourne un client indépendant vers le même hôte.

        Le logger et le backend local (sans état) sont partagés.
        """
        return SSHClient(
            self._hostname,
            ssh_user_name=self._ssh_user_name,
            logger=self._logger,
            settings=self._settings,
            executor=self._executor,
            error_handlers=self.error_handlers,
        )

    def _build_ssh_command(self, options: RunCommandOptions) -> List[str]:
        """Construit l'argv local ``ssh user@host '<ligne>'``."""
        remote_line = shell_line.join(options.command)
        if options.run_as_root:
            remote_line = f"{self._settings.sudo_binary} {remote_line}"
        return [
            self._settings.ssh_binary,
            self.get_user_at_host(),
            remote_line,
        ]

    def run_command(self, options: RunCommandOptions) -> CommandOutput:
        """Exécute la commande sur l'hôte distant.

        Le timeout éventuel est appliqué localement autour du client
        ssh ; run_as_root est traduit en sudo côté distant.

        Raises:
            InvalidCommandRequestError: Options absentes ou commande vide.
            CommandLaunchError: Le client ssh n'a pas pu être lancé.
            CommandFailedError: Code retour non nul non autorisé.
        """
        self._check_options(options)
        to_use = options.get_deep_copy()
        to_use.command = self._build_ssh_command(to_use)
        to_use.run_as_root = False
        return self._executor.run_command(to_use)

    def is_reachable(self, verbose: bool = False) -> bool:
        """Teste la connexion SSH avec ``echo hello``.

        Returns:
            True si l'hôte répond ``hello``, False si la sonde expire
            ou se termine avec un code retour non nul.

        Raises:
            UnexpectedProbeOutputError: Si la sonde réussit sans
                produire la sortie attendue.
        """
        output = self.run_command(
            RunCommandOptions(
                command=list(PROBE_COMMAND),
                timeout=self._settings.probe_timeout,
                allow_all_exit_codes=True,
                verbose=verbose,
            )
        )

        if output.is_timed_out():
            if verbose:
                self._log(
                    f"'{self._hostname}' n'est PAS joignable par SSH "
                    "(délai dépassé)."
                )
            return False

        return_code = output.get_return_code()
        if return_code != 0:
            if verbose:
                self._log(
                    f"'{self._hostname}' n'est PAS joignable par SSH "
                    f"(code retour {return_code})."
                )
            return False

        stdout = output.get_stdout_as_string().strip()
        if stdout != PROBE_EXPECTED_STDOUT:
            raise UnexpectedProbeOutputError(
                f"Sortie inattendue de la sonde SSH sur "
                f"'{self._hostname}' : stdout '{stdout}', stderr "
                f"'{output.get_stderr_as_string_or_empty()}', "
                f"code retour {return_code}"
            )

        if verbose:
            self._log(f"'{self._hostname}' est joignable par SSH.")
        return True

    def check_reachable(self, verbose: bool = False) -> None:
        """Vérifie que l'hôte est joignable par SSH.

        Raises:
            HostUnreachableError: Si l'hôte n'est pas joignable.
            UnexpectedProbeOutputError: Si la sonde est ambiguë.
        """
        if self.is_reachable(verbose):
            return
        message = f"L'hôte '{self._hostname}' n'est pas joignable par SSH"
        if verbose:
            self._log_error(message)
        raise HostUnreachableError(message)

    def must_is_reachable(self, verbose: bool = False) -> bool:
        return self._must(self.is_reachable, verbose)

    def must_check_reachable(self, verbose: bool = False) -> None:
        self._must(self.check_reachable, verbose)
