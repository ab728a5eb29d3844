"""Hôte distant : exécution SSH, sondes et clés d'hôte.

Host est un CommandExecutor dont les commandes passent par son
SSHClient. Il ajoute les opérations de gestion courantes d'une
machine distante :

    - sondes ping et SSH (is_pingable, is_reachable_by_ssh)
    - gestion de la clé d'hôte dans ~/.ssh/known_hosts
    - attente de joignabilité (wait_until_pingable,
      wait_until_reachable_by_ssh)

Example :
    Attendre le redémarrage d'une machine :

        host = get_host_by_hostname("srv1.example.org", "admin")
        host.run_command(RunCommandOptions(command=["reboot"],
                                           run_as_root=True,
                                           allow_all_exit_codes=True))
        host.wait_until_reachable_by_ssh(renew_host_key=False)
"""

from typing import Optional

from exec_python_utils.commands import shell_line
from exec_python_utils.commands.base import CommandExecutor
from exec_python_utils.commands.options import RunCommandOptions
from exec_python_utils.commands.output import CommandOutput
from exec_python_utils.commands.runner import ExecCommandExecutor
from exec_python_utils.commands.settings import (
    DEFAULT_SETTINGS,
    ExecutorSettings,
)
from exec_python_utils.commands.shell import BashCommandExecutor
from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.exceptions import (
    HostUnreachableError,
    UnexpectedProbeOutputError,
)
from exec_python_utils.hosts.polling import wait_until
from exec_python_utils.hosts.ssh_client import SSHClient
from exec_python_utils.logging.base import Logger

KNOWN_HOSTS_PATH = "${HOME}/.ssh/known_hosts"


class Host(CommandExecutor):
    """Machine distante joignable par SSH.

    Les commandes locales annexes (ping, ssh-keyscan, ssh-keygen)
    passent par le même backend processus que le client SSH.

    Attributes:
        _ssh_client: Client exécutant les commandes distantes.
        _executor: Backend processus local.
        _bash: Exécuteur bash local pour les sondes.
        comment: Commentaire libre (inventaire).
    """

    def __init__(
        self,
        hostname: str,
        ssh_user_name: Optional[str] = None,
        comment: Optional[str] = None,
        logger: Optional[Logger] = None,
        settings: ExecutorSettings = DEFAULT_SETTINGS,
        executor: Optional[CommandExecutor] = None,
        error_handlers: Optional[ErrorHandlerChain] = None,
    ) -> None:
        """Initialise l'hôte.

        Args:
            hostname: Nom ou adresse de l'hôte.
            ssh_user_name: Utilisateur SSH optionnel.
            comment: Commentaire libre.
            logger: Logger optionnel.
            settings: Réglages des binaires et des attentes.
            executor: Backend local (ExecCommandExecutor par défaut).
            error_handlers: Chaîne de handlers des variantes « must ».

        Raises:
            ValidationError: Si le nom d'hôte ou d'utilisateur est invalide.
        """
        super().__init__(logger=logger, error_handlers=error_handlers)
        self._settings = settings
        self._executor = executor or ExecCommandExecutor(
            logger=logger, settings=settings
        )
        self._ssh_client = SSHClient(
            hostname,
            ssh_user_name=ssh_user_name,
            logger=logger,
            settings=settings,
            executor=self._executor,
            error_handlers=self.error_handlers,
        )
        self._bash = BashCommandExecutor(
            logger=logger,
            settings=settings,
            executor=self._executor,
            error_handlers=self.error_handlers,
        )
        self.comment = comment

    @property
    def hostname(self) -> str:
        return self._ssh_client.hostname

    @property
    def ssh_user_name(self) -> Optional[str]:
        return self._ssh_client.ssh_user_name

    def get_ssh_client(self) -> SSHClient:
        return self._ssh_client

    def get_host_description(self) -> str:
        return self.hostname

    def get_deep_copy(self) -> "Host":
        return Host(
            self.hostname,
            ssh_user_name=self.ssh_user_name,
            comment=self.comment,
            logger=self._logger,
            settings=self._settings,
            executor=self._executor,
            error_handlers=self.error_handlers,
        )

    def run_command(self, options: RunCommandOptions) -> CommandOutput:
        """Exécute la commande sur l'hôte via SSH."""
        self._check_options(options)
        return self._ssh_client.run_command(options)

    # --- Sondes ---

    def is_pingable(self, verbose: bool = False) -> bool:
        """Envoie un ping unique à l'hôte.

        Raises:
            UnexpectedProbeOutputError: Si la sonde ne répond ni
                ``yes`` ni ``no``.
        """
        line = (
            f"ping -c 1 {shell_line.quote(self.hostname)} &>/dev/null "
            "&& echo yes || echo no"
        )
        stdout = self._bash.run_one_liner_and_get_stdout_as_string(
            line
        ).strip()
        if stdout == "yes":
            if verbose:
                self._log(f"'{self.hostname}' répond au ping.")
            return True
        if stdout == "no":
            if verbose:
                self._log(f"'{self.hostname}' ne répond pas au ping.")
            return False
        raise UnexpectedProbeOutputError(
            f"Sortie inattendue de la sonde ping : '{stdout}'"
        )

    def is_reachable_by_ssh(self, verbose: bool = False) -> bool:
        return self._ssh_client.is_reachable(verbose)

    def check_reachable_by_ssh(self, verbose: bool = False) -> None:
        """Vérifie que l'hôte est joignable par SSH.

        Raises:
            HostUnreachableError: Si l'hôte n'est pas joignable.
        """
        if self.is_reachable_by_ssh(verbose):
            if verbose:
                self._log(f"L'hôte '{self.hostname}' est joignable par SSH.")
            return
        message = f"L'hôte '{self.hostname}' n'est pas joignable par SSH"
        if verbose:
            self._log_error(message)
        raise HostUnreachableError(message)

    # --- Clés d'hôte SSH ---

    def add_ssh_host_key_to_known_hosts(self, verbose: bool = False) -> None:
        """Ajoute la clé de l'hôte (hachée) à ~/.ssh/known_hosts."""
        self._bash.run_one_liner(
            f"ssh-keyscan -H {shell_line.quote(self.hostname)} "
            f'>> "{KNOWN_HOSTS_PATH}"'
        )
        if verbose:
            self._log(
                f"Clé d'hôte de '{self.hostname}' ajoutée aux known_hosts."
            )

    def remove_ssh_host_key_from_known_hosts(
        self, verbose: bool = False
    ) -> None:
        """Retire la clé de l'hôte de ~/.ssh/known_hosts."""
        self._executor.run_command(
            RunCommandOptions(command=["ssh-keygen", "-R", self.hostname])
        )
        if verbose:
            self._log(
                f"Clé d'hôte de '{self.hostname}' retirée des known_hosts."
            )

    def renew_ssh_host_key(self, verbose: bool = False) -> None:
        """Remplace la clé connue de l'hôte par sa clé actuelle."""
        self.remove_ssh_host_key_from_known_hosts(verbose)
        self.add_ssh_host_key_to_known_hosts(verbose)

    # --- Attentes ---

    def wait_until_pingable(self, verbose: bool = False) -> float:
        """Attend que l'hôte réponde au ping.

        Returns:
            Durée d'attente en secondes.

        Raises:
            ReachabilityTimeoutError: Si le délai est dépassé.
        """
        return wait_until(
            lambda: self.is_pingable(verbose),
            f"hôte '{self.hostname}' joignable par ping",
            timeout=self._settings.wait_timeout_seconds,
            delay=self._settings.wait_delay_seconds,
            logger=self._logger,
            verbose=verbose,
        )

    def wait_until_reachable_by_ssh(
        self, renew_host_key: bool = False, verbose: bool = False
    ) -> float:
        """Attend que l'hôte soit joignable par SSH.

        Args:
            renew_host_key: Renouveler la clé d'hôte avant chaque
                sonde (machine réinstallée) ; un échec du
                renouvellement n'interrompt pas l'attente.
            verbose: Journaliser la progression.

        Returns:
            Durée d'attente en secondes.

        Raises:
            ReachabilityTimeoutError: Si le délai est dépassé.
        """
        before_probe = None
        if renew_host_key:
            def before_probe() -> None:
                self.renew_ssh_host_key(verbose)

        return wait_until(
            lambda: self.is_reachable_by_ssh(verbose),
            f"hôte '{self.hostname}' joignable par SSH",
            timeout=self._settings.wait_timeout_seconds,
            delay=self._settings.wait_delay_seconds,
            logger=self._logger,
            before_probe=before_probe,
            verbose=verbose,
        )

    # --- Variantes « must » ---

    def must_is_pingable(self, verbose: bool = False) -> bool:
        return self._must(self.is_pingable, verbose)

    def must_is_reachable_by_ssh(self, verbose: bool = False) -> bool:
        return self._must(self.is_reachable_by_ssh, verbose)

    def must_check_reachable_by_ssh(self, verbose: bool = False) -> None:
        self._must(self.check_reachable_by_ssh, verbose)

    def must_add_ssh_host_key_to_known_hosts(
        self, verbose: bool = False
    ) -> None:
        self._must(self.add_ssh_host_key_to_known_hosts, verbose)

    def must_remove_ssh_host_key_from_known_hosts(
        self, verbose: bool = False
    ) -> None:
        self._must(self.remove_ssh_host_key_from_known_hosts, verbose)

    def must_renew_ssh_host_key(self, verbose: bool = False) -> None:
        self._must(self.renew_ssh_host_key, verbose)

    def must_wait_until_pingable(self, verbose: bool = False) -> float:
        return self._must(self.wait_until_pingable, verbose)

    def must_wait_until_reachable_by_ssh(
        self, renew_host_key: bool = False, verbose: bool = False
    ) -> float:
        return self._must(
            self.wait_until_reachable_by_ssh, renew_host_key, verbose
        )


def get_host_by_hostname(
    hostname: str,
    ssh_user_name: Optional[str] = None,
    **kwargs,
) -> Host:
    """Crée un Host à partir d'un nom d'hôte (espaces retirés).

    Args:
        hostname: Nom ou adresse de l'hôte.
        ssh_user_name: Utilisateur SSH optionnel.
        **kwargs: Arguments supplémentaires de Host (logger, settings...).

    Raises:
        ValidationError: Si le nom d'hôte est invalide.
    """
    return Host(hostname.strip(), ssh_user_name=ssh_user_name, **kwargs)
