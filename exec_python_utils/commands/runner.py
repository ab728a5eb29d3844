"""Exécuteur de commandes par processus direct.

Ce module fournit ExecCommandExecutor, le backend sur lequel
reposent tous les autres : il lance le processus sans shell via
subprocess.Popen, lit stdout ligne par ligne pendant que le processus
tourne, vide stderr dans un tampon et applique la politique de code
retour des options.

Example :
    Exécution simple avec logs fichier :

        from exec_python_utils.commands import (
            ExecCommandExecutor,
            RunCommandOptions,
        )

        executor = ExecCommandExecutor(logger=logger)
        output = executor.run_command(
            RunCommandOptions(command=["ls", "-la"])
        )
        print(output.get_stdout_as_string())

    Affichage de la sortie en direct, avec un timeout :

        executor.run_command(
            RunCommandOptions(
                command=["rsync", "-av", "/src", "/dst"],
                timeout="10 minutes",
                live_output_on_stdout=True,
            )
        )
"""

import os
import subprocess  # nosec B404
import sys
import threading
from typing import IO, Dict, List, Optional

from exec_python_utils.commands import shell_line
from exec_python_utils.commands.base import LOCALHOST, CommandExecutor
from exec_python_utils.commands.formatter import (
    CommandFormatter,
    PlainCommandFormatter,
)
from exec_python_utils.commands.options import RunCommandOptions
from exec_python_utils.commands.output import CommandOutput
from exec_python_utils.commands.platform_text import (
    decode_live_line,
    is_running_on_windows,
)
from exec_python_utils.commands.settings import (
    DEFAULT_SETTINGS,
    ExecutorSettings,
)
from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.exceptions import (
    CommandFailedError,
    CommandLaunchError,
)
from exec_python_utils.logging.base import Logger


def _is_effective_root() -> bool:
    """True si le processus courant est root (toujours False sous Windows)."""
    return hasattr(os, "geteuid") and os.geteuid() == 0


def _drain(stream: IO[bytes], chunks: List[bytes]) -> None:
    """Lit un flux jusqu'à sa fin dans une liste de fragments."""
    for chunk in iter(lambda: stream.read(65536), b""):
        chunks.append(chunk)


def _feed_stdin(stream: IO[bytes], data: bytes) -> None:
    """Écrit les données sur stdin puis ferme le flux."""
    try:
        stream.write(data)
        stream.flush()
    except BrokenPipeError:
        # Comme Popen.communicate : le processus a fermé stdin
        # avant de tout lire, son code retour fait foi.
        pass
    finally:
        try:
            stream.close()
        except BrokenPipeError:
            pass


class ExecCommandExecutor(CommandExecutor):
    """Exécuteur de commandes via subprocess, sans shell.

    Les messages de log utilisent PlainCommandFormatter avec les
    préfixes [ROOT] ou [user] selon options.run_as_root. Un
    console_formatter optionnel (ex: AnsiCommandFormatter) affiche
    en parallèle les messages sur stdout lorsque options.verbose est
    actif, et formate les lignes affichées en direct.

    Attributes:
        _default_env: Variables d'environnement par défaut.
        _settings: Réglages (binaires timeout et sudo).
        _is_root: True si le processus courant est déjà root.
        _plain: Formateur texte brut pour les logs fichier.
        _console_formatter: Formateur optionnel pour la console.
    """

    def __init__(
        self,
        logger: Optional[Logger] = None,
        default_env: Optional[Dict[str, str]] = None,
        settings: ExecutorSettings = DEFAULT_SETTINGS,
        console_formatter: Optional[CommandFormatter] = None,
        error_handlers: Optional[ErrorHandlerChain] = None,
    ) -> None:
        """Initialise l'exécuteur de commandes.

        Args:
            logger: Logger optionnel pour les sorties fichier.
            default_env: Variables d'environnement par défaut
                (fusionnées avec os.environ).
            settings: Réglages des binaires auxiliaires.
            console_formatter: Formateur optionnel pour la console.
            error_handlers: Chaîne de handlers des variantes « must ».
        """
        super().__init__(logger=logger, error_handlers=error_handlers)
        self._default_env = default_env
        self._settings = settings
        self._is_root: bool = _is_effective_root()
        self._plain = PlainCommandFormatter()
        self._console_formatter = console_formatter

    @property
    def settings(self) -> ExecutorSettings:
        return self._settings

    def get_host_description(self) -> str:
        return LOCALHOST

    def _build_env(
        self,
        env: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, str]]:
        """Construit l'environnement d'exécution.

        Fusionne os.environ, default_env et les variables de l'appel.
        Retourne None si aucun environnement personnalisé
        (subprocess utilisera os.environ par défaut).
        """
        if self._default_env is None and not env:
            return None
        merged = os.environ.copy()
        if self._default_env:
            merged.update(self._default_env)
        if env:
            merged.update(env)
        return merged

    def _build_command(self, options: RunCommandOptions) -> List[str]:
        """Construit l'argv effectif : timeout puis élévation éventuels."""
        if options.timeout_binary is None:
            options.timeout_binary = self._settings.timeout_binary
        command = options.get_command()
        if (
            options.run_as_root
            and not self._is_root
            and not is_running_on_windows()
        ):
            command = [self._settings.sudo_binary] + command
        return command

    def _console(self, message: str) -> None:
        print(message, flush=True)

    def _echo_line(self, line: bytes, is_root: bool) -> None:
        """Recopie une ligne de stdout sur la console et la journalise."""
        text = decode_live_line(line.rstrip(b"\n"))
        self._log_debug(text)
        if self._console_formatter:
            text = self._console_formatter.format_line(text, is_root)
        print(text, flush=True)

    def _announce(
        self, command: List[str], options: RunCommandOptions
    ) -> None:
        """Journalise le lancement de la commande."""
        self._log(
            self._plain.format_start(
                command, LOCALHOST, options.run_as_root
            )
        )
        if self._console_formatter and options.verbose:
            self._console(
                self._console_formatter.format_start(
                    command, LOCALHOST, options.run_as_root
                )
            )

    def _start_process(
        self,
        command: List[str],
        options: RunCommandOptions,
        with_stdin: bool,
    ) -> subprocess.Popen:
        """Lance le processus.

        Raises:
            CommandLaunchError: Si le processus ne peut être créé.
        """
        try:
            return subprocess.Popen(  # nosec B603
                command,
                stdin=subprocess.PIPE if with_stdin else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._build_env(options.additional_env_vars),
            )
        except (OSError, ValueError) as e:
            message = (
                f"Impossible de lancer '{shell_line.join(command)}' : {e}"
            )
            self._log_error(message)
            raise CommandLaunchError(message) from e

    def run_command(self, options: RunCommandOptions) -> CommandOutput:
        """Exécute une commande et retourne le résultat.

        stdout est lu ligne par ligne pendant l'exécution (et recopié
        sur la console si live_output_on_stdout), stderr est collecté
        par un thread dédié et n'est disponible qu'à la fin.

        Args:
            options: Requête d'exécution (copiée, jamais modifiée).

        Returns:
            CommandOutput complet.

        Raises:
            InvalidCommandRequestError: Options absentes ou commande vide.
            CommandLaunchError: Processus non lancé ou sans code retour.
            CommandFailedError: Code retour non nul et
                allow_all_exit_codes désactivé.
        """
        self._check_options(options)
        options = options.get_deep_copy()
        command = self._build_command(options)
        joined = shell_line.join(command)
        stdin_data = (
            options.get_stdin_as_bytes() if options.is_stdin_set() else None
        )

        self._announce(command, options)
        output = CommandOutput()

        proc = self._start_process(command, options, stdin_data is not None)
        with proc:
            stderr_chunks: List[bytes] = []
            helpers = [
                threading.Thread(
                    target=_drain,
                    args=(proc.stderr, stderr_chunks),
                    daemon=True,
                )
            ]
            if stdin_data is not None:
                helpers.append(
                    threading.Thread(
                        target=_feed_stdin,
                        args=(proc.stdin, stdin_data),
                        daemon=True,
                    )
                )
            for helper in helpers:
                helper.start()

            output.append_stdout(b"")
            for line in iter(proc.stdout.readline, b""):
                output.append_stdout(line)
                if options.live_output_on_stdout:
                    self._echo_line(line, options.run_as_root)

            return_code = proc.wait()
            residual = proc.stdout.read()
            if residual:
                output.append_stdout(residual)

            for helper in helpers:
                helper.join()

        output.set_stderr(b"".join(stderr_chunks))

        if return_code is None:
            message = (
                f"Impossible d'obtenir le code retour de '{joined}'"
            )
            self._log_error(message)
            raise CommandLaunchError(message)

        output.set_return_code(return_code)
        if return_code != 0:
            output.set_run_error(
                subprocess.CalledProcessError(return_code, command)
            )
            self._apply_exit_code_policy(output, command, joined, options)

        return output

    def _apply_exit_code_policy(
        self,
        output: CommandOutput,
        command: List[str],
        joined: str,
        options: RunCommandOptions,
    ) -> None:
        """Traite un code retour non nul selon les options.

        Raises:
            CommandFailedError: Si allow_all_exit_codes est désactivé.
        """
        return_code = output.get_return_code()
        if options.allow_all_exit_codes:
            if options.verbose:
                self._log(
                    f"Code retour {return_code} de '{joined}' accepté "
                    "(allow_all_exit_codes)."
                )
            return

        message = (
            f"Échec de la commande '{joined}' : "
            f"{output.get_run_error_string_or_empty()}\n"
            f"{output.get_stderr_as_string_or_empty()}"
        )
        if options.verbose:
            self._log_error(
                self._plain.format_exit_code(
                    command, return_code, options.run_as_root
                )
            )
            if self._console_formatter:
                print(
                    self._console_formatter.format_exit_code(
                        command, return_code, options.run_as_root
                    ),
                    file=sys.stderr,
                    flush=True,
                )
        raise CommandFailedError(message, output=output)
