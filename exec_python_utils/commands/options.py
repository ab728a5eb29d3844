"""Options d'exécution d'une commande.

RunCommandOptions décrit quoi exécuter (argv) et comment : timeout,
verbosité, tolérance des codes retour, affichage en direct, élévation
de privilèges, données sur stdin et variables d'environnement.

Les backends travaillent toujours sur une copie (get_deep_copy) :
l'instance de l'appelant n'est jamais modifiée par une exécution.
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from exec_python_utils.commands import shell_line
from exec_python_utils.commands.duration import duration_to_seconds_string
from exec_python_utils.errors.exceptions import (
    InvalidCommandRequestError,
    ValidationError,
)

TIMEOUT_BINARY = "timeout"


@dataclass
class RunCommandOptions:
    """Requête d'exécution d'une commande.

    Attributes:
        command: Arguments de la commande, le premier est le programme.
        timeout: Durée maximale (ex: "5 seconds"), None = illimitée.
        verbose: Journaliser les codes retour et les échecs.
        allow_all_exit_codes: Ne pas lever d'erreur sur un code non nul.
        live_output_on_stdout: Recopier stdout en direct sur la console.
        run_as_root: Exécuter avec élévation (root / Administrateur).
        stdin: Données envoyées sur l'entrée standard.
        additional_env_vars: Variables ajoutées à l'environnement courant.
        remove_last_line_if_empty: Supprimer la ligne vide finale
            lors du découpage de stdout en lignes.
        timeout_binary: Programme imposant le timeout, None = celui
            des réglages de l'exécuteur (``timeout`` par défaut).
    """

    command: List[str] = field(default_factory=list)
    timeout: Optional[str] = None
    verbose: bool = False
    allow_all_exit_codes: bool = False
    live_output_on_stdout: bool = False
    run_as_root: bool = False
    stdin: Optional[Union[bytes, str]] = None
    additional_env_vars: Optional[Dict[str, str]] = None
    remove_last_line_if_empty: bool = True
    timeout_binary: Optional[str] = None

    def get_deep_copy(self) -> "RunCommandOptions":
        """Retourne une copie indépendante des options."""
        return copy.deepcopy(self)

    def is_timeout_set(self) -> bool:
        return bool(self.timeout)

    def is_stdin_set(self) -> bool:
        return self.stdin is not None and len(self.stdin) > 0

    def get_timeout_seconds_as_string(self) -> str:
        """Retourne le timeout en secondes pour la commande timeout.

        Raises:
            ValidationError: Si le timeout est absent ou invalide.
        """
        if not self.is_timeout_set():
            raise ValidationError("Aucun timeout défini")
        return duration_to_seconds_string(self.timeout)

    def get_stdin_as_bytes(self) -> bytes:
        """Retourne les données stdin encodées.

        Raises:
            ValidationError: Si aucune donnée stdin n'est définie.
        """
        if not self.is_stdin_set():
            raise ValidationError("Aucune donnée stdin définie")
        if isinstance(self.stdin, str):
            return self.stdin.encode("utf-8")
        return bytes(self.stdin)

    def get_command(self) -> List[str]:
        """Retourne la commande effective à exécuter.

        La liste retournée est une copie ; si un timeout est défini,
        elle est préfixée par ``timeout <secondes>``.

        Raises:
            InvalidCommandRequestError: Si la commande est vide.
        """
        if not self.command:
            raise InvalidCommandRequestError("La commande est vide")
        command = [str(part) for part in self.command]
        if self.is_timeout_set():
            command = [
                self.timeout_binary or TIMEOUT_BINARY,
                self.get_timeout_seconds_as_string(),
            ] + command
        return command

    def get_joined_command(self) -> str:
        """Retourne la commande effective sous forme de ligne shell."""
        return shell_line.join(self.get_command())

    def set_command(self, command: List[str]) -> None:
        """Définit la commande.

        Raises:
            InvalidCommandRequestError: Si la commande est vide.
        """
        if not command:
            raise InvalidCommandRequestError("La commande est vide")
        self.command = list(command)

    def set_timeout(self, timeout: str) -> None:
        """Définit le timeout après validation de son format.

        Raises:
            ValidationError: Si le timeout est vide ou mal formé.
        """
        if not timeout:
            raise ValidationError("Le timeout ne peut pas être vide")
        duration_to_seconds_string(timeout)
        self.timeout = timeout

    def set_stdin(self, stdin: Union[bytes, str]) -> None:
        """Définit les données envoyées sur stdin.

        Raises:
            ValidationError: Si les données sont vides.
        """
        if not stdin:
            raise ValidationError("Les données stdin sont vides")
        self.stdin = stdin
