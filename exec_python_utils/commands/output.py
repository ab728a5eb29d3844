"""Résultat d'une exécution de commande.

CommandOutput est créé vide par le backend au début de l'exécution,
rempli pendant le run (stdout peut grossir pendant le streaming,
stderr, code retour et erreur d'exécution sont écrits à la fin),
puis rendu à l'appelant.

Un champ jamais renseigné n'a pas de valeur par défaut : sa lecture
lève FieldNotSetError. Une sortie vide (b"") reste ainsi distincte
d'une sortie jamais capturée.
"""

from typing import List, Optional

from exec_python_utils.commands.platform_text import (
    decode_output,
    normalize_newlines,
)
from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.exceptions import (
    CommandFailedError,
    CommandOutputParseError,
    FieldNotSetError,
)
from exec_python_utils.errors.fail_fast import build_error_chain, fail_fast

EXIT_CODE_OK = 0
# Convention de la commande POSIX timeout(1)
TIMEOUT_EXIT_CODE = 124


def split_lines(
    text: str, remove_last_line_if_empty: bool = True
) -> List[str]:
    """Découpe un texte en lignes.

    Normalise ``\\r\\n`` en ``\\n`` et supprime, si demandé, la ligne
    vide produite par un ``\\n`` final.

    Args:
        text: Texte à découper.
        remove_last_line_if_empty: Supprimer la dernière ligne vide.

    Returns:
        Liste de lignes sans terminateur.
    """
    lines = normalize_newlines(text).split("\n")
    if remove_last_line_if_empty and lines and lines[-1] == "":
        lines.pop()
    return lines


class CommandOutput:
    """Sorties, code retour et erreur d'une exécution de commande.

    Attributes:
        windows: Force le décodage UTF-16 (None = détection plateforme).
    """

    def __init__(self, windows: Optional[bool] = None) -> None:
        """Crée un résultat vide.

        Args:
            windows: Force le mode de décodage (tests, sorties
                rapatriées d'un hôte Windows).
        """
        self._return_code: Optional[int] = None
        self._stdout: Optional[bytes] = None
        self._stderr: Optional[bytes] = None
        self._run_error: Optional[BaseException] = None
        self.windows = windows
        self._error_chain: Optional[ErrorHandlerChain] = None

    def __repr__(self) -> str:
        return (
            f"CommandOutput(return_code={self._return_code!r}, "
            f"stdout={self._stdout!r}, stderr={self._stderr!r})"
        )

    # --- Écriture ---

    def set_return_code(self, return_code: int) -> None:
        """Renseigne le code retour du processus."""
        self._return_code = int(return_code)

    def set_stdout(self, stdout: bytes) -> None:
        """Renseigne la sortie standard complète."""
        self._stdout = bytes(stdout)

    def set_stdout_by_string(self, stdout: str) -> None:
        """Renseigne la sortie standard depuis une chaîne UTF-8."""
        self.set_stdout(stdout.encode("utf-8"))

    def append_stdout(self, chunk: bytes) -> None:
        """Ajoute un fragment à la sortie standard (streaming).

        Le premier appel initialise le champ, même avec b"".
        """
        if self._stdout is None:
            self._stdout = b""
        self._stdout += bytes(chunk)

    def set_stderr(self, stderr: bytes) -> None:
        """Renseigne la sortie d'erreur complète."""
        self._stderr = bytes(stderr)

    def set_stderr_by_string(self, stderr: str) -> None:
        """Renseigne la sortie d'erreur depuis une chaîne UTF-8."""
        self.set_stderr(stderr.encode("utf-8"))

    def set_run_error(self, error: BaseException) -> None:
        """Renseigne l'erreur remontée par l'exécution."""
        self._run_error = error

    # --- Lecture ---

    def get_return_code(self) -> int:
        """Retourne le code retour.

        Raises:
            FieldNotSetError: Si le processus ne s'est pas terminé.
        """
        if self._return_code is None:
            raise FieldNotSetError("return_code non renseigné")
        return self._return_code

    def get_stdout_as_bytes(self) -> bytes:
        """Retourne la sortie standard brute.

        Raises:
            FieldNotSetError: Si stdout n'a pas été capturé.
        """
        if self._stdout is None:
            raise FieldNotSetError("stdout non renseigné")
        return self._stdout

    def get_stdout_as_string(self) -> str:
        """Retourne la sortie standard décodée.

        Raises:
            FieldNotSetError: Si stdout n'a pas été capturé.
        """
        return decode_output(self.get_stdout_as_bytes(), self.windows)

    def get_stdout_as_lines(
        self, remove_last_line_if_empty: bool = True
    ) -> List[str]:
        """Retourne la sortie standard découpée en lignes.

        Args:
            remove_last_line_if_empty: Supprimer la ligne vide finale.

        Raises:
            FieldNotSetError: Si stdout n'a pas été capturé.
        """
        return split_lines(
            self.get_stdout_as_string(), remove_last_line_if_empty
        )

    def get_first_line_of_stdout_as_string(self) -> str:
        """Retourne la première ligne de la sortie standard.

        Raises:
            FieldNotSetError: Si stdout n'a pas été capturé.
        """
        lines = self.get_stdout_as_lines()
        return lines[0] if lines else ""

    def get_stdout_as_float64(self) -> float:
        """Retourne la sortie standard interprétée comme un flottant.

        Raises:
            FieldNotSetError: Si stdout n'a pas été capturé.
            CommandOutputParseError: Si la sortie n'est pas un nombre.
        """
        text = self.get_stdout_as_string().strip()
        try:
            return float(text)
        except ValueError as e:
            raise CommandOutputParseError(
                f"Sortie non convertible en flottant : {text!r}"
            ) from e

    def get_stdout_as_int64(self) -> int:
        """Retourne la sortie standard interprétée comme un entier.

        Raises:
            FieldNotSetError: Si stdout n'a pas été capturé.
            CommandOutputParseError: Si la sortie n'est pas un entier.
        """
        text = self.get_stdout_as_string().strip()
        try:
            value = int(text, 10)
        except ValueError as e:
            raise CommandOutputParseError(
                f"Sortie non convertible en entier : {text!r}"
            ) from e
        if not -(2 ** 63) <= value < 2 ** 63:
            raise CommandOutputParseError(
                f"Entier hors plage 64 bits : {text!r}"
            )
        return value

    def get_stderr_as_bytes(self) -> bytes:
        """Retourne la sortie d'erreur brute.

        Raises:
            FieldNotSetError: Si stderr n'a pas été capturé.
        """
        if self._stderr is None:
            raise FieldNotSetError("stderr non renseigné")
        return self._stderr

    def get_stderr_as_string(self) -> str:
        """Retourne la sortie d'erreur décodée.

        Raises:
            FieldNotSetError: Si stderr n'a pas été capturé.
        """
        return decode_output(self.get_stderr_as_bytes(), self.windows)

    def get_stderr_as_string_or_empty(self) -> str:
        """Retourne stderr décodé, ou "" s'il n'a pas été capturé."""
        if self._stderr is None:
            return ""
        return decode_output(self._stderr, self.windows)

    def get_run_error(self) -> BaseException:
        """Retourne l'erreur d'exécution.

        Raises:
            FieldNotSetError: Si aucune erreur n'a été enregistrée.
        """
        if self._run_error is None:
            raise FieldNotSetError("run_error non renseigné")
        return self._run_error

    def get_run_error_string_or_empty(self) -> str:
        """Retourne l'erreur d'exécution en texte, ou "" si absente."""
        if self._run_error is None:
            return ""
        return str(self._run_error)

    # --- Prédicats ---

    def is_return_code_set(self) -> bool:
        return self._return_code is not None

    def is_exit_success(self) -> bool:
        """True si le code retour vaut 0 (False s'il est absent)."""
        return self._return_code == EXIT_CODE_OK

    def is_timed_out(self) -> bool:
        """True si le code retour est celui de timeout(1).

        Raises:
            FieldNotSetError: Si le code retour est absent.
        """
        return self.get_return_code() == TIMEOUT_EXIT_CODE

    def is_stdout_empty(self) -> bool:
        return self.get_stdout_as_string() == ""

    def is_stderr_empty(self) -> bool:
        return self.get_stderr_as_string() == ""

    def is_stdout_and_stderr_empty(self) -> bool:
        return self.is_stdout_empty() and self.is_stderr_empty()

    def check_exit_success(self) -> None:
        """Vérifie que la commande s'est terminée avec succès.

        Raises:
            CommandFailedError: Si le code retour n'est pas 0.
        """
        if not self.is_exit_success():
            raise CommandFailedError(
                f"Code retour {self._return_code} différent de 0 : "
                f"{self.get_stderr_as_string_or_empty()}",
                output=self,
            )

    # --- Variantes « must » ---

    def _must(self, func, *args):
        """Exécute une lecture faillible, arrête le programme sinon."""
        if self._error_chain is None:
            self._error_chain = build_error_chain()
        return fail_fast(self._error_chain, func, *args)

    def must_get_return_code(self) -> int:
        return self._must(self.get_return_code)

    def must_get_stdout_as_bytes(self) -> bytes:
        return self._must(self.get_stdout_as_bytes)

    def must_get_stdout_as_string(self) -> str:
        return self._must(self.get_stdout_as_string)

    def must_get_stdout_as_lines(
        self, remove_last_line_if_empty: bool = True
    ) -> List[str]:
        return self._must(
            self.get_stdout_as_lines, remove_last_line_if_empty
        )

    def must_get_first_line_of_stdout_as_string(self) -> str:
        return self._must(self.get_first_line_of_stdout_as_string)

    def must_get_stdout_as_float64(self) -> float:
        return self._must(self.get_stdout_as_float64)

    def must_get_stderr_as_string(self) -> str:
        return self._must(self.get_stderr_as_string)

    def must_is_timed_out(self) -> bool:
        return self._must(self.is_timed_out)

    def must_check_exit_success(self) -> None:
        self._must(self.check_exit_success)
