"""Conversion entre liste d'arguments et ligne de commande shell.

La jonction quote chaque argument pour un shell POSIX : un argument
vide ou contenant des espaces, des guillemets ou des caractères
spéciaux est entouré d'apostrophes, une apostrophe interne devenant
``'"'"'``. La ligne produite, réinterprétée par bash, redonne
exactement les arguments d'origine.
"""

import shlex
from typing import List, Sequence

from exec_python_utils.errors.exceptions import InvalidCommandRequestError


def quote(argument: str) -> str:
    """Quote un argument pour un shell POSIX.

    Args:
        argument: Argument brut.

    Returns:
        Argument inchangé s'il ne contient aucun caractère spécial,
        sinon entouré d'apostrophes.
    """
    return shlex.quote(argument)


def join(command: Sequence[str]) -> str:
    """Assemble une commande en une ligne shell.

    Args:
        command: Liste d'arguments (au moins un élément).

    Returns:
        Ligne shell quotée.

    Raises:
        InvalidCommandRequestError: Si la commande est vide.
    """
    if not command:
        raise InvalidCommandRequestError("La commande est vide")
    return " ".join(quote(str(part)) for part in command)


def split(command_line: str) -> List[str]:
    """Découpe une ligne shell en liste d'arguments.

    Inverse de join() pour les lignes qu'il produit.

    Args:
        command_line: Ligne de commande.

    Returns:
        Liste d'arguments.

    Raises:
        InvalidCommandRequestError: Si la ligne est vide ou mal quotée.
    """
    if not command_line or not command_line.strip():
        raise InvalidCommandRequestError("La ligne de commande est vide")
    try:
        return shlex.split(command_line)
    except ValueError as e:
        raise InvalidCommandRequestError(
            f"Ligne de commande invalide {command_line!r} : {e}"
        ) from e
