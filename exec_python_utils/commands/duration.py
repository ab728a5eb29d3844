"""Conversion des durées textuelles en secondes.

Accepte un nombre éventuellement suivi d'une unité, avec ou sans
espaces : "5", "5s", "5 seconds", "1.5 minutes", "2h", "1 day".
Utilisé pour construire le préfixe ``timeout <secondes>``.
"""

import re

from exec_python_utils.errors.exceptions import ValidationError

_UNIT_SECONDS = {
    "s": 1.0,
    "sec": 1.0,
    "second": 1.0,
    "seconds": 1.0,
    "m": 60.0,
    "min": 60.0,
    "minute": 60.0,
    "minutes": 60.0,
    "h": 3600.0,
    "hour": 3600.0,
    "hours": 3600.0,
    "d": 86400.0,
    "day": 86400.0,
    "days": 86400.0,
    "w": 604800.0,
    "week": 604800.0,
    "weeks": 604800.0,
}

_DURATION_PATTERN = re.compile(
    r"^(?P<value>\d+(?:\.\d+)?|\.\d+)\s*(?P<unit>[a-zA-Z]*)$"
)


def parse_duration_seconds(duration: str) -> float:
    """Convertit une durée textuelle en secondes.

    Args:
        duration: Durée (ex: "5 seconds", "0.5s", "2m").

    Returns:
        Nombre de secondes.

    Raises:
        ValidationError: Si la durée est vide, mal formée ou
            utilise une unité inconnue.
    """
    if duration is None or not str(duration).strip():
        raise ValidationError("La durée ne peut pas être vide")

    match = _DURATION_PATTERN.match(str(duration).strip())
    if not match:
        raise ValidationError(f"Durée invalide : {duration!r}")

    unit = match.group("unit").lower() or "s"
    if unit not in _UNIT_SECONDS:
        raise ValidationError(
            f"Unité de durée inconnue '{unit}' dans {duration!r}"
        )
    return float(match.group("value")) * _UNIT_SECONDS[unit]


def format_seconds(seconds: float) -> str:
    """Formate des secondes pour la commande ``timeout``.

    Les valeurs entières sont écrites sans décimale ("5"), les
    autres gardent leur partie fractionnaire ("0.5").
    """
    if float(seconds).is_integer():
        return str(int(seconds))
    return f"{seconds:g}"


def duration_to_seconds_string(duration: str) -> str:
    """Convertit une durée textuelle en argument pour ``timeout``.

    Args:
        duration: Durée textuelle.

    Returns:
        Nombre de secondes sous forme de chaîne.
    """
    return format_seconds(parse_duration_seconds(duration))
