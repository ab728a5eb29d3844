"""Fonctions de validation pour les hôtes distants.

Ce module fournit les validateurs des noms d'hôte (court ou FQDN),
des adresses IPv4 et des noms d'utilisateur SSH.
"""

import re

from exec_python_utils.errors.exceptions import ValidationError

_LABEL_PATTERN = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$")
_IPV4_PATTERN = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")
_USER_PATTERN = re.compile(r"^[a-zA-Z0-9_][a-zA-Z0-9_.-]*$")


def is_ipv4(address: str) -> bool:
    """Indique si la chaîne est une adresse IPv4 valide."""
    match = _IPV4_PATTERN.match(address)
    if not match:
        return False
    return all(0 <= int(octet) <= 255 for octet in match.groups())


def validate_hostname(hostname: str) -> str:
    """Valide un nom d'hôte (RFC 952 / 1123) ou une adresse IPv4.

    Chaque label d'un nom pleinement qualifié est validé
    séparément ; un point final est toléré.

    Args:
        hostname: Nom d'hôte à valider.

    Returns:
        Le nom d'hôte validé.

    Raises:
        ValidationError: Si le nom d'hôte est invalide.
    """
    if not hostname:
        raise ValidationError("Le nom d'hôte ne peut pas être vide")
    if is_ipv4(hostname):
        return hostname
    name = hostname[:-1] if hostname.endswith(".") else hostname
    if len(name) > 253:
        raise ValidationError(
            f"Nom d'hôte trop long ({len(name)} > 253) : {hostname!r}"
        )
    for label in name.split("."):
        if not _LABEL_PATTERN.match(label):
            raise ValidationError(f"Nom d'hôte invalide : {hostname!r}")
    return hostname


def validate_ssh_user_name(user_name: str) -> str:
    """Valide un nom d'utilisateur SSH.

    Raises:
        ValidationError: Si le nom est vide ou contient des
            caractères interdits (espace, @, :...).
    """
    if not user_name:
        raise ValidationError(
            "Le nom d'utilisateur SSH ne peut pas être vide"
        )
    if not _USER_PATTERN.match(user_name):
        raise ValidationError(
            f"Nom d'utilisateur SSH invalide : {user_name!r}"
        )
    return user_name
