"""Normalisation du texte produit par les sous-processus.

Sous Windows, les sorties des processus natifs (PowerShell, cmd)
sont encodées en UTF-16 little-endian. Ce module les ramène à des
chaînes Python avec des fins de ligne Unix.
"""

import codecs
import sys


def is_running_on_windows() -> bool:
    """Indique si l'interpréteur tourne sous Windows."""
    return sys.platform.startswith("win")


def decode_utf16(data: bytes) -> str:
    """Décode des octets UTF-16-LE en ignorant une éventuelle BOM.

    Un octet final orphelin (sortie tronquée) est ignoré.

    Args:
        data: Octets bruts du sous-processus.

    Returns:
        Chaîne décodée.
    """
    if data.startswith(codecs.BOM_UTF16_LE):
        data = data[len(codecs.BOM_UTF16_LE):]
    if len(data) % 2:
        data = data[:-1]
    return data.decode("utf-16-le", errors="replace")


def normalize_newlines(text: str) -> str:
    """Remplace les fins de ligne ``\\r\\n`` par ``\\n``."""
    return text.replace("\r\n", "\n")


def decode_output(data: bytes, windows: bool | None = None) -> str:
    """Décode une sortie de processus selon la plateforme.

    Args:
        data: Octets bruts.
        windows: Force le mode Windows (None = détection).

    Returns:
        Texte UTF-16 normalisé sous Windows, UTF-8 sinon.
    """
    if windows is None:
        windows = is_running_on_windows()
    if windows:
        return normalize_newlines(decode_utf16(data))
    return data.decode("utf-8", errors="replace")


def decode_live_line(line: bytes, windows: bool | None = None) -> str:
    """Décode une ligne affichée en direct sur la console.

    Sous Windows, la coupure sur ``\\n`` laisse l'octet nul de poids
    fort du caractère UTF-16 en tête de la ligne suivante : il est
    retiré avant décodage.

    Args:
        line: Ligne brute sans terminateur.
        windows: Force le mode Windows (None = détection).

    Returns:
        Ligne décodée sans ``\\r`` final.
    """
    if windows is None:
        windows = is_running_on_windows()
    if windows:
        if line[:1] == b"\x00":
            line = line[1:]
        return decode_utf16(line).rstrip("\r")
    return line.decode("utf-8", errors="replace").rstrip("\r")
