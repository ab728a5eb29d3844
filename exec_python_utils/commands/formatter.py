"""Formateurs pour l'affichage des messages de commandes.

Ce module fournit une hiérarchie de formateurs permettant d'afficher
les messages d'exécution différemment selon le contexte (fichier de
log ou console) et l'élévation demandée (run_as_root).

Classes :
    CommandFormatter : Interface abstraite de formatage.
    PlainCommandFormatter : Texte brut avec préfixes [ROOT]/[user].
    AnsiCommandFormatter : Codes ANSI colorés pour la console.

Example :
    Affichage coloré des commandes lancées :

        from exec_python_utils.commands import (
            ExecCommandExecutor,
            AnsiCommandFormatter,
        )

        executor = ExecCommandExecutor(
            logger=logger,
            console_formatter=AnsiCommandFormatter(),
        )

Note :
    AnsiCommandFormatter vérifie si la sortie est un terminal (TTY)
    avant d'émettre des codes ANSI, évitant ainsi de polluer les
    pipes ou les redirections.
"""

import sys
from abc import ABC, abstractmethod
from typing import List


class CommandFormatter(ABC):
    """Interface abstraite pour formater les messages de commande.

    Les formateurs reçoivent l'élévation demandée (is_root) pour
    adapter leur affichage.
    """

    @abstractmethod
    def format_start(
        self, command: List[str], host: str, is_root: bool
    ) -> str:
        """Formate le message de début d'exécution.

        Args:
            command: Commande effective sous forme de liste.
            host: Description de l'hôte d'exécution.
            is_root: True si l'élévation est demandée.

        Returns:
            Message formaté prêt à l'affichage.
        """
        pass

    @abstractmethod
    def format_exit_code(
        self, command: List[str], return_code: int, is_root: bool
    ) -> str:
        """Formate le message de fin pour un code retour non nul.

        Args:
            command: Commande effective sous forme de liste.
            return_code: Code retour du processus.
            is_root: True si l'élévation est demandée.

        Returns:
            Message formaté prêt à l'affichage.
        """
        pass

    @abstractmethod
    def format_line(
        self, line: str, is_root: bool
    ) -> str:
        """Formate une ligne de sortie affichée en direct.

        Args:
            line: Ligne de sortie de la commande.
            is_root: True si l'élévation est demandée.

        Returns:
            Ligne formatée prête à l'affichage.
        """
        pass


class PlainCommandFormatter(CommandFormatter):
    """Formateur texte brut pour les logs fichier.

    Produit des messages avec préfixe textuel [ROOT] ou [user],
    sans code ANSI : compatible avec grep et les éditeurs.

    Example :
        [ROOT] Exécution sur localhost : apt-get update
        [user] Code retour 2 : ls /inexistant
    """

    _ROOT_PREFIX = "[ROOT]"
    _USER_PREFIX = "[user]"

    def _prefix(self, is_root: bool) -> str:
        return self._ROOT_PREFIX if is_root else self._USER_PREFIX

    def format_start(
        self, command: List[str], host: str, is_root: bool
    ) -> str:
        """Formate le début d'exécution avec préfixe textuel."""
        cmd_str = " ".join(command)
        return f"{self._prefix(is_root)} Exécution sur {host} : {cmd_str}"

    def format_exit_code(
        self, command: List[str], return_code: int, is_root: bool
    ) -> str:
        """Formate un code retour non nul avec préfixe textuel."""
        cmd_str = " ".join(command)
        return (
            f"{self._prefix(is_root)} Code retour {return_code} : "
            f"{cmd_str}"
        )

    def format_line(
        self, line: str, is_root: bool
    ) -> str:
        """Retourne la ligne sans modification."""
        return line


class AnsiCommandFormatter(CommandFormatter):
    """Formateur ANSI coloré pour la sortie console.

    Distingue visuellement les exécutions élevées (jaune-or gras)
    des exécutions utilisateur (vert). Les lignes de sortie ne sont
    pas stylisées pour rester lisibles et copiables.

    Styles ANSI :
        ROOT    → \\033[1;33m (jaune-or gras)
        user    → \\033[0;32m (vert normal)
        échec   → \\033[0;31m (rouge)
        reset   → \\033[0m
    """

    RESET = "\033[0m"
    ROOT_STYLE = "\033[1;33m"   # Jaune-or gras
    USER_STYLE = "\033[0;32m"   # Vert normal
    FAIL_STYLE = "\033[0;31m"   # Rouge

    ROOT_PREFIX = "[ROOT]"
    USER_PREFIX = "[user]"

    def _is_tty(self) -> bool:
        """Vérifie si stdout est un terminal interactif (TTY)."""
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

    def _prefix(self, is_root: bool) -> str:
        return self.ROOT_PREFIX if is_root else self.USER_PREFIX

    def _apply_style(self, text: str, style: str) -> str:
        """Applique le style ANSI si on est dans un TTY."""
        if not self._is_tty():
            return text
        return f"{style}{text}{self.RESET}"

    def format_start(
        self, command: List[str], host: str, is_root: bool
    ) -> str:
        """Formate le début d'exécution avec style ANSI."""
        cmd_str = " ".join(command)
        style = self.ROOT_STYLE if is_root else self.USER_STYLE
        return self._apply_style(
            f"{self._prefix(is_root)} Exécution sur {host} : {cmd_str}",
            style,
        )

    def format_exit_code(
        self, command: List[str], return_code: int, is_root: bool
    ) -> str:
        """Formate un code retour non nul en rouge."""
        cmd_str = " ".join(command)
        return self._apply_style(
            f"{self._prefix(is_root)} Code retour {return_code} : "
            f"{cmd_str}",
            self.FAIL_STYLE,
        )

    def format_line(
        self, line: str, is_root: bool
    ) -> str:
        """Retourne la ligne sans style (contenu brut préservé)."""
        return line
