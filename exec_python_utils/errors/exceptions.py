"""
Exceptions personnalisées pour l'exécution de commandes.

Toutes les exceptions dérivent de ApplicationError afin que les
handlers (console, logger) distinguent les erreurs connues des
erreurs inattendues.
"""
from typing import Any, Optional


class ApplicationError(Exception):
    """Exception de base pour toutes les applications."""
    pass


class ConfigurationError(ApplicationError):
    """Exception de base pour toutes les Configurations."""
    pass


class FileConfigurationError(ConfigurationError):
    """Fichier de configuration absent, illisible ou invalide."""
    pass


class ValidationError(ApplicationError):
    """Exception de base pour toutes les validations."""
    pass


class InvalidCommandRequestError(ValidationError):
    """Options absentes ou commande vide, détectée avant tout lancement."""
    pass


class CommandError(ApplicationError):
    """Exception de base pour toutes les erreurs d'exécution."""
    pass


class CommandLaunchError(CommandError):
    """Le processus n'a pas pu être créé, démarré ou n'a pas de code retour.

    Toujours fatale pour l'appel, indépendamment de allow_all_exit_codes.
    """
    pass


class CommandFailedError(CommandError):
    """Le processus s'est terminé avec un code retour non nul.

    Attributes:
        output: CommandOutput capturé lors de l'exécution (peut être
            None si l'erreur est levée hors d'un backend).
    """

    def __init__(self, message: str, output: Optional[Any] = None) -> None:
        super().__init__(message)
        self.output = output


class FieldNotSetError(CommandError):
    """Lecture d'un champ de CommandOutput qui n'a jamais été renseigné."""
    pass


class CommandOutputParseError(CommandError, ValueError):
    """La sortie standard ne peut pas être convertie dans le type demandé."""
    pass


class UnexpectedProbeOutputError(CommandError):
    """Sonde de joignabilité ni expirée ni conforme à la sortie attendue."""
    pass


class HostUnreachableError(ApplicationError):
    """L'hôte distant n'est pas joignable."""
    pass


class ReachabilityTimeoutError(HostUnreachableError):
    """L'hôte n'est pas devenu joignable avant la fin du délai d'attente.

    Attributes:
        elapsed: Durée écoulée en secondes au moment de l'abandon.
    """

    def __init__(self, message: str, elapsed: float) -> None:
        super().__init__(message)
        self.elapsed = elapsed
