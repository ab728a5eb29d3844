"""
    ConsoleErrorHandler (générique, configurable)
"""
from exec_python_utils.errors.base import ErrorHandler
from exec_python_utils.errors.exceptions import (ApplicationError,
                                                 CommandFailedError,
                                                 CommandLaunchError,
                                                 ConfigurationError,
                                                 HostUnreachableError,
                                                 ValidationError)


class ConsoleErrorHandler(ErrorHandler):
    """Handler pour afficher les erreurs dans la console.

    Distingue les erreurs connues (ApplicationError) des erreurs
    inattendues, et affiche un message de solution adapté au type
    d'erreur.
    """

    def __init__(
        self,
        base_error_type: type[Exception] = ApplicationError,
        solutions: dict[type[Exception], str] | None = None
    ) -> None:
        """Initialise le handler console.

        Args:
            base_error_type: Classe de base pour distinguer erreurs
                connues/inconnues (défaut: ApplicationError).
            solutions: Dictionnaire {TypeException: "message solution"}
                prioritaire sur les solutions intégrées.
        """
        self.base_error_type = base_error_type
        self.solutions = solutions or {}

    def handle(self, error: Exception) -> None:
        """Affiche l'erreur dans la console avec des messages utilisateur.

        Args:
            error: L'exception à afficher.
        """
        if isinstance(error, self.base_error_type):
            self._handle_known_error(error)
        else:
            self._handle_unknown_error(error)

    def _handle_known_error(self, error: Exception) -> None:
        """Gère les erreurs connues du projet.

        Affiche le type et le message de l'erreur, suivi d'une
        suggestion de solution adaptée via isinstance.

        Args:
            error: L'exception métier à traiter.
        """
        print(f"\n🛑 {type(error).__name__}: {str(error)}")

        for error_type, solution in self.solutions.items():
            if isinstance(error, error_type):
                print(f"\n🔧 Solution : {solution}")
                return

        if isinstance(error, CommandLaunchError):
            print("\n🔧 Solution : Vérifiez que le programme existe"
                  " dans le PATH et qu'il est exécutable.")
        elif isinstance(error, CommandFailedError):
            print("\n🔧 Solution : Consultez la sortie d'erreur"
                  " de la commande ci-dessus.")
        elif isinstance(error, HostUnreachableError):
            print("\n🔧 Solution : Vérifiez le réseau et l'accès SSH"
                  " à l'hôte distant.")
        elif isinstance(error, ValidationError):
            print("\n🔧 Solution : Vérifiez les options passées"
                  " à la commande.")
        elif isinstance(error, ConfigurationError):
            print("\n🔧 Solution : Vérifiez votre fichier de configuration.")
        else:
            print("\n🔧 Solution : Voir les suggestions ci-dessus.")

    def _handle_unknown_error(self, error: Exception) -> None:
        """Gère les erreurs inattendues.

        Args:
            error: L'exception non prévue à afficher.
        """
        print(f"\n💥 Erreur inattendue: {str(error)}")
        print(f"Type: {type(error).__name__}")
        print(
            "\n📋 Cela peut être un bug. Veuillez ouvrir une issue avec ces informations."
        )
