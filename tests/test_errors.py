#!/usr/bin/env python3
"""Tests unitaires pour le module errors."""

import unittest
from unittest.mock import MagicMock, patch


from exec_python_utils.errors.base import ErrorHandler, ErrorHandlerChain
from exec_python_utils.errors.exceptions import (ApplicationError,
                                                 ConfigurationError,
                                                 FileConfigurationError,
                                                 ValidationError,
                                                 InvalidCommandRequestError,
                                                 CommandError,
                                                 CommandLaunchError,
                                                 CommandFailedError,
                                                 CommandOutputParseError,
                                                 HostUnreachableError,
                                                 ReachabilityTimeoutError)
from exec_python_utils.errors.console_handler import ConsoleErrorHandler
from exec_python_utils.errors.logger_handler import LoggerErrorHandler
from exec_python_utils.errors.fail_fast import build_error_chain, fail_fast


class TestExceptions(unittest.TestCase):
    """Tests de la hiérarchie des exceptions."""

    def test_hierarchie(self):
        """Vérifie que toutes les erreurs dérivent de ApplicationError."""
        for error_type in (ConfigurationError, ValidationError,
                           CommandError, HostUnreachableError):
            self.assertTrue(issubclass(error_type, ApplicationError))
        self.assertTrue(
            issubclass(InvalidCommandRequestError, ValidationError)
        )
        self.assertTrue(
            issubclass(ReachabilityTimeoutError, HostUnreachableError)
        )

    def test_command_failed_porte_la_sortie(self):
        """Vérifie que CommandFailedError conserve la sortie capturée."""
        output = object()
        error = CommandFailedError("échec", output=output)
        self.assertIs(error.output, output)
        self.assertEqual(str(error), "échec")

    def test_command_failed_sans_sortie(self):
        """Vérifie la sortie absente par défaut."""
        self.assertIsNone(CommandFailedError("échec").output)

    def test_reachability_timeout_porte_la_duree(self):
        """Vérifie que ReachabilityTimeoutError conserve la durée."""
        error = ReachabilityTimeoutError("trop long", 61.5)
        self.assertEqual(error.elapsed, 61.5)

    def test_parse_error_est_value_error(self):
        """Vérifie que l'erreur de conversion reste une ValueError."""
        with self.assertRaises(ValueError):
            raise CommandOutputParseError("pas un entier")


class TestConsoleErrorHandler(unittest.TestCase):
    """Tests pour ConsoleErrorHandler."""

    def setUp(self):
        self.handler = ConsoleErrorHandler()

    @patch("builtins.print")
    def test_handle_launch_error(self, mock_print):
        """Vérifie le message pour CommandLaunchError."""
        error = CommandLaunchError("programme introuvable")
        self.handler.handle(error)
        mock_print.assert_any_call(
            "\n🛑 CommandLaunchError: programme introuvable"
        )
        mock_print.assert_any_call(
            "\n🔧 Solution : Vérifiez que le programme existe"
            " dans le PATH et qu'il est exécutable."
        )

    @patch("builtins.print")
    def test_handle_failed_error(self, mock_print):
        """Vérifie le message pour CommandFailedError."""
        error = CommandFailedError("code retour 2")
        self.handler.handle(error)
        mock_print.assert_any_call(
            "\n🔧 Solution : Consultez la sortie d'erreur"
            " de la commande ci-dessus."
        )

    @patch("builtins.print")
    def test_handle_unreachable_error(self, mock_print):
        """Vérifie le message pour HostUnreachableError et ses dérivées."""
        error = ReachabilityTimeoutError("hôte muet", 60.0)
        self.handler.handle(error)
        mock_print.assert_any_call(
            "\n🔧 Solution : Vérifiez le réseau et l'accès SSH"
            " à l'hôte distant."
        )

    @patch("builtins.print")
    def test_handle_validation_error(self, mock_print):
        """Vérifie le message pour ValidationError."""
        error = InvalidCommandRequestError("commande vide")
        self.handler.handle(error)
        mock_print.assert_any_call(
            "\n🔧 Solution : Vérifiez les options passées à la commande."
        )

    @patch("builtins.print")
    def test_handle_subclass_matches_parent(self, mock_print):
        """FileConfigurationError hérite de ConfigurationError, doit matcher."""
        error = FileConfigurationError("fichier invalide")
        self.handler.handle(error)
        mock_print.assert_any_call(
            "\n🔧 Solution : Vérifiez votre fichier de configuration."
        )

    @patch("builtins.print")
    def test_handle_generic_error(self, mock_print):
        """Vérifie le message par défaut pour une erreur connue."""
        error = CommandError("erreur générique")
        self.handler.handle(error)
        mock_print.assert_any_call(
            "\n🔧 Solution : Voir les suggestions ci-dessus."
        )

    @patch("builtins.print")
    def test_solutions_personnalisees(self, mock_print):
        """Vérifie la priorité des solutions passées au constructeur."""
        handler = ConsoleErrorHandler(
            solutions={CommandFailedError: "Relancez avec verbose=True."}
        )
        handler.handle(CommandFailedError("code retour 1"))
        mock_print.assert_any_call(
            "\n🔧 Solution : Relancez avec verbose=True."
        )
        self.assertEqual(mock_print.call_count, 2)

    @patch("builtins.print")
    def test_handle_unknown_error(self, mock_print):
        """Vérifie le message pour une erreur inconnue."""
        error = RuntimeError("erreur inconnue")
        self.handler.handle(error)
        mock_print.assert_any_call("\n💥 Erreur inattendue: erreur inconnue")
        mock_print.assert_any_call("Type: RuntimeError")


class TestLoggerErrorHandler(unittest.TestCase):
    """Tests pour LoggerErrorHandler."""

    def setUp(self):
        self.mock_logger = MagicMock()
        self.handler = LoggerErrorHandler(self.mock_logger)

    def test_handle_known_error(self):
        """Vérifie le log pour une erreur connue."""
        error = CommandLaunchError("ls introuvable")
        self.handler.handle(error)
        self.mock_logger.log_error.assert_called_once_with(
            "CommandLaunchError: ls introuvable"
        )

    def test_handle_unknown_error(self):
        """Vérifie le log pour une erreur inconnue."""
        error = RuntimeError("runtime error")
        self.handler.handle(error)
        self.mock_logger.log_error.assert_called_once_with(
            "Erreur inattendue: RuntimeError: runtime error"
        )


class TestErrorHandlerChain(unittest.TestCase):
    """Tests pour ErrorHandlerChain."""

    def test_handle_calls_all_handlers(self):
        """Vérifie que tous les handlers sont appelés."""
        chain = ErrorHandlerChain()
        handler1 = MagicMock(spec=ErrorHandler)
        handler2 = MagicMock(spec=ErrorHandler)
        chain.add_handler(handler1)
        chain.add_handler(handler2)

        error = RuntimeError("test")
        chain.handle(error)

        handler1.handle.assert_called_once_with(error)
        handler2.handle.assert_called_once_with(error)

    def test_handle_and_exit(self):
        """Vérifie que handle_and_exit appelle sys.exit."""
        chain = ErrorHandlerChain()
        handler = MagicMock()
        chain.add_handler(handler)

        error = RuntimeError("test")
        with self.assertRaises(SystemExit) as ctx:
            chain.handle_and_exit(error, exit_code=2)

        self.assertEqual(ctx.exception.code, 2)
        handler.handle.assert_called_once_with(error)


class TestFailFast(unittest.TestCase):
    """Tests pour fail_fast et build_error_chain."""

    def test_build_error_chain_sans_logger(self):
        """Vérifie la chaîne par défaut réduite à la console."""
        chain = build_error_chain()
        self.assertEqual(len(chain.handlers), 1)
        self.assertIsInstance(chain.handlers[0], ConsoleErrorHandler)

    def test_build_error_chain_avec_logger(self):
        """Vérifie l'ajout du handler logger."""
        chain = build_error_chain(MagicMock())
        self.assertEqual(len(chain.handlers), 2)
        self.assertIsInstance(chain.handlers[1], LoggerErrorHandler)

    def test_fail_fast_retourne_le_resultat(self):
        """Vérifie que le résultat est transmis sans erreur."""
        chain = MagicMock()
        result = fail_fast(chain, lambda a, b=0: a + b, 2, b=3)
        self.assertEqual(result, 5)
        chain.handle_and_exit.assert_not_called()

    def test_fail_fast_termine_le_programme(self):
        """Vérifie la sortie du programme après traitement de l'erreur."""
        handler = MagicMock()
        chain = ErrorHandlerChain([handler])
        error = CommandFailedError("échec")

        def _raise():
            raise error

        with self.assertRaises(SystemExit) as ctx:
            fail_fast(chain, _raise, exit_code=3)

        self.assertEqual(ctx.exception.code, 3)
        handler.handle.assert_called_once_with(error)


if __name__ == "__main__":
    unittest.main()
