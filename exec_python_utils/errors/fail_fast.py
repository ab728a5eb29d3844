"""Variantes « must » : exécution ou arrêt du programme.

Les opérations faillibles lèvent des exceptions. Les appelants qui
préfèrent arrêter le programme passent par fail_fast(), qui confie
l'erreur à une ErrorHandlerChain puis termine le processus.
"""

from typing import Callable, Optional, TypeVar

from exec_python_utils.errors.base import ErrorHandlerChain
from exec_python_utils.errors.console_handler import ConsoleErrorHandler
from exec_python_utils.errors.logger_handler import LoggerErrorHandler
from exec_python_utils.logging.base import Logger

R = TypeVar("R")


def build_error_chain(logger: Optional[Logger] = None) -> ErrorHandlerChain:
    """Construit la chaîne par défaut : console, puis logger éventuel.

    Args:
        logger: Logger optionnel recevant aussi l'erreur.

    Returns:
        Chaîne de handlers prête à l'emploi.
    """
    chain = ErrorHandlerChain([ConsoleErrorHandler()])
    if logger is not None:
        chain.add_handler(LoggerErrorHandler(logger))
    return chain


def fail_fast(
    chain: ErrorHandlerChain,
    func: Callable[..., R],
    *args,
    exit_code: int = 1,
    **kwargs,
) -> R:
    """Appelle func et termine le programme en cas d'erreur.

    Args:
        chain: Chaîne de handlers qui traite l'erreur avant la sortie.
        func: Opération faillible.
        *args: Arguments positionnels de func.
        exit_code: Code de sortie du programme en cas d'erreur.
        **kwargs: Arguments nommés de func.

    Returns:
        Résultat de func.
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        chain.handle_and_exit(e, exit_code)
        raise
