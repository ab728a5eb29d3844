"""Attente active d'une condition de joignabilité.

wait_until() répète une sonde jusqu'à ce qu'elle réussisse ou que
le délai global soit dépassé. Elle sert à attendre qu'un hôte
réponde au ping ou devienne joignable par SSH, par exemple après le
redémarrage d'une machine virtuelle.
"""

import time
from typing import Callable, Optional

from exec_python_utils.errors.exceptions import ReachabilityTimeoutError
from exec_python_utils.logging.base import Logger

DEFAULT_WAIT_TIMEOUT_SECONDS = 60.0
DEFAULT_WAIT_DELAY_SECONDS = 2.0


def wait_until(
    probe: Callable[[], bool],
    description: str,
    timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
    delay: float = DEFAULT_WAIT_DELAY_SECONDS,
    logger: Optional[Logger] = None,
    before_probe: Optional[Callable[[], None]] = None,
    verbose: bool = False,
    sleep: Optional[Callable[[float], None]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> float:
    """Attend que la sonde retourne True.

    À chaque itération, before_probe (s'il est fourni) est appelé ;
    son échec est journalisé en avertissement et n'interrompt pas
    l'attente. Une exception levée par la sonde elle-même est
    propagée : seule une réponse négative est retentée.

    Args:
        probe: Sonde retournant True quand la condition est remplie.
        description: Condition attendue, pour les messages
            (ex: "host 'srv1' pingable").
        timeout: Durée maximale d'attente en secondes.
        delay: Pause entre deux sondes en secondes.
        logger: Logger optionnel.
        before_probe: Action exécutée avant chaque sonde.
        verbose: Journaliser la progression de l'attente.
        sleep: Fonction de pause (time.sleep par défaut).
        clock: Horloge monotone (time.monotonic par défaut).

    Returns:
        Durée écoulée en secondes jusqu'au succès.

    Raises:
        ReachabilityTimeoutError: Si le délai est dépassé.
    """
    sleep = sleep or time.sleep
    clock = clock or time.monotonic
    start = clock()
    while True:
        if before_probe is not None:
            try:
                before_probe()
            except Exception as e:
                if logger:
                    logger.log_warning(
                        f"Action préalable à la sonde en échec, "
                        f"ignorée pendant l'attente ({description}) : {e}"
                    )

        success = probe()
        elapsed = clock() - start

        if success:
            if verbose and logger:
                logger.log_info(
                    f"Condition remplie après {elapsed:.1f}s : {description}"
                )
            return elapsed

        if elapsed > timeout:
            message = (
                f"Condition non remplie après {elapsed:.1f}s : "
                f"{description}"
            )
            if verbose and logger:
                logger.log_error(message)
            raise ReachabilityTimeoutError(message, elapsed)

        if verbose and logger:
            logger.log_info(
                f"Attente de {delay:g}s ({description}). "
                f"Restant : {timeout - elapsed:.1f}s, "
                f"écoulé : {elapsed:.1f}s."
            )
        sleep(delay)
