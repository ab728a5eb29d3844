"""Module d'exécution sur hôtes distants.

Classes disponibles :
    SSHClient : Exécuteur de commandes via le client ssh.
    Host : Hôte distant (commandes SSH, sondes, clés d'hôte, attentes).

Fonctions disponibles :
    get_host_by_hostname : Fabrique de Host.
    wait_until : Attente active d'une sonde.
    validate_hostname : Validation d'un nom d'hôte ou d'une IPv4.
"""

from exec_python_utils.hosts.validators import (
    is_ipv4,
    validate_hostname,
    validate_ssh_user_name,
)
from exec_python_utils.hosts.polling import (
    DEFAULT_WAIT_DELAY_SECONDS,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    wait_until,
)
from exec_python_utils.hosts.ssh_client import SSHClient
from exec_python_utils.hosts.host import Host, get_host_by_hostname

__all__ = [
    "is_ipv4",
    "validate_hostname",
    "validate_ssh_user_name",
    "DEFAULT_WAIT_DELAY_SECONDS",
    "DEFAULT_WAIT_TIMEOUT_SECONDS",
    "wait_until",
    "SSHClient",
    "Host",
    "get_host_by_hostname",
]
