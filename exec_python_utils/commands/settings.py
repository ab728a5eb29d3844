"""Configuration des exécuteurs de commandes.

Les binaires utilisés par les backends et les délais des sondes de
joignabilité sont regroupés dans ExecutorSettings, chargeable depuis
la section ``[executor]`` d'un fichier TOML ou JSON :

    [executor]
    ssh_binary = "/usr/bin/ssh"
    probe_timeout = "10 seconds"
    wait_timeout_seconds = 120
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from exec_python_utils.commands.duration import parse_duration_seconds
from exec_python_utils.config.loader import ConfigFileLoader, ConfigLoader
from exec_python_utils.errors.exceptions import ValidationError


class ExecutorSettings(BaseModel):
    """Réglages partagés par les backends.

    Attributes:
        bash_binary: Shell utilisé par BashCommandExecutor.
        powershell_binary: Shell utilisé par PowerShellCommandExecutor.
        ssh_binary: Client SSH utilisé par SSHClient.
        timeout_binary: Programme imposant l'option timeout.
        sudo_binary: Programme d'élévation (run_as_root hors Windows).
        probe_timeout: Timeout de la sonde ``echo hello``.
        wait_timeout_seconds: Durée maximale des attentes de joignabilité.
        wait_delay_seconds: Pause entre deux sondes.
    """

    model_config = {"extra": "forbid", "frozen": True}

    bash_binary: str = "bash"
    powershell_binary: str = "powershell"
    ssh_binary: str = "ssh"
    timeout_binary: str = "timeout"
    sudo_binary: str = "sudo"
    probe_timeout: str = "5 seconds"
    wait_timeout_seconds: float = Field(default=60.0, gt=0)
    wait_delay_seconds: float = Field(default=2.0, ge=0)

    @field_validator(
        "bash_binary", "powershell_binary", "ssh_binary", "timeout_binary",
        "sudo_binary",
    )
    @classmethod
    def binary_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le binaire ne peut pas être vide")
        return v

    @field_validator("probe_timeout")
    @classmethod
    def probe_timeout_parsable(cls, v: str) -> str:
        try:
            parse_duration_seconds(v)
        except ValidationError as e:
            raise ValueError(str(e)) from e
        return v


DEFAULT_SETTINGS = ExecutorSettings()


class ExecutorSettingsLoader(ConfigFileLoader[ExecutorSettings]):
    """Chargeur de ExecutorSettings depuis un fichier de configuration."""

    def load(self, section: str | None = None) -> ExecutorSettings:
        """Charge la section (``executor`` par défaut).

        Une section absente donne les réglages par défaut.

        Raises:
            pydantic.ValidationError: Si la section est invalide.
        """
        data = self._get_section(section or "executor", required=False)
        return ExecutorSettings.model_validate(data)


def load_executor_settings(
    config_path: str | Path,
    config_loader: Optional[ConfigLoader] = None,
) -> ExecutorSettings:
    """Charge les réglages des exécuteurs depuis un fichier.

    Args:
        config_path: Fichier TOML ou JSON.
        config_loader: Chargeur injectable (tests).

    Returns:
        Réglages validés.
    """
    return ExecutorSettingsLoader(config_path, config_loader).load()
