"""Settings for juju-restore, read from the environment."""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JUJU_RESTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Account used to log in to controller machines.
    ssh_user: str = "ubuntu"
    # Private key passed to ssh with -i; ssh's own defaults apply when unset.
    ssh_identity_file: str | None = None
    ssh_strict_host_key_checking: bool = False
    # Seconds a single remote command may run before the node is reported failed.
    command_timeout: float = Field(default=30.0, gt=0)
    # Agent service on a controller is this prefix plus the juju machine id.
    agent_service_prefix: str = "jujud-machine-"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Send juju-restore logs to stderr at the given (or configured) level."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
