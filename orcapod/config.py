"""Runtime configuration, env-driven via pydantic-settings.

Reads from a .env file and ORCAPOD_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class OrcapodSettings(BaseSettings):
    """Store and logging settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export ORCAPOD_STORE_DIRECTORY=/data/orcapod
        export ORCAPOD_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ORCAPOD_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Root of the local store; records and the file store live beneath it
    store_directory: Path = Path(".orcapod/store")


def configure_logging(config: OrcapodSettings | None = None) -> None:
    """Apply ``log_level`` to the orcapod loggers and install a stderr handler."""
    config = config or settings
    level = config.log_level.upper()
    logging.getLogger("orcapod").setLevel(level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Module-level singleton; import as `from orcapod.config import settings`
settings = OrcapodSettings()
