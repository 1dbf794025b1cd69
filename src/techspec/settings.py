"""Environment-driven settings for techspec.

``TechSpecSettings`` reads ``TECHSPEC_*`` environment variables (and a
``.env`` file) for the knobs that belong to the runtime rather than to a
document: log level, log format, and where the YAML config lives.

Examples:
    >>> import os
    >>> os.environ["TECHSPEC_LOG_LEVEL"] = "DEBUG"
    >>> TechSpecSettings().log_level
    'DEBUG'

Tags:
    settings, configuration, pydantic, environment, techspec
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from techspec.config import TechSpecConfig


class TechSpecSettings(BaseSettings):
    """Runtime settings shared by the CLI and the builder.

    Fields
    ──────
    log_level    : Structlog log level
    log_json     : Force JSON (True) or console (False) logs; auto when unset
    config_file  : YAML file with TechSpecConfig values
    """

    model_config = SettingsConfigDict(
        env_prefix="TECHSPEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    log_json: bool | None = None

    # ── Documents ────────────────────────────────────────────────
    config_file: Path | None = Field(
        default=None,
        description="YAML file with document and conversion defaults",
    )

    def load_config(self) -> TechSpecConfig:
        """Load the TechSpecConfig named by ``config_file``, or defaults."""
        if self.config_file is None:
            return TechSpecConfig()
        return TechSpecConfig.from_yaml(self.config_file)
