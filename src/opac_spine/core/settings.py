"""Environment-driven settings for opac-spine.

``OpacSettings`` tells the process-wide configuration store where the
catalogue definition lives. Values come from ``OPAC_*`` environment
variables or a ``.env`` file.

Examples:
    >>> from opac_spine.core.settings import OpacSettings
    >>> OpacSettings(config_dir="/etc/kitodo", config_file="opac.xml").config_path
    PosixPath('/etc/kitodo/opac.xml')

Environment variables:
    OPAC_CONFIG_DIR          directory holding the catalogue definition
    OPAC_CONFIG_FILE         file name (``.yaml``, ``.yml`` or ``.xml``)
    OPAC_FALLBACK_TO_EMPTY   load an empty definition when parsing fails
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpacSettings(BaseSettings):
    """Settings for the catalogue configuration store.

    Fields
    ──────
    config_dir        : Directory containing the catalogue definition
    config_file       : Name of the definition file inside ``config_dir``
    fallback_to_empty : Legacy behaviour, swallow parse failures into an
                        empty definition (logged as an error)
    """

    model_config = SettingsConfigDict(
        env_prefix="OPAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_dir: Path = Field(
        default=Path("config"),
        description="Directory containing the catalogue definition",
    )
    config_file: str = "opac.yaml"
    fallback_to_empty: bool = False

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.config_file


@lru_cache
def get_settings() -> OpacSettings:
    """Return the cached process-wide settings."""
    return OpacSettings()
