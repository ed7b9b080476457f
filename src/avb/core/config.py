"""Environment configuration utilities.

Values are loaded via environment variables (or a local ``.env`` file).
They seed the output configuration of a fresh session; values persisted in
a session store take precedence once they exist.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AvbSettings(BaseSettings):
    """Top-level configuration container for the ad variations builder."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Composition defaults
    include_headings: bool = Field(alias="AVB_INCLUDE_HEADINGS", default=False)
    separator: str = Field(alias="AVB_SEPARATOR", default="\n\n")

    # Preview panel and archive safety cap
    max_for_preview: int = Field(alias="AVB_MAX_FOR_PREVIEW", default=20, ge=1)
    max_for_zip: int = Field(alias="AVB_MAX_FOR_ZIP", default=3000, ge=100)

    # Pause between dispatches of the individual-files export (ms)
    download_delay_ms: int = Field(alias="AVB_DOWNLOAD_DELAY_MS", default=5, ge=0)

    state_path: str = Field(alias="AVB_STATE_PATH", default="./var/avb/state.json")
    export_dir: str = Field(alias="AVB_EXPORT_DIR", default="./var/avb/exports")

    log_level: str = Field(alias="AVB_LOG_LEVEL", default="INFO")


__all__ = ["AvbSettings"]
