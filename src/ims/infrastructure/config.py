"""Runtime settings, read from ``IMS_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="IMS_", env_file=".env", extra="ignore")

    data_dir: Path = Path("data")
    default_location: str = "WH-DEFAULT"
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def store_path(self) -> Path:
        return self.data_dir / "ims.json"
