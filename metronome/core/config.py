from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DB_NAME = "tasks.db"


class Settings(BaseSettings):
    APP_NAME: str = "Metronome"

    # Storage
    DATA_DIR: Path = Path.home() / ".metronome"
    DATABASE_URL: str = ""  # empty -> sqlite file inside DATA_DIR

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[Path] = None

    model_config = SettingsConfigDict(env_prefix="METRONOME_", env_file=".env", extra="ignore")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.DATA_DIR.expanduser() / DB_NAME}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
