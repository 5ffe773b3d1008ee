from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, PORT). DATABASE_PATH is accepted as an alias for db_path.
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "Trip Tally"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "triptally.sqlite3"
    db_path: Optional[Path] = Field(
        default=None, validation_alias=AliasChoices("db_path", "database_path")
    )  # derived if not provided

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
