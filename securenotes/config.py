"""Application configuration."""
from pathlib import Path
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Secure Notes"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Base64 encoded AES-256 key, must decode to exactly 32 bytes
    secret_key: str = ""

    # Storage
    data_dir: Path = Path.home() / ".securenotes"
    notes_file: str = "notes.json"
    single_instance: bool = True

    # Notes
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    preview_length: int = 10

    @model_validator(mode="after")
    def resolve_paths(self):
        """Expand ``~`` in the data directory."""
        self.data_dir = self.data_dir.expanduser()
        return self

    @property
    def notes_path(self) -> Path:
        return self.data_dir / self.notes_file

    @property
    def lock_path(self) -> Path:
        return self.data_dir / ".instance.lock"


settings = Settings()
