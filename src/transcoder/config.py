"""Application configuration using Pydantic BaseSettings."""

import tempfile
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Transcoder configuration loaded from environment variables."""

    model_config = {
        "env_prefix": "TRANSCODER_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    # FFmpeg executable; FFMPEG_BIN_PATH is still honoured for older setups
    ffmpeg_bin_path: str = Field(
        default="ffmpeg",
        validation_alias=AliasChoices("TRANSCODER_FFMPEG_BIN_PATH", "FFMPEG_BIN_PATH"),
    )

    # Child process
    working_dir: Path = Path(tempfile.gettempdir())
    stderr_encoding: str = "utf-8"
    stdin_chunk_size: int = Field(default=64 * 1024, gt=0)

    # Seconds to let stderr drain after the process has exited
    exit_drain_timeout: float = Field(default=5.0, ge=0)


def get_settings() -> Settings:
    """Return a settings instance built from the current environment."""
    return Settings()
