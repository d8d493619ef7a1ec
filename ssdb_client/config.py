"""
Client configuration management
"""
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings"""

    # Server address
    host: str = "127.0.0.1"
    port: int = 8888

    # Socket behaviour
    connect_timeout_sec: Optional[float] = None
    read_timeout_sec: Optional[float] = None  # None blocks until data or close
    read_chunk_size: int = 8192

    # Text values
    encoding: str = "utf-8"

    # Logging
    log_dir: Optional[Path] = None
    log_level: str = "INFO"

    @field_validator("read_chunk_size")
    @classmethod
    def _chunk_size_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("read_chunk_size must be positive")
        return value

    class Config:
        env_prefix = "SSDB_"
        env_file = ".env"


settings = Settings()
