"""
Configuration

Read from the environment after loading an optional .env file.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from analytics_ai.errors import ConfigError
from analytics_ai.services.gemini_client import DEFAULT_ENDPOINT

DEFAULT_PORT = 8081


@dataclass(frozen=True)
class Settings:
    api_key: str
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    gemini_endpoint: str = DEFAULT_ENDPOINT
    upload_dir: str = "uploads"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv()

        api_key = os.getenv("GEMINI_API_KEY", "").strip()
        if not api_key:
            raise ConfigError("GEMINI_API_KEY environment variable is required")

        port_raw = os.getenv("PORT") or str(DEFAULT_PORT)
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigError(f"PORT must be an integer, got {port_raw!r}") from None

        return cls(
            api_key=api_key,
            port=port,
            host=os.getenv("HOST") or "0.0.0.0",
            gemini_endpoint=os.getenv("GEMINI_ENDPOINT") or DEFAULT_ENDPOINT,
            upload_dir=os.getenv("UPLOAD_DIR") or "uploads",
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )
