"""Application configuration, read from the environment."""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
import os


DEFAULT_HOME = Path.home() / ".pictac"


def _default_database_url() -> str:
    return f"sqlite:///{DEFAULT_HOME / 'matches.db'}"


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    database_url: str = field(default_factory=_default_database_url)
    prefs_path: Path = DEFAULT_HOME / "prefs.json"
    giphy_api_key: str = ""
    giphy_timeout: float = 10.0
    allowed_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            env=os.getenv("PICTAC_ENV", "development"),
            database_url=os.getenv("PICTAC_DATABASE_URL") or _default_database_url(),
            prefs_path=Path(
                os.getenv("PICTAC_PREFS_PATH", str(DEFAULT_HOME / "prefs.json"))
            ).expanduser(),
            giphy_api_key=os.getenv("GIPHY_API_KEY", ""),
            giphy_timeout=float(os.getenv("GIPHY_TIMEOUT", "10")),
            allowed_origins=tuple(os.getenv("ALLOWED_ORIGINS", "*").split(",")),
            log_level=os.getenv("PICTAC_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
