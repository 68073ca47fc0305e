# src/passlink/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

from passlink.logging import LEVELS

__all__ = [
    "AppCfg",
    "DEFAULT_BASE_URL",
    "load_env",
]

DEFAULT_BASE_URL = "http://localhost:5173/"


# ---------------------------
# Application configuration
# ---------------------------

@dataclass(frozen=True)
class AppCfg:
    """
    Runtime settings for the CLI. Password settings are not configured here;
    they come from a share URL or command options.
    """
    base_url: str = DEFAULT_BASE_URL
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AppCfg":
        return cls(
            base_url=os.getenv("PASSLINK_BASE_URL", DEFAULT_BASE_URL),
            log_level=os.getenv("PASSLINK_LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("PASSLINK_LOG_FILE") or None,
        )

    def validate(self) -> None:
        problems = []
        if self.log_level.upper() not in LEVELS:
            problems.append(f"PASSLINK_LOG_LEVEL={self.log_level!r} (expected one of {', '.join(LEVELS)})")
        parts = urlsplit(self.base_url)
        if not parts.scheme or not parts.netloc:
            problems.append(f"PASSLINK_BASE_URL={self.base_url!r} (needs scheme and host)")
        if problems:
            raise RuntimeError(f"Invalid config: {'; '.join(problems)}")


# ---------------------------
# Env helpers
# ---------------------------

def load_env(env_file: Optional[str | Path] = None) -> None:
    """
    Load environment variables from a .env file.
    - If env_file is provided, load it directly.
    - Otherwise, attempt to load from current working directory, then repo root.
    Variables already set in the environment win.
    """
    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    elif not env_file:
        # fallback: try repo root (.env next to pyproject.toml)
        repo_env = Path(__file__).resolve().parents[2] / ".env"
        if repo_env.exists():
            load_dotenv(dotenv_path=repo_env)
