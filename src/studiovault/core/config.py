"""Configuration management for StudioVault core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# StudioVault data directory (XDG-style, defaults to ~/.studiovault)
STUDIOVAULT_DATA_DIR = Path(
    get_env("STUDIOVAULT_DATA_DIR", os.path.expanduser("~/.studiovault"))
    or os.path.expanduser("~/.studiovault")
).expanduser()

# Preferences database (last opened vault)
DATABASE_PATH = STUDIOVAULT_DATA_DIR / "studiovault.db"

# Default vault hub, created on first start
STUDIOVAULT_HUB_DIR = Path(
    get_env(
        "STUDIOVAULT_HUB_DIR",
        os.path.join(os.path.expanduser("~"), "Documents", "StudioVault"),
    )
    or os.path.join(os.path.expanduser("~"), "Documents", "StudioVault")
).expanduser()

# Documents
DOCUMENT_EXTENSIONS = (".md", ".txt")
DEFAULT_DOCUMENT_EXTENSION = ".md"
FRONTMATTER_EXTENSIONS = (".md",)
IMPORTABLE_EXTENSIONS = (".md", ".txt")
DEFAULT_DOCUMENT_STATUS = "backlog"

# Recent documents
RECENT_LIMIT = get_env_int("STUDIOVAULT_RECENT_LIMIT", 10)
RECENT_MAX_DEPTH = get_env_int("STUDIOVAULT_MAX_DEPTH", 4)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO") or "INFO"

# API Server settings
STUDIOVAULT_API_KEY = get_env("STUDIOVAULT_API_KEY")
STUDIOVAULT_HOST = get_env("STUDIOVAULT_HOST", "127.0.0.1")
STUDIOVAULT_PORT = get_env_int("STUDIOVAULT_PORT", 8430)
STUDIOVAULT_ALLOW_NO_AUTH = get_env_bool("STUDIOVAULT_ALLOW_NO_AUTH", False)
STUDIOVAULT_CORS_ORIGINS = [
    origin.strip()
    for origin in (
        get_env("STUDIOVAULT_CORS_ORIGINS", "http://localhost:5173")
        or "http://localhost:5173"
    ).split(",")
    if origin.strip()
]


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    )
    return logging.getLogger(__name__)
