"""Environment configuration and loading for quality-hook.

Centralizes config paths and dotenv loading.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# User config directory (stores .env, logs, etc.)
USER_CONFIG_DIR = Path.home() / ".config" / "quality-hook"


def get_log_dir() -> Path:
    """Get the log directory, respecting QUALITY_HOOK_LOG_DIR env var.

    This function evaluates the env var at call time, so it respects
    values loaded from .env via load_user_env().
    """
    return Path(os.environ.get("QUALITY_HOOK_LOG_DIR", str(USER_CONFIG_DIR / "logs")))


def load_user_env() -> None:
    """Load environment from user config directory.

    Loads ${USER_CONFIG_DIR}/.env (typically ~/.config/quality-hook/.env).
    Values already present in the environment win.
    """
    load_dotenv(dotenv_path=USER_CONFIG_DIR / ".env")

