"""
Configuration management for the Random Dish Picker.

This module centralizes environment variable loading from the .env file at the
project root. It is imported early in api/main.py so .env is loaded before any
other code reads environment variables.

In production .env will not exist; load_dotenv() is safe to call and will no-op,
and platform environment variables are used instead.

Environment Variables:
- RAKUTEN_APP_ID: Required, Rakuten application id
- RAKUTEN_CATEGORY_LIST_URL: Optional, CategoryList endpoint override
- RAKUTEN_CATEGORY_RANKING_URL: Optional, CategoryRanking endpoint override
- RAKUTEN_REQUEST_INTERVAL_SECONDS: Optional, pause between category list calls (default 1.5)
- RAKUTEN_TIMEOUT_SECONDS: Optional, outbound HTTP timeout (default 10)
- LOG_LEVEL: Optional, logging level name (default INFO)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from dishpicker.categories import REQUEST_INTERVAL_SECONDS
from dishpicker.connectors.rakuten_connector import (
    DEFAULT_CATEGORY_LIST_URL,
    DEFAULT_CATEGORY_RANKING_URL,
    DEFAULT_TIMEOUT_SECONDS,
)
from dishpicker.utils.env import get_float_env

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    Safe to call multiple times. Existing environment variables take precedence
    over values in .env (override=False).
    """
    # api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


class RakutenConfig:
    """Configuration for the Rakuten Recipe API connector."""

    @staticmethod
    def get_application_id() -> Optional[str]:
        """
        Get the Rakuten application id from environment.

        Returns:
            Application id string or None if not set

        Note:
            This does not raise an error - see validate_required_config().
        """
        return os.getenv("RAKUTEN_APP_ID") or None

    @staticmethod
    def get_category_list_url() -> str:
        return os.getenv("RAKUTEN_CATEGORY_LIST_URL", DEFAULT_CATEGORY_LIST_URL)

    @staticmethod
    def get_category_ranking_url() -> str:
        return os.getenv("RAKUTEN_CATEGORY_RANKING_URL", DEFAULT_CATEGORY_RANKING_URL)

    @staticmethod
    def get_request_interval() -> float:
        """
        Get the pause between category list calls in seconds.

        Returns:
            Interval in seconds (default: 1.5, the upstream allows 1 request/second)
        """
        return get_float_env("RAKUTEN_REQUEST_INTERVAL_SECONDS", REQUEST_INTERVAL_SECONDS)

    @staticmethod
    def get_timeout() -> float:
        """Get the outbound HTTP timeout in seconds (default: 10)."""
        return get_float_env("RAKUTEN_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)


def get_log_level() -> int:
    """Resolve LOG_LEVEL to a logging level, falling back to INFO for unknown names."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Configure root logging once (no-op if handlers are already installed)."""
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)


def validate_required_config() -> None:
    """
    Validate that all required environment variables are set.

    Raises:
        RuntimeError: If RAKUTEN_APP_ID is missing
    """
    if not RakutenConfig.get_application_id():
        raise RuntimeError(
            "Missing required environment variables:\n"
            "  - RAKUTEN_APP_ID (Rakuten application id)\n\n"
            "Please create a .env file at the project root with this variable."
        )
