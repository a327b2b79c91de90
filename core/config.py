# =============================================================================
# core/config.py  —  Process-wide Settings
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the environment ONCE at startup and freezes it into a Settings
#   value.  The client and dispatcher receive that value explicitly; nothing
#   below main.py reads os.environ.
#
# ENVIRONMENT VARIABLES:
#   LCONTEXT_API_KEY    required: sent as X-API-Key on every request
#   LCONTEXT_API_URL    optional: backend origin (default https://lcontext.com)
#   LCONTEXT_TIMEOUT    optional: per-request timeout in seconds (default 30)
#   LCONTEXT_LOG_LEVEL  optional: stderr log level (default INFO)
#
#   A .env file in the working directory is honoured via python-dotenv.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.errors import ConfigError

DEFAULT_API_URL = "https://lcontext.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration shared by every tool call."""

    api_key: str
    base_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests pass a dict).
            When omitted, a local .env file is loaded first.

    Raises:
        ConfigError: LCONTEXT_API_KEY is missing, or LCONTEXT_TIMEOUT is
            not a positive number.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    api_key = (environ.get("LCONTEXT_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("LCONTEXT_API_KEY environment variable is required")

    base_url = (environ.get("LCONTEXT_API_URL") or DEFAULT_API_URL).strip().rstrip("/")

    raw_timeout = environ.get("LCONTEXT_TIMEOUT")
    timeout = DEFAULT_TIMEOUT_SECONDS
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"LCONTEXT_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigError(f"LCONTEXT_TIMEOUT must be positive, got {raw_timeout!r}")

    log_level = (environ.get("LCONTEXT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()

    return Settings(
        api_key=api_key,
        base_url=base_url,
        timeout_seconds=timeout,
        log_level=log_level,
    )
