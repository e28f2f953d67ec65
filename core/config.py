# =============================================================================
# core/config.py  —  Process Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the two settings the server needs from the environment, once, at
#   startup:
#
#     STABLES_API_KEY  (required)  Bearer credential for the Stables API
#     STABLES_API_URL  (optional)  Base URL, defaults to the sandbox
#
#   The result is a frozen dataclass that gets passed into StablesClient.
#   Nothing reads os.environ after this point.
#
#   .env files are loaded by the entry points (main.py, tools/mcp_server.py)
#   with python-dotenv BEFORE load_config() runs.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from core.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.sandbox.stables.money"

API_KEY_ENV = "STABLES_API_KEY"
BASE_URL_ENV = "STABLES_API_URL"


@dataclass(frozen=True)
class StablesConfig:
    """Immutable connection settings for one server process."""

    api_key: str = field(repr=False)     # never shows up in logs or tracebacks
    base_url: str = DEFAULT_BASE_URL


def load_config(environ: Optional[Mapping[str, str]] = None) -> StablesConfig:
    """Build a StablesConfig from environment variables.

    Args:
        environ: Mapping to read from.  Defaults to os.environ; tests pass
            a plain dict.

    Raises:
        ConfigurationError: if STABLES_API_KEY is missing or blank.
    """
    env = os.environ if environ is None else environ

    api_key = (env.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigurationError(f"{API_KEY_ENV} environment variable is required")

    base_url = (env.get(BASE_URL_ENV) or "").strip() or DEFAULT_BASE_URL
    return StablesConfig(api_key=api_key, base_url=base_url.rstrip("/"))
