# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines the exceptions that flow through core/.  There are only two
#   kinds of failure the rest of the system needs to tell apart:
#
#     ConfigurationError  → fatal, raised once at startup
#     StablesAPIError     → per-call, covers BOTH upstream non-2xx responses
#                           and transport failures (DNS, refused, bad JSON)
#
#   Argument validation failures are pydantic ValidationErrors raised by
#   core/schemas.py; the tool boundary (core/toolkit.py) turns all three
#   into error results.
# =============================================================================

from typing import Any, Optional


class StablesError(Exception):
    """Base class for every error raised by core/."""


class ConfigurationError(StablesError):
    """The process cannot start (e.g. STABLES_API_KEY is missing)."""


class StablesAPIError(StablesError):
    """A single Stables API call failed.

    Attributes:
        message: Human-readable reason, already normalized.
        status_code: HTTP status, or None when the request never got a
            usable response (network error, malformed body).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_error_message(status_code: int, reason_phrase: str, body: Any) -> str:
    """Pull the most specific human message out of an error response body.

    Priority order:
      1. body["error"]["message"]
      2. body["message"]
      3. body["error"] when it is a plain string
      4. "HTTP <status>: <reason>"

    ``body`` is whatever the JSON decoder produced, or None if the body was
    empty or unparseable.
    """
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
        if isinstance(error, str) and error:
            return error
    return f"HTTP {status_code}: {reason_phrase}"
