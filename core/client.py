# =============================================================================
# core/client.py  —  Stables HTTP Client Wrapper
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Owns the ONE place where the system talks to the network.  Every
#   resource operation in core/ ends up calling StablesClient.request().
#
# THE CONTRACT:
#   request(method, path, params=..., json=..., idempotent=...)
#     → performs exactly one HTTP call against config.base_url
#     → attaches "Authorization: Bearer <key>"
#     → attaches "Content-Type: application/json" ONLY when a body is sent
#     → attaches a fresh "idempotency-key" when idempotent=True
#     → returns the parsed JSON body on 2xx ({} for an empty body)
#     → raises StablesAPIError for anything else
#
#   There is no retry loop.  A new idempotency key is generated on every
#   call, so two identical invocations are two distinct requests.
#
# CONCURRENCY:
#   One httpx.AsyncClient is shared by all in-flight tool calls.  It holds
#   no state that affects correctness; the config it was built from is
#   frozen.
# =============================================================================

import json
import logging
import uuid
from typing import Any, Optional

import httpx

from core.config import StablesConfig
from core.errors import StablesAPIError, extract_error_message

logger = logging.getLogger(__name__)

USER_AGENT = "stables-mcp-server/1.0.0"
IDEMPOTENCY_HEADER = "idempotency-key"


def new_idempotency_key() -> str:
    """Return a fresh random idempotency key (UUID4)."""
    return str(uuid.uuid4())


def build_query(**params: Any) -> dict[str, Any]:
    """Keep only the query parameters the caller actually supplied.

    None means "not supplied" and is dropped.  Every other value, including
    0 and False, is kept exactly once.
    """
    return {name: value for name, value in params.items() if value is not None}


class StablesClient:
    """Async client for the Stables REST API.

    Args:
        config: Connection settings built by core.config.load_config().
        transport: Optional httpx transport.  Tests pass an
            httpx.MockTransport here; production leaves it as None.
    """

    def __init__(self, config: StablesConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                headers={
                    "Authorization": f"Bearer {self._config.api_key}",
                    "User-Agent": USER_AGENT,
                },
                transport=self._transport,
            )
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        idempotent: bool = False,
    ) -> Any:
        """Perform one API call and return the decoded JSON body.

        Raises:
            StablesAPIError: on a non-2xx status, a transport failure, or
                a 2xx response whose body is not valid JSON.
        """
        headers: dict[str, str] = {}
        content: Optional[bytes] = None
        if json is not None:
            headers["Content-Type"] = "application/json"
            content = _encode_body(json)
        if idempotent:
            headers[IDEMPOTENCY_HEADER] = new_idempotency_key()

        logger.debug("%s %s", method, path)
        try:
            response = await self._get_client().request(
                method,
                path,
                params=params or None,
                content=content,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc.__class__.__name__)
            raise StablesAPIError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            message = extract_error_message(
                response.status_code,
                response.reason_phrase,
                _decode_or_none(response),
            )
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise StablesAPIError(message, status_code=response.status_code)

        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise StablesAPIError(
                f"Invalid JSON in response from {method} {path}",
                status_code=response.status_code,
            ) from exc

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "StablesClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def _encode_body(body: Any) -> bytes:
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


def _decode_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
