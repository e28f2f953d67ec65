# =============================================================================
# core/quotes.py  —  Quote Operations
# =============================================================================
#
#   create_quote   POST  /api/v1/quotes         (idempotent)
#   get_quote      GET   /api/v1/quotes/{id}
#
# Both endpoints wrap the resource as {"quote": {...}}.  Quotes never change
# locally; their status is whatever the API reports on each read.
# =============================================================================

from core.client import StablesClient
from core.models import Quote, unwrap
from core.schemas import CreateQuoteInput, QuoteRef


async def create_quote(client: StablesClient, params: CreateQuoteInput) -> Quote:
    data = await client.request("POST", "/api/v1/quotes", json=params.to_body(), idempotent=True)
    return Quote.from_dict(unwrap(data, "quote"))


async def get_quote(client: StablesClient, params: QuoteRef) -> Quote:
    data = await client.request("GET", f"/api/v1/quotes/{params.quote_id}")
    return Quote.from_dict(unwrap(data, "quote"))
