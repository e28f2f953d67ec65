# =============================================================================
# core/transfers.py  —  Transfer Operations
# =============================================================================
#
#   create_transfer   POST  /api/v1/transfer          (idempotent)
#   get_transfer      GET   /api/v1/transfers/{id}
#   list_transfers    GET   /api/v1/transfers?status&type&customerId&pageSize&pageToken
#
# A transfer executes exactly one quote.  For off-ramps the bank account is
# sent as paymentMethod.bankTransfer, and the response carries the
# collection instructions (where the customer sends the crypto).
#
# list_transfers returns ONE page.  The nextPageToken is handed back to the
# agent as-is; it decides whether to ask for the next page.
# =============================================================================

from core.client import StablesClient
from core.models import Transfer, TransferPage
from core.schemas import CreateTransferInput, ListTransfersInput, TransferRef


async def create_transfer(client: StablesClient, params: CreateTransferInput) -> Transfer:
    data = await client.request("POST", "/api/v1/transfer", json=params.to_body(), idempotent=True)
    return Transfer.from_dict(data)


async def get_transfer(client: StablesClient, params: TransferRef) -> Transfer:
    data = await client.request("GET", f"/api/v1/transfers/{params.transfer_id}")
    return Transfer.from_dict(data)


async def list_transfers(client: StablesClient, params: ListTransfersInput) -> TransferPage:
    data = await client.request("GET", "/api/v1/transfers", params=params.to_query())
    return TransferPage.from_dict(data)
