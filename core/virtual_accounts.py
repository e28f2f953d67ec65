# =============================================================================
# core/virtual_accounts.py  —  Virtual Account Operations
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   A virtual account is a bank-like account number that receives fiat for
#   one customer.  Its lifecycle transitions all happen upstream; this
#   module only triggers them:
#
#     create_virtual_account        POST   /api/v1/customers/{c}/virtual-accounts            (idempotent)
#     list_virtual_accounts         GET    /api/v1/customers/{c}/virtual-accounts?status&limit
#     list_all_virtual_accounts     GET    /api/v1/virtual-accounts?status&limit
#     update_virtual_account        PATCH  /api/v1/customers/{c}/virtual-accounts/{va}
#     deactivate_virtual_account    POST   .../{va}/deactivate                               (idempotent)
#     reactivate_virtual_account    POST   .../{va}/reactivate                               (idempotent)
#     get_virtual_account_history   GET    .../{va}/history?limit&event_type
#
#   Only deposit_handling_mode can be updated.  The payout destination is
#   the single "destination" field of this API version.
# =============================================================================

from core.client import StablesClient
from core.models import VirtualAccount, VirtualAccountHistory, VirtualAccountList
from core.schemas import (
    CreateVirtualAccountInput,
    ListAllVirtualAccountsInput,
    ListVirtualAccountsInput,
    UpdateVirtualAccountInput,
    VirtualAccountHistoryInput,
    VirtualAccountRef,
)


def _accounts_path(customer_id: str) -> str:
    return f"/api/v1/customers/{customer_id}/virtual-accounts"


def _account_path(params: VirtualAccountRef) -> str:
    return f"{_accounts_path(params.customer_id)}/{params.virtual_account_id}"


async def create_virtual_account(
    client: StablesClient, params: CreateVirtualAccountInput
) -> VirtualAccount:
    data = await client.request(
        "POST",
        _accounts_path(params.customer_id),
        json=params.to_body(),
        idempotent=True,
    )
    return VirtualAccount.from_dict(data)


async def list_virtual_accounts(
    client: StablesClient, params: ListVirtualAccountsInput
) -> VirtualAccountList:
    data = await client.request("GET", _accounts_path(params.customer_id), params=params.to_query())
    return VirtualAccountList.from_dict(data, customer_id=params.customer_id)


async def list_all_virtual_accounts(
    client: StablesClient, params: ListAllVirtualAccountsInput
) -> VirtualAccountList:
    data = await client.request("GET", "/api/v1/virtual-accounts", params=params.to_query())
    return VirtualAccountList.from_dict(data)


async def update_virtual_account(
    client: StablesClient, params: UpdateVirtualAccountInput
) -> VirtualAccount:
    data = await client.request("PATCH", _account_path(params), json=params.to_body())
    return VirtualAccount.from_dict(data)


async def deactivate_virtual_account(
    client: StablesClient, params: VirtualAccountRef
) -> VirtualAccount:
    data = await client.request("POST", f"{_account_path(params)}/deactivate", idempotent=True)
    return VirtualAccount.from_dict(data)


async def reactivate_virtual_account(
    client: StablesClient, params: VirtualAccountRef
) -> VirtualAccount:
    data = await client.request("POST", f"{_account_path(params)}/reactivate", idempotent=True)
    return VirtualAccount.from_dict(data)


async def get_virtual_account_history(
    client: StablesClient, params: VirtualAccountHistoryInput
) -> VirtualAccountHistory:
    data = await client.request("GET", f"{_account_path(params)}/history", params=params.to_query())
    return VirtualAccountHistory.from_dict(data, virtual_account_id=params.virtual_account_id)
