# =============================================================================
# core/api_keys.py  —  API Key Operations
# =============================================================================
#
#   create_api_key   POST    /api/v1/api-keys          (idempotent)
#   list_api_keys    GET     /api/v1/api-keys?pageSize&pageToken
#   get_api_key      GET     /api/v1/api-keys/{id}
#   revoke_api_key   DELETE  /api/v1/api-keys/{id}     (idempotent)
#
# SECRET HANDLING:
#   create_api_key is the only call that ever sees a plaintext key.  It is
#   returned inside CreatedApiKey (excluded from repr), rendered once, and
#   never logged or stored.
# =============================================================================

from core.client import StablesClient
from core.models import ApiKey, ApiKeyList, CreatedApiKey, Revocation, unwrap
from core.schemas import ApiKeyRef, CreateApiKeyInput, ListApiKeysInput


async def create_api_key(client: StablesClient, params: CreateApiKeyInput) -> CreatedApiKey:
    data = await client.request("POST", "/api/v1/api-keys", json=params.to_body(), idempotent=True)
    return CreatedApiKey.from_dict(data)


async def list_api_keys(client: StablesClient, params: ListApiKeysInput) -> ApiKeyList:
    data = await client.request("GET", "/api/v1/api-keys", params=params.to_query())
    return ApiKeyList.from_dict(data)


async def get_api_key(client: StablesClient, params: ApiKeyRef) -> ApiKey:
    data = await client.request("GET", f"/api/v1/api-keys/{params.api_key_id}")
    return ApiKey.from_dict(unwrap(data, "apiKey"))


async def revoke_api_key(client: StablesClient, params: ApiKeyRef) -> Revocation:
    await client.request("DELETE", f"/api/v1/api-keys/{params.api_key_id}", idempotent=True)
    return Revocation(resource_id=params.api_key_id)
