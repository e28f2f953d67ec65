# =============================================================================
# core/webhooks.py  —  Webhook Subscription Operations
# =============================================================================
#
#   create_webhook   POST    /api/v1/webhooks        (idempotent)
#   list_webhooks    GET     /api/v1/webhooks
#   delete_webhook   DELETE  /api/v1/webhooks/{id}   (idempotent)
#
# The signing secret is write-only: it goes out in the create body and the
# API never returns it.  WebhookSubscription.has_secret records locally
# whether one was sent.
# =============================================================================

from core.client import StablesClient
from core.models import Revocation, WebhookSubscription, as_object, records, unwrap
from core.schemas import CreateWebhookInput, NoInput, WebhookRef


async def create_webhook(client: StablesClient, params: CreateWebhookInput) -> WebhookSubscription:
    data = await client.request("POST", "/api/v1/webhooks", json=params.to_body(), idempotent=True)
    return WebhookSubscription.from_dict(unwrap(data, "subscription"), has_secret=bool(params.secret))


async def list_webhooks(client: StablesClient, params: NoInput) -> list[WebhookSubscription]:
    data = await client.request("GET", "/api/v1/webhooks")
    return [WebhookSubscription.from_dict(s) for s in records(as_object(data), "subscriptions")]


async def delete_webhook(client: StablesClient, params: WebhookRef) -> Revocation:
    await client.request("DELETE", f"/api/v1/webhooks/{params.webhook_id}", idempotent=True)
    return Revocation(resource_id=params.webhook_id)
