"""Tests for the resource operations: method, path, query, body, and parsing."""
import pytest

from conftest import body_of
from core import api_keys, customers, quotes, transfers, virtual_accounts, webhooks
from core import schemas
from core.client import IDEMPOTENCY_HEADER

MOCK_QUOTE = {
    "quoteId": "q_123",
    "from": {"currency": "USDC", "amount": "100", "network": "polygon"},
    "to": {"currency": "EUR", "amount": "91.20", "paymentMethodType": "SWIFT"},
    "exchangeRate": 0.912,
    "fees": {"totalFee": {"currency": "USDC", "amount": "1.50"}},
    "status": "QUOTE_STATUS_ACTIVE",
    "expiresAt": "2025-06-01T12:00:45Z",
}

MOCK_ACCOUNT = {
    "id": "va_1",
    "status": "activated",
    "customer_id": "c_1",
    "deposit_handling_mode": "auto_payout",
    "source_deposit_instructions": {
        "currency": "usd",
        "payment_rails": ["ach_push", "wire"],
        "bank_name": "Lead Bank",
        "bank_account_number": "900000001",
        "bank_routing_number": "101019644",
    },
    "destination": {"currency": "usdc", "payment_rail": "base", "address": "0x1234567890abcdef"},
}


def _sent(recorder):
    request = recorder.last
    return request.method, request.url.path


class TestCustomers:
    async def test_create_generates_external_id(self, client, recorder):
        recorder.add_response(json={"customerId": "c_1", "email": "a@b.com"})
        params = schemas.CreateCustomerInput(email="a@b.com", customer_type="individual")

        customer = await customers.create_customer(client, params)

        assert _sent(recorder) == ("POST", "/api/v1/customer")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        body = body_of(recorder.last)
        assert body["externalCustomerId"]
        assert body["customerType"] == "CUSTOMER_TYPE_INDIVIDUAL"
        assert customer.customer_id == "c_1"
        assert customer.verification_status == "NOT_STARTED"

    async def test_create_keeps_given_external_id(self, client, recorder):
        params = schemas.CreateCustomerInput(
            email="a@b.com", customer_type="individual", external_customer_id="crm-42",
        )
        await customers.create_customer(client, params)
        assert body_of(recorder.last)["externalCustomerId"] == "crm-42"

    async def test_get(self, client, recorder):
        recorder.add_response(json={
            "customerId": "c_1",
            "verificationLevels": [{"level": "L1", "status": "VERIFICATION_APPROVED"}],
            "entitlements": [{"name": "offramp", "status": "ACTIVE"}],
        })

        customer = await customers.get_customer(client, schemas.CustomerRef(customer_id="c_1"))

        assert _sent(recorder) == ("GET", "/api/v1/customers/c_1")
        assert customer.is_verified
        assert customer.entitlements[0].name == "offramp"

    async def test_list_tolerates_missing_collection(self, client, recorder):
        recorder.add_response(json={})
        assert await customers.list_customers(client, schemas.NoInput()) == []
        assert _sent(recorder) == ("GET", "/api/v1/customers")

    async def test_update_is_a_patch_without_idempotency_key(self, client, recorder):
        recorder.add_response(json={"customerId": "c_1", "email": "new@b.com"})
        params = schemas.UpdateCustomerInput(customer_id="c_1", email="new@b.com")

        await customers.update_customer(client, params)

        assert _sent(recorder) == ("PATCH", "/api/v1/customer/c_1")
        assert IDEMPOTENCY_HEADER not in recorder.last.headers
        assert body_of(recorder.last) == {"email": "new@b.com"}

    async def test_update_metadata(self, client, recorder):
        params = schemas.UpdateCustomerMetadataInput(customer_id="c_1", metadata={"tier": "gold"})

        update = await customers.update_customer_metadata(client, params)

        assert _sent(recorder) == ("PUT", "/api/v1/customers/c_1/metadata")
        assert body_of(recorder.last) == {"metadata": {"tier": "gold"}}
        assert update.keys == ["tier"]

    async def test_verification_link(self, client, recorder):
        recorder.add_response(json={"customerId": "c_1", "kycLink": "https://kyc.example/abc"})

        link = await customers.get_verification_link(
            client, schemas.VerificationLinkInput(customer_id="c_1"),
        )

        assert _sent(recorder) == ("POST", "/api/v1/customer/c_1/verification/link")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert link.kyc_link == "https://kyc.example/abc"


class TestQuotes:
    async def test_create_unwraps_quote(self, client, recorder):
        recorder.add_response(json={"quote": MOCK_QUOTE})
        params = schemas.CreateQuoteInput(
            from_currency="USDC", from_amount="100", from_network="polygon",
            to_currency="EUR", to_country="DE", payment_method_type="SWIFT",
        )

        quote = await quotes.create_quote(client, params)

        assert _sent(recorder) == ("POST", "/api/v1/quotes")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert quote.quote_id == "q_123"
        assert quote.destination.amount == "91.20"
        assert quote.fees.total_fee.amount == "1.50"

    async def test_get_accepts_unwrapped_quote(self, client, recorder):
        recorder.add_response(json=MOCK_QUOTE)
        quote = await quotes.get_quote(client, schemas.QuoteRef(quote_id="q_123"))
        assert _sent(recorder) == ("GET", "/api/v1/quotes/q_123")
        assert quote.status == "QUOTE_STATUS_ACTIVE"


class TestTransfers:
    async def test_create(self, client, recorder):
        recorder.add_response(json={
            "id": "t_1",
            "type": "TRANSFER_TYPE_OFFRAMP",
            "status": "PENDING",
            "collectionInstructions": {
                "walletAddress": "0xfeed", "currency": "USDC", "network": "polygon", "amount": "100",
            },
        })
        params = schemas.CreateTransferInput(customer_id="c_1", quote_id="q_1")

        transfer = await transfers.create_transfer(client, params)

        assert _sent(recorder) == ("POST", "/api/v1/transfer")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert transfer.collection_instructions.wallet_address == "0xfeed"

    async def test_get(self, client, recorder):
        recorder.add_response(json={"id": "t_1", "status": "COMPLETED"})
        transfer = await transfers.get_transfer(client, schemas.TransferRef(transfer_id="t_1"))
        assert _sent(recorder) == ("GET", "/api/v1/transfers/t_1")
        assert transfer.collection_instructions is None

    async def test_list_forwards_page_token(self, client, recorder):
        recorder.add_response(json={
            "transfers": [{"id": "t_1"}, {"id": "t_2"}],
            "page": {"nextPageToken": "next-abc", "total": 7},
        })
        params = schemas.ListTransfersInput(page_size=2, page_token="cur")

        page = await transfers.list_transfers(client, params)

        assert recorder.count == 1
        assert dict(recorder.last.url.params) == {"pageSize": "2", "pageToken": "cur"}
        assert [t.id for t in page.transfers] == ["t_1", "t_2"]
        assert page.page.next_page_token == "next-abc"
        assert page.page.total == 7

    async def test_list_without_filters_has_no_query(self, client, recorder):
        await transfers.list_transfers(client, schemas.ListTransfersInput())
        assert recorder.last.url.query == b""


class TestVirtualAccounts:
    async def test_create(self, client, recorder):
        recorder.add_response(json=MOCK_ACCOUNT)
        params = schemas.CreateVirtualAccountInput(customer_id="c_1", source_currency="usd")

        account = await virtual_accounts.create_virtual_account(client, params)

        assert _sent(recorder) == ("POST", "/api/v1/customers/c_1/virtual-accounts")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert account.deposit_instructions.bank_name == "Lead Bank"
        assert account.destination.payment_rail == "base"

    async def test_list_for_customer(self, client, recorder):
        recorder.add_response(json={"count": 1, "data": [MOCK_ACCOUNT]})
        params = schemas.ListVirtualAccountsInput(customer_id="c_1", status="activated")

        listing = await virtual_accounts.list_virtual_accounts(client, params)

        assert _sent(recorder) == ("GET", "/api/v1/customers/c_1/virtual-accounts")
        assert dict(recorder.last.url.params) == {"status": "activated"}
        assert listing.customer_id == "c_1"
        assert listing.count == 1

    async def test_list_all(self, client, recorder):
        recorder.add_response(json={"data": [MOCK_ACCOUNT, MOCK_ACCOUNT]})
        listing = await virtual_accounts.list_all_virtual_accounts(
            client, schemas.ListAllVirtualAccountsInput(limit=5),
        )
        assert _sent(recorder) == ("GET", "/api/v1/virtual-accounts")
        assert dict(recorder.last.url.params) == {"limit": "5"}
        assert listing.customer_id is None
        assert listing.count == 2

    async def test_update(self, client, recorder):
        recorder.add_response(json={**MOCK_ACCOUNT, "deposit_handling_mode": "hold"})
        params = schemas.UpdateVirtualAccountInput(
            customer_id="c_1", virtual_account_id="va_1", deposit_handling_mode="hold",
        )

        account = await virtual_accounts.update_virtual_account(client, params)

        assert _sent(recorder) == ("PATCH", "/api/v1/customers/c_1/virtual-accounts/va_1")
        assert body_of(recorder.last) == {"deposit_handling_mode": "hold"}
        assert account.deposit_handling_mode == "hold"

    @pytest.mark.parametrize(
        "operation, suffix",
        [
            (virtual_accounts.deactivate_virtual_account, "deactivate"),
            (virtual_accounts.reactivate_virtual_account, "reactivate"),
        ],
    )
    async def test_lifecycle_transitions(self, client, recorder, operation, suffix):
        params = schemas.VirtualAccountRef(customer_id="c_1", virtual_account_id="va_1")

        await operation(client, params)

        assert _sent(recorder) == ("POST", f"/api/v1/customers/c_1/virtual-accounts/va_1/{suffix}")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert recorder.last.content == b""

    async def test_history(self, client, recorder):
        recorder.add_response(json={"count": 1, "data": [
            {"id": "ev_1", "type": "funds_received", "amount": "250.00", "currency": "usd"},
        ]})
        params = schemas.VirtualAccountHistoryInput(
            customer_id="c_1", virtual_account_id="va_1", limit=10,
        )

        history = await virtual_accounts.get_virtual_account_history(client, params)

        assert _sent(recorder) == ("GET", "/api/v1/customers/c_1/virtual-accounts/va_1/history")
        assert dict(recorder.last.url.params) == {"limit": "10"}
        assert history.events[0].type == "funds_received"


class TestApiKeys:
    async def test_create_returns_secret_outside_repr(self, client, recorder):
        recorder.add_response(json={
            "apiKey": {"apiKeyId": "k_1", "name": "ci", "prefix": "sk_live_ab", "active": True},
            "plaintextKey": "sk_live_abcdef123456",
        })

        created = await api_keys.create_api_key(client, schemas.CreateApiKeyInput(name="ci"))

        assert _sent(recorder) == ("POST", "/api/v1/api-keys")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert created.plaintext_key == "sk_live_abcdef123456"
        assert "sk_live_abcdef123456" not in repr(created)

    async def test_list(self, client, recorder):
        recorder.add_response(json={"apiKeys": [{"id": "k_1", "name": "ci", "active": False}]})

        listing = await api_keys.list_api_keys(client, schemas.ListApiKeysInput(page_size=5))

        assert dict(recorder.last.url.params) == {"pageSize": "5"}
        assert listing.api_keys[0].api_key_id == "k_1"
        assert listing.api_keys[0].active is False

    async def test_get_unwraps_api_key(self, client, recorder):
        recorder.add_response(json={"apiKey": {"apiKeyId": "k_1", "name": "ci"}})
        key = await api_keys.get_api_key(client, schemas.ApiKeyRef(api_key_id="k_1"))
        assert _sent(recorder) == ("GET", "/api/v1/api-keys/k_1")
        assert key.name == "ci"

    async def test_revoke(self, client, recorder):
        revocation = await api_keys.revoke_api_key(client, schemas.ApiKeyRef(api_key_id="k_1"))
        assert _sent(recorder) == ("DELETE", "/api/v1/api-keys/k_1")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
        assert revocation.resource_id == "k_1"


class TestWebhooks:
    async def test_create_records_secret_locally(self, client, recorder):
        recorder.add_response(json={"subscription": {
            "subscriptionId": "wh_1", "name": "ops", "url": "https://example.com/hook",
            "eventTypes": ["WEBHOOK_EVENT_TYPE_ALL"], "active": True,
        }})
        params = schemas.CreateWebhookInput(
            name="ops", url="https://example.com/hook",
            event_types=["WEBHOOK_EVENT_TYPE_ALL"], secret="whsec_1",
        )

        webhook = await webhooks.create_webhook(client, params)

        assert _sent(recorder) == ("POST", "/api/v1/webhooks")
        assert body_of(recorder.last)["eventTypes"] == ["WEBHOOK_EVENT_TYPE_ALL"]
        assert webhook.subscription_id == "wh_1"
        assert webhook.has_secret

    async def test_list(self, client, recorder):
        recorder.add_response(json={"subscriptions": [{"subscriptionId": "wh_1"}]})
        subscriptions = await webhooks.list_webhooks(client, schemas.NoInput())
        assert [s.subscription_id for s in subscriptions] == ["wh_1"]

    async def test_delete(self, client, recorder):
        await webhooks.delete_webhook(client, schemas.WebhookRef(webhook_id="wh_1"))
        assert _sent(recorder) == ("DELETE", "/api/v1/webhooks/wh_1")
        assert recorder.last.headers[IDEMPOTENCY_HEADER]
