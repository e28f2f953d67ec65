# =============================================================================
# core/formatting.py  —  Tool Result Rendering
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns the models returned by the resource operations into the plain
#   text the agent reads.  Every renderer has the same signature:
#
#       render_x(result, params, now) -> str
#
#     result  the model returned by the operation
#     params  the validated input model (some renderers echo arguments)
#     now     the render-time clock, as an aware UTC datetime
#
#   Renderers are pure: same inputs, same text.  Passing `now` in is what
#   makes the "expires in N seconds" line testable.
#
# LAYOUT RULES:
#   - One "Label: value" line per field, absent optional fields are skipped
#   - A blank line between sections
#   - A closing hint telling the agent what to call next, where useful
# =============================================================================

import math
import re
from datetime import datetime, timezone
from typing import Optional

from core.models import (
    ApiKey,
    ApiKeyList,
    CollectionInstructions,
    CreatedApiKey,
    CurrencyAmount,
    Customer,
    MetadataUpdate,
    Quote,
    Revocation,
    Transfer,
    TransferPage,
    VerificationLink,
    VirtualAccount,
    VirtualAccountHistory,
    VirtualAccountList,
    WebhookSubscription,
)
from core.schemas import WEBHOOK_EVENT_TYPES

QUOTE_ACTIVE = "QUOTE_STATUS_ACTIVE"
QUOTE_EXPIRED = "QUOTE_STATUS_EXPIRED"
QUOTE_USED = "QUOTE_STATUS_USED"
QUOTE_CANCELLED = "QUOTE_STATUS_CANCELLED"

TRANSFER_STATUS_MESSAGES = {
    "PENDING": "Transfer is waiting to be processed.",
    "IN_PROGRESS": "Transfer is being processed.",
    "COMPLETED": "Transfer completed successfully!",
    "FAILED": "Transfer failed. Check with support for details.",
    "CANCELLED": "Transfer was cancelled.",
    "EXPIRED": "Transfer expired before completion.",
}

DEFAULT_KYC_LINK_TTL = "30 minutes (default)"

_FRACTION = re.compile(r"\.(\d+)")


# =============================================================================
# Small helpers
# =============================================================================
def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an API timestamp into an aware UTC datetime, or None.

    Accepts a trailing "Z" and more than six fractional digits (the API
    emits nanoseconds), neither of which datetime.fromisoformat handles
    on every supported Python.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def seconds_until(expires_at: Optional[str], now: datetime) -> Optional[int]:
    """Whole seconds from `now` until `expires_at`, clamped at zero.

    Returns None when the timestamp is missing or unparseable.
    """
    expiry = parse_timestamp(expires_at)
    if expiry is None:
        return None
    return max(0, math.floor((expiry - now).total_seconds()))


def _money(amount: Optional[CurrencyAmount]) -> str:
    if amount is None:
        return "n/a"
    return f"{amount.amount} {amount.currency}".strip()


def _lines(*parts: Optional[str]) -> str:
    """Join lines, dropping None entries (but keeping deliberate blanks)."""
    return "\n".join(p for p in parts if p is not None)


def _known(value) -> str:
    return "unknown" if value is None or value == "" else str(value)


def _opt(label: str, value: Optional[str]) -> Optional[str]:
    return f"{label}: {value}" if value else None


def _full_name(first: Optional[str], middle: Optional[str], last: Optional[str]) -> Optional[str]:
    if not first:
        return None
    return " ".join(p for p in (first, middle, last) if p)


def _transfer_type(kind: Optional[str], short: bool = False) -> str:
    if kind == "TRANSFER_TYPE_ONRAMP":
        return "On-ramp" if short else "On-ramp (Fiat to Crypto)"
    return "Off-ramp" if short else "Off-ramp (Crypto to Fiat)"


def _entitlements(customer: Customer) -> str:
    if not customer.entitlements:
        return "None"
    return ", ".join(f"{e.name}: {_known(e.status)}" for e in customer.entitlements)


# =============================================================================
# Customers
# =============================================================================
def render_customer_created(customer: Customer, params, now) -> str:
    return _lines(
        "Customer created successfully!",
        "",
        f"Customer ID: {customer.customer_id}",
        f"Email: {customer.email or params.email}",
        f"Type: {params.customer_type}",
        _opt("Name", _full_name(params.first_name, params.middle_name, params.last_name)),
        _opt("Company", params.company_name),
        _opt("Phone", params.phone),
        _opt("Nationality", params.nationality),
        f"Entitlements: {_entitlements(customer)}",
        f"Verification Status: {customer.verification_status}",
        _opt("Created", customer.created_at),
        "",
        "Next step: Use 'get_verification_link' to get a KYC verification link for this customer.",
    )


def render_customer(customer: Customer, params, now) -> str:
    can_transfer = "Yes" if customer.is_verified else "No - needs KYC verification"
    return _lines(
        "Customer Details:",
        "",
        f"Customer ID: {customer.customer_id}",
        f"Email: {customer.email or 'Not set'}",
        f"Type: {_known(customer.customer_type)}",
        _opt("Name", _full_name(customer.first_name, None, customer.last_name)),
        _opt("Company", customer.company_name),
        _opt("Phone", customer.phone),
        f"Entitlements: {_entitlements(customer)}",
        f"Verification Status: {customer.verification_status}",
        f"Can Transfer: {can_transfer}",
        _opt("Created", customer.created_at),
        _opt("Updated", customer.updated_at),
    )


def render_customer_list(customers: list[Customer], params, now) -> str:
    if not customers:
        return "No customers found. Use 'create_customer' to add your first customer."
    rows = [
        f"- {c.customer_id}: {c.email or 'No email'} ({_known(c.customer_type)}) - {c.verification_status}"
        for c in customers
    ]
    return _lines(f"Customers ({len(customers)}):", "", *rows)


def render_customer_updated(customer: Customer, params, now) -> str:
    return _lines(
        f"Customer {customer.customer_id or params.customer_id} updated successfully.",
        "",
        f"Email: {customer.email or 'Not set'}",
        _opt("Name", _full_name(customer.first_name, None, customer.last_name)),
        _opt("Updated", customer.updated_at),
    )


def render_metadata_updated(update: MetadataUpdate, params, now) -> str:
    keys = ", ".join(update.keys) if update.keys else "(none)"
    return _lines(
        f"Metadata updated for customer {update.customer_id}.",
        "",
        f"Keys set: {keys}",
    )


def render_verification_link(link: VerificationLink, params, now) -> str:
    if params.ttl_in_secs:
        ttl = f"{params.ttl_in_secs // 60} minutes"
    else:
        ttl = DEFAULT_KYC_LINK_TTL
    return _lines(
        "Verification link generated!",
        "",
        f"Customer ID: {link.customer_id or params.customer_id}",
        f"Verification Link: {link.kyc_link}",
        "",
        f"The link will expire in {ttl}.",
        "Share this link with the customer to complete their identity verification.",
    )


# =============================================================================
# Quotes
# =============================================================================
def _conversion_lines(quote: Quote) -> list[str]:
    source = f"{quote.source.amount} {quote.source.currency}"
    if quote.source.network:
        source += f" ({quote.source.network})"
    destination = f"{quote.destination.amount} {quote.destination.currency}"
    if quote.destination.payment_method_type:
        destination += f" via {quote.destination.payment_method_type}"
    return ["Converting:", f"  From: {source}", f"  To: {destination}"]


def quote_status_message(quote: Quote, now: datetime) -> str:
    """Explain where a quote stands.

    The status reported by the API wins.  The local clock is only consulted
    when the API did not send a recognised status.
    """
    if quote.status == QUOTE_USED:
        return "This quote has already been used to create a transfer."
    if quote.status == QUOTE_CANCELLED:
        return "This quote has been cancelled."
    if quote.status == QUOTE_EXPIRED:
        return "This quote has expired. Create a new quote to proceed."

    remaining = seconds_until(quote.expires_at, now)
    if quote.status != QUOTE_ACTIVE and remaining == 0:
        return "This quote has expired. Create a new quote to proceed."
    if remaining is None:
        return "This quote is active."
    return f"This quote is active and expires in {remaining} seconds."


def render_quote_created(quote: Quote, params, now) -> str:
    fees = quote.fees
    fee_lines = [f"Total Fees: {_money(fees.total_fee)}"]
    for label, amount in (
        ("FX Fee", fees.fx_fee),
        ("Platform Fee", fees.platform_fee),
        ("Payment Method Fee", fees.payment_method_fee),
        ("Network Fee", fees.network_fee),
        ("Integrator Fee", fees.integrator_fee),
    ):
        if amount is not None:
            fee_lines.append(f"  {label}: {_money(amount)}")

    remaining = seconds_until(quote.expires_at, now)
    return _lines(
        "Quote created successfully!",
        "",
        f"Quote ID: {quote.quote_id}",
        f"Status: {_known(quote.status)}",
        "",
        *_conversion_lines(quote),
        "",
        f"Exchange Rate: {_known(quote.exchange_rate)}",
        *fee_lines,
        "",
        f"Expires in: {remaining if remaining is not None else 'unknown'} seconds",
        f"Expires at: {_known(quote.expires_at)}",
        "",
        "To execute this quote, use 'create_transfer' with this quote_id and include "
        "bank details for off-ramp transfers.",
    )


def render_quote(quote: Quote, params, now) -> str:
    return _lines(
        "Quote Details:",
        "",
        f"Quote ID: {quote.quote_id}",
        f"Status: {_known(quote.status)}",
        "",
        *_conversion_lines(quote),
        "",
        f"Exchange Rate: {_known(quote.exchange_rate)}",
        f"Total Fees: {_money(quote.fees.total_fee)}",
        "",
        _opt("Created", quote.created_at),
        _opt("Expires", quote.expires_at),
        "",
        quote_status_message(quote, now),
    )


# =============================================================================
# Transfers
# =============================================================================
def _collection_lines(ci: Optional[CollectionInstructions], heading: str) -> list[str]:
    if ci is None:
        return []
    return [
        "",
        heading,
        f"  Wallet Address: {ci.wallet_address}",
        f"  Currency: {ci.currency}",
        f"  Network: {ci.network}",
        f"  Amount: {ci.amount}",
    ]


def render_transfer_created(transfer: Transfer, params, now) -> str:
    collection = _collection_lines(
        transfer.collection_instructions, "Collection Instructions (share with customer):"
    )
    if collection:
        collection += [
            "",
            "The customer must send the specified amount to this wallet address. "
            "Once received, Stables will process the payout to the bank account.",
        ]
    return _lines(
        "Transfer created successfully!",
        "",
        f"Transfer ID: {transfer.id}",
        f"Type: {_transfer_type(transfer.type)}",
        f"Status: {_known(transfer.status)}",
        f"Customer ID: {transfer.customer_id or params.customer_id}",
        f"Quote ID: {transfer.quote_id or params.quote_id}",
        "",
        _opt("Created", transfer.created_at),
        *collection,
        "",
        "Use 'get_transfer' to check the status.",
    )


def render_transfer(transfer: Transfer, params, now) -> str:
    status_message = TRANSFER_STATUS_MESSAGES.get(transfer.status or "")
    return _lines(
        "Transfer Details:",
        "",
        f"Transfer ID: {transfer.id}",
        f"Type: {_transfer_type(transfer.type)}",
        f"Status: {_known(transfer.status)}",
        f"Customer ID: {_known(transfer.customer_id)}",
        f"Quote ID: {_known(transfer.quote_id)}",
        "",
        _opt("Created", transfer.created_at),
        _opt("Updated", transfer.updated_at),
        *_collection_lines(transfer.collection_instructions, "Collection Instructions:"),
        *(["", status_message] if status_message else []),
    )


def render_transfer_list(page: TransferPage, params, now) -> str:
    if not page.transfers:
        return "No transfers found matching your criteria."
    rows = [
        f"- {t.id}: {_transfer_type(t.type, short=True)} - {_known(t.status)} (Customer: {_known(t.customer_id)})"
        for t in page.transfers
    ]
    total = page.page.total if page.page.total is not None else len(page.transfers)
    more = None
    if page.page.next_page_token:
        more = f'\nMore results available. Use page_token: "{page.page.next_page_token}"'
    return _lines(f"Transfers ({len(page.transfers)} of {total}):", "", *rows, more)


# =============================================================================
# Virtual accounts
# =============================================================================
def _deposit_lines(account: VirtualAccount) -> list[str]:
    di = account.deposit_instructions
    lines = [f"Currency: {di.currency}", f"Payment Rails: {', '.join(di.payment_rails)}"]
    for label, value in (
        ("Bank", di.bank_name),
        ("Account Number", di.bank_account_number),
        ("Routing Number", di.bank_routing_number),
        ("IBAN", di.iban),
        ("BIC", di.bic),
        ("CLABE", di.clabe),
        ("PIX Key", di.pix_key),
        ("Account Holder", di.account_holder_name),
    ):
        if value:
            lines.append(f"{label}: {value}")
    return lines


def _mask(address: str, keep: int = 10) -> str:
    return address if len(address) <= keep else f"{address[:keep]}..."


def render_virtual_account_created(account: VirtualAccount, params, now) -> str:
    if account.destination:
        destination = [
            f"Payout Address: {account.destination.address}",
            f"Payment Rail: {account.destination.payment_rail}",
            f"Currency: {account.destination.currency}",
        ]
    else:
        destination = ["No payout destination configured"]
    balance = None
    if account.held_balance:
        balance = f"Held Balance: {account.held_balance.amount} {account.held_balance.currency}"
    return _lines(
        "Virtual Account created successfully!",
        "",
        f"Account ID: {account.id}",
        f"Status: {_known(account.status)}",
        f"Customer ID: {account.customer_id or params.customer_id}",
        f"Deposit Mode: {_known(account.deposit_handling_mode)}",
        "",
        "Deposit Instructions:",
        *_deposit_lines(account),
        "",
        "Payout Destination:",
        *destination,
        balance,
        _opt("Created", account.created_at),
        "",
        "Share the deposit instructions with the customer to receive funds.",
    )


def _account_row(account: VirtualAccount, show_owner: bool) -> str:
    if account.destination:
        payout = f"Payout: {_mask(account.destination.address)} ({account.destination.payment_rail})"
    else:
        payout = "No payout destination"
    balance = ""
    if account.held_balance:
        balance = f" | Balance: {account.held_balance.amount} {account.held_balance.currency}"
    owner = f" [Customer: {account.customer_id}]" if show_owner and account.customer_id else ""
    status = _known(account.status)
    return f"- {account.id}: {account.deposit_instructions.currency} ({status}) - {payout}{balance}{owner}"


def render_virtual_account_list(listing: VirtualAccountList, params, now) -> str:
    if listing.customer_id is not None:
        if not listing.accounts:
            return (
                f"No virtual accounts found for customer {listing.customer_id}. "
                "Use 'create_virtual_account' to create one."
            )
        heading = f"Virtual Accounts for Customer {listing.customer_id} ({listing.count} total):"
    else:
        if not listing.accounts:
            return "No virtual accounts found."
        heading = f"Virtual Accounts ({listing.count} total):"
    show_owner = listing.customer_id is None
    return _lines(heading, "", *(_account_row(a, show_owner) for a in listing.accounts))


def render_virtual_account_updated(account: VirtualAccount, params, now) -> str:
    return _lines(
        f"Virtual account {account.id or params.virtual_account_id} updated.",
        f"Deposit Mode: {_known(account.deposit_handling_mode)}",
        f"Status: {_known(account.status)}",
    )


def render_virtual_account_deactivated(account: VirtualAccount, params, now) -> str:
    return (
        f"Virtual account {account.id or params.virtual_account_id} has been deactivated. "
        "No new deposits will be accepted."
    )


def render_virtual_account_reactivated(account: VirtualAccount, params, now) -> str:
    return (
        f"Virtual account {account.id or params.virtual_account_id} has been reactivated. "
        f"Status: {_known(account.status)}"
    )


def render_virtual_account_history(history: VirtualAccountHistory, params, now) -> str:
    if not history.events:
        return f"No activity found for virtual account {history.virtual_account_id}."
    rows = []
    for event in history.events:
        amount = f"{event.amount} {event.currency or ''}".strip() if event.amount else "unknown amount"
        row = f"- {_known(event.created_at)}: {_known(event.type)} - {amount}"
        if event.deposit_id:
            row += f" (Deposit: {event.deposit_id})"
        rows.append(row)
    return _lines(f"Virtual Account History ({history.count} events):", "", *rows)


# =============================================================================
# API keys
# =============================================================================
def render_api_key_created(created: CreatedApiKey, params, now) -> str:
    key = created.api_key
    return _lines(
        "API Key created successfully!",
        "",
        f"Key ID: {key.api_key_id}",
        f"Name: {key.name}",
        f"Prefix: {key.prefix}",
        f"Active: {'Yes' if key.active else 'No'}",
        _opt("Created", key.created_at),
        "",
        f"SECRET KEY: {created.plaintext_key}",
        "",
        "IMPORTANT: Save the secret key now! It will not be shown again.",
    )


def render_api_key_list(listing: ApiKeyList, params, now) -> str:
    if not listing.api_keys:
        return "No API keys found. Use 'create_api_key' to create one."
    rows = [
        f'- {k.api_key_id}: "{k.name}" ({k.prefix}...) - '
        f"{'Active' if k.active else 'Revoked'} - Created: {_known(k.created_at)}"
        for k in listing.api_keys
    ]
    more = None
    if listing.next_page_token:
        more = f'\nMore results available. Use page_token: "{listing.next_page_token}"'
    return _lines(f"API Keys ({len(listing.api_keys)}):", "", *rows, more)


def render_api_key(key: ApiKey, params, now) -> str:
    return _lines(
        "API Key Details:",
        "",
        f"Key ID: {key.api_key_id or params.api_key_id}",
        f"Name: {key.name}",
        f"Prefix: {key.prefix}",
        f"Active: {'Yes' if key.active else 'No'}",
        _opt("Created", key.created_at),
        _opt("Updated", key.updated_at),
        f"Last Used: {key.last_used_at}" if key.last_used_at else "Never used",
    )


def render_api_key_revoked(revocation: Revocation, params, now) -> str:
    return (
        f"API key {revocation.resource_id} has been revoked successfully. "
        "This key can no longer be used to access the API."
    )


# =============================================================================
# Webhooks
# =============================================================================
def render_webhook_created(webhook: WebhookSubscription, params, now) -> str:
    if webhook.has_secret:
        secret = "Signing Secret: Configured (verify via X-Webhook-Signature header)"
    else:
        secret = "Signing Secret: Not set"
    return _lines(
        "Webhook created successfully!",
        "",
        f"Subscription ID: {webhook.subscription_id}",
        f"Name: {webhook.name}",
        f"URL: {webhook.url}",
        f"Event Types: {', '.join(webhook.event_types)}",
        f"Active: {'Yes' if webhook.active else 'No'}",
        secret,
        _opt("Created", webhook.created_at),
        "",
        "Your endpoint will now receive POST requests when these events occur.",
        "Tip: Return 200 quickly and process events asynchronously. Use eventId for idempotency.",
    )


def render_webhook_list(webhooks: list[WebhookSubscription], params, now) -> str:
    if not webhooks:
        return _lines(
            "No webhooks configured. Use 'create_webhook' to subscribe to events.",
            "",
            "Available event types:",
            *(f"- {name}" for name in WEBHOOK_EVENT_TYPES),
        )
    blocks = [
        f'- {w.subscription_id}: "{w.name}" -> {w.url} ({"Active" if w.active else "Inactive"})\n'
        f"  Events: {', '.join(w.event_types)}"
        for w in webhooks
    ]
    return f"Webhooks ({len(webhooks)}):\n\n" + "\n\n".join(blocks)


def render_webhook_deleted(revocation: Revocation, params, now) -> str:
    return (
        f"Webhook {revocation.resource_id} has been deleted. "
        "You will no longer receive events at this endpoint."
    )
