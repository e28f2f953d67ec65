# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes every Stables operation as an MCP tool.  Each tool is a thin
#   wrapper: it collects its typed arguments and hands them to
#   core.toolkit.invoke(), which validates, calls the API, and renders text.
#
# HOW IT WORKS (the flow):
#   1. The agent host decides it needs to act (e.g., price a payout)
#   2. It calls a tool by name via MCP (e.g., "create_quote")
#   3. FastMCP routes the call to the matching function below
#   4. invoke() validates → makes ONE HTTP request → renders the result
#   5. The host receives text, or a ToolError flagged as failed
#
# TOOL NAMING CONVENTIONS:
#   - get_* / list_*          → read-only
#   - create_* / update_*     → writes; every POST/PUT carries a fresh
#                               idempotency key (PATCH updates do not)
#   - deactivate_* / reactivate_* / revoke_* / delete_*
#                             → state changes, also idempotency-keyed
#   Nothing is retried.  A failed write is reported, never resent.
#
# RUNNING THIS SERVER:
#     a) Standalone:   python -m tools.mcp_server
#     b) From the ADK agent via stdio transport (agent/payments_agent.py)
#   STABLES_API_KEY must be set (a .env file in the working directory works).
# =============================================================================

import logging
import sys
from typing import Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

# --- Import core logic ---
# The tools layer depends on core/ and nothing else.
from core.client import StablesClient
from core.config import load_config
from core.errors import ConfigurationError
from core.schemas import (
    CustomerType,
    DepositHandlingMode,
    PaymentMethodType,
    PaymentRail,
    QuoteNetwork,
    Stablecoin,
    TransferStatus,
    TransferType,
    VirtualAccountEventType,
    VirtualAccountStatus,
    compact,
)
from core.toolkit import TOOL_DEFINITIONS, invoke

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the host over STDOUT.
# A log line on stdout would corrupt the MCP JSON stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for rendered responses
#     - YELLOW for status (failures, suppressed output)
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"

_REDACTED_ARGS = {"secret"}

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(
        f"{k}={'***' if k in _REDACTED_ARGS else repr(v)}" for k, v in params.items()
    )
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the rendered response on one line in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {' | '.join(text.splitlines())}{_RESET}")
    return text


# =============================================================================
# Server factory
# =============================================================================
# The client is injected, so tests can build a server over a mocked
# transport and the process entry point builds one over the real API.
# =============================================================================
def build_server(client: StablesClient) -> FastMCP:
    """Create the FastMCP server with every Stables tool registered."""

    mcp = FastMCP("stables-mcp-server")

    async def run_tool(tool_name: str, **arguments) -> str:
        arguments = compact(**arguments)
        _log_request(tool_name, **arguments)
        result = await invoke(TOOL_DEFINITIONS[tool_name], client, arguments)
        if result.is_error:
            _log_status(result.text)
            raise ToolError(result.text)
        if result.sensitive:
            _log_status(f"{tool_name} response contains a secret; not logged")
            return result.text
        return _log_response(tool_name, result.text)

    # =========================================================================
    # CUSTOMERS
    # =========================================================================
    @mcp.tool()
    async def create_customer(
        email: str,
        customer_type: CustomerType,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        middle_name: Optional[str] = None,
        company_name: Optional[str] = None,
        external_customer_id: Optional[str] = None,
        phone: Optional[str] = None,
        dob: Optional[str] = None,
        nationality: Optional[str] = None,
        entitlements: Optional[list[str]] = None,
        address_line1: Optional[str] = None,
        address_line2: Optional[str] = None,
        address_city: Optional[str] = None,
        address_state: Optional[str] = None,
        address_postal_code: Optional[str] = None,
        address_country: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Create a new customer (an individual or a business) for payments.

        WHEN TO CALL THIS: Before any quote, transfer or virtual account is
        created for someone new.  A customer must pass KYC/KYB verification
        before they can transact; call get_verification_link afterwards.

        Args:
            email: Customer email address.
            customer_type: "individual" or "business".
            first_name / last_name / middle_name: For individuals.
            company_name: For businesses.
            external_customer_id: Your own id for this customer.  A random
                one is generated if omitted.
            phone: Phone number in international format.
            dob: Date of birth, YYYY-MM-DD.
            nationality: ISO country code.
            entitlements: Payment capabilities to request.
            address_line1 ... address_country: Postal address.  Sent only
                when address_line1 is given.
            metadata: Free-form string key/value pairs.

        Returns:
            Text with the new customer id and its verification status.
        """
        return await run_tool(
            "create_customer",
            email=email, customer_type=customer_type, first_name=first_name,
            last_name=last_name, middle_name=middle_name, company_name=company_name,
            external_customer_id=external_customer_id, phone=phone, dob=dob,
            nationality=nationality, entitlements=entitlements,
            address_line1=address_line1, address_line2=address_line2,
            address_city=address_city, address_state=address_state,
            address_postal_code=address_postal_code, address_country=address_country,
            metadata=metadata,
        )

    @mcp.tool()
    async def get_customer(customer_id: str) -> str:
        """Get a customer's details, verification status and entitlements."""
        return await run_tool("get_customer", customer_id=customer_id)

    @mcp.tool()
    async def list_customers() -> str:
        """List all customers of this account with their verification status."""
        return await run_tool("list_customers")

    @mcp.tool()
    async def update_customer(
        customer_id: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        entitlements: Optional[list[str]] = None,
    ) -> str:
        """Update a customer's contact details or entitlements.

        Only the fields you pass are changed.
        """
        return await run_tool(
            "update_customer",
            customer_id=customer_id, email=email, phone=phone,
            first_name=first_name, last_name=last_name, entitlements=entitlements,
        )

    @mcp.tool()
    async def update_customer_metadata(customer_id: str, metadata: dict[str, str]) -> str:
        """Replace a customer's metadata with the given string key/value pairs."""
        return await run_tool("update_customer_metadata", customer_id=customer_id, metadata=metadata)

    @mcp.tool()
    async def get_verification_link(
        customer_id: str,
        ttl_in_secs: Optional[int] = None,
        success_url: Optional[str] = None,
        reject_url: Optional[str] = None,
    ) -> str:
        """Generate a KYC/KYB verification link to send to the customer.

        WHEN TO CALL THIS: Right after create_customer, or whenever a
        customer's status is not VERIFICATION_APPROVED.

        Args:
            customer_id: The customer to verify.
            ttl_in_secs: How long the link stays valid (default 30 minutes).
            success_url / reject_url: Where to send the customer afterwards.
        """
        return await run_tool(
            "get_verification_link",
            customer_id=customer_id, ttl_in_secs=ttl_in_secs,
            success_url=success_url, reject_url=reject_url,
        )

    # =========================================================================
    # QUOTES
    # =========================================================================
    @mcp.tool()
    async def create_quote(
        from_currency: Literal["USDC", "USDT"],
        from_amount: str,
        from_network: QuoteNetwork,
        to_currency: str,
        to_country: str,
        payment_method_type: PaymentMethodType,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Price a stablecoin → fiat conversion and lock the rate for a short time.

        WHEN TO CALL THIS: Before create_transfer.  Quotes expire quickly
        (usually within minutes); the result says how many seconds are left.

        Args:
            from_currency: "USDC" or "USDT".
            from_amount: Decimal amount as a string, e.g. "100" or "250.50".
            from_network: "ethereum", "polygon" or "polygon-amoy".
            to_currency: Fiat currency code, e.g. "EUR".
            to_country: Destination country code, e.g. "DE".
            payment_method_type: "SWIFT" or "LOCAL".
            metadata: Free-form string key/value pairs.

        Returns:
            Text with the quote id, the converted amount, the fee breakdown
            and the seconds until expiry.
        """
        return await run_tool(
            "create_quote",
            from_currency=from_currency, from_amount=from_amount,
            from_network=from_network, to_currency=to_currency,
            to_country=to_country, payment_method_type=payment_method_type,
            metadata=metadata,
        )

    @mcp.tool()
    async def get_quote(quote_id: str) -> str:
        """Get a quote and whether it is still usable for a transfer."""
        return await run_tool("get_quote", quote_id=quote_id)

    # =========================================================================
    # TRANSFERS
    # =========================================================================
    @mcp.tool()
    async def create_transfer(
        customer_id: str,
        quote_id: str,
        account_holder_name: Optional[str] = None,
        iban: Optional[str] = None,
        account_number: Optional[str] = None,
        bank_name: Optional[str] = None,
        bank_country: Optional[str] = None,
        bank_currency: Optional[str] = None,
        swift_code: Optional[str] = None,
        routing_number: Optional[str] = None,
        sort_code: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Execute a transfer using an active quote.  This moves money.

        WHEN TO CALL THIS: Only after create_quote returned an ACTIVE quote
        for a verified customer, and the user confirmed the amounts.

        Args:
            customer_id: The verified customer sending funds.
            quote_id: An active quote id.
            account_holder_name: Beneficiary name.  Bank details are sent
                only when this is given.
            iban / account_number: Beneficiary account.
            bank_name / bank_country / bank_currency: Beneficiary bank.
            swift_code / routing_number / sort_code: Bank codes.
            metadata: Free-form string key/value pairs.

        Returns:
            Text with the transfer id, its status, and where to send the
            stablecoins (collection address and network).
        """
        return await run_tool(
            "create_transfer",
            customer_id=customer_id, quote_id=quote_id,
            account_holder_name=account_holder_name, iban=iban,
            account_number=account_number, bank_name=bank_name,
            bank_country=bank_country, bank_currency=bank_currency,
            swift_code=swift_code, routing_number=routing_number,
            sort_code=sort_code, metadata=metadata,
        )

    @mcp.tool()
    async def get_transfer(transfer_id: str) -> str:
        """Get a transfer's status, amounts and collection instructions."""
        return await run_tool("get_transfer", transfer_id=transfer_id)

    @mcp.tool()
    async def list_transfers(
        status: Optional[TransferStatus] = None,
        type: Optional[TransferType] = None,
        customer_id: Optional[str] = None,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> str:
        """List transfers, optionally filtered by status, type or customer.

        Returns one page.  When more exist the result includes a page_token;
        pass it back to get the next page.
        """
        return await run_tool(
            "list_transfers",
            status=status, type=type, customer_id=customer_id,
            page_size=page_size, page_token=page_token,
        )

    # =========================================================================
    # VIRTUAL ACCOUNTS
    # =========================================================================
    @mcp.tool()
    async def create_virtual_account(
        customer_id: str,
        source_currency: str,
        deposit_handling_mode: Optional[DepositHandlingMode] = None,
        destination_address: Optional[str] = None,
        destination_payment_rail: Optional[PaymentRail] = None,
        destination_currency: Optional[Stablecoin] = None,
        destination_memo: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Create a virtual bank account that receives fiat for a customer.

        Deposits can be paid out automatically to a crypto wallet: pass
        destination_address and destination_payment_rail together
        (destination_currency defaults to usdc).

        Args:
            customer_id: The owning customer.
            source_currency: Fiat currency the account receives, e.g. "usd".
            deposit_handling_mode: "auto_payout", "hold" or "manual".
            destination_address: Wallet address for payouts.
            destination_payment_rail: Chain for payouts, e.g. "base".
            destination_currency: Stablecoin for payouts.
            destination_memo: Memo for chains that need one.
            metadata: Free-form string key/value pairs.
        """
        return await run_tool(
            "create_virtual_account",
            customer_id=customer_id, source_currency=source_currency,
            deposit_handling_mode=deposit_handling_mode,
            destination_address=destination_address,
            destination_payment_rail=destination_payment_rail,
            destination_currency=destination_currency,
            destination_memo=destination_memo, metadata=metadata,
        )

    @mcp.tool()
    async def list_virtual_accounts(
        customer_id: str,
        status: Optional[VirtualAccountStatus] = None,
        limit: Optional[int] = None,
    ) -> str:
        """List one customer's virtual accounts."""
        return await run_tool("list_virtual_accounts", customer_id=customer_id, status=status, limit=limit)

    @mcp.tool()
    async def list_all_virtual_accounts(
        status: Optional[VirtualAccountStatus] = None,
        limit: Optional[int] = None,
    ) -> str:
        """List virtual accounts across every customer of this account."""
        return await run_tool("list_all_virtual_accounts", status=status, limit=limit)

    @mcp.tool()
    async def update_virtual_account(
        customer_id: str,
        virtual_account_id: str,
        deposit_handling_mode: DepositHandlingMode,
    ) -> str:
        """Change how a virtual account handles incoming deposits."""
        return await run_tool(
            "update_virtual_account",
            customer_id=customer_id, virtual_account_id=virtual_account_id,
            deposit_handling_mode=deposit_handling_mode,
        )

    @mcp.tool()
    async def deactivate_virtual_account(customer_id: str, virtual_account_id: str) -> str:
        """Deactivate a virtual account.  Deposits are no longer accepted."""
        return await run_tool(
            "deactivate_virtual_account",
            customer_id=customer_id, virtual_account_id=virtual_account_id,
        )

    @mcp.tool()
    async def reactivate_virtual_account(customer_id: str, virtual_account_id: str) -> str:
        """Reactivate a previously deactivated virtual account."""
        return await run_tool(
            "reactivate_virtual_account",
            customer_id=customer_id, virtual_account_id=virtual_account_id,
        )

    @mcp.tool()
    async def get_virtual_account_history(
        customer_id: str,
        virtual_account_id: str,
        limit: Optional[int] = None,
        event_type: Optional[VirtualAccountEventType] = None,
    ) -> str:
        """Get the deposit and payout events of a virtual account, newest first."""
        return await run_tool(
            "get_virtual_account_history",
            customer_id=customer_id, virtual_account_id=virtual_account_id,
            limit=limit, event_type=event_type,
        )

    # =========================================================================
    # API KEYS
    # =========================================================================
    # create_api_key is the one tool whose output holds a secret.  Its
    # response is never logged.
    # =========================================================================
    @mcp.tool()
    async def create_api_key(name: str, metadata: Optional[dict[str, str]] = None) -> str:
        """Create a new API key for this account.

        The secret key is shown ONCE in the result and cannot be retrieved
        again.  Tell the user to store it securely.
        """
        return await run_tool("create_api_key", name=name, metadata=metadata)

    @mcp.tool()
    async def list_api_keys(page_size: Optional[int] = None, page_token: Optional[str] = None) -> str:
        """List API keys (never their secrets)."""
        return await run_tool("list_api_keys", page_size=page_size, page_token=page_token)

    @mcp.tool()
    async def get_api_key(api_key_id: str) -> str:
        """Get one API key's details."""
        return await run_tool("get_api_key", api_key_id=api_key_id)

    @mcp.tool()
    async def revoke_api_key(api_key_id: str) -> str:
        """Permanently revoke an API key.  Anything using it stops working."""
        return await run_tool("revoke_api_key", api_key_id=api_key_id)

    # =========================================================================
    # WEBHOOKS
    # =========================================================================
    @mcp.tool()
    async def create_webhook(
        name: str,
        url: str,
        event_types: list[str],
        secret: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Subscribe an HTTPS endpoint to payment events.

        Args:
            name: A label for the subscription.
            url: The endpoint that receives events.
            event_types: At least one, e.g. "WEBHOOK_EVENT_TYPE_PAYMENT_STATUS_CHANGED",
                or "WEBHOOK_EVENT_TYPE_ALL".
            secret: Optional signing secret.  It is never shown again.
            metadata: Free-form string key/value pairs.
        """
        return await run_tool(
            "create_webhook",
            name=name, url=url, event_types=event_types, secret=secret, metadata=metadata,
        )

    @mcp.tool()
    async def list_webhooks() -> str:
        """List webhook subscriptions."""
        return await run_tool("list_webhooks")

    @mcp.tool()
    async def delete_webhook(webhook_id: str) -> str:
        """Delete a webhook subscription."""
        return await run_tool("delete_webhook", webhook_id=webhook_id)

    return mcp


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    # .env is read before the environment is inspected.
    load_dotenv()
    try:
        config = load_config()
    except ConfigurationError as exc:
        print(f"stables-mcp-server: {exc}", file=sys.stderr)
        sys.exit(1)

    _log_status(f"Using Stables API at {config.base_url}")
    mcp = build_server(StablesClient(config))
    mcp.run()


if __name__ == "__main__":
    main()
