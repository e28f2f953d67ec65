# =============================================================================
# core/toolkit.py  —  Tool Formatter (validate → call → render)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Bridges one resource operation to one agent-callable tool.  Every tool
#   invocation goes through invoke():
#
#     1. VALIDATE   raw arguments against the tool's input model
#                   (failure → error result, NO network call)
#     2. CALL       the resource operation (exactly one HTTP request)
#     3. RENDER     the result to text with the render-time clock
#
#   Any failure along the way becomes a ToolResult with is_error=True and a
#   message of the form "Failed to <action>: <reason>".  invoke() never
#   raises for invocation errors (malformed 2xx bodies included); the MCP
#   layer always gets a result back.
#
# THE CATALOG:
#   TOOL_DEFINITIONS lists every tool the server exposes.  tools/mcp_server.py
#   registers one FastMCP tool per entry; tests drive invoke() directly.
#
#   This module has no FastMCP import.  It is plain Python, like the rest
#   of core/.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from core import api_keys, customers, formatting, quotes, transfers, virtual_accounts, webhooks
from core import schemas
from core.client import StablesClient
from core.errors import StablesError

logger = logging.getLogger(__name__)

Operation = Callable[[StablesClient, Any], Awaitable[Any]]
Renderer = Callable[[Any, Any, datetime], str]


@dataclass(frozen=True)
class ToolResult:
    """What the agent host receives for one invocation.

    sensitive=True marks text that must not be logged (a new API key's secret).
    """

    text: str
    is_error: bool = False
    sensitive: bool = False


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    action: str                     # "create quote" → "Failed to create quote: ..."
    input_model: type[schemas.ToolInput]
    operation: Operation
    render: Renderer
    sensitive: bool = False


def describe_validation_error(exc: ValidationError) -> str:
    """One line per invalid field: 'invalid arguments: field: problem; ...'"""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "invalid arguments: " + "; ".join(problems)


async def invoke(
    definition: ToolDefinition,
    client: StablesClient,
    arguments: Optional[dict[str, Any]],
    now: Optional[datetime] = None,
) -> ToolResult:
    """Run one tool invocation end to end.  Never raises for invocation errors."""
    try:
        params = definition.input_model.model_validate(arguments or {})
    except ValidationError as exc:
        logger.info("%s rejected before execution: %d invalid field(s)", definition.name, exc.error_count())
        return ToolResult(f"Failed to {definition.action}: {describe_validation_error(exc)}", is_error=True)

    try:
        result = await definition.operation(client, params)
        text = definition.render(result, params, now or datetime.now(timezone.utc))
    except StablesError as exc:
        return ToolResult(f"Failed to {definition.action}: {exc}", is_error=True)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        # A 2xx body that parsed as JSON but not into the expected shape.
        logger.warning("%s got an unexpected response: %s", definition.name, exc.__class__.__name__)
        return ToolResult(
            f"Failed to {definition.action}: Malformed response from Stables API ({exc.__class__.__name__})",
            is_error=True,
        )

    return ToolResult(text, sensitive=definition.sensitive)


def _tool(name, action, input_model, operation, render, sensitive=False) -> ToolDefinition:
    return ToolDefinition(name, action, input_model, operation, render, sensitive)


# =============================================================================
# The catalog
# =============================================================================
TOOL_DEFINITIONS: dict[str, ToolDefinition] = {
    d.name: d
    for d in (
        # --- Customers ---
        _tool("create_customer", "create customer", schemas.CreateCustomerInput,
              customers.create_customer, formatting.render_customer_created),
        _tool("get_customer", "get customer", schemas.CustomerRef,
              customers.get_customer, formatting.render_customer),
        _tool("list_customers", "list customers", schemas.NoInput,
              customers.list_customers, formatting.render_customer_list),
        _tool("update_customer", "update customer", schemas.UpdateCustomerInput,
              customers.update_customer, formatting.render_customer_updated),
        _tool("update_customer_metadata", "update metadata", schemas.UpdateCustomerMetadataInput,
              customers.update_customer_metadata, formatting.render_metadata_updated),
        _tool("get_verification_link", "generate verification link", schemas.VerificationLinkInput,
              customers.get_verification_link, formatting.render_verification_link),
        # --- Quotes ---
        _tool("create_quote", "create quote", schemas.CreateQuoteInput,
              quotes.create_quote, formatting.render_quote_created),
        _tool("get_quote", "get quote", schemas.QuoteRef,
              quotes.get_quote, formatting.render_quote),
        # --- Transfers ---
        _tool("create_transfer", "create transfer", schemas.CreateTransferInput,
              transfers.create_transfer, formatting.render_transfer_created),
        _tool("get_transfer", "get transfer", schemas.TransferRef,
              transfers.get_transfer, formatting.render_transfer),
        _tool("list_transfers", "list transfers", schemas.ListTransfersInput,
              transfers.list_transfers, formatting.render_transfer_list),
        # --- Virtual accounts ---
        _tool("create_virtual_account", "create virtual account", schemas.CreateVirtualAccountInput,
              virtual_accounts.create_virtual_account, formatting.render_virtual_account_created),
        _tool("list_virtual_accounts", "list virtual accounts", schemas.ListVirtualAccountsInput,
              virtual_accounts.list_virtual_accounts, formatting.render_virtual_account_list),
        _tool("list_all_virtual_accounts", "list virtual accounts", schemas.ListAllVirtualAccountsInput,
              virtual_accounts.list_all_virtual_accounts, formatting.render_virtual_account_list),
        _tool("update_virtual_account", "update virtual account", schemas.UpdateVirtualAccountInput,
              virtual_accounts.update_virtual_account, formatting.render_virtual_account_updated),
        _tool("deactivate_virtual_account", "deactivate virtual account", schemas.VirtualAccountRef,
              virtual_accounts.deactivate_virtual_account, formatting.render_virtual_account_deactivated),
        _tool("reactivate_virtual_account", "reactivate virtual account", schemas.VirtualAccountRef,
              virtual_accounts.reactivate_virtual_account, formatting.render_virtual_account_reactivated),
        _tool("get_virtual_account_history", "get virtual account history", schemas.VirtualAccountHistoryInput,
              virtual_accounts.get_virtual_account_history, formatting.render_virtual_account_history),
        # --- API keys ---
        _tool("create_api_key", "create API key", schemas.CreateApiKeyInput,
              api_keys.create_api_key, formatting.render_api_key_created, sensitive=True),
        _tool("list_api_keys", "list API keys", schemas.ListApiKeysInput,
              api_keys.list_api_keys, formatting.render_api_key_list),
        _tool("get_api_key", "get API key", schemas.ApiKeyRef,
              api_keys.get_api_key, formatting.render_api_key),
        _tool("revoke_api_key", "revoke API key", schemas.ApiKeyRef,
              api_keys.revoke_api_key, formatting.render_api_key_revoked),
        # --- Webhooks ---
        _tool("create_webhook", "create webhook", schemas.CreateWebhookInput,
              webhooks.create_webhook, formatting.render_webhook_created),
        _tool("list_webhooks", "list webhooks", schemas.NoInput,
              webhooks.list_webhooks, formatting.render_webhook_list),
        _tool("delete_webhook", "delete webhook", schemas.WebhookRef,
              webhooks.delete_webhook, formatting.render_webhook_deleted),
    )
}
