"""Tests for the FastMCP server, driven through FastMCP's in-memory client."""
import logging

import pytest
from fastmcp import Client

from core.toolkit import TOOL_DEFINITIONS
from tools import mcp_server


@pytest.fixture
def server(client):
    return mcp_server.build_server(client)


def _text(result) -> str:
    return "\n".join(block.text for block in result.content if getattr(block, "text", None))


class TestCatalog:
    async def test_every_catalog_tool_is_registered(self, server):
        async with Client(server) as mcp_client:
            tools = await mcp_client.list_tools()

        assert {tool.name for tool in tools} == set(TOOL_DEFINITIONS)

    async def test_schema_declares_required_fields_and_enums(self, server):
        async with Client(server) as mcp_client:
            tools = {tool.name: tool for tool in await mcp_client.list_tools()}

        schema = tools["create_quote"].inputSchema
        assert set(schema["required"]) == {
            "from_currency", "from_amount", "from_network",
            "to_currency", "to_country", "payment_method_type",
        }
        assert schema["properties"]["from_currency"]["enum"] == ["USDC", "USDT"]
        assert tools["create_quote"].description.startswith("Price a stablecoin")


class TestCalls:
    async def test_success_returns_rendered_text(self, server, recorder):
        recorder.add_response(json={"customerId": "c_1", "email": "a@b.com"})

        async with Client(server) as mcp_client:
            result = await mcp_client.call_tool_mcp("get_customer", {"customer_id": "c_1"})

        assert not result.isError
        assert "Customer ID: c_1" in _text(result)
        assert recorder.last.url.path == "/api/v1/customers/c_1"

    async def test_upstream_failure_is_flagged_as_error(self, server, recorder):
        recorder.add_response(status_code=404, json={"message": "Quote not found"})

        async with Client(server) as mcp_client:
            result = await mcp_client.call_tool_mcp("get_quote", {"quote_id": "q_missing"})

        assert result.isError
        assert "Failed to get quote: Quote not found" in _text(result)

    async def test_invalid_arguments_never_reach_the_api(self, server, recorder):
        async with Client(server) as mcp_client:
            result = await mcp_client.call_tool_mcp("get_customer", {"customer_id": "   "})

        assert result.isError
        assert recorder.count == 0

    async def test_new_api_key_secret_is_not_logged(self, server, recorder, caplog):
        recorder.add_response(json={
            "apiKey": {"apiKeyId": "k_1", "name": "ci", "prefix": "sk_live_ab"},
            "plaintextKey": "sk_live_top_secret",
        })

        with caplog.at_level(logging.INFO):
            async with Client(server) as mcp_client:
                result = await mcp_client.call_tool_mcp("create_api_key", {"name": "ci"})

        assert "sk_live_top_secret" in _text(result)
        assert "sk_live_top_secret" not in caplog.text

    async def test_webhook_secret_is_redacted_in_request_log(self, server, recorder, caplog):
        with caplog.at_level(logging.INFO):
            async with Client(server) as mcp_client:
                await mcp_client.call_tool_mcp("create_webhook", {
                    "name": "ops",
                    "url": "https://example.com/hook",
                    "event_types": ["WEBHOOK_EVENT_TYPE_ALL"],
                    "secret": "whsec_hidden",
                })

        assert "whsec_hidden" not in caplog.text
        assert "secret=***" in caplog.text


class TestMain:
    def test_missing_api_key_exits_with_status_1(self, monkeypatch, capsys):
        monkeypatch.delenv("STABLES_API_KEY", raising=False)
        monkeypatch.setattr(mcp_server, "load_dotenv", lambda: False)

        with pytest.raises(SystemExit) as exc_info:
            mcp_server.main()

        assert exc_info.value.code == 1
        assert "STABLES_API_KEY" in capsys.readouterr().err
