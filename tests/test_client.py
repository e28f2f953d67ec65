"""Tests for the HTTP client wrapper."""
import httpx
import pytest

from conftest import API_KEY, BASE_URL, body_of
from core.client import IDEMPOTENCY_HEADER, USER_AGENT, build_query
from core.errors import StablesAPIError, extract_error_message


class TestRequest:
    async def test_sends_bearer_credential_and_user_agent(self, client, recorder):
        recorder.add_response(json={"ok": True})

        result = await client.request("GET", "/api/v1/customers")

        assert result == {"ok": True}
        request = recorder.last
        assert str(request.url) == f"{BASE_URL}/api/v1/customers"
        assert request.headers["authorization"] == f"Bearer {API_KEY}"
        assert request.headers["user-agent"] == USER_AGENT

    async def test_json_content_type_only_with_a_body(self, client, recorder):
        await client.request("POST", "/api/v1/quotes", json={"a": 1})
        with_body = recorder.last
        await client.request("GET", "/api/v1/quotes/q_1")
        without_body = recorder.last

        assert with_body.headers["content-type"] == "application/json"
        assert body_of(with_body) == {"a": 1}
        assert "content-type" not in without_body.headers

    async def test_bodiless_delete_has_no_content_type(self, client, recorder):
        await client.request("DELETE", "/api/v1/webhooks/wh_1", idempotent=True)
        assert "content-type" not in recorder.last.headers

    async def test_idempotency_key_only_when_requested(self, client, recorder):
        await client.request("GET", "/api/v1/transfers")
        assert IDEMPOTENCY_HEADER not in recorder.last.headers

        await client.request("POST", "/api/v1/transfer", json={}, idempotent=True)
        assert recorder.last.headers[IDEMPOTENCY_HEADER]

    async def test_identical_calls_get_distinct_idempotency_keys(self, client, recorder):
        await client.request("POST", "/api/v1/quotes", json={"x": 1}, idempotent=True)
        await client.request("POST", "/api/v1/quotes", json={"x": 1}, idempotent=True)

        first, second = (r.headers[IDEMPOTENCY_HEADER] for r in recorder.requests)
        assert first != second

    async def test_empty_success_body_is_empty_dict(self, client, recorder):
        recorder.add_response(status_code=204)
        assert await client.request("DELETE", "/api/v1/api-keys/k_1") == {}

    async def test_query_params_are_sent(self, client, recorder):
        await client.request("GET", "/api/v1/transfers", params={"pageSize": 0, "status": "PENDING"})
        params = recorder.last.url.params
        assert params.get_list("pageSize") == ["0"]
        assert params.get_list("status") == ["PENDING"]

    async def test_makes_exactly_one_call_on_failure(self, client, recorder):
        recorder.add_response(status_code=500, json={"message": "boom"})
        with pytest.raises(StablesAPIError):
            await client.request("POST", "/api/v1/transfer", json={}, idempotent=True)
        assert recorder.count == 1


class TestErrors:
    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({"error": {"message": "Quote expired"}}, "Quote expired"),
            ({"message": "Customer not found"}, "Customer not found"),
            ({"error": "invalid_request"}, "invalid_request"),
            ({"error": {"message": "nested"}, "message": "top"}, "nested"),
        ],
    )
    async def test_error_message_from_body(self, client, recorder, payload, expected):
        recorder.add_response(status_code=400, json=payload)

        with pytest.raises(StablesAPIError) as exc_info:
            await client.request("GET", "/api/v1/quotes/q_1")

        assert exc_info.value.message == expected
        assert exc_info.value.status_code == 400

    async def test_unparseable_error_body_falls_back_to_status(self, client, recorder):
        recorder.add_response(status_code=503, content=b"<html>down</html>")

        with pytest.raises(StablesAPIError) as exc_info:
            await client.request("GET", "/api/v1/customers")

        assert str(exc_info.value) == "HTTP 503: Service Unavailable"

    async def test_empty_error_body_falls_back_to_status(self, client, recorder):
        recorder.add_response(status_code=404)

        with pytest.raises(StablesAPIError, match="HTTP 404: Not Found"):
            await client.request("GET", "/api/v1/customers/missing")

    async def test_transport_failure_is_an_api_error(self, client, recorder):
        recorder.add_exception(httpx.ConnectError("connection refused"))

        with pytest.raises(StablesAPIError, match="connection refused") as exc_info:
            await client.request("GET", "/api/v1/customers")

        assert exc_info.value.status_code is None

    async def test_invalid_json_on_success_is_an_api_error(self, client, recorder):
        recorder.add_response(status_code=200, content=b"not json")

        with pytest.raises(StablesAPIError, match="Invalid JSON"):
            await client.request("GET", "/api/v1/customers")

    def test_extract_error_message_ignores_non_dict_bodies(self):
        assert extract_error_message(502, "Bad Gateway", ["x"]) == "HTTP 502: Bad Gateway"


class TestBuildQuery:
    def test_drops_only_none(self):
        assert build_query(a=None, b=0, c="", d=False, e="x") == {"b": 0, "c": "", "d": False, "e": "x"}
