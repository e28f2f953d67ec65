"""Tests for the operator agent wiring (no LLM calls are made)."""
import pytest

pytest.importorskip("google.adk")

from agent import payments_agent  # noqa: E402
from agent.prompt import get_payments_operator_prompt  # noqa: E402


class TestServerSubprocess:
    def test_only_needed_environment_is_forwarded(self):
        env = payments_agent.server_environment({
            "STABLES_API_KEY": "sk_test",
            "STABLES_API_URL": "https://api.sandbox.stables.money",
            "PATH": "/usr/bin",
            "OPENROUTER_API_KEY": "or_key",
        })
        assert env == {
            "STABLES_API_KEY": "sk_test",
            "STABLES_API_URL": "https://api.sandbox.stables.money",
            "PATH": "/usr/bin",
        }

    def test_server_runs_as_a_module(self):
        params = payments_agent.server_parameters({"STABLES_API_KEY": "sk_test"})
        assert params.args[-2:] == ["-m", "tools.mcp_server"]
        assert params.env == {"STABLES_API_KEY": "sk_test"}


class TestAgent:
    def test_model_can_be_overridden(self):
        agent = payments_agent.create_agent({
            "STABLES_API_KEY": "sk_test",
            "STABLES_AGENT_MODEL": "openrouter/openai/gpt-4o-mini",
        })
        assert agent.name == "stables_payments_operator"
        assert agent.model.model == "openrouter/openai/gpt-4o-mini"


def test_prompt_requires_confirmation_before_transfers():
    prompt = get_payments_operator_prompt()
    assert "create_transfer" in prompt
    assert "confirm" in prompt
