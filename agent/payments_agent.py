# =============================================================================
# agent/payments_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that drives the Stables tool server.  The
#   agent is one example host; any MCP client can use tools/mcp_server.py.
#
# HOW IT WORKS:
#
#   ┌────────────────────────────────────────────────────────────┐
#   │                     Google ADK Agent                       │
#   │   System prompt ──▶ LLM (via LiteLlm) ──▶ MCPToolset       │
#   └────────────────────────────────────────────────────────────┘
#                                                 │ stdio
#                                                 ▼
#                                     ┌────────────────────────┐
#                                     │  tools/mcp_server.py   │
#                                     │  (FastMCP)             │
#                                     └────────────────────────┘
#                                                 │ HTTPS
#                                                 ▼
#                                     ┌────────────────────────┐
#                                     │  Stables REST API      │
#                                     └────────────────────────┘
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess and talks to it over
#   stdin/stdout.  The subprocess gets only the environment variables it
#   needs: the Stables credentials plus PATH/HOME so "uv" can run.
#
# MODEL CHOICE:
#   LiteLlm routes to any provider.  The default goes through OpenRouter;
#   set STABLES_AGENT_MODEL to use another model string.
# =============================================================================

import os
from typing import Mapping, Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_payments_operator_prompt
from core.config import API_KEY_ENV, BASE_URL_ENV

DEFAULT_MODEL = "openrouter/openai/gpt-4o"
MODEL_ENV = "STABLES_AGENT_MODEL"

_FORWARDED_ENV = (API_KEY_ENV, BASE_URL_ENV, "PATH", "HOME")


def server_environment(environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """The subset of the environment handed to the tool-server subprocess."""
    environ = os.environ if environ is None else environ
    return {name: environ[name] for name in _FORWARDED_ENV if name in environ}


def server_parameters(environ: Optional[Mapping[str, str]] = None) -> StdioServerParameters:
    # Run as a module from the project root so "core" resolves.
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return StdioServerParameters(
        command="uv",
        args=["run", "python", "-m", "tools.mcp_server"],
        cwd=project_root,
        env=server_environment(environ),
    )


def create_agent(environ: Optional[Mapping[str, str]] = None) -> Agent:
    """Create the payments-operations agent wired to the Stables tool server.

    The agent has no payments logic of its own: a system prompt, a model,
    and the MCP tool connection.
    """
    environ = os.environ if environ is None else environ

    mcp_tools = MCPToolset(connection_params=server_parameters(environ))

    return Agent(
        name="stables_payments_operator",
        model=LiteLlm(model=environ.get(MODEL_ENV) or DEFAULT_MODEL),
        instruction=get_payments_operator_prompt(),
        tools=[mcp_tools],
    )
