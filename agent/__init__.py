# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer is an example host for the Stables tool server.  It:
#     1. Receives an operator's request ("pay 500 USDC out to this IBAN")
#     2. Works out which tools to call and in what order
#     3. Calls them (via MCP) and reports the results
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the payments logic (that's in core/)
#   - It is NOT the tool implementations (that's in tools/)
#
# THE LLM'S ROLE:
#   The LLM (connected via LiteLlm) reads the system prompt and the tool
#   docstrings and decides how to proceed.  It never touches credentials;
#   the tool server subprocess holds the API key.
# =============================================================================
