# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between the agent host and core/.
#   mcp_server.py:
#     1. Declares one typed FastMCP tool per entry in core.toolkit's catalog
#     2. Hands the arguments to core.toolkit.invoke()
#     3. Returns the rendered text, or raises ToolError so the host sees
#        the call flagged as failed
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build requests or parse responses (that's in core/)
#   - They do NOT make decisions (that's the agent's job)
#   - They do NOT know about Google ADK
#
# TOOL CONTRACT QUALITY:
#   The docstring of each tool is what the LLM reads to decide WHEN to call
#   it.  Payment tools move real money, so the docstrings say which calls
#   must come first (a quote before a transfer, a verified customer before
#   either).
# =============================================================================
