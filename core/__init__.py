# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL payments logic for the Stables tool server.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any orchestration
#   framework.  Every module here is plain Python: configuration, the HTTP
#   client, input schemas, response models, one module per API resource, and
#   the text rendering the agent reads.
#
# LAYERS (bottom-up):
#   config / errors   → settings from the environment, the error hierarchy
#   client            → one authenticated HTTP request per call, no retries
#   schemas / models  → what goes out, what comes back
#   customers, quotes, transfers, virtual_accounts, api_keys, webhooks
#                     → one async function per API operation
#   formatting        → result → text for the agent
#   toolkit           → validate → call → render, plus the tool catalog
# =============================================================================
