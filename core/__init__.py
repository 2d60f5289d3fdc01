# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL logic of the Vitally adapter: configuration, the
# API transport (live client + demo responder), the account cache, the tool
# registry and the dispatcher.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK or any other protocol
#   or agent framework.  Every module can be imported and exercised with no
#   MCP host and no network access (demo mode).
# =============================================================================
