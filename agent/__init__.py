# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains a reference host assistant for the Vitally MCP server,
# built on Google ADK.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer is the consumer of tools/mcp_server.py.  It:
#     1. Starts the MCP server as a stdio subprocess
#     2. Lets the LLM discover and call the Vitally tools
#     3. Turns the JSON tool payloads into answers for the user
#
#   It holds no Vitally logic of its own: the server must remain usable from
#   any other MCP host.
# =============================================================================
