# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server that publishes the Vitally tools
# and resources.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP protocol and core/.
#   Each tool here:
#     1. Declares its parameters (names, types, descriptions) for discovery
#     2. Forwards the call to core.dispatcher.Dispatcher
#     3. Turns core errors into protocol-level ToolErrors
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT call the Vitally API themselves (core/client.py does)
#   - They do NOT filter or reshape data (core/dispatcher.py does)
#   - They do NOT know about Google ADK (agent/ does)
# =============================================================================
