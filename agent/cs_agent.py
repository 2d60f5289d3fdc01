# =============================================================================
# agent/cs_agent.py  —  Google ADK assistant wired to the Vitally MCP server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Configures the reference host assistant: an ADK Agent whose only tools
#   are the ones published by tools/mcp_server.py.
#
#   ┌──────────────────────────────┐        stdio        ┌──────────────────┐
#   │  ADK Agent (GPT-4o/LiteLlm)  │ ──────────────────▶ │  vitally-api     │
#   │  instruction: prompt.py      │ ◀────────────────── │  FastMCP server  │
#   └──────────────────────────────┘    JSON payloads    └──────────────────┘
#                                                                 │
#                                                                 ▼
#                                                     Vitally REST API / demo
#
# MCP CONNECTION:
#   ADK launches the server as a subprocess with `uv run python -m
#   tools.mcp_server` from the project root, so the subprocess sees the
#   project's virtualenv and can import core/.  The parent environment is
#   passed through explicitly: the server reads VITALLY_API_KEY and friends
#   from it.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_customer_success_prompt

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent(model: str = DEFAULT_MODEL) -> Agent:
    """Create the customer-success assistant.

    Args:
        model: LiteLlm model string.  LiteLlm reads the matching provider key
            (e.g. OPENROUTER_API_KEY) from the environment.

    Returns:
        A configured Google ADK Agent instance.
    """
    vitally_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=PROJECT_ROOT,
            env=dict(os.environ),
        ),
    )

    return Agent(
        name="vitally_cs_assistant",
        model=LiteLlm(model=model),
        instruction=get_customer_success_prompt(),
        tools=[vitally_tools],
    )
