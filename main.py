# =============================================================================
# main.py  —  Interactive console for the Vitally customer-success assistant
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Creates the ADK agent (agent/cs_agent.py), which launches the Vitally
#      MCP server (tools/mcp_server.py) as a stdio subprocess
#   2. Opens an in-memory session
#   3. Sends each question to the agent and prints the tool calls it makes
#   4. Prints the final answer
#
# Without VITALLY_API_KEY the server runs in demo mode, so the console works
# offline against the mock accounts (try "How healthy is Acme?").
#
# The MCP server itself does not need this file: run `vitally-mcp` or
# `python -m tools.mcp_server` to serve any other MCP host.
# =============================================================================

import asyncio

from dotenv import load_dotenv

# LiteLlm reads OPENROUTER_API_KEY when the agent is created, so .env must be
# loaded first.
load_dotenv()

from google.adk.runners import Runner  # noqa: E402
from google.adk.sessions import InMemorySessionService  # noqa: E402
from google.genai import types  # noqa: E402

from agent.cs_agent import create_agent  # noqa: E402

APP_NAME = "vitally_cs_assistant"
USER_ID = "console_user"


async def run_agent():
    """Run the customer-success assistant interactively."""
    print("=" * 70)
    print("  VITALLY CUSTOMER-SUCCESS ASSISTANT")
    print("  Google ADK + FastMCP (vitally-api)")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask about your customer accounts.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(role="user", parts=[types.Part(text=user_input)])

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text
                    if getattr(part, "function_call", None):
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
