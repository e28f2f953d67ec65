# =============================================================================
# main.py  —  Entry Point for the Stables Payments Operator Console
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/payments_agent.py), which starts
#      the Stables tool server as a subprocess
#   2. Sets up an interactive session
#   3. Sends each operator request to the agent
#   4. Prints the tool calls as they happen and the agent's final answer
#
# REQUIRED ENVIRONMENT (a .env file works):
#   STABLES_API_KEY       → passed through to the tool server
#   STABLES_API_URL       → optional, defaults to the sandbox
#   OPENROUTER_API_KEY    → read by LiteLlm for the default model
#   STABLES_AGENT_MODEL   → optional LiteLlm model string
#
# GOOGLE ADK CONCEPTS USED:
#   - Runner: Manages the agent's execution lifecycle
#   - SessionService: Tracks conversation state across turns
#   - Content/Part: ADK's message format
# =============================================================================

import asyncio
import os
import sys

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm and the tool server both
# read their keys from the environment.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.payments_agent import create_agent
from core.config import API_KEY_ENV

APP_NAME = "stables_operator"
USER_ID = "operator"


async def run_agent():
    """Run the payments operator console until the user quits."""

    print("=" * 70)
    print("  STABLES PAYMENTS OPERATOR")
    print("  Powered by Google ADK + FastMCP")
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
    print("💬 Ask about customers, quotes, transfers, virtual accounts,")
    print("   API keys or webhooks.  (Type 'quit' to exit)\n")
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

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is working...\n")
        print("-" * 70)

        final_response = ""

        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if part.text:
                        final_response = part.text
                    if part.function_call:
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


def main() -> None:
    # Fail here rather than inside the tool-server subprocess.
    if not os.environ.get(API_KEY_ENV, "").strip():
        print(f"{API_KEY_ENV} is not set. Add it to your environment or .env file.", file=sys.stderr)
        sys.exit(1)
    asyncio.run(run_agent())


if __name__ == "__main__":
    main()
