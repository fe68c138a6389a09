#!/usr/bin/env python3
# =============================================================================
# scripts/chat_interactive.py - Interactive Chat with the Contact Assistant
# =============================================================================
# Talk to the assistant in your terminal. It can audit the candidate database
# for missing contact details and send follow-up emails.
#
# Usage:
#   python scripts/chat_interactive.py
#
# Commands:
#   /quit or /exit - Exit the chat
#   /tools         - List the available tools
#   /clear         - Forget the conversation
#   /help          - Show help
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

# Check for API key
if not os.getenv("OPENAI_API_KEY") and not os.getenv("AZURE_OPENAI_ENDPOINT"):
    print("ERROR: OPENAI_API_KEY not found in environment")
    print("Please set it in your .env file or environment")
    sys.exit(1)

from agents.assistant import AssistantError, ContactAssistant
from agents.tools import ToolContext, list_tools
from app.config import settings
from lib.gmail_client import GmailSender
from lib.query_executor import SQLAlchemyQueryExecutor, create_database_engine


def print_header():
    """Print the welcome message."""
    print("\n" + "=" * 60)
    print("  Welcome to ContactGap!")
    print("=" * 60)
    print("\nI find candidates with missing emails, phones or names and")
    print("can email them (or your team) about it.")
    print(f"\n  Database: {settings.DATABASE_URL.split('@')[-1]}")
    print(f"  Tools:    {', '.join(list_tools())}")
    print("\n  Type /help for commands.\n")


def print_help():
    """Print help message."""
    print("\n" + "-" * 40)
    print("COMMANDS:")
    print("  /help  - Show this help")
    print("  /tools - List available tools")
    print("  /clear - Start a new conversation")
    print("  /quit  - Exit")
    print("\nTry saying things like:")
    print('  "Which candidates are missing an email?"')
    print('  "Show me only the critical ones"')
    print('  "Email recruiter@example.com a summary"')
    print("-" * 40 + "\n")


def main():
    """Main chat loop."""
    engine = create_database_engine(settings.DATABASE_URL, settings.DATABASE_CONNECT_TIMEOUT)
    context = ToolContext(
        executor=SQLAlchemyQueryExecutor(engine, schema=settings.database_schema),
        sender=GmailSender(settings.GMAIL_CREDENTIALS_PATH, settings.GMAIL_TOKEN_PATH, sender=settings.GMAIL_SENDER),
    )
    assistant = ContactAssistant(context=context)

    print_header()
    conversation = []

    try:
        while True:
            try:
                user_input = input("You: ").strip()
            except (KeyboardInterrupt, EOFError):
                print("\n\nAssistant: Goodbye!\n")
                break

            if not user_input:
                continue

            command = user_input.lower()
            if command in ["/quit", "/exit", "/q"]:
                print("\nAssistant: Goodbye!\n")
                break
            if command == "/help":
                print_help()
                continue
            if command == "/tools":
                print(f"\n  {', '.join(list_tools())}\n")
                continue
            if command == "/clear":
                conversation = []
                print("\n  Conversation cleared.\n")
                continue

            conversation.append({"role": "user", "content": user_input})
            try:
                reply = assistant.chat(conversation)
            except AssistantError as e:
                conversation.pop()
                print(f"\nAssistant: Sorry, I had trouble responding. {e.message}")
                if e.suggestion:
                    print(f"           {e.suggestion}")
                print()
                continue

            for call in reply.tool_calls:
                status = "ok" if call.result.get("success") else call.result.get("error")
                print(f"  [tool {call.name}: {status}]")

            print(f"\nAssistant: {reply.content}\n")
            conversation.append({"role": "assistant", "content": reply.content})
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
