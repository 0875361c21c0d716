"""
Terminal chat against the proxy.

Usage:
    python chat_cli.py
    CHAT_API_URL=http://192.168.1.20:3000 python chat_cli.py

Commands: /models, /model <name>, /clear, /quit
"""

import asyncio

from chatproxy.client import ChatSession
from chatproxy.config import get_settings

HELP = "Commands: /models, /model <name>, /clear, /quit"


async def chat_loop(session: ChatSession) -> None:
    print(f"Local LLM Chat - server: {session.api_base_url}, model: {session.model}")
    print(HELP)

    while True:
        try:
            line = await asyncio.to_thread(input, "\nYou: ")
        except (EOFError, KeyboardInterrupt):
            print()
            return

        command = line.strip()
        if command in ("/quit", "/exit"):
            return
        if command == "/clear":
            session.clear()
            print("Conversation cleared.")
            continue
        if command == "/models":
            for name in await session.available_models():
                marker = "*" if name == session.model else " "
                print(f" {marker} {name}")
            continue
        if command.startswith("/model "):
            session.model = command.split(maxsplit=1)[1]
            print(f"Using model {session.model}")
            continue
        if command.startswith("/"):
            print(HELP)
            continue

        session.input = line
        print("Assistant: ...", end="\r", flush=True)
        reply = await session.send()
        if reply:
            print(f"Assistant: {reply.content}")
        elif session.error:
            print(f"Error: {session.error}")


def main():
    settings = get_settings()
    session = ChatSession(api_base_url=settings.chat_api_url, model=settings.default_model)
    asyncio.run(chat_loop(session))


if __name__ == "__main__":
    main()
