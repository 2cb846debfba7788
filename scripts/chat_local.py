#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py [user_id]

What it does:
- Focuses the assistant screen for one customer and prints the menu
- Sends your typed messages through the same HandleAssistantMessageUseCase
- Prints mode/step after every turn, plus any error tag on a reply
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.wiring.dependencies import get_handle_assistant_message_use_case  # noqa: E402


def _print_header(user_id: str) -> None:
    print("\nLocal Assistant Harness")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /reset (screen refocus), /quit, /help")
    print("-" * 60)


def _print_replies(replies) -> None:
    for reply in replies:
        print(f"\nbot: {reply.text}")
        if reply.error:
            print(f"     [error={reply.error}]")


def main() -> None:
    user_id = sys.argv[1] if len(sys.argv) > 1 else "demo"
    use_case = get_handle_assistant_message_use_case()

    _print_header(user_id)
    _print_replies(use_case.focus(user_id))

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            break
        if cmd == "/help":
            print("  /reset -> blur + focus, same as leaving and reopening the screen")
            print("  /quit  -> exit")
            continue
        if cmd == "/reset":
            use_case.blur(user_id)
            _print_replies(use_case.focus(user_id))
            continue

        _print_replies(use_case.handle(user_id, user_text))
        session = use_case.get_session(user_id)
        mode = session.mode.value if session.mode else "-"
        print(f"     (mode={mode} step={session.step} generation={session.generation})")

    use_case.blur(user_id)


if __name__ == "__main__":
    main()
