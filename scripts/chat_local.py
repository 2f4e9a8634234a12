#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no Twilio).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable user_id for the session
- Sends your typed messages through the same HandleIncomingMessageUseCase
- Prints the booking status after each turn and the reply text
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass

from app.domain.entities.message import Message


def _print_header(user_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (new user), /history, /appointments, /quit, /help")
    print("-" * 60)


def _build_container() -> dict[str, object]:
    try:
        from app.wiring.dependencies import get_container

        return get_container()
    except Exception as e:
        raise RuntimeError(
            "Could not construct HandleIncomingMessageUseCase via wiring.\n"
            "Check ENV and the Twilio/OpenAI settings in .env.\n"
            f"Original error: {e}"
        ) from e


def main() -> None:
    user_id = os.getenv("CHAT_USER_ID", "whatsapp:+10000000000")
    container = _build_container()
    use_case = container["use_case"]
    session_store = container["session_store"]
    appointment_store = container["appointment_store"]
    _print_header(user_id)

    while True:
        try:
            user_text = input("\n> ")
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        cmd = user_text.strip().lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new  -> start over as a new user_id")
            print("  /history -> show last 10 chat turns")
            print("  /appointments -> list appointments booked by this user")
            print("  /quit -> exit")
            continue
        if cmd == "/new":
            user_id = f"whatsapp:+1{int(time.time())}"
            print(f"New user_id: {user_id}")
            continue
        if cmd == "/history":
            session = session_store.find(user_id)
            print("\n--- History (last 10) ---")
            for turn in (session.history[-10:] if session else ()):
                print(f"{turn.role}: {turn.content}")
            continue
        if cmd == "/appointments":
            for record in appointment_store.list_for_user(user_id):
                print(
                    f"{record.appointment_date} {record.appointment_time} "
                    f"{record.service} ({record.patient_name}) [{record.status.value}]"
                )
            continue

        message = Message(
            id=f"local_{int(time.time() * 1000)}",
            user_id=user_id,
            text=user_text,
            timestamp=time.time(),
            platform="local",
        )
        reply_text = use_case.handle(message)

        session = session_store.find(user_id)
        print("\n--- Decision ---")
        print(f"booking_status: {session.booking.status if session else 'n/a'}")
        print("\n--- Reply ---")
        print(reply_text.strip() or "(empty reply)")
        print("-" * 60)


if __name__ == "__main__":
    main()
