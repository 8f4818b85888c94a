#!/usr/bin/env python3
"""
Emotional Eating Coach Command Line Interface

Main entry point for the `coach` command. State lives in process memory,
so each invocation starts fresh; use --entries to preload a mood history.

Usage:
    coach chat --user alice                      # Interactive session
    coach chat --user alice --message "..."      # Single message
    coach log-mood --user alice --emotion sad --intensity 6 --trigger loneliness
    coach analytics --user alice --entries moods.json
    coach check-in --user alice --entries moods.json
    coach demo                                   # Seeded walkthrough
    coach --version
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path

from dotenv import load_dotenv

from coach import __version__
from coach.agent.engine import CoachEngine
from coach.errors import ValidationError
from coach.learning.pattern_analyzer import load_entries
from coach.logging_config import setup_logging

CHAT_HELP = """Commands:
  /mood <emotion> <intensity> <trigger...>   log a mood
  /helpful                                   the last suggestion helped
  /analytics                                 show your patterns
  /checkin                                   proactive check-in
  /quit                                      leave
"""


def _print(result) -> None:
    print(json.dumps(result, indent=2, default=str))


async def _preload(engine: CoachEngine, user_id: str, path: Path | None) -> None:
    if path is None:
        return
    for entry in load_entries(path, user_id):
        await engine.log_mood(user_id, entry.emotion, entry.intensity, entry.trigger,
                              entry.context, entry.timestamp)


async def _chat_loop(engine: CoachEngine, user_id: str) -> None:
    print("Hi! I'm here to help you work through emotional eating patterns. "
          "How are you feeling right now? (/help for commands)")
    last = None

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not line:
            continue

        if line in ("/quit", "/exit"):
            return
        if line == "/help":
            print(CHAT_HELP)
        elif line.startswith("/mood"):
            parts = line.split()
            if len(parts) < 4:
                print("Usage: /mood <emotion> <intensity> <trigger...>")
                continue
            if not parts[2].isdigit():
                print("Intensity should be a number from 1 to 10")
                continue
            try:
                entry = await engine.log_mood(user_id, parts[1], int(parts[2]), " ".join(parts[3:]))
                print(f"Logged {entry.emotion} ({entry.intensity}/10) - {entry.trigger}")
            except ValidationError as e:
                print(f"Couldn't log that: {e}")
        elif line == "/helpful":
            if not last or "intervention" not in last:
                print("Nothing to mark yet.")
                continue
            await engine.mark_intervention_helpful(
                user_id, last["emotion"], last["risk_level"], last["intervention"]
            )
            print("Noted - I'll suggest that again when it fits.")
        elif line == "/analytics":
            _print(await engine.get_analytics(user_id))
        elif line == "/checkin":
            print((await engine.check_in(user_id))["message"])
        else:
            result = await engine.submit_message(user_id, line)
            if result.get("requires_escalation"):
                print(result["message"])
                for resource in result["resources"]:
                    print(f"  - {resource['name']}: {resource['contact']}")
                last = None
                continue
            print(result["reply"])
            print(f"  Try this: {result['intervention']}")
            for insight in result["insights"]:
                print(f"  * {insight}")
            history = engine.get_history(user_id)
            last = {**result, "risk_level": history[-1].get("risk_level", "medium")}


def cmd_chat(engine: CoachEngine, args) -> int:
    async def run():
        await _preload(engine, args.user, args.entries)
        if args.message:
            _print(await engine.submit_message(args.user, args.message))
        else:
            await _chat_loop(engine, args.user)

    asyncio.run(run())
    return 0


def cmd_log_mood(engine: CoachEngine, args) -> int:
    async def run():
        await _preload(engine, args.user, args.entries)
        return await engine.log_mood(args.user, args.emotion, args.intensity, args.trigger, args.context)

    entry = asyncio.run(run())
    _print({"success": True, "entry": entry.to_dict()})
    return 0


def cmd_analytics(engine: CoachEngine, args) -> int:
    async def run():
        await _preload(engine, args.user, args.entries)
        return await engine.get_analytics(args.user)

    _print({"success": True, "analytics": asyncio.run(run())})
    return 0


def cmd_check_in(engine: CoachEngine, args) -> int:
    async def run():
        await _preload(engine, args.user, args.entries)
        return await engine.check_in(args.user)

    _print({"success": True, **asyncio.run(run())})
    return 0


def cmd_demo(engine: CoachEngine, args) -> int:
    """Seed a week of moods and walk through one turn of each kind."""
    user = "demo"

    async def run():
        base = datetime.now().replace(minute=0, second=0, microsecond=0) - timedelta(days=7)
        for day in range(3):
            await engine.log_mood(user, "stressed", 7, "work deadline",
                                  timestamp=base.replace(hour=14) + timedelta(days=day))
        for day in range(2):
            await engine.log_mood(user, "bored", 4, "evening alone",
                                  timestamp=base.replace(hour=21) + timedelta(days=day))

        results = {
            "analytics": await engine.get_analytics(user),
            "known_trigger": await engine.submit_message(
                user, "Another work deadline today and I keep thinking about snacks"
            ),
            "check_in": await engine.check_in(user),
        }
        return results

    _print(asyncio.run(run()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coach",
        description="Emotional Eating Coach - patterns, actions and coping suggestions",
    )
    parser.add_argument("--version", action="version", version=f"coach {__version__}")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING (default: env or INFO)")

    subparsers = parser.add_subparsers(dest="command")

    def add_user_args(p):
        p.add_argument("--user", required=True, help="User ID")
        p.add_argument("--entries", type=Path, help="JSON file of mood entries to preload")

    chat = subparsers.add_parser("chat", help="Talk to the coach")
    add_user_args(chat)
    chat.add_argument("--message", help="Send a single message and print the JSON result")
    chat.set_defaults(func=cmd_chat)

    log_mood = subparsers.add_parser("log-mood", help="Log a mood entry")
    add_user_args(log_mood)
    log_mood.add_argument("--emotion", required=True)
    log_mood.add_argument("--intensity", required=True, type=int, help="1-10")
    log_mood.add_argument("--trigger", required=True)
    log_mood.add_argument("--context")
    log_mood.set_defaults(func=cmd_log_mood)

    analytics = subparsers.add_parser("analytics", help="Show patterns, risk factors and progress")
    add_user_args(analytics)
    analytics.set_defaults(func=cmd_analytics)

    check_in = subparsers.add_parser("check-in", help="Get a proactive check-in message")
    add_user_args(check_in)
    check_in.set_defaults(func=cmd_check_in)

    demo = subparsers.add_parser("demo", help="Run a seeded walkthrough")
    demo.set_defaults(func=cmd_demo)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    setup_logging(level=args.log_level)
    engine = CoachEngine()

    try:
        return args.func(engine, args)
    except ValidationError as e:
        _print({"success": False, "error": str(e)})
        return 1
    except (OSError, json.JSONDecodeError) as e:
        _print({"success": False, "error": f"Could not load entries: {e}"})
        return 1


if __name__ == "__main__":
    sys.exit(main())
