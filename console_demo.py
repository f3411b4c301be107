"""
Offline console chat with the real-estate assistant.

Runs the real extractor, classifier, context store, synthesizer and
session manager in the terminal. No backend, no network calls. Turns
are written to the configured turn log when it is enabled.

Usage:
    python console_demo.py
    python console_demo.py --user demo-user
    python console_demo.py --scenario budget
"""

import argparse
import asyncio
from typing import Optional

from realty_assistant.config import settings
from realty_assistant.conversation.session_manager import ChatSession
from realty_assistant.schemas.conversation_schema import ChatAction
from realty_assistant.tools.turn_recorder import TurnRecorder

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """Drives one ChatSession from the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "budget": [
            "What's the cost for a 2BHK near Whitefield, budget is around 40 lakh",
            "Can you suggest a flat?",
        ],
        "property": [
            "I'm looking in Mumbai for a flat",
            "My budget is 2 crore",
            "thanks",
        ],
        "construction": [
            "I want to build a house in 6 months",
            "Do you have an architect for the plan?",
            "I need some advice",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(
        self,
        user_id: Optional[str] = None,
        thinking_delay: Optional[float] = None,
        recorder: Optional[TurnRecorder] = None,
    ) -> None:
        self.session = ChatSession(
            user_id=user_id,
            recorder=recorder,
            thinking_delay=thinking_delay,
            navigator=self._navigate,
        )
        self._last_actions: tuple[ChatAction, ...] = ()

    def assistant_say(self, text: str, actions: tuple[ChatAction, ...]) -> None:
        print(f"{GREEN}{BOLD}[{settings.assistant.name}]{RESET} {GREEN}{text}{RESET}")
        for i, action in enumerate(actions, start=1):
            print(f"  {YELLOW}[{i}] {action.label}{RESET}")
        self._last_actions = actions

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _navigate(self, target: str) -> None:
        self.system_log(f"Opening {target}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  REAL ESTATE ASSISTANT - {title}{RESET}")
        mode = "signed in" if self.session.is_authenticated else "guest"
        print(f"{BOLD}  Session: {self.session.session_id} ({mode}){RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _show_greeting(self) -> None:
        greeting = self.session.transcript[0]
        self.assistant_say(greeting.text, greeting.actions)

    def _summary(self) -> None:
        ctx = self.session.context
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  Budget: {ctx.budget.value_in_base_units if ctx.budget else '-'}{RESET}")
        print(f"{DIM}  Timeline: {ctx.timeline.value_in_days if ctx.timeline else '-'} days{RESET}")
        print(f"{DIM}  Location: {ctx.location or '-'}{RESET}")
        print(f"{DIM}  Interests: {', '.join(sorted(ctx.interests)) or '-'}{RESET}")
        print(f"{DIM}  Messages: {len(self.session.transcript)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def _turn(self, text: str) -> None:
        reply = await self.session.submit_user_text(text)
        self.assistant_say(reply.reply_text, reply.actions)
        ctx = self.session.context
        self.system_log(
            f"Context: budget={ctx.budget.value_in_base_units if ctx.budget else None} "
            f"timeline={ctx.timeline.value_in_days if ctx.timeline else None} "
            f"location={ctx.location}"
        )

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        self._show_greeting()
        for step in steps:
            print(f"\n{BLUE}[You] {RESET}{step}")
            await self._turn(step)

        await self.session.drain()
        self.session.close()
        self._summary()

    async def run(self) -> None:
        self._banner("Console Chat")
        print(f"{DIM}  Type a message, an action number to open it, or 'quit' to exit.{RESET}\n")
        self._show_greeting()

        while True:
            try:
                user_input = (await asyncio.to_thread(input, f"\n{BLUE}[You] {RESET}")).strip()
            except EOFError:
                user_input = "quit"
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break

            if user_input.isdigit() and 1 <= int(user_input) <= len(self._last_actions):
                self.session.invoke_action(self._last_actions[int(user_input) - 1])
                continue

            if len(user_input) > self.MAX_INPUT_LENGTH:
                print(f"{RED}That was quite long. Could you keep it brief?{RESET}")
                continue

            await self._turn(user_input)

        await self.session.drain()
        self.session.close()
        self._summary()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Offline assistant console")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument(
        "--user",
        default=None,
        help="Chat as a signed-in user with this id (default: guest)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Thinking pause before each reply, in seconds (default: THINKING_DELAY_SEC)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    session = ConsoleSession(user_id=args.user, thinking_delay=args.delay)
    if args.scenario:
        asyncio.run(session.run_scenario(args.scenario))
    else:
        asyncio.run(session.run())


if __name__ == "__main__":
    main()
