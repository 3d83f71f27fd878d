"""
Switchboard - Main Entry Point
==============================

Routes one request from the command line and prints what happened:
1. Loads configuration and builds the application context
2. Routes the request (small talk, clarification or a new task)
3. Runs the task on the chosen agent
4. Prints the reply and the task outcome

Run with:
    python -m switchboard.main "[work] review the open PRs on acme/api"

Or after installing:
    switchboard "plan my weekend trip"

Ctrl+C cancels a running task at the next safe point.
"""

import asyncio
import signal
import sys

from switchboard.agent import CancellationToken
from switchboard.context import AppContext
from switchboard.errors import SwitchboardError
from switchboard.utils.logger import Logger

main_logger = Logger("Main")


async def main(text: str) -> int:
    """
    Main async entry point.

    Args:
        text: The request to route

    Returns:
        Process exit code (0 when the request was handled successfully)
    """
    cancel = CancellationToken()

    try:
        async with AppContext() as app:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, cancel.cancel, "Interrupted")

            outcome, result = await app.handle(text, cancel)
    except SwitchboardError as e:
        main_logger.error("Request failed", e)
        return 1

    print(outcome.response)

    if result is None:
        return 0

    task = outcome.task
    print()
    print(f"[{task.assigned_agent}] {task.title} -> {task.status.value}")
    if result.success:
        print(result.output)
        return 0

    print(f"Error ({result.error_kind}): {result.error}", file=sys.stderr)
    return 1


def run():
    """
    Synchronous entry point.

    This is called when running with the `switchboard` command.
    """
    text = " ".join(sys.argv[1:]).strip()
    if not text:
        print('Usage: switchboard "<request>"', file=sys.stderr)
        sys.exit(2)

    try:
        sys.exit(asyncio.run(main(text)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
