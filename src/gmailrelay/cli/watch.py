"""Start, stop or inspect the Gmail watch from the command line."""

from __future__ import annotations

import argparse

from gmailrelay.application.use_cases import START_WATCH_TASK, STATUS_TASK, STOP_WATCH_TASK
from gmailrelay.infrastructure import build_task_dispatcher, get_settings
from gmailrelay.infrastructure.logging_setup import configure_logging

COMMANDS = {
    "start": START_WATCH_TASK,
    "stop": STOP_WATCH_TASK,
    "status": STATUS_TASK,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage the Gmail push watch")
    parser.add_argument("command", choices=sorted(COMMANDS), help="start / stop the watch, or show its status")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level or get_settings().log_level)

    result = build_task_dispatcher().dispatch(COMMANDS[args.command])
    print(result.message)
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
