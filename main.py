"""Main entry point for the event display service."""

import asyncio
import sys
from contextlib import ExitStack

from dotenv import load_dotenv

from event_display.app import serve_until_signalled
from event_display.config import Settings
from event_display.exceptions import EventDisplayError
from event_display.logging_config import open_log_sink


def main():
    """Run the application."""
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    with ExitStack() as stack:
        try:
            logger = stack.enter_context(open_log_sink(settings))
        except OSError as e:
            print(f"Failed to open log file {settings.log_file_path}: {e}", file=sys.stderr)
            sys.exit(1)

        try:
            asyncio.run(serve_until_signalled(settings, logger))
        except EventDisplayError as e:
            logger.critical("%s", e)
            sys.exit(1)


if __name__ == "__main__":
    main()
