"""Entry point for todoist-completed."""

import logging
import sys

from todoist_completed.cli import cli

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
