import argparse
import sys
from typing import List, Optional

from infrastructure.logging import setup_logger
from infrastructure.telemetry import setup_opentelemetry

from adapters.query_cli import QueryCLI


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the `ubiflow` command.

    Shared flags are handled here; the query and its arguments are passed
    through to the query CLI.
    """
    parser = argparse.ArgumentParser(prog="ubiflow", add_help=False)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Increase logging verbosity"
    )
    args, remaining = parser.parse_known_args(argv)

    # Setup shared infrastructure
    setup_logger(verbose=args.verbose)
    setup_opentelemetry()

    return QueryCLI().run(remaining)


if __name__ == "__main__":
    sys.exit(main())
