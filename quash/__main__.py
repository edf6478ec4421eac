import argparse
import sys

from quash import __version__
from quash.config import valid_timeout
from quash.shell import main_loop


def parse_args(args=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="quash",
        description="quash - a small shell that times out runaway foreground commands",
    )
    parser.add_argument(
        "--timeout", "-t",
        type=float,
        metavar="SECONDS",
        help="kill foreground commands after SECONDS (default: $QUASH_TIMEOUT or 10)",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="do not read or write the history file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(args)


def main(args=None):
    options = parse_args(args)
    if options.timeout is not None and not valid_timeout(options.timeout):
        print("quash: --timeout must be positive", file=sys.stderr)
        return 2
    return main_loop(timeout=options.timeout, use_history=not options.no_history)


if __name__ == "__main__":
    sys.exit(main())
