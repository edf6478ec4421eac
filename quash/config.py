import os
import sys

DEFAULT_TIMEOUT = 10.0


def valid_timeout(seconds):
    """A usable foreground timeout is a finite number of seconds above zero"""
    return isinstance(seconds, (int, float)) and 0 < seconds < float("inf")


def read_timeout(environ):
    """Timeout from $QUASH_TIMEOUT; a bad value is reported and the default kept"""
    raw = environ.get("QUASH_TIMEOUT")
    if raw is None:
        return DEFAULT_TIMEOUT
    try:
        seconds = float(raw)
    except ValueError:
        seconds = None
    if not valid_timeout(seconds):
        print(f"quash: warning: ignoring QUASH_TIMEOUT={raw!r}, must be a positive number; "
              f"using {DEFAULT_TIMEOUT:g}", file=sys.stderr)
        return DEFAULT_TIMEOUT
    return seconds


# Foreground commands are killed after this many seconds
FOREGROUND_TIMEOUT = read_timeout(os.environ)

# Input limits
MAX_LINE_LEN = 1024
MAX_ARGS = 128  # includes the terminator slot

PROMPT_SUFFIX = "> "
FAREWELL = "exit"

# History
HISTORY_FILE = os.path.expanduser(os.getenv("QUASH_HISTORY", "~/.quash_history"))
MAX_HISTORY = 1000

# Reserved statuses for commands that could not be started
EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXECUTE = 126
