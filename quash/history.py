import os
import sys

import readline

from quash.config import HISTORY_FILE, MAX_HISTORY


def init_readline():
    """Configure line editing when reading from a real terminal"""
    if not sys.stdin.isatty():
        return False
    try:
        readline.parse_and_bind("set editing-mode emacs")
        readline.parse_and_bind("\\e[A: previous-history")
        readline.parse_and_bind("\\e[B: next-history")
        readline.parse_and_bind("\\e[1;5D: backward-word")
        readline.parse_and_bind("\\e[1;5C: forward-word")
    except Exception as e:
        print(f"quash: warning: could not configure readline: {e}", file=sys.stderr)
        return False
    return True


def load_history(path=HISTORY_FILE):
    try:
        if os.path.exists(path):
            readline.read_history_file(path)
        readline.set_history_length(MAX_HISTORY)
    except OSError as e:
        print(f"quash: warning: could not load history: {e}", file=sys.stderr)


def save_history(path=HISTORY_FILE):
    try:
        readline.set_history_length(MAX_HISTORY)
        readline.write_history_file(path)
    except OSError as e:
        print(f"quash: warning: could not save history: {e}", file=sys.stderr)
