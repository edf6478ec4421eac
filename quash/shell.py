import os
import sys

from quash import history
from quash.builtin import execute_builtin
from quash.config import FAREWELL, PROMPT_SUFFIX
from quash.errors import ShellError
from quash.executor import execute
from quash.job_control import init_signal_handlers, reap_background_jobs, restore_signal_handlers
from quash.parser import build_command, tokenize


def prompt():
    """Shell prompt: the working directory followed by the suffix"""
    try:
        return f"{os.getcwd()}{PROMPT_SUFFIX}"
    except OSError as e:
        print(f"quash: getcwd: {e.strerror}", file=sys.stderr)
        return PROMPT_SUFFIX


def run_line(line, timeout=None):
    """
    Run one line of input: built-ins first, then external commands.
    Errors are reported and only abandon this line.
    """
    try:
        args, background = tokenize(line)
        if not args:
            return None
        if execute_builtin(args):
            return None
        return execute(build_command(args, background), timeout)
    except ShellError as e:
        print(f"quash: {e.message}", file=sys.stderr)
        return None


def main_loop(timeout=None, use_history=True):
    """Main shell loop. Returns the exit status for end of input."""
    previous = init_signal_handlers()
    use_history = use_history and history.init_readline()
    if use_history:
        history.load_history()

    try:
        while True:
            reap_background_jobs()
            try:
                line = input(prompt())
            except EOFError:
                print()
                print(FAREWELL)
                return 0
            except (InterruptedError, KeyboardInterrupt):
                print()
                continue

            if not line.strip():
                continue
            run_line(line, timeout)
    finally:
        if use_history:
            history.save_history()
        restore_signal_handlers(previous)
