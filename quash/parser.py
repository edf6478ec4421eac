import os
import shlex
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from quash.config import MAX_ARGS, MAX_LINE_LEN
from quash.errors import ShellSyntaxError

DELIMITERS = " \t\r\n"
PIPE = "|"
BACKGROUND = "&"


@dataclass(frozen=True)
class CommandSpec:
    """A program name plus its arguments, ready to launch."""
    args: Tuple[str, ...]
    background: bool = False
    partner: Optional["CommandSpec"] = None

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))
        if not self.args or not self.args[0]:
            raise ShellSyntaxError("empty command")

    @property
    def name(self):
        return self.args[0]

    def __str__(self):
        line = " ".join(self.args)
        if self.partner is not None:
            line += f" {PIPE} {self.partner}"
        return line


def _split_words(line):
    lex = shlex.shlex(line, posix=True)
    lex.whitespace = DELIMITERS
    lex.whitespace_split = True
    lex.quotes = ""
    lex.escape = ""
    lex.commenters = ""
    return list(lex)


def tokenize(line):
    """
    Split an input line into arguments and expand $NAME tokens.

    Returns: (args: list, background: bool)

    A token starting with '$' is replaced by the value of the environment
    variable at parse time. Unset variables are dropped with a warning
    rather than passed through as an empty argument. A trailing '&' is
    stripped and reported through the background flag.
    """
    if len(line) > MAX_LINE_LEN:
        raise ShellSyntaxError(f"line too long (max {MAX_LINE_LEN} characters)")

    args = []
    for word in _split_words(line):
        if word.startswith("$"):
            name = word[1:]
            value = os.environ.get(name)
            if value is None:
                print(f"quash: warning: environment variable '{name}' not set",
                      file=sys.stderr)
                continue
            word = value
        args.append(word)

    if len(args) > MAX_ARGS - 1:
        raise ShellSyntaxError(f"too many arguments (max {MAX_ARGS - 1})")

    background = bool(args) and args[-1] == BACKGROUND
    if background:
        args.pop()
    return args, background


def split_pipeline(args):
    """
    Split arguments around a lone '|' separator.

    Returns: (first: list, second: list or None)

    A pipe is only valid between two non-empty argument groups; a leading
    or trailing pipe, or more than one, is a syntax error.
    """
    if PIPE not in args:
        return list(args), None

    index = args.index(PIPE)
    first, second = list(args[:index]), list(args[index + 1:])
    if not first or not second or PIPE in second:
        raise ShellSyntaxError("invalid pipe command format")
    return first, second


def build_command(args, background=False):
    """Turn a tokenized argument list into a CommandSpec, pipe partner included."""
    first, second = split_pipeline(args)
    partner = CommandSpec(second) if second is not None else None
    return CommandSpec(first, background=background, partner=partner)
