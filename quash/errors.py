"""
Errors raised by the interpreter core.

Every error here is isolated to the line that caused it: the prompt loop
reports it and carries on with the next line.
"""


class ShellError(Exception):
    """Base class for errors reported to the user."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ShellSyntaxError(ShellError):
    """Malformed input: bad pipe usage, too many arguments, ..."""


class ResourceError(ShellError):
    """The system refused to create a process or a pipe."""
