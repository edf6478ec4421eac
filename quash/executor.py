import errno
import os
import signal
import subprocess
import sys

from quash.config import EXIT_CANNOT_EXECUTE, EXIT_NOT_FOUND
from quash.errors import ResourceError
from quash.job_control import add_background_job, wait_foreground

# errno values meaning the system could not create the process at all
RESOURCE_ERRNOS = {errno.EAGAIN, errno.ENOMEM, errno.EMFILE, errno.ENFILE}


class ChildHandle:
    """
    A launched command.

    Wraps the Popen object of a running child. A command whose program
    could not be executed gets a handle with no process and the reserved
    exit status already set.
    """

    def __init__(self, spec, process=None, returncode=None):
        self.spec = spec
        self.process = process
        self._returncode = returncode

    @property
    def pid(self):
        return self.process.pid if self.process is not None else None

    @property
    def returncode(self):
        if self.process is not None:
            return self.process.returncode
        return self._returncode

    def wait(self):
        if self.process is None:
            return self._returncode
        return self.process.wait()

    def poll(self):
        if self.process is None:
            return self._returncode
        return self.process.poll()

    def __repr__(self):
        return f"<ChildHandle pid={self.pid} {self.spec}>"


def _child_setup(foreground):
    """Runs in the child between fork and exec"""
    def reset_signals():
        # Never inherit the shell's countdown
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, signal.SIG_DFL)
        if foreground:
            signal.signal(signal.SIGINT, signal.SIG_DFL)
    return reset_signals


def launch(spec, stdin=None, stdout=None, foreground=True):
    """
    Start the command as a child process.

    stdin / stdout are optional file descriptors to install as the
    child's standard streams; every other descriptor is closed in the
    child. Raises ResourceError when the process cannot be created.

    Returns: ChildHandle
    """
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        process = subprocess.Popen(
            list(spec.args),
            stdin=stdin,
            stdout=stdout,
            preexec_fn=_child_setup(foreground),
        )
    except FileNotFoundError:
        print(f"quash: {spec.name}: command not found", file=sys.stderr)
        return ChildHandle(spec, returncode=EXIT_NOT_FOUND)
    except OSError as e:
        if e.errno in RESOURCE_ERRNOS:
            raise ResourceError(f"cannot create process: {e.strerror}") from e
        print(f"quash: {spec.name}: {e.strerror}", file=sys.stderr)
        return ChildHandle(spec, returncode=EXIT_CANNOT_EXECUTE)
    except subprocess.SubprocessError as e:
        print(f"quash: {spec.name}: {e}", file=sys.stderr)
        return ChildHandle(spec, returncode=EXIT_CANNOT_EXECUTE)
    return ChildHandle(spec, process)


def execute_single(spec, timeout=None):
    """
    Run one command.
    Background commands return right away; foreground ones are supervised.
    Returns: (ChildHandle, Outcome or None)
    """
    child = launch(spec, foreground=not spec.background)
    if spec.background:
        if child.pid is not None:
            add_background_job(child)
        return child, None
    return child, wait_foreground(child, timeout)


def execute_pipe(spec):
    """
    Run spec | spec.partner and wait for both ends.

    The shell holds neither end of the pipe once both children exist.
    Pipelines are not timed and never run in the background.
    Returns: (writer ChildHandle, reader ChildHandle)
    """
    try:
        read_fd, write_fd = os.pipe()
    except OSError as e:
        raise ResourceError(f"cannot create pipe: {e.strerror}") from e

    writer = reader = None
    try:
        writer = launch(spec, stdout=write_fd)
        reader = launch(spec.partner, stdin=read_fd)
    finally:
        os.close(read_fd)
        os.close(write_fd)
        if reader is None and writer is not None:
            writer.wait()

    writer.wait()
    reader.wait()
    return writer, reader


def execute(spec, timeout=None):
    """Dispatch a parsed command to the pipeline coordinator or the launcher"""
    if spec.partner is None:
        return execute_single(spec, timeout)

    if spec.background:
        print("quash: background pipelines are not supported, running in foreground",
              file=sys.stderr)
    return execute_pipe(spec)
