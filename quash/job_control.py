import enum
import os
import signal
import sys

import psutil

from quash.config import FOREGROUND_TIMEOUT, valid_timeout


class Outcome(enum.Enum):
    COMPLETED = "completed"
    TIMED_OUT = "timed out"
    INTERRUPTED = "interrupted"


class State(enum.Enum):
    IDLE = "idle"
    ARMED = "armed"


# Foreground slot: the only state shared with the SIGALRM handler.
# The handler reads foreground_pid and sets timed_out, nothing else.
foreground_pid = 0
timed_out = False
supervisor_state = State.IDLE

# Background jobs: pid -> ChildHandle
background_jobs = {}
# Jobs collected by the SIGCHLD handler, reported at the next sweep
finished_jobs = []


# ---------- Foreground supervisor ----------
def handle_sigalrm(signum, frame):
    """Kill the registered foreground process when its timer expires"""
    global timed_out
    pid = foreground_pid
    if pid > 0:
        timed_out = True
        try:
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            pass


def arm_timer(seconds):
    signal.setitimer(signal.ITIMER_REAL, seconds)


def disarm_timer():
    signal.setitimer(signal.ITIMER_REAL, 0)


def wait_foreground(child, timeout=None):
    """
    Wait for a foreground child, killing it if it outlives the timeout.

    The child's pid is published in the foreground slot and a countdown
    is armed. Whichever comes first wins: the child exiting on its own
    (COMPLETED, or INTERRUPTED if it died of SIGINT) or the SIGALRM
    handler killing it (TIMED_OUT). The slot is cleared and the timer
    disarmed on every path.

    Returns: Outcome
    """
    global foreground_pid, timed_out, supervisor_state

    if timeout is None:
        timeout = FOREGROUND_TIMEOUT
    if child.pid is None:
        # Never started, nothing to supervise
        return Outcome.COMPLETED
    if not valid_timeout(timeout):
        raise ValueError(f"timeout must be a positive number of seconds, got {timeout!r}")

    if supervisor_state is State.ARMED:
        raise RuntimeError(f"foreground slot already holds pid {foreground_pid}")

    timed_out = False
    foreground_pid = child.pid
    supervisor_state = State.ARMED
    try:
        arm_timer(timeout)
        returncode = child.wait()
    finally:
        disarm_timer()
        foreground_pid = 0
        supervisor_state = State.IDLE

    if returncode is None:
        # The kill is asynchronous; collect the status without blocking
        returncode = child.poll()

    if timed_out and returncode == -signal.SIGKILL:
        print(f"quash: process {child.pid} timed out after {timeout:g} seconds, terminated",
              file=sys.stderr)
        return Outcome.TIMED_OUT
    if returncode == -signal.SIGINT:
        print()
        return Outcome.INTERRUPTED
    return Outcome.COMPLETED


# ---------- Background reaper ----------
def add_background_job(child):
    """Track a background child; the caller does not wait for it"""
    background_jobs[child.pid] = child
    print(f"[Background job] PID: {child.pid}")
    sys.stdout.flush()
    # It may have exited before it was tracked
    handle_sigchld(signal.SIGCHLD, None)


def collect_background_jobs():
    """Poll tracked background jobs without blocking, return the finished ones"""
    done = []
    for pid, child in list(background_jobs.items()):
        # Whoever pops the job owns its report
        if child.poll() is not None and background_jobs.pop(pid, None) is not None:
            done.append(child)
    return done


def handle_sigchld(signum, frame):
    """Auto-reap background jobs as soon as they exit"""
    finished_jobs.extend(collect_background_jobs())


def zombie_children():
    """Children of this process that exited but were never reaped"""
    zombies = []
    for proc in psutil.Process().children():
        try:
            if proc.status() == psutil.STATUS_ZOMBIE:
                zombies.append(proc.pid)
        except psutil.NoSuchProcess:
            continue
    return zombies


def reap_background_jobs():
    """
    Non-blocking sweep run before each prompt.

    Collects finished background jobs, then any other exited child the
    shell still owns. Running jobs are left alone.
    Returns: list of reaped background ChildHandles
    """
    done = []
    while finished_jobs:
        done.append(finished_jobs.pop(0))
    done.extend(collect_background_jobs())

    for pid in zombie_children():
        if pid in background_jobs:
            continue
        try:
            os.waitpid(pid, os.WNOHANG)
        except ChildProcessError:
            pass

    for child in done:
        print(f"[Background job] PID: {child.pid} done (status {child.returncode})")
    if done:
        sys.stdout.flush()
    return done


# ---------- Signal setup ----------
def init_signal_handlers():
    """
    Install the shell's signal dispositions.
    Returns the previous handlers, for restore_signal_handlers().
    """
    return {
        signal.SIGINT: signal.signal(signal.SIGINT, signal.SIG_IGN),
        signal.SIGALRM: signal.signal(signal.SIGALRM, handle_sigalrm),
        signal.SIGCHLD: signal.signal(signal.SIGCHLD, handle_sigchld),
    }


def restore_signal_handlers(previous):
    disarm_timer()
    for signum, handler in previous.items():
        signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
