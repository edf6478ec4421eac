import os
import signal
import sys

import pytest

from quash import job_control


@pytest.fixture()
def sandbox(tmp_path, monkeypatch):
    # Work in an isolated temp directory with a minimal environment
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PATH", os.environ.get("PATH", "/usr/bin:/bin"))
    monkeypatch.setenv("LC_ALL", "C")
    return tmp_path


@pytest.fixture()
def signals():
    """Install the shell's signal handlers for one test, then restore them."""
    previous = job_control.init_signal_handlers()
    yield
    job_control.restore_signal_handlers(previous)
    for child in list(job_control.background_jobs.values()):
        if child.poll() is None:
            child.process.kill()
            child.wait()
    job_control.background_jobs.clear()
    del job_control.finished_jobs[:]


@pytest.fixture()
def linux_proc():
    if not sys.platform.startswith("linux"):
        pytest.skip("requires /proc")


def sig_ignored(status_text, signum):
    """Whether signum is in the SigIgn mask of a /proc/<pid>/status dump."""
    for line in status_text.splitlines():
        if line.startswith("SigIgn:"):
            mask = int(line.split()[1], 16)
            return bool(mask & (1 << (signum - 1)))
    raise AssertionError("no SigIgn line")
