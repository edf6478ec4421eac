import builtins
import os

import pytest

from quash import job_control, shell
from quash.__main__ import main, parse_args
from quash.config import PROMPT_SUFFIX
from quash.job_control import Outcome


def feed_input(monkeypatch, lines):
    """Make input() return lines one by one, then raise EOFError."""
    pending = list(lines)

    def fake_input(prompt=""):
        print(prompt, end="")
        if not pending:
            raise EOFError
        item = pending.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    monkeypatch.setattr(builtins, "input", fake_input)


class TestPrompt:

    def test_shows_working_directory(self, sandbox):
        assert shell.prompt() == f"{os.getcwd()}{PROMPT_SUFFIX}"

    def test_falls_back_when_cwd_is_gone(self, monkeypatch, capsys):
        def no_cwd():
            raise FileNotFoundError(2, "No such file or directory")

        monkeypatch.setattr(shell.os, "getcwd", no_cwd)
        assert shell.prompt() == PROMPT_SUFFIX
        assert "getcwd" in capsys.readouterr().err


class TestRunLine:

    def test_echo_home(self, monkeypatch, capfd):
        monkeypatch.setenv("HOME", "/home/u")
        shell.run_line("echo $HOME")
        assert capfd.readouterr().out == "/home/u\n"

    def test_builtin_wins_over_pipe(self, capfd):
        shell.run_line("echo a | b")
        assert capfd.readouterr().out == "a | b\n"

    def test_external_command(self, sandbox, signals, capfd):
        child, outcome = shell.run_line("ls")
        assert outcome is Outcome.COMPLETED
        assert child.returncode == 0

    def test_blank_and_background_only_lines(self, signals):
        assert shell.run_line("   ") is None
        assert shell.run_line("&") is None

    @pytest.mark.parametrize("line", ["| wc", "ls |", "ls | | wc", "a | b | c"])
    def test_bad_pipe_is_reported(self, signals, capfd, line):
        assert shell.run_line(line) is None
        assert "quash: invalid pipe command format" in capfd.readouterr().err
        assert job_control.background_jobs == {}

    def test_pipeline(self, sandbox, signals, capfd):
        (sandbox / "words").write_text("one\ntwo\nthree\n")
        shell.run_line("cat words | wc -l")
        assert capfd.readouterr().out.strip() == "3"

    def test_foreground_timeout(self, signals, capfd):
        child, outcome = shell.run_line("sleep 20", timeout=0.5)
        assert outcome is Outcome.TIMED_OUT
        assert "timed out after 0.5 seconds" in capfd.readouterr().err

    def test_background_returns_prompt(self, signals, capfd):
        child, outcome = shell.run_line("sleep 1 &")
        assert outcome is None
        assert child.pid in job_control.background_jobs

    def test_cd_failure(self, sandbox, capfd):
        shell.run_line("cd /no/such/dir")
        assert "cd: /no/such/dir" in capfd.readouterr().err
        assert os.getcwd() == str(sandbox.resolve())

    def test_too_many_arguments(self, capfd):
        shell.run_line("echo " + "x " * 200)
        assert "too many arguments" in capfd.readouterr().err


class TestMainLoop:

    def test_end_of_input_says_goodbye(self, sandbox, monkeypatch, capfd):
        feed_input(monkeypatch, ["echo hello"])
        assert shell.main_loop(use_history=False) == 0
        out = capfd.readouterr().out
        assert "hello\n" in out
        assert out.endswith("\nexit\n")

    def test_exit_builtin(self, sandbox, monkeypatch):
        feed_input(monkeypatch, ["exit", "echo unreachable"])
        with pytest.raises(SystemExit) as excinfo:
            shell.main_loop(use_history=False)
        assert excinfo.value.code == 0

    def test_interrupted_read_is_retried(self, sandbox, monkeypatch, capfd):
        feed_input(monkeypatch, [InterruptedError(), KeyboardInterrupt(), "echo again"])
        assert shell.main_loop(use_history=False) == 0
        assert "again\n" in capfd.readouterr().out

    def test_background_job_reported_before_next_prompt(self, sandbox, monkeypatch, capfd):
        feed_input(monkeypatch, ["false &", "sleep 0.3", ""])
        shell.main_loop(timeout=5, use_history=False)
        out = capfd.readouterr().out
        assert "[Background job] PID:" in out
        assert "done (status 1)" in out

    def test_signal_handlers_are_restored(self, sandbox, monkeypatch):
        import signal
        before = signal.getsignal(signal.SIGINT)
        feed_input(monkeypatch, [])
        shell.main_loop(use_history=False)
        assert signal.getsignal(signal.SIGINT) is before


class TestCommandLine:

    def test_defaults(self):
        options = parse_args([])
        assert options.timeout is None
        assert options.no_history is False

    def test_options(self):
        options = parse_args(["--timeout", "2.5", "--no-history"])
        assert options.timeout == 2.5
        assert options.no_history is True

    def test_rejects_non_positive_timeout(self, capsys):
        assert main(["--timeout", "0"]) == 2
        assert "must be positive" in capsys.readouterr().err

    def test_runs_the_loop(self, sandbox, monkeypatch, capfd):
        feed_input(monkeypatch, [])
        assert main(["--no-history"]) == 0
