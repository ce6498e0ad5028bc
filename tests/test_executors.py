from __future__ import annotations

import subprocess

import pytest

from prun.errors import NoSessionError
from prun.executors import ShellExecutor, TmuxExecutor

TMUX_ENV = {"TMUX": "/tmp/tmux-1000/default,1,0"}


def _cp(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def test_tmux_executor_sends_line_and_enter_to_window() -> None:
    calls: list[list[str]] = []

    def runner(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        calls.append(cmd)
        assert kwargs["check"] is False
        return _cp(0)

    ok = TmuxExecutor("2", environ=TMUX_ENV, runner=runner)("make 'all' && echo \"$HOME\"")

    assert ok is True
    assert calls == [["tmux", "send-keys", "-t", "2", "make 'all' && echo \"$HOME\"", "Enter"]]


def test_tmux_executor_without_session_raises_before_running() -> None:
    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        raise AssertionError("tmux must not be invoked without a session")

    with pytest.raises(NoSessionError):
        TmuxExecutor("1", environ={}, runner=runner)("make")


def test_tmux_executor_empty_session_variable_counts_as_missing() -> None:
    with pytest.raises(NoSessionError):
        TmuxExecutor("1", environ={"TMUX": ""}, runner=lambda cmd, **_: _cp(0))("make")


def test_tmux_executor_nonzero_exit_is_failure() -> None:
    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        return _cp(1, stderr="can't find window: 7")

    assert TmuxExecutor("7", environ=TMUX_ENV, runner=runner)("make") is False


def test_tmux_executor_missing_binary_is_failure() -> None:
    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        raise FileNotFoundError("tmux")

    assert TmuxExecutor("1", environ=TMUX_ENV, runner=runner)("make") is False


def test_shell_executor_spawns_detached_without_waiting() -> None:
    spawned: list[tuple[list[str], dict[str, object]]] = []

    class FakeProcess:
        def wait(self) -> int:
            raise AssertionError("detached spawn must not be awaited")

    def spawner(cmd: list[str], **kwargs: object) -> FakeProcess:
        spawned.append((cmd, kwargs))
        return FakeProcess()

    assert ShellExecutor(spawner=spawner)("notify-send done") is True

    cmd, kwargs = spawned[0]
    assert cmd == ["sh", "-c", "notify-send done"]
    assert kwargs["stdout"] is subprocess.DEVNULL
    assert kwargs["stderr"] is subprocess.DEVNULL
    assert kwargs["stdin"] is subprocess.DEVNULL
    assert kwargs["start_new_session"] is True


def test_shell_executor_spawn_error_is_failure() -> None:
    def spawner(cmd: list[str], **_: object) -> object:
        raise PermissionError("sh")

    assert ShellExecutor(spawner=spawner)("true") is False
