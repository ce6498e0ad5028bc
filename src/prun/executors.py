"""Execution targets: tmux window keystrokes and detached shell spawns."""

from __future__ import annotations

import logging as py_logging
import os
import subprocess
from collections.abc import Callable, Mapping

from prun.errors import NoSessionError
from prun.template import TMUX_ENV

logger = py_logging.getLogger(__name__)

Executor = Callable[[str], bool]


def build_send_keys_command(window_id: str, line: str) -> list[str]:
    return ["tmux", "send-keys", "-t", window_id, line, "Enter"]


def build_shell_command(line: str) -> list[str]:
    return ["sh", "-c", line]


class TmuxExecutor:
    def __init__(
        self,
        window_id: str,
        *,
        environ: Mapping[str, str] | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.window_id = window_id
        self.environ = os.environ if environ is None else environ
        self.runner = runner

    def __call__(self, line: str) -> bool:
        if not self.environ.get(TMUX_ENV):
            raise NoSessionError("TMUX not detected")
        command = build_send_keys_command(self.window_id, line)
        logger.debug("Sending keys to tmux window=%s line=%s", self.window_id, line)
        try:
            completed = self.runner(command, capture_output=True, text=True, check=False)
        except OSError:
            logger.error("Could not run tmux send-keys window=%s", self.window_id, exc_info=True)
            return False
        if completed.returncode != 0:
            logger.warning(
                "tmux send-keys failed window=%s returncode=%s stderr=%s",
                self.window_id,
                completed.returncode,
                (completed.stderr or "").strip()[:200],
            )
            return False
        return True


class ShellExecutor:
    """Fire-and-forget ``sh -c`` spawn; the child is never awaited."""

    def __init__(self, *, spawner: Callable[..., object] = subprocess.Popen) -> None:
        self.spawner = spawner

    def __call__(self, line: str) -> bool:
        command = build_shell_command(line)
        logger.debug("Spawning detached shell command=%s", line)
        try:
            self.spawner(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError:
            logger.error("Detached shell spawn failed command=%s", line, exc_info=True)
            return False
        return True
