"""Placeholder expansion for slot commands."""

from __future__ import annotations

import logging as py_logging
import os
import re
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass

logger = py_logging.getLogger(__name__)

SessionNameProvider = Callable[[], str]

# %cwd must come first so the alternation never stops at a shorter name.
PLACEHOLDER_PATTERN = re.compile(r"%(cwd|f|F|w|s)")

TMUX_ENV = "TMUX"
SESSION_NAME_COMMAND = ["tmux", "display-message", "-p", "#S"]


class TmuxSessionProbe:
    """Ask tmux for the active session name; empty outside a session."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.runner = runner

    def __call__(self) -> str:
        if not self.environ.get(TMUX_ENV):
            return ""
        try:
            completed = self.runner(
                SESSION_NAME_COMMAND,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError:
            logger.debug("tmux session probe could not start", exc_info=True)
            return ""
        if completed.returncode != 0:
            logger.debug("tmux session probe failed returncode=%s", completed.returncode)
            return ""
        lines = (completed.stdout or "").splitlines()
        return lines[0] if lines else ""


@dataclass(frozen=True)
class FixedSessionName:
    name: str = ""

    def __call__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TemplateContext:
    file_path: str = ""
    cwd: str = ""
    window_id: str = ""
    session_name: SessionNameProvider = FixedSessionName()


def expand(text: str, context: TemplateContext) -> str:
    """Substitute ``%f %F %cwd %w %s`` in one pass over ``text``.

    Substituted values are never rescanned, so a file path containing ``%w``
    is emitted literally. The session name is only queried when ``%s`` occurs.
    """
    if not text:
        return text

    session: list[str] = []

    def _session_name() -> str:
        if not session:
            session.append(context.session_name())
        return session[0]

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == "f":
            return context.file_path
        if name == "F":
            return os.path.basename(context.file_path)
        if name == "cwd":
            return context.cwd
        if name == "w":
            return context.window_id
        return _session_name()

    return PLACEHOLDER_PATTERN.sub(_replace, text)
