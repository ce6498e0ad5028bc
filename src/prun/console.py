"""Terminal implementation of the runner host capabilities."""

from __future__ import annotations

import os
import sys
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TextIO

from prun.host import InputCallback, SelectCallback


class ConsoleHost:
    """Answers prompts from ``answers`` first, then from ``stdin``.

    An empty line accepts the default, EOF cancels. Menus take a 1-based
    number or the exact item text.
    """

    def __init__(
        self,
        *,
        project_dir: str | Path | None = None,
        file_path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        answers: Iterable[str] = (),
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._cwd = str(Path(project_dir).resolve()) if project_dir else os.getcwd()
        self._file = str(Path(file_path).resolve()) if file_path else ""
        self._environ = os.environ if environ is None else environ
        self._answers: deque[str] = deque(answers)
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ

    def cwd(self) -> str:
        return self._cwd

    def current_file(self) -> str:
        return self._file

    def _read_line(self, prompt: str) -> str | None:
        if self._answers:
            return self._answers.popleft()
        self.stderr.write(prompt)
        self.stderr.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def input(self, prompt: str, default: str, callback: InputCallback) -> None:
        if self._answers:
            callback(self._answers.popleft())
            return
        suffix = f" [{default}]" if default else ""
        value = self._read_line(f"{prompt}{suffix}: ")
        if value == "":
            value = default
        callback(value)

    def select(self, items: Sequence[str], prompt: str, callback: SelectCallback) -> None:
        if not self._answers:
            self.stderr.write(f"{prompt}:\n")
            for position, item in enumerate(items, start=1):
                self.stderr.write(f"  {position}) {item}\n")
        raw = self._read_line("> ")
        position = _menu_position(items, raw)
        if position is None:
            callback(None, None)
            return
        callback(items[position], position)

    def notify(self, text: str, level: int) -> None:
        del level
        self.stderr.write(text + "\n")
        self.stderr.flush()


def _menu_position(items: Sequence[str], raw: str | None) -> int | None:
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    if value in items:
        return list(items).index(value)
    if value.isdigit():
        position = int(value) - 1
        if 0 <= position < len(items):
            return position
    return None
