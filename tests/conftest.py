from __future__ import annotations

from collections import deque
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from prun.host import InputCallback, SelectCallback

TMUX_SOCKET = "/tmp/tmux-1000/default,4242,0"


class RecordingHost:
    """Host double: scripted prompt answers, recorded notifications."""

    def __init__(
        self,
        cwd: Path,
        *,
        file_path: str = "",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._cwd = str(cwd)
        self.file_path = file_path
        self._environ = dict(environ) if environ is not None else {"TMUX": TMUX_SOCKET}
        self.inputs: deque[str | None] = deque()
        self.choices: deque[str | None] = deque()
        self.prompts: list[tuple[str, str]] = []
        self.selects: list[tuple[list[str], str]] = []
        self.notifications: list[tuple[str, int]] = []

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ

    def cwd(self) -> str:
        return self._cwd

    def current_file(self) -> str:
        return self.file_path

    def input(self, prompt: str, default: str, callback: InputCallback) -> None:
        self.prompts.append((prompt, default))
        callback(self.inputs.popleft() if self.inputs else None)

    def select(self, items: Sequence[str], prompt: str, callback: SelectCallback) -> None:
        self.selects.append((list(items), prompt))
        choice = self.choices.popleft() if self.choices else None
        if choice is None:
            callback(None, None)
            return
        callback(choice, list(items).index(choice))

    def notify(self, text: str, level: int) -> None:
        self.notifications.append((text, level))

    @property
    def messages(self) -> list[str]:
        return [text for text, _ in self.notifications]


@pytest.fixture
def host(tmp_path: Path) -> RecordingHost:
    return RecordingHost(tmp_path, file_path=str(tmp_path / "src" / "main.c"))


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)
