"""Capabilities the runner consumes from its host (editor, CLI, tests)."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Protocol

InputCallback = Callable[[str | None], None]
SelectCallback = Callable[[str | None, int | None], None]


class Host(Protocol):
    """Interactive prompts resolve through callbacks; ``None`` means cancelled.

    ``select`` reports the chosen item and its zero-based index.
    """

    @property
    def environ(self) -> Mapping[str, str]: ...

    def cwd(self) -> str: ...

    def current_file(self) -> str: ...

    def input(self, prompt: str, default: str, callback: InputCallback) -> None: ...

    def select(self, items: Sequence[str], prompt: str, callback: SelectCallback) -> None: ...

    def notify(self, text: str, level: int) -> None: ...
