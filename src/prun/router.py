"""Leading ``[tag]`` parsing that selects an execution target."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from prun.executors import Executor

TAG_PATTERN = re.compile(r"^\[([A-Za-z0-9]+)\]\s*(.*)$", re.DOTALL)


class ExecutorKind(str, Enum):
    TMUX = "tmux"
    SHELL = "shell"


_TAGS = {
    "sh": ExecutorKind.SHELL,
    "shell": ExecutorKind.SHELL,
    "tmux": ExecutorKind.TMUX,
}


def parse_target(raw: str) -> tuple[ExecutorKind, str]:
    """Split ``raw`` into its target and body.

    Unknown tags are kept in the body and routed to tmux unchanged.
    """
    match = TAG_PATTERN.match(raw)
    if match is None:
        return ExecutorKind.TMUX, raw
    kind = _TAGS.get(match.group(1).lower())
    if kind is None:
        return ExecutorKind.TMUX, raw
    return kind, match.group(2)


@dataclass(frozen=True)
class RoutedCommand:
    kind: ExecutorKind
    executor: Executor
    body: str


class TargetRouter:
    def __init__(self, *, tmux: Executor, shell: Executor) -> None:
        self._executors = {ExecutorKind.TMUX: tmux, ExecutorKind.SHELL: shell}

    def route(self, raw: str) -> RoutedCommand:
        kind, body = parse_target(raw)
        return RoutedCommand(kind=kind, executor=self._executors[kind], body=body)
