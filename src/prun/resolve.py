"""Cascade of pre/post hooks: slot, then project, then global."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from prun.config import GlobalConfig
from prun.models import ProjectState, Slot


class Phase(str, Enum):
    PRE = "pre"
    CMD = "cmd"
    POST = "post"


@dataclass(frozen=True)
class ResolvedSequence:
    pre: str
    cmd: str
    post: str

    def phases(self) -> Iterator[tuple[Phase, str]]:
        for phase, raw in ((Phase.PRE, self.pre), (Phase.CMD, self.cmd), (Phase.POST, self.post)):
            if raw:
                yield phase, raw


def _first_set(*values: str) -> str:
    for value in values:
        if value:
            return value
    return ""


def resolve(slot: Slot, project: ProjectState, config: GlobalConfig) -> ResolvedSequence:
    return ResolvedSequence(
        pre=_first_set(slot.pre, project.project_default_pre, config.default_pre),
        cmd=slot.cmd,
        post=_first_set(slot.post, project.project_default_post, config.default_post),
    )
