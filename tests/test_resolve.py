from __future__ import annotations

import pytest

from prun.config import GlobalConfig
from prun.models import ProjectState, Slot
from prun.resolve import Phase, ResolvedSequence, resolve


@pytest.mark.parametrize("index", range(1, 10))
def test_all_empty_hooks_resolve_to_bare_command(index: int) -> None:
    project = ProjectState()
    project.slots[index].cmd = f"make target{index}"

    sequence = resolve(project.slots[index], project, GlobalConfig())

    assert (sequence.pre, sequence.cmd, sequence.post) == ("", f"make target{index}", "")
    assert list(sequence.phases()) == [(Phase.CMD, f"make target{index}")]


def test_project_default_wins_over_global() -> None:
    project = ProjectState(project_default_pre="X", project_default_post="PX")
    config = GlobalConfig(default_pre="Y", default_post="PY")

    sequence = resolve(Slot(cmd="make"), project, config)

    assert sequence.pre == "X"
    assert sequence.post == "PX"


def test_slot_value_wins_over_all() -> None:
    project = ProjectState(project_default_pre="X")
    config = GlobalConfig(default_pre="Y")

    assert resolve(Slot(cmd="make", pre="Z"), project, config).pre == "Z"


def test_global_default_used_when_slot_and_project_are_empty() -> None:
    sequence = resolve(Slot(cmd="make"), ProjectState(), GlobalConfig(default_post="notify"))
    assert sequence.pre == ""
    assert sequence.post == "notify"


def test_pre_and_post_cascade_independently() -> None:
    project = ProjectState(project_default_post="project-post")
    config = GlobalConfig(default_pre="global-pre", default_post="global-post")

    sequence = resolve(Slot(cmd="make", post=""), project, config)

    assert sequence.pre == "global-pre"
    assert sequence.post == "project-post"


def test_command_is_never_cascaded() -> None:
    project = ProjectState(project_default_pre="clear")
    sequence = resolve(Slot(), project, GlobalConfig(default_post="notify"))
    assert sequence.cmd == ""
    assert list(sequence.phases()) == [(Phase.PRE, "clear"), (Phase.POST, "notify")]


def test_phases_keep_fixed_order() -> None:
    sequence = ResolvedSequence(pre="a", cmd="b", post="c")
    assert [phase for phase, _ in sequence.phases()] == [Phase.PRE, Phase.CMD, Phase.POST]
