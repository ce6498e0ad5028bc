from __future__ import annotations

import pytest

from prun.errors import InvalidSlotError
from prun.models import NUM_SLOTS, ProjectState, Slot, validate_slot_index


def test_fresh_state_has_nine_empty_slots() -> None:
    state = ProjectState()
    assert sorted(state.slots) == list(range(1, NUM_SLOTS + 1))
    assert all(slot.is_empty for slot in state.slots.values())
    assert state.project_default_pre == ""
    assert state.project_default_post == ""


def test_validation_fills_missing_and_drops_out_of_range_slots() -> None:
    state = ProjectState.model_validate(
        {"slots": {"2": {"cmd": "make"}, "12": {"cmd": "ignored"}}}
    )
    assert sorted(state.slots) == list(range(1, 10))
    assert state.slots[2].cmd == "make"
    assert state.slots[2].pre == ""
    assert state.slots[1].is_empty


def test_payload_uses_persisted_key_names() -> None:
    state = ProjectState(project_default_pre="clear")
    payload = state.to_payload()
    assert list(payload) == ["_project_default_pre", "_project_default_post", "slots"]
    assert payload["_project_default_pre"] == "clear"
    assert list(payload["slots"]) == [str(index) for index in range(1, 10)]
    assert payload["slots"]["1"] == {"cmd": "", "pre": "", "post": ""}


def test_slot_clear_resets_every_field() -> None:
    slot = Slot(cmd="make", pre="clear", post="notify")
    slot.clear()
    assert slot.is_empty


@pytest.mark.parametrize("index", [0, 10, -1, "1", 1.0, True, None])
def test_invalid_slot_index_is_rejected(index: object) -> None:
    with pytest.raises(InvalidSlotError):
        validate_slot_index(index)


def test_state_slot_lookup_validates_index() -> None:
    state = ProjectState()
    assert state.slot(9) is state.slots[9]
    with pytest.raises(InvalidSlotError):
        state.slot(10)
