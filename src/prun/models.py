"""Slot and project state models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prun.errors import InvalidSlotError

NUM_SLOTS = 9
SLOT_INDICES: tuple[int, ...] = tuple(range(1, NUM_SLOTS + 1))
SLOT_FIELDS: tuple[str, ...] = ("cmd", "pre", "post")


def validate_slot_index(index: object) -> int:
    if isinstance(index, bool) or not isinstance(index, int) or index not in SLOT_INDICES:
        raise InvalidSlotError(f"Invalid slot: {index!r}")
    return index


class Slot(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    cmd: str = ""
    pre: str = ""
    post: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.cmd or self.pre or self.post)

    def clear(self) -> None:
        self.cmd = ""
        self.pre = ""
        self.post = ""


def empty_slots() -> dict[int, Slot]:
    return {index: Slot() for index in SLOT_INDICES}


class ProjectState(BaseModel):
    """Per-project slots plus project-level pre/post defaults.

    Always carries exactly the nine slots 1..9: missing indices are filled
    with empty slots and out-of-range keys are dropped during validation.
    """

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True, extra="ignore")

    project_default_pre: str = Field(default="", alias="_project_default_pre")
    project_default_post: str = Field(default="", alias="_project_default_post")
    slots: dict[int, Slot] = Field(default_factory=empty_slots)

    @field_validator("slots")
    @classmethod
    def _fill_slots(cls, value: dict[int, Slot]) -> dict[int, Slot]:
        return {index: value[index] if index in value else Slot() for index in SLOT_INDICES}

    def slot(self, index: int) -> Slot:
        return self.slots[validate_slot_index(index)]

    def to_payload(self) -> dict[str, object]:
        return {
            "_project_default_pre": self.project_default_pre,
            "_project_default_post": self.project_default_post,
            "slots": {str(index): self.slots[index].model_dump() for index in SLOT_INDICES},
        }
