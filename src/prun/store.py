"""Project `.run` file persistence, legacy migration, and caching."""

from __future__ import annotations

import json
import logging as py_logging
import os
import stat
import tempfile
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from prun.errors import DecodeError, EncodeError, WriteError
from prun.models import SLOT_INDICES, ProjectState, Slot

logger = py_logging.getLogger(__name__)

RUN_FILE = ".run"
_DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class LegacyFormat:
    """Flat ``{"1": "make", ...}`` mapping written by older releases."""

    commands: Mapping[str, object]

    def normalize(self) -> ProjectState:
        state = ProjectState()
        for index in SLOT_INDICES:
            command = self.commands.get(str(index))
            if isinstance(command, str):
                state.slots[index].cmd = command
        return state


@dataclass(frozen=True)
class CurrentFormat:
    payload: Mapping[str, object]

    def normalize(self) -> ProjectState:
        try:
            return ProjectState.model_validate(dict(self.payload))
        except ValidationError as exc:
            raise DecodeError(f"Corrupt project file structure: {exc.error_count()} invalid field(s)") from exc


PersistedFormat = Union[LegacyFormat, CurrentFormat]


def classify_payload(raw: object) -> PersistedFormat:
    if not isinstance(raw, dict):
        raise DecodeError(f"Project file must hold a JSON object, got {type(raw).__name__}")
    if "slots" in raw:
        return CurrentFormat(raw)
    return LegacyFormat(raw)


def decode_payload(raw: object) -> ProjectState:
    return classify_payload(raw).normalize()


def encode_state(state: ProjectState) -> bytes:
    try:
        text = json.dumps(state.to_payload(), indent=2, ensure_ascii=False) + "\n"
        return text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodeError("Could not encode project state", hint=str(exc)) from exc


def _existing_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except OSError:
        return _DEFAULT_FILE_MODE


class ProjectStore:
    """Loads the project file once and flushes it after every mutation."""

    def __init__(self, project_dir: str | Path) -> None:
        self.project_dir = Path(project_dir)
        self._cache: ProjectState | None = None

    @property
    def path(self) -> Path:
        return self.project_dir / RUN_FILE

    @property
    def state(self) -> ProjectState:
        if self._cache is None:
            self._cache = self.load()
        return self._cache

    def load(self) -> ProjectState:
        path = self.path
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No project file at %s; starting empty", path)
            return ProjectState()
        except (OSError, UnicodeDecodeError):
            logger.warning("Unreadable project file %s; starting empty", path, exc_info=True)
            return ProjectState()

        try:
            state = decode_payload(json.loads(text))
        except json.JSONDecodeError as exc:
            logger.warning("Invalid JSON in %s (%s); starting empty", path, exc)
            return ProjectState()
        except DecodeError as exc:
            logger.warning("Ignoring project file %s: %s", path, exc.message)
            return ProjectState()
        logger.debug("Loaded project file %s", path)
        return state

    def save(self, state: ProjectState | None = None) -> Path:
        target_state = state if state is not None else self.state
        self._cache = target_state
        encoded = encode_state(target_state)
        path = self.path
        tmp_name = ""
        replaced = False
        try:
            with tempfile.NamedTemporaryFile(
                "wb",
                delete=False,
                dir=str(path.parent),
                prefix=f"{RUN_FILE}.",
                suffix=".tmp",
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(encoded)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, _existing_mode(path))
            os.replace(tmp_name, path)
            replaced = True
        except OSError as exc:
            raise WriteError(f"Could not write {path}", hint=exc.strerror or str(exc)) from exc
        finally:
            if tmp_name and not replaced:
                with suppress(OSError):
                    os.unlink(tmp_name)
        logger.debug("Saved project file %s", path)
        return path

    def slot(self, index: int) -> Slot:
        return self.state.slot(index)
