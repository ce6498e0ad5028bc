"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    STORE_ERROR = 5
    TMUX_ERROR = 6
    VALIDATION_ERROR = 7


@dataclass
class PrunError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class DecodeError(PrunError):
    """Persisted project file is unreadable or structurally corrupt."""

    code: ExitCode = ExitCode.STORE_ERROR


@dataclass
class EncodeError(PrunError):
    code: ExitCode = ExitCode.STORE_ERROR


@dataclass
class WriteError(PrunError):
    code: ExitCode = ExitCode.STORE_ERROR


@dataclass
class NoSessionError(PrunError):
    code: ExitCode = ExitCode.TMUX_ERROR
    hint: str = "Start tmux or tag the command with [sh]."


@dataclass
class InvalidSlotError(PrunError):
    code: ExitCode = ExitCode.VALIDATION_ERROR
    hint: str = "Use a slot between 1 and 9."


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
