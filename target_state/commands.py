"""Command messages accepted by :class:`target_state.dispatcher.TargetDispatcher`."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SubmitText:
    text: str


@dataclass(frozen=True)
class ToggleHighlight:
    position: int


@dataclass(frozen=True)
class DeleteAt:
    index: int


@dataclass(frozen=True)
class RenameAt:
    index: int
    value: str


@dataclass(frozen=True)
class MoveTarget:
    from_index: int
    to_index: int


@dataclass(frozen=True)
class SetEditMode:
    enabled: bool


@dataclass(frozen=True)
class StartRecording:
    pass


@dataclass(frozen=True)
class StopRecording:
    pass


@dataclass(frozen=True)
class ToggleRecording:
    pass


@dataclass(frozen=True)
class ApplyHit:
    # Raw payload value; non-numeric positions are ignored by the dispatcher.
    position: Any


@dataclass(frozen=True)
class ApplyReset:
    pass


@dataclass(frozen=True)
class Discovered:
    name: str


@dataclass(frozen=True)
class RoundEnded:
    pass


@dataclass(frozen=True)
class SendReset:
    pass


Command = (
    SubmitText
    | ToggleHighlight
    | DeleteAt
    | RenameAt
    | MoveTarget
    | SetEditMode
    | StartRecording
    | StopRecording
    | ToggleRecording
    | ApplyHit
    | ApplyReset
    | Discovered
    | RoundEnded
    | SendReset
)
