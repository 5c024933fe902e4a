"""Refactoring session state.

A session is either closed or open. An open session has exactly one phase
describing which step of the refactoring flow is active:

    GET_REFACTORINGS -> PICK -> RENAME | FREEFORM -> (DIFF_PREVIEW) -> EXECUTE
                                                  -> PROGRESS / CONFIRM

All values are frozen. Transitions build new values; a state object a
subscriber already holds never changes underneath it.

Providers, editors, confirmation responses and diffs are opaque handles owned
elsewhere. They are carried through phases untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from refactorizer.refactorings import AvailableRefactoring, FreeformRefactoring, SymbolAtPoint


class RefactorUI(Enum):
    """Presentation mode that launched a session."""

    GENERIC = "generic"
    RENAME = "rename"

    def __str__(self) -> str:
        return self.value


class PhaseType(Enum):
    """Discriminant for the phase of an open session."""

    GET_REFACTORINGS = "get-refactorings"
    PICK = "pick"
    RENAME = "rename"
    FREEFORM = "freeform"
    EXECUTE = "execute"
    CONFIRM = "confirm"
    DIFF_PREVIEW = "diff-preview"
    PROGRESS = "progress"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GetRefactoringsPhase:
    """Waiting for the provider to list refactorings at the cursor."""

    type: ClassVar[PhaseType] = PhaseType.GET_REFACTORINGS


@dataclass(frozen=True)
class PickPhase:
    """Candidates are known; waiting for the user to choose one."""

    type: ClassVar[PhaseType] = PhaseType.PICK

    provider: Any
    editor: Any
    original_range: Any
    available_refactorings: tuple[AvailableRefactoring, ...]


@dataclass(frozen=True)
class RenamePhase:
    """Collecting a new name for the symbol at ``original_point``."""

    type: ClassVar[PhaseType] = PhaseType.RENAME

    provider: Any
    editor: Any
    original_point: Any
    symbol_at_point: SymbolAtPoint


@dataclass(frozen=True)
class FreeformPhase:
    """Collecting the arguments of a freeform refactoring."""

    type: ClassVar[PhaseType] = PhaseType.FREEFORM

    provider: Any
    editor: Any
    original_range: Any
    refactoring: FreeformRefactoring


@dataclass(frozen=True)
class ExecutePhase:
    """The refactoring is being computed and applied."""

    type: ClassVar[PhaseType] = PhaseType.EXECUTE


@dataclass(frozen=True)
class ConfirmPhase:
    """Execution produced a response the user must confirm."""

    type: ClassVar[PhaseType] = PhaseType.CONFIRM

    response: Any


@dataclass(frozen=True)
class DiffPreviewPhase:
    """Pending changes shown as diffs.

    Attributes:
        loading: True while the diffs are still being computed
        diffs: Computed diffs, empty while loading
        previous_phase: Phase restored when the user backs out
    """

    type: ClassVar[PhaseType] = PhaseType.DIFF_PREVIEW

    loading: bool
    diffs: tuple[Any, ...]
    previous_phase: Phase


@dataclass(frozen=True)
class ProgressPhase:
    """Execution progress, reported as ``value`` out of ``max``."""

    type: ClassVar[PhaseType] = PhaseType.PROGRESS

    message: str
    value: float
    max: float


Phase = (
    GetRefactoringsPhase
    | PickPhase
    | RenamePhase
    | FreeformPhase
    | ExecutePhase
    | ConfirmPhase
    | DiffPreviewPhase
    | ProgressPhase
)


@dataclass(frozen=True)
class ClosedState:
    """No refactoring session is active."""

    type: ClassVar[str] = "closed"


@dataclass(frozen=True)
class OpenState:
    """An active refactoring session."""

    type: ClassVar[str] = "open"

    ui: RefactorUI
    phase: Phase


RefactorState = ClosedState | OpenState


def describe_state(state: Any) -> str:
    """Short label such as ``closed`` or ``open/pick`` for diagnostics."""
    if isinstance(state, OpenState):
        return f"open/{state.phase.type}"
    if isinstance(state, ClosedState):
        return "closed"
    return type(state).__name__
