"""Actions understood by the session reducer, and their creators.

Every action has a ``type`` discriminant and an ``error`` marker. The
orchestration layer sets ``error`` when the work behind an action failed;
the reducer ignores such actions because the orchestration layer follows
them up with an ordinary corrective action (usually ``close``).

Prefer the creator functions at the bottom of this module over building the
dataclasses directly; they normalise loose inputs (string UI names, lists).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from refactorizer.refactorings import AvailableRefactoring, FreeformRefactoring
from refactorizer.state import Phase, RefactorUI


class ActionType(str, Enum):
    """Wire names of the reducer's action vocabulary."""

    OPEN = "open"
    GOT_REFACTORINGS = "got-refactorings"
    CLOSE = "close"
    BACK_FROM_DIFF_PREVIEW = "back-from-diff-preview"
    PICKED_REFACTOR = "picked-refactor"
    INLINE_PICKED_REFACTOR = "inline-picked-refactor"
    EXECUTE = "execute"
    CONFIRM = "confirm"
    LOAD_DIFF_PREVIEW = "load-diff-preview"
    DISPLAY_DIFF_PREVIEW = "display-diff-preview"
    PROGRESS = "progress"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OpenAction:
    type: ClassVar[ActionType] = ActionType.OPEN

    ui: RefactorUI
    error: bool = False


@dataclass(frozen=True)
class GotRefactoringsAction:
    type: ClassVar[ActionType] = ActionType.GOT_REFACTORINGS

    provider: Any
    editor: Any
    original_range: Any
    available_refactorings: tuple[AvailableRefactoring, ...]
    error: bool = False


@dataclass(frozen=True)
class CloseAction:
    type: ClassVar[ActionType] = ActionType.CLOSE

    error: bool = False


@dataclass(frozen=True)
class BackFromDiffPreviewAction:
    type: ClassVar[ActionType] = ActionType.BACK_FROM_DIFF_PREVIEW

    phase: Phase
    error: bool = False


@dataclass(frozen=True)
class PickedRefactorAction:
    type: ClassVar[ActionType] = ActionType.PICKED_REFACTOR

    refactoring: AvailableRefactoring
    error: bool = False


@dataclass(frozen=True)
class InlinePickedRefactorAction:
    """Opens a session straight into a freeform form, skipping the picker."""

    type: ClassVar[ActionType] = ActionType.INLINE_PICKED_REFACTOR

    provider: Any
    editor: Any
    original_range: Any
    refactoring: FreeformRefactoring
    error: bool = False


@dataclass(frozen=True)
class ExecuteAction:
    type: ClassVar[ActionType] = ActionType.EXECUTE

    error: bool = False


@dataclass(frozen=True)
class ConfirmAction:
    type: ClassVar[ActionType] = ActionType.CONFIRM

    response: Any
    error: bool = False


@dataclass(frozen=True)
class LoadDiffPreviewAction:
    type: ClassVar[ActionType] = ActionType.LOAD_DIFF_PREVIEW

    previous_phase: Phase
    error: bool = False


@dataclass(frozen=True)
class DisplayDiffPreviewAction:
    type: ClassVar[ActionType] = ActionType.DISPLAY_DIFF_PREVIEW

    diffs: tuple[Any, ...]
    error: bool = False


@dataclass(frozen=True)
class ProgressAction:
    type: ClassVar[ActionType] = ActionType.PROGRESS

    message: str
    value: float
    max: float
    error: bool = False


@dataclass(frozen=True)
class ErrorAction:
    """A failed action of any type. Always ignored by the reducer.

    Attributes:
        type: The action type whose work failed
        message: Failure description for display by the orchestration layer
    """

    type: ActionType
    message: str = ""
    error: bool = True


RefactorAction = (
    OpenAction
    | GotRefactoringsAction
    | CloseAction
    | BackFromDiffPreviewAction
    | PickedRefactorAction
    | InlinePickedRefactorAction
    | ExecuteAction
    | ConfirmAction
    | LoadDiffPreviewAction
    | DisplayDiffPreviewAction
    | ProgressAction
    | ErrorAction
)


# =============================================================================
# Action creators
# =============================================================================


def open_session(ui: RefactorUI | str) -> OpenAction:
    return OpenAction(ui=RefactorUI(ui))


def got_refactorings(
    provider: Any,
    editor: Any,
    original_range: Any,
    available_refactorings: Iterable[AvailableRefactoring],
) -> GotRefactoringsAction:
    return GotRefactoringsAction(
        provider=provider,
        editor=editor,
        original_range=original_range,
        available_refactorings=tuple(available_refactorings),
    )


def close() -> CloseAction:
    return CloseAction()


def back_from_diff_preview(phase: Phase) -> BackFromDiffPreviewAction:
    return BackFromDiffPreviewAction(phase=phase)


def picked_refactor(refactoring: AvailableRefactoring) -> PickedRefactorAction:
    return PickedRefactorAction(refactoring=refactoring)


def inline_picked_refactor(
    provider: Any,
    editor: Any,
    original_range: Any,
    refactoring: FreeformRefactoring,
) -> InlinePickedRefactorAction:
    return InlinePickedRefactorAction(
        provider=provider,
        editor=editor,
        original_range=original_range,
        refactoring=refactoring,
    )


def execute() -> ExecuteAction:
    return ExecuteAction()


def confirm(response: Any) -> ConfirmAction:
    return ConfirmAction(response=response)


def load_diff_preview(previous_phase: Phase) -> LoadDiffPreviewAction:
    return LoadDiffPreviewAction(previous_phase=previous_phase)


def display_diff_preview(diffs: Iterable[Any]) -> DisplayDiffPreviewAction:
    return DisplayDiffPreviewAction(diffs=tuple(diffs))


def progress(message: str, value: float, max: float) -> ProgressAction:
    return ProgressAction(message=message, value=value, max=max)


def error_action(action_type: ActionType | str, message: str = "") -> ErrorAction:
    """Mark the work behind ``action_type`` as failed."""
    return ErrorAction(type=ActionType(action_type), message=message)
