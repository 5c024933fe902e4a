"""Session reducer: ``reduce(state, action) -> state``.

Pure and synchronous. No I/O, no logging, no mutation of its inputs. The
caller serializes dispatches (see refactorizer.store).

Each transition checks its precondition first. A failed precondition is a
sequencing defect in the caller and raises RefactorInvariantError rather
than coercing the session into a plausible-looking state.

State transitions:
    closed              + open                   -> open/get-refactorings
    closed              + inline-picked-refactor -> open(generic)/freeform
    open/get-refactorings + got-refactorings     -> open/pick
    open/pick           + picked-refactor        -> open/rename | open/freeform
    open/diff-preview   + display-diff-preview   -> open/diff-preview (loaded)
    open/*              + close                  -> closed
    open/*              + back-from-diff-preview -> open/<given phase>
    open/*              + execute                -> open/execute
    open/*              + confirm                -> open/confirm
    open/*              + load-diff-preview      -> open/diff-preview (loading)
    open/*              + progress               -> open/progress
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any, cast

from refactorizer.actions import (
    ActionType,
    BackFromDiffPreviewAction,
    ConfirmAction,
    DisplayDiffPreviewAction,
    GotRefactoringsAction,
    InlinePickedRefactorAction,
    LoadDiffPreviewAction,
    OpenAction,
    PickedRefactorAction,
    ProgressAction,
)
from refactorizer.errors import RefactorInvariantError
from refactorizer.refactorings import RefactoringKind
from refactorizer.state import (
    ClosedState,
    ConfirmPhase,
    DiffPreviewPhase,
    ExecutePhase,
    FreeformPhase,
    GetRefactoringsPhase,
    OpenState,
    Phase,
    PhaseType,
    PickPhase,
    ProgressPhase,
    RefactorState,
    RefactorUI,
    RenamePhase,
    describe_state,
)


def reduce(state: RefactorState | None, action: Any) -> RefactorState:
    """Compute the session state that follows ``action``.

    Args:
        state: Current state; None means no session has ever been opened
        action: Any RefactorAction. Unrecognised actions are ignored.

    Returns:
        The next state. The same object is returned when nothing changes.

    Raises:
        RefactorInvariantError: If the action's precondition does not hold
    """
    if state is None:
        state = ClosedState()

    # Failures are reported and followed up with an ordinary action upstream.
    if getattr(action, "error", False):
        return state

    handler = _HANDLERS.get(getattr(action, "type", None))
    if handler is None:
        return state
    return handler(state, action)


def refactoring_kind(refactoring: Any) -> RefactoringKind | str | None:
    """Read ``refactoring.kind``, normalising known wire names to the enum.

    Unknown kinds are returned as-is so the caller can report them.
    """
    kind = getattr(refactoring, "kind", None)
    if isinstance(kind, RefactoringKind):
        return kind
    try:
        return RefactoringKind(kind)
    except ValueError:
        return kind


def get_refactoring_phase(
    refactoring: Any,
    provider: Any,
    editor: Any,
    original_range: Any,
) -> Phase:
    """Map a chosen refactoring to the phase that collects its parameters.

    Raises:
        RefactorInvariantError: If the refactoring kind has no phase
    """
    kind = refactoring_kind(refactoring)
    if kind == RefactoringKind.RENAME:
        return RenamePhase(
            provider=provider,
            editor=editor,
            original_point=original_range.start,
            symbol_at_point=refactoring.symbol_at_point,
        )
    if kind == RefactoringKind.FREEFORM:
        return FreeformPhase(
            provider=provider,
            editor=editor,
            original_range=original_range,
            refactoring=refactoring,
        )
    raise RefactorInvariantError(None, "a rename or freeform refactoring", f"kind {kind}")


# =============================================================================
# Preconditions
# =============================================================================


def _require_closed(state: RefactorState, action_type: ActionType) -> ClosedState:
    if not isinstance(state, ClosedState):
        raise RefactorInvariantError(str(action_type), "closed", describe_state(state))
    return state


def _require_open(
    state: RefactorState,
    action_type: ActionType,
    phase: PhaseType | None = None,
) -> OpenState:
    expected = f"open/{phase}" if phase else "open"
    if not isinstance(state, OpenState):
        raise RefactorInvariantError(str(action_type), expected, describe_state(state))
    if phase is not None and state.phase.type != phase:
        raise RefactorInvariantError(str(action_type), expected, describe_state(state))
    return state


# =============================================================================
# Transitions
# =============================================================================


def _open(state: RefactorState, action: OpenAction) -> RefactorState:
    _require_closed(state, action.type)
    return OpenState(ui=action.ui, phase=GetRefactoringsPhase())


def _got_refactorings(state: RefactorState, action: GotRefactoringsAction) -> RefactorState:
    current = _require_open(state, action.type, PhaseType.GET_REFACTORINGS)
    return OpenState(
        ui=current.ui,
        phase=PickPhase(
            provider=action.provider,
            editor=action.editor,
            original_range=action.original_range,
            available_refactorings=tuple(action.available_refactorings),
        ),
    )


def _close(state: RefactorState, action: Any) -> RefactorState:
    _require_open(state, ActionType.CLOSE)
    return ClosedState()


def _back_from_diff_preview(
    state: RefactorState, action: BackFromDiffPreviewAction
) -> RefactorState:
    current = _require_open(state, action.type)
    return OpenState(ui=current.ui, phase=action.phase)


def _picked_refactor(state: RefactorState, action: PickedRefactorAction) -> RefactorState:
    current = _require_open(state, action.type, PhaseType.PICK)
    pick = cast(PickPhase, current.phase)
    return OpenState(
        ui=current.ui,
        phase=get_refactoring_phase(
            action.refactoring, pick.provider, pick.editor, pick.original_range
        ),
    )


def _inline_picked_refactor(
    state: RefactorState, action: InlinePickedRefactorAction
) -> RefactorState:
    _require_closed(state, action.type)
    kind = refactoring_kind(action.refactoring)
    if kind != RefactoringKind.FREEFORM:
        raise RefactorInvariantError(
            str(action.type), "a freeform refactoring", f"kind {kind}"
        )
    return OpenState(
        ui=RefactorUI.GENERIC,
        phase=get_refactoring_phase(
            action.refactoring, action.provider, action.editor, action.original_range
        ),
    )


def _execute(state: RefactorState, action: Any) -> RefactorState:
    current = _require_open(state, ActionType.EXECUTE)
    return OpenState(ui=current.ui, phase=ExecutePhase())


def _confirm(state: RefactorState, action: ConfirmAction) -> RefactorState:
    current = _require_open(state, action.type)
    return OpenState(ui=current.ui, phase=ConfirmPhase(response=action.response))


def _load_diff_preview(state: RefactorState, action: LoadDiffPreviewAction) -> RefactorState:
    current = _require_open(state, action.type)
    return OpenState(
        ui=current.ui,
        phase=DiffPreviewPhase(loading=True, diffs=(), previous_phase=action.previous_phase),
    )


def _display_diff_preview(
    state: RefactorState, action: DisplayDiffPreviewAction
) -> RefactorState:
    current = _require_open(state, action.type, PhaseType.DIFF_PREVIEW)
    return dataclasses.replace(
        current,
        phase=dataclasses.replace(current.phase, loading=False, diffs=tuple(action.diffs)),
    )


def _progress(state: RefactorState, action: ProgressAction) -> RefactorState:
    current = _require_open(state, action.type)
    return OpenState(
        ui=current.ui,
        phase=ProgressPhase(message=action.message, value=action.value, max=action.max),
    )


_HANDLERS: dict[ActionType, Callable[[RefactorState, Any], RefactorState]] = {
    ActionType.OPEN: _open,
    ActionType.GOT_REFACTORINGS: _got_refactorings,
    ActionType.CLOSE: _close,
    ActionType.BACK_FROM_DIFF_PREVIEW: _back_from_diff_preview,
    ActionType.PICKED_REFACTOR: _picked_refactor,
    ActionType.INLINE_PICKED_REFACTOR: _inline_picked_refactor,
    ActionType.EXECUTE: _execute,
    ActionType.CONFIRM: _confirm,
    ActionType.LOAD_DIFF_PREVIEW: _load_diff_preview,
    ActionType.DISPLAY_DIFF_PREVIEW: _display_diff_preview,
    ActionType.PROGRESS: _progress,
}
