"""refactorizer: state machine for interactive refactoring sessions."""

__version__ = "0.1.0"

# Public API
from refactorizer.actions import (
    ActionType,
    ErrorAction,
    RefactorAction,
    back_from_diff_preview,
    close,
    confirm,
    display_diff_preview,
    error_action,
    execute,
    got_refactorings,
    inline_picked_refactor,
    load_diff_preview,
    open_session,
    picked_refactor,
    progress,
)
from refactorizer.config import Config, get_config, load_config
from refactorizer.errors import ActionLogError, RefactorInvariantError
from refactorizer.reducer import get_refactoring_phase, reduce
from refactorizer.refactorings import (
    FreeformArgument,
    FreeformRefactoring,
    RefactoringKind,
    RenameRefactoring,
    SymbolAtPoint,
)
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
)
from refactorizer.store import RefactorStore
from refactorizer.text import Point, Range

__all__ = [
    # Reducer
    "reduce",
    "get_refactoring_phase",
    "RefactorStore",
    # State
    "RefactorState",
    "ClosedState",
    "OpenState",
    "RefactorUI",
    "Phase",
    "PhaseType",
    "GetRefactoringsPhase",
    "PickPhase",
    "RenamePhase",
    "FreeformPhase",
    "ExecutePhase",
    "ConfirmPhase",
    "DiffPreviewPhase",
    "ProgressPhase",
    # Actions
    "ActionType",
    "RefactorAction",
    "ErrorAction",
    "open_session",
    "got_refactorings",
    "close",
    "back_from_diff_preview",
    "picked_refactor",
    "inline_picked_refactor",
    "execute",
    "confirm",
    "load_diff_preview",
    "display_diff_preview",
    "progress",
    "error_action",
    # Refactorings
    "RefactoringKind",
    "RenameRefactoring",
    "FreeformRefactoring",
    "FreeformArgument",
    "SymbolAtPoint",
    "Point",
    "Range",
    # Errors
    "RefactorInvariantError",
    "ActionLogError",
    # Config
    "Config",
    "load_config",
    "get_config",
]
