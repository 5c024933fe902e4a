"""Plain-dict snapshots of session state for logs, CLI output and tests.

Opaque handles (providers, editors, responses, diffs) are rendered by their
``name`` attribute when they have one and by ``repr`` otherwise.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from refactorizer.refactorings import FreeformRefactoring, RenameRefactoring, SymbolAtPoint
from refactorizer.state import (
    ClosedState,
    ConfirmPhase,
    DiffPreviewPhase,
    FreeformPhase,
    OpenState,
    PickPhase,
    ProgressPhase,
    RenamePhase,
)
from refactorizer.text import Point, Range


def state_to_dict(state: Any) -> dict[str, Any]:
    if isinstance(state, OpenState):
        return {"type": "open", "ui": str(state.ui), "phase": phase_to_dict(state.phase)}
    if isinstance(state, ClosedState):
        return {"type": "closed"}
    raise TypeError(f"Not a session state: {state!r}")


def phase_to_dict(phase: Any) -> dict[str, Any]:
    result: dict[str, Any] = {"type": str(phase.type)}

    if isinstance(phase, PickPhase):
        result.update(
            provider=handle_name(phase.provider),
            editor=handle_name(phase.editor),
            original_range=position_to_value(phase.original_range),
            available_refactorings=[
                refactoring_to_dict(r) for r in phase.available_refactorings
            ],
        )
    elif isinstance(phase, RenamePhase):
        result.update(
            provider=handle_name(phase.provider),
            editor=handle_name(phase.editor),
            original_point=position_to_value(phase.original_point),
            symbol_at_point=_symbol_to_dict(phase.symbol_at_point),
        )
    elif isinstance(phase, FreeformPhase):
        result.update(
            provider=handle_name(phase.provider),
            editor=handle_name(phase.editor),
            original_range=position_to_value(phase.original_range),
            refactoring=refactoring_to_dict(phase.refactoring),
        )
    elif isinstance(phase, ConfirmPhase):
        result["response"] = handle_name(phase.response)
    elif isinstance(phase, DiffPreviewPhase):
        result.update(
            loading=phase.loading,
            diffs=[handle_name(d) for d in phase.diffs],
            previous_phase=phase_to_dict(phase.previous_phase),
        )
    elif isinstance(phase, ProgressPhase):
        result.update(message=phase.message, value=phase.value, max=phase.max)

    return result


def refactoring_to_dict(refactoring: Any) -> dict[str, Any]:
    if isinstance(refactoring, RenameRefactoring):
        return {
            "kind": str(refactoring.kind),
            "symbol_at_point": _symbol_to_dict(refactoring.symbol_at_point),
        }
    if isinstance(refactoring, FreeformRefactoring):
        return {
            "kind": str(refactoring.kind),
            "id": refactoring.id,
            "name": refactoring.name,
            "description": refactoring.description,
            "range": position_to_value(refactoring.range),
            "args": {
                name: {
                    "type": str(arg.type),
                    "description": arg.description,
                    "default": arg.default,
                    "options": list(arg.options),
                }
                for name, arg in refactoring.args.items()
            },
            "disabled": refactoring.disabled,
        }
    return {"kind": str(getattr(refactoring, "kind", None)), "repr": repr(refactoring)}


def position_to_value(value: Any) -> Any:
    """Render a Point as ``[row, column]`` and a Range as ``{start, end}``."""
    if isinstance(value, Point):
        return value.to_list()
    if isinstance(value, Range):
        return {"start": value.start.to_list(), "end": value.end.to_list()}
    return handle_name(value)


def handle_name(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    return repr(value)


def _symbol_to_dict(symbol: Any) -> dict[str, Any]:
    if isinstance(symbol, SymbolAtPoint):
        return {"text": symbol.text, "range": position_to_value(symbol.range)}
    return {"repr": repr(symbol)}
