"""Refactoring descriptors offered by providers.

A provider answers a "what can I do here?" query with a list of available
refactorings. Each one has a kind that decides which phase collects its
parameters:
- RENAME: a new name for the symbol under the cursor
- FREEFORM: an arbitrary set of typed arguments rendered as a generic form
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from refactorizer.text import Range


class RefactoringKind(Enum):
    """Classification of an available refactoring."""

    RENAME = "rename"
    FREEFORM = "freeform"

    def __str__(self) -> str:
        return self.value


class ArgumentType(Enum):
    """Value type of a freeform refactoring argument."""

    STRING = "string"
    BOOLEAN = "boolean"
    ENUM = "enum"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SymbolAtPoint:
    """The symbol a rename applies to."""

    text: str
    range: Range


@dataclass(frozen=True)
class RenameRefactoring:
    """Rename the symbol at the cursor."""

    symbol_at_point: SymbolAtPoint
    kind: RefactoringKind = field(default=RefactoringKind.RENAME, init=False)


@dataclass(frozen=True)
class FreeformArgument:
    """One parameter of a freeform refactoring.

    Attributes:
        type: Value type the form should collect
        description: Label shown next to the input
        default: Initial value, if any
        options: Allowed values for ENUM arguments
    """

    type: ArgumentType
    description: str
    default: Any = None
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class FreeformRefactoring:
    """A provider-defined refactoring with arbitrary arguments.

    Attributes:
        id: Provider-specific identifier passed back on execution
        name: Human-readable name
        description: Longer explanation shown in the picker
        range: Range the refactoring applies to
        args: Argument name -> FreeformArgument
        disabled: True when offered but not currently applicable
    """

    id: str
    name: str
    description: str
    range: Range
    args: dict[str, FreeformArgument] = field(default_factory=dict)
    disabled: bool = False
    kind: RefactoringKind = field(default=RefactoringKind.FREEFORM, init=False)


AvailableRefactoring = RenameRefactoring | FreeformRefactoring
