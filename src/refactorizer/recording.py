"""Recorded action logs and replay.

An action log is a sequence of reducer actions captured from (or written to
exercise) an orchestration layer. Two formats are read:

JSONL, one action per line:
    {"type": "open", "ui": "generic"}
    {"type": "got-refactorings", "provider": "pyright", "editor": "main.py",
     "original_range": {"start": [3, 4], "end": [3, 9]},
     "available_refactorings": [{"kind": "rename",
        "symbol_at_point": {"text": "foo", "range": {"start": [3, 4], "end": [3, 7]}}}]}
    {"type": "execute", "error": true, "message": "provider timed out"}

YAML, a top-level list of the same mappings.

Providers and editors are referenced by name; those names become the opaque
handles carried in phase data.

Usage:
    with ActionLog(Path("session.jsonl")) as log:
        for action, state in replay(log):
            print(describe_state(state))
"""

from __future__ import annotations

import json
from abc import abstractmethod
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, Annotated, Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from refactorizer.actions import (
    ActionType,
    ErrorAction,
    back_from_diff_preview,
    close,
    confirm,
    display_diff_preview,
    execute,
    got_refactorings,
    inline_picked_refactor,
    load_diff_preview,
    open_session,
    picked_refactor,
    progress,
)
from refactorizer.errors import ActionLogError
from refactorizer.reducer import reduce
from refactorizer.refactorings import (
    ArgumentType,
    FreeformArgument,
    FreeformRefactoring,
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
    Phase,
    PickPhase,
    ProgressPhase,
    RefactorState,
    RenamePhase,
)
from refactorizer.text import Point, Range

YAML_SUFFIXES = {".yaml", ".yml"}


class LogModel(BaseModel):
    """Base model for log records; unknown keys are rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


# =============================================================================
# Positions and refactorings
# =============================================================================


class RangeRecord(LogModel):
    start: tuple[int, int]
    end: tuple[int, int]

    def build(self) -> Range:
        return Range(Point.from_list(self.start), Point.from_list(self.end))


class SymbolRecord(LogModel):
    text: str
    range: RangeRecord

    def build(self) -> SymbolAtPoint:
        return SymbolAtPoint(text=self.text, range=self.range.build())


class RenameRefactoringRecord(LogModel):
    kind: Literal["rename"]
    symbol_at_point: SymbolRecord = Field(alias="symbolAtPoint")

    def build(self) -> RenameRefactoring:
        return RenameRefactoring(symbol_at_point=self.symbol_at_point.build())


class ArgumentRecord(LogModel):
    type: Literal["string", "boolean", "enum"]
    description: str = ""
    default: Any = None
    options: list[str] = Field(default_factory=list)

    def build(self) -> FreeformArgument:
        return FreeformArgument(
            type=ArgumentType(self.type),
            description=self.description,
            default=self.default,
            options=tuple(self.options),
        )


class FreeformRefactoringRecord(LogModel):
    kind: Literal["freeform"]
    id: str
    name: str
    description: str = ""
    range: RangeRecord
    args: dict[str, ArgumentRecord] = Field(default_factory=dict)
    disabled: bool = False

    def build(self) -> FreeformRefactoring:
        return FreeformRefactoring(
            id=self.id,
            name=self.name,
            description=self.description,
            range=self.range.build(),
            args={name: arg.build() for name, arg in self.args.items()},
            disabled=self.disabled,
        )


RefactoringRecord = Annotated[
    Union[RenameRefactoringRecord, FreeformRefactoringRecord],
    Field(discriminator="kind"),
]


# =============================================================================
# Phases (payloads of back-from-diff-preview and load-diff-preview)
# =============================================================================


class GetRefactoringsPhaseRecord(LogModel):
    type: Literal["get-refactorings"]

    def build(self) -> Phase:
        return GetRefactoringsPhase()


class PickPhaseRecord(LogModel):
    type: Literal["pick"]
    provider: str
    editor: str
    original_range: RangeRecord = Field(alias="originalRange")
    available_refactorings: list[RefactoringRecord] = Field(
        default_factory=list, alias="availableRefactorings"
    )

    def build(self) -> Phase:
        return PickPhase(
            provider=self.provider,
            editor=self.editor,
            original_range=self.original_range.build(),
            available_refactorings=tuple(r.build() for r in self.available_refactorings),
        )


class RenamePhaseRecord(LogModel):
    type: Literal["rename"]
    provider: str
    editor: str
    original_point: tuple[int, int] = Field(alias="originalPoint")
    symbol_at_point: SymbolRecord = Field(alias="symbolAtPoint")

    def build(self) -> Phase:
        return RenamePhase(
            provider=self.provider,
            editor=self.editor,
            original_point=Point.from_list(self.original_point),
            symbol_at_point=self.symbol_at_point.build(),
        )


class FreeformPhaseRecord(LogModel):
    type: Literal["freeform"]
    provider: str
    editor: str
    original_range: RangeRecord = Field(alias="originalRange")
    refactoring: FreeformRefactoringRecord

    def build(self) -> Phase:
        return FreeformPhase(
            provider=self.provider,
            editor=self.editor,
            original_range=self.original_range.build(),
            refactoring=self.refactoring.build(),
        )


class ExecutePhaseRecord(LogModel):
    type: Literal["execute"]

    def build(self) -> Phase:
        return ExecutePhase()


class ConfirmPhaseRecord(LogModel):
    type: Literal["confirm"]
    response: Any = None

    def build(self) -> Phase:
        return ConfirmPhase(response=self.response)


class DiffPreviewPhaseRecord(LogModel):
    type: Literal["diff-preview"]
    loading: bool = True
    diffs: list[Any] = Field(default_factory=list)
    previous_phase: PhaseRecord = Field(alias="previousPhase")

    def build(self) -> Phase:
        return DiffPreviewPhase(
            loading=self.loading,
            diffs=tuple(self.diffs),
            previous_phase=self.previous_phase.build(),
        )


class ProgressPhaseRecord(LogModel):
    type: Literal["progress"]
    message: str
    value: float
    max: float

    def build(self) -> Phase:
        return ProgressPhase(message=self.message, value=self.value, max=self.max)


PhaseRecord = Annotated[
    Union[
        GetRefactoringsPhaseRecord,
        PickPhaseRecord,
        RenamePhaseRecord,
        FreeformPhaseRecord,
        ExecutePhaseRecord,
        ConfirmPhaseRecord,
        DiffPreviewPhaseRecord,
        ProgressPhaseRecord,
    ],
    Field(discriminator="type"),
]

DiffPreviewPhaseRecord.model_rebuild()


# =============================================================================
# Actions
# =============================================================================


class ActionRecord(LogModel):
    """Fields shared by every successful recorded action."""

    type: str
    error: Literal[False] = False

    @abstractmethod
    def to_action(self) -> Any:
        """Build the runtime action this record describes."""


class FailedActionRecord(LogModel):
    """An action whose work failed upstream. Its payload is not needed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal[
        "open",
        "got-refactorings",
        "close",
        "back-from-diff-preview",
        "picked-refactor",
        "inline-picked-refactor",
        "execute",
        "confirm",
        "load-diff-preview",
        "display-diff-preview",
        "progress",
    ]
    error: Literal[True]
    message: str = ""

    def to_action(self) -> ErrorAction:
        return ErrorAction(type=ActionType(self.type), message=self.message)


class OpenRecord(ActionRecord):
    type: Literal["open"]
    ui: Literal["generic", "rename"]

    def to_action(self) -> Any:
        return open_session(self.ui)


class GotRefactoringsRecord(ActionRecord):
    type: Literal["got-refactorings"]
    provider: str
    editor: str
    original_range: RangeRecord = Field(alias="originalRange")
    available_refactorings: list[RefactoringRecord] = Field(
        default_factory=list, alias="availableRefactorings"
    )

    def to_action(self) -> Any:
        return got_refactorings(
            self.provider,
            self.editor,
            self.original_range.build(),
            [r.build() for r in self.available_refactorings],
        )


class CloseRecord(ActionRecord):
    type: Literal["close"]

    def to_action(self) -> Any:
        return close()


class BackFromDiffPreviewRecord(ActionRecord):
    type: Literal["back-from-diff-preview"]
    phase: PhaseRecord

    def to_action(self) -> Any:
        return back_from_diff_preview(self.phase.build())


class PickedRefactorRecord(ActionRecord):
    type: Literal["picked-refactor"]
    refactoring: RefactoringRecord

    def to_action(self) -> Any:
        return picked_refactor(self.refactoring.build())


class InlinePickedRefactorRecord(ActionRecord):
    type: Literal["inline-picked-refactor"]
    provider: str
    editor: str
    original_range: RangeRecord = Field(alias="originalRange")
    # Rename is accepted here so that `check` can report it as a defect
    refactoring: RefactoringRecord

    def to_action(self) -> Any:
        return inline_picked_refactor(
            self.provider,
            self.editor,
            self.original_range.build(),
            self.refactoring.build(),  # type: ignore[arg-type]
        )


class ExecuteRecord(ActionRecord):
    type: Literal["execute"]

    def to_action(self) -> Any:
        return execute()


class ConfirmRecord(ActionRecord):
    type: Literal["confirm"]
    response: Any = None

    def to_action(self) -> Any:
        return confirm(self.response)


class LoadDiffPreviewRecord(ActionRecord):
    type: Literal["load-diff-preview"]
    previous_phase: PhaseRecord = Field(alias="previousPhase")

    def to_action(self) -> Any:
        return load_diff_preview(self.previous_phase.build())


class DisplayDiffPreviewRecord(ActionRecord):
    type: Literal["display-diff-preview"]
    diffs: list[Any] = Field(default_factory=list)

    def to_action(self) -> Any:
        return display_diff_preview(self.diffs)


class ProgressRecord(ActionRecord):
    type: Literal["progress"]
    message: str = ""
    value: float
    max: float

    def to_action(self) -> Any:
        return progress(self.message, self.value, self.max)


RecordedAction = Annotated[
    Union[
        OpenRecord,
        GotRefactoringsRecord,
        CloseRecord,
        BackFromDiffPreviewRecord,
        PickedRefactorRecord,
        InlinePickedRefactorRecord,
        ExecuteRecord,
        ConfirmRecord,
        LoadDiffPreviewRecord,
        DisplayDiffPreviewRecord,
        ProgressRecord,
    ],
    Field(discriminator="type"),
]

_recorded_action = TypeAdapter(RecordedAction)
_failed_action = TypeAdapter(FailedActionRecord)


def parse_record(data: Any, line: int | None = None) -> ActionRecord | FailedActionRecord:
    """Validate one raw mapping as a recorded action.

    Raises:
        ActionLogError: If the mapping is not a valid action record
    """
    failed = isinstance(data, dict) and data.get("error") is True
    adapter = _failed_action if failed else _recorded_action
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        summary = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ActionLogError(summary, line=line) from e


class ActionLog:
    """Reads recorded actions from a JSONL or YAML log.

    Iterating yields runtime actions ready for ``reduce``. The format is
    taken from the file suffix (``.yaml``/``.yml`` mean YAML) unless given.
    """

    def __init__(self, source: Path | IO[str], log_format: str | None = None) -> None:
        self._source: IO[str]
        self._owns_file = False

        if isinstance(source, Path):
            if log_format is None:
                log_format = "yaml" if source.suffix.lower() in YAML_SUFFIXES else "jsonl"
            try:
                self._source = open(source, encoding="utf-8")
            except OSError as e:
                raise ActionLogError(f"cannot open {source}: {e}") from e
            self._owns_file = True
        else:
            self._source = source

        if log_format not in (None, "jsonl", "yaml"):
            raise ValueError(f"Unknown action log format: {log_format}")
        self._format = log_format or "jsonl"

    def records(self) -> Iterator[ActionRecord | FailedActionRecord]:
        """Iterate validated records."""
        for line, data in self._raw():
            yield parse_record(data, line=line)

    def __iter__(self) -> Iterator[Any]:
        for record in self.records():
            yield record.to_action()

    def actions(self) -> list[Any]:
        """Load all actions into memory."""
        return list(self)

    def _raw(self) -> Iterator[tuple[int, Any]]:
        if self._format == "yaml":
            try:
                data = yaml.safe_load(self._source)
            except yaml.YAMLError as e:
                raise ActionLogError(f"invalid YAML: {e}") from e
            except UnicodeDecodeError as e:
                raise ActionLogError(f"not valid UTF-8: {e.reason}") from e
            if data is None:
                return
            if not isinstance(data, list):
                raise ActionLogError("YAML action log must be a list of actions")
            yield from enumerate(data, start=1)
            return

        for line_no, line in self._lines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                yield line_no, json.loads(line)
            except json.JSONDecodeError as e:
                raise ActionLogError(f"invalid JSON: {e.msg}", line=line_no) from e

    def _lines(self) -> Iterator[tuple[int, str]]:
        line_no = 1
        while True:
            try:
                line = self._source.readline()
            except UnicodeDecodeError as e:
                raise ActionLogError(f"not valid UTF-8: {e.reason}", line=line_no) from e
            if not line:
                return
            yield line_no, line
            line_no += 1

    def close(self) -> None:
        if self._owns_file:
            self._source.close()

    def __enter__(self) -> ActionLog:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def replay(
    actions: Iterable[Any],
    state: RefactorState | None = None,
) -> Iterator[tuple[Any, RefactorState]]:
    """Fold actions through ``reduce``, yielding each action with its result.

    Raises:
        RefactorInvariantError: At the first action the state cannot accept
    """
    current: RefactorState = state if state is not None else ClosedState()
    for action in actions:
        current = reduce(current, action)
        yield action, current
