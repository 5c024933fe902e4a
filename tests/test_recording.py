"""Tests for recorded action logs and replay."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from refactorizer.actions import ActionType, ErrorAction, PickedRefactorAction
from refactorizer.errors import ActionLogError, RefactorInvariantError
from refactorizer.recording import ActionLog, ActionRecord, parse_record, replay
from refactorizer.refactorings import RefactoringKind, RenameRefactoring
from refactorizer.state import (
    ClosedState,
    DiffPreviewPhase,
    FreeformPhase,
    OpenState,
    PhaseType,
    PickPhase,
    RefactorUI,
)
from refactorizer.text import Point, Range

RANGE = {"start": [3, 4], "end": [3, 9]}
RENAME = {
    "kind": "rename",
    "symbol_at_point": {"text": "count", "range": RANGE},
}
FREEFORM = {
    "kind": "freeform",
    "id": "extract-function",
    "name": "Extract function",
    "range": RANGE,
    "args": {"name": {"type": "string", "description": "Function name"}},
}
PICK_PHASE = {
    "type": "pick",
    "provider": "pyright",
    "editor": "main.py",
    "original_range": RANGE,
    "available_refactorings": [RENAME, FREEFORM],
}

SESSION = [
    {"type": "open", "ui": "generic"},
    {
        "type": "got-refactorings",
        "provider": "pyright",
        "editor": "main.py",
        "original_range": RANGE,
        "available_refactorings": [RENAME, FREEFORM],
    },
    {"type": "load-diff-preview", "previous_phase": PICK_PHASE},
    {"type": "display-diff-preview", "diffs": ["--- a/main.py\n+++ b/main.py"]},
    {"type": "back-from-diff-preview", "phase": PICK_PHASE},
    {"type": "picked-refactor", "refactoring": FREEFORM},
    {"type": "execute", "error": True, "message": "provider timed out"},
    {"type": "execute"},
    {"type": "progress", "message": "Applying", "value": 1, "max": 2},
    {"type": "confirm", "response": {"files": 2}},
    {"type": "close"},
]


def _jsonl(records: list[dict]) -> io.StringIO:
    return io.StringIO("\n".join(json.dumps(r) for r in records) + "\n")


class TestParseRecord:
    """Tests for validating single records."""

    def test_open(self) -> None:
        action = parse_record({"type": "open", "ui": "rename"}).to_action()
        assert action.type is ActionType.OPEN
        assert action.ui is RefactorUI.RENAME

    def test_picked_rename(self) -> None:
        action = parse_record({"type": "picked-refactor", "refactoring": RENAME}).to_action()
        assert isinstance(action, PickedRefactorAction)
        assert isinstance(action.refactoring, RenameRefactoring)
        assert action.refactoring.kind is RefactoringKind.RENAME
        assert action.refactoring.symbol_at_point.range == Range(Point(3, 4), Point(3, 9))

    def test_camel_case_alias(self) -> None:
        refactoring = {"kind": "rename", "symbolAtPoint": RENAME["symbol_at_point"]}
        action = parse_record({"type": "picked-refactor", "refactoring": refactoring}).to_action()
        assert action.refactoring.symbol_at_point.text == "count"

    def test_error_record(self) -> None:
        action = parse_record({"type": "close", "error": True, "message": "gone"}).to_action()
        assert action == ErrorAction(type=ActionType.CLOSE, message="gone")

    def test_error_record_needs_no_payload(self) -> None:
        action = parse_record({"type": "got-refactorings", "error": True}).to_action()
        assert action == ErrorAction(type=ActionType.GOT_REFACTORINGS)

    def test_error_record_unknown_type(self) -> None:
        with pytest.raises(ActionLogError):
            parse_record({"type": "explode", "error": True})

    def test_nested_diff_preview_phase(self) -> None:
        record = {
            "type": "back-from-diff-preview",
            "phase": {
                "type": "diff-preview",
                "loading": False,
                "diffs": ["d"],
                "previous_phase": {"type": "execute"},
            },
        }
        phase = parse_record(record).to_action().phase
        assert isinstance(phase, DiffPreviewPhase)
        assert phase.previous_phase.type is PhaseType.EXECUTE
        assert phase.diffs == ("d",)

    def test_unknown_type(self) -> None:
        with pytest.raises(ActionLogError, match="record 4"):
            parse_record({"type": "explode"}, line=4)

    def test_missing_field(self) -> None:
        with pytest.raises(ActionLogError, match="ui"):
            parse_record({"type": "open"})

    def test_extra_field(self) -> None:
        with pytest.raises(ActionLogError):
            parse_record({"type": "close", "reason": "done"})

    def test_camel_case_action_fields(self) -> None:
        record = {
            "type": "load-diff-preview",
            "previousPhase": {
                "type": "pick",
                "provider": "pyright",
                "editor": "main.py",
                "originalRange": RANGE,
                "availableRefactorings": [RENAME],
            },
        }
        phase = parse_record(record).to_action().previous_phase
        assert isinstance(phase, PickPhase)
        assert phase.original_range == Range.of(3, 4, 3, 9)
        assert len(phase.available_refactorings) == 1

    def test_base_record_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            ActionRecord(type="close")


class TestActionLog:
    """Tests for reading JSONL and YAML logs."""

    def test_jsonl_stream(self) -> None:
        actions = ActionLog(_jsonl(SESSION)).actions()
        assert len(actions) == len(SESSION)
        assert actions[6].error is True

    def test_blank_lines_and_comments(self) -> None:
        source = io.StringIO('# recorded by hand\n\n{"type": "open", "ui": "generic"}\n\n')
        assert [a.type for a in ActionLog(source)] == [ActionType.OPEN]

    def test_invalid_json_reports_line(self) -> None:
        source = io.StringIO('{"type": "open", "ui": "generic"}\n{"type": \n')
        with pytest.raises(ActionLogError) as excinfo:
            ActionLog(source).actions()
        assert excinfo.value.line == 2

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "session.yaml"
        path.write_text(
            "- type: open\n"
            "  ui: generic\n"
            "- type: execute\n"
            "- type: close\n",
            encoding="utf-8",
        )
        with ActionLog(path) as log:
            assert [str(a.type) for a in log] == ["open", "execute", "close"]

    def test_yaml_must_be_list(self, tmp_path: Path) -> None:
        path = tmp_path / "session.yml"
        path.write_text("type: open\n", encoding="utf-8")
        with ActionLog(path) as log:
            with pytest.raises(ActionLogError, match="list"):
                log.actions()

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with ActionLog(path) as log:
            assert log.actions() == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ActionLogError, match="cannot open"):
            ActionLog(tmp_path / "missing.jsonl")

    def test_closes_owned_file(self, tmp_path: Path) -> None:
        path = tmp_path / "session.jsonl"
        path.write_text(json.dumps({"type": "close"}) + "\n", encoding="utf-8")
        log = ActionLog(path)
        log.close()
        assert log._source.closed

    def test_jsonl_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "session.jsonl"
        path.write_bytes(b'{"type": "close"}\n\xff\xfe\n')
        with ActionLog(path) as log:
            with pytest.raises(ActionLogError, match="UTF-8"):
                log.actions()

    def test_yaml_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "session.yaml"
        path.write_bytes(b"- type: close\n- type: \xff\xfe\n")
        with ActionLog(path) as log:
            with pytest.raises(ActionLogError, match="UTF-8"):
                log.actions()

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError):
            ActionLog(io.StringIO(""), log_format="xml")


class TestReplay:
    """Tests for folding a log through the reducer."""

    def test_full_session(self) -> None:
        steps = list(replay(ActionLog(_jsonl(SESSION))))
        phases = [
            state.phase.type if isinstance(state, OpenState) else "closed"
            for _action, state in steps
        ]
        assert phases == [
            PhaseType.GET_REFACTORINGS,
            PhaseType.PICK,
            PhaseType.DIFF_PREVIEW,
            PhaseType.DIFF_PREVIEW,
            PhaseType.PICK,
            PhaseType.FREEFORM,
            PhaseType.FREEFORM,  # failed execute is ignored
            PhaseType.EXECUTE,
            PhaseType.PROGRESS,
            PhaseType.CONFIRM,
            "closed",
        ]
        _action, freeform_state = steps[5]
        assert isinstance(freeform_state.phase, FreeformPhase)
        assert freeform_state.phase.provider == "pyright"
        assert freeform_state.phase.original_range == Range.of(3, 4, 3, 9)

    def test_diff_preview_restores_pick(self) -> None:
        steps = list(replay(ActionLog(_jsonl(SESSION[:5]))))
        _action, loaded = steps[3]
        assert loaded.phase.loading is False
        _action, back = steps[4]
        assert isinstance(back.phase, PickPhase)
        assert back.phase == loaded.phase.previous_phase

    def test_starting_state(self) -> None:
        start = OpenState(ui=RefactorUI.RENAME, phase=FreeformPhase("p", "e", None, None))
        steps = list(replay(ActionLog(_jsonl([{"type": "close"}])), state=start))
        assert steps[-1][1] == ClosedState()

    def test_invariant_violation_stops_replay(self) -> None:
        records = [{"type": "open", "ui": "generic"}, {"type": "open", "ui": "generic"}]
        iterator = replay(ActionLog(_jsonl(records)))
        next(iterator)
        with pytest.raises(RefactorInvariantError):
            next(iterator)

    def test_inline_rename_is_a_violation(self) -> None:
        record = {
            "type": "inline-picked-refactor",
            "provider": "pyright",
            "editor": "main.py",
            "original_range": RANGE,
            "refactoring": RENAME,
        }
        with pytest.raises(RefactorInvariantError, match="freeform"):
            list(replay(ActionLog(_jsonl([record]))))
