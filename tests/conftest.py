"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from refactorizer.config import reset_config
from refactorizer.logging import reset_logging
from refactorizer.refactorings import (
    ArgumentType,
    FreeformArgument,
    FreeformRefactoring,
    RenameRefactoring,
    SymbolAtPoint,
)
from refactorizer.text import Range
from tests.utils import FakeHandle


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep user config, env overrides and log handlers out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    monkeypatch.delenv("REFACTORIZER_LOG", raising=False)
    monkeypatch.delenv("REFACTORIZER_HISTORY_LIMIT", raising=False)
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def provider() -> FakeHandle:
    return FakeHandle("pyright")


@pytest.fixture
def editor() -> FakeHandle:
    return FakeHandle("main.py")


@pytest.fixture
def original_range() -> Range:
    return Range.of(3, 4, 3, 9)


@pytest.fixture
def rename_refactoring() -> RenameRefactoring:
    return RenameRefactoring(symbol_at_point=SymbolAtPoint("count", Range.of(3, 4, 3, 9)))


@pytest.fixture
def freeform_refactoring() -> FreeformRefactoring:
    return FreeformRefactoring(
        id="extract-function",
        name="Extract function",
        description="Move the selection into a new function",
        range=Range.of(3, 0, 7, 0),
        args={
            "name": FreeformArgument(ArgumentType.STRING, "Function name", default="extracted"),
        },
    )
