"""Exceptions raised by refactorizer."""

from __future__ import annotations


class RefactorInvariantError(AssertionError):
    """An action arrived that the current session state cannot accept.

    This signals a sequencing defect in whoever dispatched the action, not a
    recoverable runtime condition. Raised when:
    - An action requires an open session and the session is closed (or vice versa)
    - An action requires a specific phase and a different phase is active
    - A refactoring carries a kind with no matching phase

    Attributes:
        action_type: Wire name of the offending action, if any
        expected: Description of the state/phase the action requires
        actual: Description of the state/phase that was found
    """

    def __init__(self, action_type: str | None, expected: str, actual: str) -> None:
        self.action_type = action_type
        self.expected = expected
        self.actual = actual
        prefix = f"{action_type}: " if action_type else ""
        super().__init__(f"{prefix}expected {expected}, got {actual}")


class ActionLogError(Exception):
    """A recorded action log could not be read or validated.

    Attributes:
        line: 1-based line (JSONL) or item (YAML) number, when known
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"record {line}: {message}"
        super().__init__(message)
