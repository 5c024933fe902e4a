"""Shared test helpers for refactorizer tests."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FakeHandle:
    """Stands in for a provider or editor; the reducer never looks inside."""

    name: str
