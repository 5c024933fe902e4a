"""Minimal editor position types.

The reducer treats editors, points and ranges as opaque handles and only
ever reads ``range.start``. These value types exist for callers without an
editor of their own, such as recorded action logs and tests.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Point:
    """Zero-based buffer position."""

    row: int
    column: int

    def to_list(self) -> list[int]:
        return [self.row, self.column]

    @staticmethod
    def from_list(data: list[int] | tuple[int, int]) -> Point:
        row, column = data
        return Point(row=row, column=column)


@dataclass(frozen=True)
class Range:
    """Buffer range from ``start`` (inclusive) to ``end`` (exclusive)."""

    start: Point
    end: Point

    @staticmethod
    def of(start_row: int, start_column: int, end_row: int, end_column: int) -> Range:
        return Range(Point(start_row, start_column), Point(end_row, end_column))

    def is_empty(self) -> bool:
        return self.start == self.end
