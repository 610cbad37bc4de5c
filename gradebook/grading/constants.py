"""Fixed scoring configuration for the gradebook.

Values here are deployment-time configuration: changing a threshold is a
release, not a runtime operation, so everything is ``Final`` and tuples.
"""

from __future__ import annotations

from typing import Final, Tuple

__all__ = [
    "COLLECTED_SLOTS",
    "MAX_COLLECTED_SCORE",
    "MAX_MIDTERM_SCORE",
    "MAX_FINAL_SCORE",
    "GRADE_THRESHOLDS",
    "GRADE_SCALE",
    "PASSING_GRADE",
    "FAILING_GRADE",
]

COLLECTED_SLOTS: Final[int] = 6
"""Number of coursework (collected) score cells per enrollment."""

MAX_COLLECTED_SCORE: Final[float] = 10.0
MAX_MIDTERM_SCORE: Final[float] = 20.0
MAX_FINAL_SCORE: Final[float] = 20.0

GRADE_THRESHOLDS: Final[Tuple[Tuple[float, float], ...]] = (
    (80.0, 4.0),
    (75.0, 3.5),
    (70.0, 3.0),
    (65.0, 2.5),
    (60.0, 2.0),
    (55.0, 1.5),
    (50.0, 1.0),
)
"""Descending ``(minimum total, grade)`` pairs; anything below the last row is 0."""

FAILING_GRADE: Final[float] = 0.0
PASSING_GRADE: Final[float] = 1.0

GRADE_SCALE: Final[Tuple[float, ...]] = tuple(grade for _, grade in GRADE_THRESHOLDS) + (FAILING_GRADE,)
"""All numeric grades from best to worst: 4, 3.5, 3, 2.5, 2, 1.5, 1, 0."""
