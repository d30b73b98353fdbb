"""
Game state for a single puzzle: placing walls within a budget, one
submission, scoring.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Set
from dataclasses import dataclass
from enum import Enum

from enclosure import enclosed_cells, escape_path
from grid_types import CellIndex, CellType, Puzzle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringRules:
    """Rules governing scoring."""

    cherry_bonus: int = 3


class ToggleOutcome(Enum):
    """Result of trying to toggle a wall."""

    PLACED = "placed"
    REMOVED = "removed"
    NOT_GRASS = "not_grass"  # Only grass accepts walls
    NO_WALLS_LEFT = "no_walls_left"
    ALREADY_SUBMITTED = "already_submitted"


@dataclass(frozen=True)
class Submission:
    """Outcome of submitting a wall layout."""

    enclosed: frozenset[CellIndex]
    horse_enclosed: bool
    score: int | None  # None when the horse escapes
    escape_path: tuple[CellIndex, ...]  # Empty when the horse is enclosed


def _enclosed_cherries(puzzle: Puzzle, enclosed: Set[CellIndex]) -> int:
    return len(puzzle.indices_of(CellType.CHERRY) & enclosed)


def calculate_score(puzzle: Puzzle, enclosed: Set[CellIndex], rules: ScoringRules = ScoringRules()) -> int:
    """One point per enclosed cell plus the cherry bonus for each enclosed cherry."""
    return len(enclosed) + _enclosed_cherries(puzzle, enclosed) * rules.cherry_bonus


def score_breakdown(puzzle: Puzzle, enclosed: Set[CellIndex], rules: ScoringRules = ScoringRules()) -> str:
    if not enclosed:
        return ""
    base = len(enclosed)
    cherries = _enclosed_cherries(puzzle, enclosed)
    if cherries:
        bonus = cherries * rules.cherry_bonus
        return f"Base: {base} + Cherry bonus: {cherries} × {rules.cherry_bonus} = {bonus}"
    return f"Base: {base} (no cherries enclosed)"


def portal_colors(portals: Mapping[CellIndex, CellIndex]) -> dict[CellIndex, int]:
    """
    Give each portal pair its own color id, in mapping order.

    Both ends of a pair share the id. An entry whose ends were already seen
    is skipped, so a symmetric map yields one id per pair.
    """
    colors: dict[CellIndex, int] = {}
    next_id = 0
    for a, b in portals.items():
        if a not in colors and b not in colors:
            colors[a] = next_id
            colors[b] = next_id
            next_id += 1
    return colors


class GameState:
    """Mutable play state wrapped around an immutable Puzzle."""

    def __init__(self, puzzle: Puzzle, rules: ScoringRules = ScoringRules()) -> None:
        self.puzzle = puzzle
        self.rules = rules
        self.walls: set[CellIndex] = set()
        self.submission: Submission | None = None

    @property
    def remaining_walls(self) -> int:
        return self.puzzle.max_walls - len(self.walls)

    @property
    def submitted(self) -> bool:
        return self.submission is not None

    def toggle_wall(self, row: int, col: int) -> ToggleOutcome:
        """Place a wall on grass, or remove the one already there."""
        if self.submitted:
            return ToggleOutcome.ALREADY_SUBMITTED
        if self.puzzle.cell_type(row, col) is not CellType.GRASS:
            return ToggleOutcome.NOT_GRASS

        index = self.puzzle.cell_index(row, col)
        if index in self.walls:
            self.walls.remove(index)
            return ToggleOutcome.REMOVED
        if self.remaining_walls <= 0:
            return ToggleOutcome.NO_WALLS_LEFT
        self.walls.add(index)
        return ToggleOutcome.PLACED

    def enclosed(self) -> set[CellIndex]:
        """Enclosed cells for the current walls."""
        p = self.puzzle
        return enclosed_cells(p.grid_size, frozenset(self.walls), p.is_water, p.portals)

    def preview_escape(self) -> list[CellIndex]:
        """Current shortest way out for the horse ([] if it is penned in)."""
        p = self.puzzle
        return escape_path(p.grid_size, p.horse_row, p.horse_col, frozenset(self.walls), p.is_water, p.portals)

    def submit(self) -> Submission:
        """
        Lock in the current walls. Only the first call counts; later calls
        return the same Submission.
        """
        if self.submission is not None:
            return self.submission

        enclosed = self.enclosed()
        horse_enclosed = self.puzzle.horse_index in enclosed
        if horse_enclosed:
            submission = Submission(
                enclosed=frozenset(enclosed),
                horse_enclosed=True,
                score=calculate_score(self.puzzle, enclosed, self.rules),
                escape_path=(),
            )
        else:
            submission = Submission(
                enclosed=frozenset(enclosed),
                horse_enclosed=False,
                score=None,
                escape_path=tuple(self.preview_escape()),
            )

        logger.info(
            "submit: puzzle=%s walls=%d enclosed=%d horse_enclosed=%s score=%s",
            self.puzzle.name or "<unnamed>",
            len(self.walls),
            len(enclosed),
            horse_enclosed,
            submission.score,
        )
        self.submission = submission
        return submission

    def reset(self) -> None:
        self.walls = set()
        self.submission = None
