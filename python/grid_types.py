"""
Shared type definitions for the horsepen system.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum


class Direction(Enum):
    """Cardinal direction for neighbor expansion."""

    N = "N"  # Up (decreasing row)
    S = "S"  # Down (increasing row)
    W = "W"  # Left (decreasing col)
    E = "E"  # Right (increasing col)


# Expansion order is part of the escape-path tie-break.
NEIGHBOR_ORDER: tuple[Direction, ...] = (Direction.N, Direction.S, Direction.W, Direction.E)

DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.W: (0, -1),
    Direction.E: (0, 1),
}


# =============================================================================
# Board Definition Types
# =============================================================================


class CellType(Enum):
    """What sits on a cell before any walls are placed."""

    GRASS = "grass"
    WATER = "water"
    HORSE = "horse"
    CHERRY = "cherry"
    PORTAL = "portal"


CellIndex = int
WaterFn = Callable[[int, int], bool]
PortalMap = Mapping[CellIndex, CellIndex]

DEFAULT_MAX_WALLS = 11


def cell_index(grid_size: int, row: int, col: int) -> CellIndex:
    """Row-major index of (row, col). Out-of-range coordinates raise ValueError."""
    if not (0 <= row < grid_size and 0 <= col < grid_size):
        raise ValueError(
            f"Cell ({row}, {col}) is outside the grid\n"
            f"  Grid size: {grid_size}x{grid_size}\n"
            f"  Valid rows and columns: 0..{grid_size - 1}"
        )
    return row * grid_size + col



@dataclass(frozen=True)
class Puzzle:
    """A square board plus the horse, portals and wall budget."""

    grid_size: int
    cells: dict[CellIndex, CellType] = field(default_factory=dict)  # missing = grass
    portals: dict[CellIndex, CellIndex] = field(default_factory=dict)
    max_walls: int = DEFAULT_MAX_WALLS
    horse_row: int = 0
    horse_col: int = 0

    # Metadata
    name: str | None = None
    creator_name: str | None = None
    level_id: str | None = None
    day: str | None = None

    def cell_index(self, row: int, col: int) -> CellIndex:
        return cell_index(self.grid_size, row, col)

    def cell_type(self, row: int, col: int) -> CellType:
        return self.cells.get(self.cell_index(row, col), CellType.GRASS)

    def is_water(self, row: int, col: int) -> bool:
        return self.cell_type(row, col) is CellType.WATER

    @property
    def horse_index(self) -> CellIndex:
        return self.cell_index(self.horse_row, self.horse_col)

    def indices_of(self, cell_type: CellType) -> set[CellIndex]:
        """All indices holding the given cell type (grass is scanned, not stored)."""
        if cell_type is CellType.GRASS:
            return {
                i for i in range(self.grid_size * self.grid_size)
                if self.cells.get(i, CellType.GRASS) is CellType.GRASS
            }
        return {i for i, t in self.cells.items() if t is cell_type}
