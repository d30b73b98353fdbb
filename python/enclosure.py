"""
Boundary reachability and escape paths over a walled grid with portals.
Two engines share one graph adapter: flood fill from the edges (which cells
are enclosed) and BFS from the horse (shortest way out).
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator, Set
from dataclasses import dataclass, field
from typing import Protocol

from grid_types import DELTAS, NEIGHBOR_ORDER, CellIndex, PortalMap, WaterFn, cell_index

logger = logging.getLogger(__name__)


# =============================================================================
# Grid Graph Adapter
# =============================================================================


def _check_grid_size(grid_size: int) -> None:
    if isinstance(grid_size, bool) or not isinstance(grid_size, int) or grid_size < 1:
        raise ValueError(f"grid_size must be a positive integer, got {grid_size!r}")


def is_edge_cell(grid_size: int, row: int, col: int) -> bool:
    return row == 0 or row == grid_size - 1 or col == 0 or col == grid_size - 1


def edge_cells(grid_size: int) -> Iterator[tuple[int, int]]:
    """
    Yield the outer ring: top row, bottom row, left column, right column.

    Corners come out more than once; callers dedupe with their visited set.
    """
    for col in range(grid_size):
        yield (0, col)
    for col in range(grid_size):
        yield (grid_size - 1, col)
    for row in range(grid_size):
        yield (row, 0)
    for row in range(grid_size):
        yield (row, grid_size - 1)


class GridGraph(Protocol):
    """What the search engines need to know about a board."""

    grid_size: int

    def is_traversable(self, row: int, col: int) -> bool: ...

    def neighbors(self, row: int, col: int) -> list[CellIndex]: ...


def _no_water(row: int, col: int) -> bool:
    return False


@dataclass(frozen=True)
class BoardGraph:
    """
    Set-backed GridGraph: walls as a set of indices, water as a predicate,
    portals as an index -> partner mapping.

    The portal map is read entry by entry. A one-sided entry gives a
    one-way jump; nothing here checks that pairs are symmetric.
    """

    grid_size: int
    walls: Set[CellIndex] = frozenset()
    is_water: WaterFn = _no_water
    portals: PortalMap = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_grid_size(self.grid_size)

    def is_traversable(self, row: int, col: int) -> bool:
        if row * self.grid_size + col in self.walls:
            return False
        return not self.is_water(row, col)

    def neighbors(self, row: int, col: int) -> list[CellIndex]:
        """
        Traversable orthogonal neighbors in N, S, W, E order, then the portal
        partner if (row, col) is a portal.

        The portal partner is added without a traversability check.
        """
        result: list[CellIndex] = []
        for direction in NEIGHBOR_ORDER:
            dr, dc = DELTAS[direction]
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.grid_size and 0 <= nc < self.grid_size and self.is_traversable(nr, nc):
                result.append(nr * self.grid_size + nc)

        partner = self.portals.get(row * self.grid_size + col)
        if partner is not None:
            result.append(partner)
        return result


# =============================================================================
# Boundary Reachability
# =============================================================================


def flood_from_edges(graph: GridGraph) -> set[CellIndex]:
    """
    Multi-source BFS seeded from every traversable cell on the outer ring.

    Args:
        graph: Board to search

    Returns:
        Indices reachable from the boundary through traversable cells and portals
    """
    size = graph.grid_size
    reachable: set[CellIndex] = set()
    queue: deque[CellIndex] = deque()

    for row, col in edge_cells(size):
        index = row * size + col
        if index not in reachable and graph.is_traversable(row, col):
            reachable.add(index)
            queue.append(index)

    seeds = len(queue)

    while queue:
        current = queue.popleft()
        for neighbor in graph.neighbors(current // size, current % size):
            if neighbor not in reachable:
                reachable.add(neighbor)
                queue.append(neighbor)

    logger.debug("flood_from_edges: size=%d seeds=%d reachable=%d", size, seeds, len(reachable))
    return reachable


def reachable_from_boundary(
    grid_size: int,
    walls: Set[CellIndex],
    is_water: WaterFn,
    portals: PortalMap | None = None,
) -> set[CellIndex]:
    """Cells reachable from any boundary cell. See flood_from_edges."""
    graph = BoardGraph(grid_size, walls, is_water, portals or {})
    return flood_from_edges(graph)


def enclosed_cells(
    grid_size: int,
    walls: Set[CellIndex],
    is_water: WaterFn,
    portals: PortalMap | None = None,
) -> set[CellIndex]:
    """
    Traversable cells that cannot reach the boundary.

    Walls and water are never enclosed, even when surrounded.

    Args:
        grid_size: Side length of the square grid
        walls: Indices of placed walls
        is_water: Predicate over (row, col)
        portals: Portal index -> partner index

    Returns:
        Set of enclosed cell indices
    """
    graph = BoardGraph(grid_size, walls, is_water, portals or {})
    reachable = flood_from_edges(graph)

    universe = {
        row * grid_size + col
        for row in range(grid_size)
        for col in range(grid_size)
        if graph.is_traversable(row, col)
    }
    enclosed = universe - reachable

    logger.info(
        "enclosed_cells: size=%d walls=%d portals=%d enclosed=%d",
        grid_size,
        len(walls),
        len(graph.portals),
        len(enclosed),
    )
    return enclosed


# =============================================================================
# Shortest Escape Path
# =============================================================================


def find_escape_path(graph: GridGraph, row: int, col: int) -> list[CellIndex]:
    """
    Shortest path from (row, col) to the nearest boundary cell.

    A portal jump counts as one step. Among equally short exits the first one
    dequeued wins, so N, S, W, E, portal expansion order decides ties.

    Args:
        graph: Board to search
        row: Source row
        col: Source column

    Returns:
        Indices from the source to a boundary cell, both inclusive. Empty if
        the source is blocked or no boundary cell can be reached.
    """
    size = graph.grid_size
    source = cell_index(size, row, col)
    if not graph.is_traversable(row, col):
        return []

    parent: dict[CellIndex, CellIndex | None] = {source: None}
    queue: deque[CellIndex] = deque([source])
    target: CellIndex | None = None

    while queue:
        current = queue.popleft()
        r, c = divmod(current, size)
        if is_edge_cell(size, r, c):
            target = current
            break

        for neighbor in graph.neighbors(r, c):
            if neighbor not in parent:
                parent[neighbor] = current
                queue.append(neighbor)

    if target is None:
        logger.debug("find_escape_path: no exit from (%d, %d), visited=%d", row, col, len(parent))
        return []

    path: list[CellIndex] = []
    step: CellIndex | None = target
    while step is not None:
        path.append(step)
        step = parent[step]
    path.reverse()

    logger.debug("find_escape_path: (%d, %d) -> %d in %d steps", row, col, target, len(path) - 1)
    return path


def escape_path(
    grid_size: int,
    source_row: int,
    source_col: int,
    walls: Set[CellIndex],
    is_water: WaterFn,
    portals: PortalMap | None = None,
) -> list[CellIndex]:
    """Shortest route from the source cell to the boundary. See find_escape_path."""
    graph = BoardGraph(grid_size, walls, is_water, portals or {})
    return find_escape_path(graph, source_row, source_col)
