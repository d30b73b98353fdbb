"""
Puzzle parsing utilities for Horsepen.

Provides three input shapes:
1. Map text, one character per cell (the level format)
2. Flat cell arrays with integer or string codes
3. Decoded level records (dicts holding a map plus budget and metadata)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from grid_types import DEFAULT_MAX_WALLS, CellIndex, CellType, Puzzle

__all__ = ["pair_portals", "parse_board", "parse_cells_array", "parse_level", "parse_puzzle"]

logger = logging.getLogger(__name__)

WALL_CHAR = "#"

_MAP_CHARS: dict[str, CellType] = {
    ".": CellType.GRASS,
    "~": CellType.WATER,
    "H": CellType.HORSE,
    "C": CellType.CHERRY,
    "c": CellType.CHERRY,
}

_INT_CODES: dict[int, CellType] = {
    0: CellType.GRASS,
    1: CellType.WATER,
    2: CellType.HORSE,
    3: CellType.CHERRY,
    4: CellType.PORTAL,
    5: CellType.PORTAL,
}

_STR_CODES: dict[str, CellType] = {
    "G": CellType.GRASS,
    "GRASS": CellType.GRASS,
    "W": CellType.WATER,
    "WATER": CellType.WATER,
    "H": CellType.HORSE,
    "HORSE": CellType.HORSE,
    "C": CellType.CHERRY,
    "CHERRY": CellType.CHERRY,
    "P": CellType.PORTAL,
    "PORTAL": CellType.PORTAL,
}


def pair_portals(groups: Iterable[Sequence[CellIndex]]) -> dict[CellIndex, CellIndex]:
    """
    Connect portals within each group two at a time, in the order given.

    The first portal pairs with the second, the third with the fourth, and so
    on. A trailing odd portal is left unpaired (and logged).

    Args:
        groups: Sequences of portal indices that may connect to each other

    Returns:
        Symmetric mapping from each paired portal to its partner
    """
    connections: dict[CellIndex, CellIndex] = {}
    for group in groups:
        for i in range(0, len(group) - 1, 2):
            a, b = group[i], group[i + 1]
            connections[a] = b
            connections[b] = a
        if len(group) % 2:
            logger.warning("pair_portals: portal at index %d has no partner", group[-1])
    return connections


def _parse_rows(
    text: str,
    allow_walls: bool,
) -> tuple[int, dict[CellIndex, CellType], dict[str, list[CellIndex]], set[CellIndex], tuple[int, int] | None]:
    """Shared scanner for parse_puzzle and parse_board."""
    lines = [line.rstrip("\r") for line in text.split("\n") if line.strip()]
    if not lines:
        raise ValueError("Empty map: expected at least one non-blank row")

    width = max(len(line) for line in lines)
    height = len(lines)
    if width != height:
        raise ValueError(
            f"Map must be square\n"
            f"  Rows: {height}\n"
            f"  Columns (longest row): {width}\n"
            f"  Short rows are padded with grass, so the longest row sets the width"
        )

    cells: dict[CellIndex, CellType] = {}
    portal_groups: dict[str, list[CellIndex]] = {}
    walls: set[CellIndex] = set()
    horse: tuple[int, int] | None = None

    for row, line in enumerate(lines):
        for col, char in enumerate(line):
            index = row * width + col

            if char.isdigit():
                cells[index] = CellType.PORTAL
                portal_groups.setdefault(char, []).append(index)
            elif allow_walls and char == WALL_CHAR:
                walls.add(index)
            elif char in _MAP_CHARS:
                cell_type = _MAP_CHARS[char]
                if cell_type is CellType.HORSE:
                    if horse is not None:
                        raise ValueError(
                            f"More than one horse in map\n"
                            f"  First: row {horse[0]}, column {horse[1]}\n"
                            f"  Second: row {row}, column {col}"
                        )
                    horse = (row, col)
                if cell_type is not CellType.GRASS:
                    cells[index] = cell_type
            # Anything else is grass

    return width, cells, portal_groups, walls, horse


def parse_puzzle(
    map_text: str,
    budget: int | None = None,
    name: str | None = None,
    creator_name: str | None = None,
    level_id: str | None = None,
    day: str | None = None,
) -> Puzzle:
    """
    Parse a puzzle from its map text.

    Format:
    - One row per line, one character per cell; blank lines are skipped
    - Rows are not trimmed: a leading space is a grass cell
    - Width is the longest row; shorter rows are padded with grass
    - Cell characters:
      * '.': Grass
      * '~': Water
      * 'H': The horse (at most one; defaults to the center if absent)
      * 'C' or 'c': Cherry
      * '0'-'9': Portal; portals with the same digit connect in pairs
      * Anything else: Grass

    Example:
        \"\"\"
        .....
        .1.~.
        ..H..
        .C.1.
        .....
        \"\"\"
        Creates a 5x5 puzzle with the horse at (2, 2), water at (1, 3), a
        cherry at (3, 1) and portals (1, 1) <-> (3, 3).

    Args:
        map_text: The map, rows separated by newlines
        budget: Wall budget (defaults to 11)
        name, creator_name, level_id, day: Optional metadata

    Returns:
        Parsed Puzzle

    Raises:
        ValueError: If the map is empty, not square or has several horses
    """
    size, cells, portal_groups, _, horse = _parse_rows(map_text, allow_walls=False)
    return _build_puzzle(size, cells, portal_groups, horse, budget, name, creator_name, level_id, day)


def parse_board(
    board_text: str,
    budget: int | None = None,
    name: str | None = None,
) -> tuple[Puzzle, set[CellIndex]]:
    """
    Parse a puzzle together with placed walls.

    Same format as parse_puzzle, plus '#' for a wall standing on grass.

    Example:
        \"\"\"
        #####
        #...#
        #.H.#
        #...#
        ##.##
        \"\"\"

    Returns:
        (puzzle, walls)
    """
    size, cells, portal_groups, walls, horse = _parse_rows(board_text, allow_walls=True)
    puzzle = _build_puzzle(size, cells, portal_groups, horse, budget, name, None, None, None)
    return puzzle, walls


def _build_puzzle(
    size: int,
    cells: dict[CellIndex, CellType],
    portal_groups: dict[str, list[CellIndex]],
    horse: tuple[int, int] | None,
    budget: int | None,
    name: str | None,
    creator_name: str | None,
    level_id: str | None,
    day: str | None,
) -> Puzzle:
    portals = pair_portals(portal_groups[key] for key in sorted(portal_groups))
    horse_row, horse_col = horse if horse is not None else (size // 2, size // 2)

    logger.debug(
        "parsed puzzle %s: %dx%d, budget=%s, water=%d, cherries=%d, portals=%d",
        name or "<unnamed>",
        size,
        size,
        budget,
        sum(1 for t in cells.values() if t is CellType.WATER),
        sum(1 for t in cells.values() if t is CellType.CHERRY),
        len(portals),
    )

    return Puzzle(
        grid_size=size,
        cells=cells,
        portals=portals,
        max_walls=budget if budget is not None else DEFAULT_MAX_WALLS,
        horse_row=horse_row,
        horse_col=horse_col,
        name=name,
        creator_name=creator_name,
        level_id=level_id,
        day=day,
    )


def parse_cells_array(
    cells: Sequence[int | str],
    width: int,
    height: int,
    max_walls: int | None = None,
    name: str | None = None,
    level_id: str | None = None,
    day: str | None = None,
) -> Puzzle:
    """
    Parse a puzzle from a flat row-major array of cell codes.

    Codes:
    - Integers: 0 grass, 1 water, 2 horse, 3 cherry, 4 or 5 portal
    - Strings (case-insensitive): G/GRASS, W/WATER, H/HORSE, C/CHERRY, P/PORTAL
    - Unknown codes: grass

    All portals connect in scan order, first with second and so on. If several
    horses appear the last one wins, matching how level arrays are exported.

    Raises:
        ValueError: If width != height or the array is shorter than width * height
    """
    if width != height:
        raise ValueError(f"Cell array must describe a square grid, got {width}x{height}")
    if len(cells) < width * height:
        raise ValueError(
            f"Cell array too short\n"
            f"  Expected: {width * height} cells ({width}x{height})\n"
            f"  Got: {len(cells)}"
        )

    parsed: dict[CellIndex, CellType] = {}
    portal_indices: list[CellIndex] = []
    horse: tuple[int, int] | None = None

    for index, code in enumerate(cells[: width * height]):
        if isinstance(code, str):
            cell_type = _STR_CODES.get(code.upper(), CellType.GRASS)
        else:
            cell_type = _INT_CODES.get(code, CellType.GRASS)

        if cell_type is CellType.GRASS:
            continue
        parsed[index] = cell_type
        if cell_type is CellType.HORSE:
            horse = divmod(index, width)
        elif cell_type is CellType.PORTAL:
            portal_indices.append(index)

    portals = pair_portals([portal_indices])
    horse_row, horse_col = horse if horse is not None else (height // 2, width // 2)

    return Puzzle(
        grid_size=width,
        cells=parsed,
        portals=portals,
        max_walls=max_walls if max_walls is not None else DEFAULT_MAX_WALLS,
        horse_row=horse_row,
        horse_col=horse_col,
        name=name,
        level_id=level_id,
        day=day,
    )


def parse_level(data: Mapping[str, Any], day: str | None = None) -> Puzzle:
    """
    Parse a decoded level record.

    Recognised keys: "map" (required), "budget", "name", "creatorName", "id".

    Example:
        {"id": "abc", "name": "Dual Portals", "budget": 9, "map": "...\\n.H.\\n..."}
    """
    map_text = data.get("map")
    if not isinstance(map_text, str):
        raise ValueError(
            f"Level record has no map\n"
            f"  Keys present: {', '.join(sorted(data)) or '<none>'}"
        )

    return parse_puzzle(
        map_text,
        budget=data.get("budget"),
        name=data.get("name"),
        creator_name=data.get("creatorName"),
        level_id=data.get("id"),
        day=day,
    )
