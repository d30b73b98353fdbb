"""
ASCII rendering for Horsepen boards.

Draws one boxed grid per call, one character per cell, with simple_chalk
colors for enclosed cells, the escape path and the cursor.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from game import ScoringRules, Submission, portal_colors, score_breakdown
from grid_types import CellIndex, CellType, Puzzle

Colorizer = Callable[[str], str]

_GLYPHS: dict[CellType, str] = {
    CellType.GRASS: ".",
    CellType.WATER: "~",
    CellType.HORSE: "H",
    CellType.CHERRY: "C",
}

WALL_GLYPH = "#"
PATH_GLYPH = "*"
ENCLOSED_GLYPH = "o"

# Portal pairs cycle through these
PORTAL_COLORS: list[Colorizer] = [
    chalk.magenta,
    chalk.cyan,
    chalk.blueBright,
    chalk.redBright,
    chalk.yellowBright,
    chalk.greenBright,
]


def _plain(s: str) -> str:
    return s


def cell_glyph(
    puzzle: Puzzle,
    row: int,
    col: int,
    walls: set[CellIndex],
    enclosed: set[CellIndex],
    path: set[CellIndex],
    portal_ids: dict[CellIndex, int],
) -> str:
    """Single character for a cell. Walls cover whatever they stand on."""
    index = puzzle.cell_index(row, col)
    cell_type = puzzle.cell_type(row, col)

    if index in walls:
        return WALL_GLYPH
    if cell_type is CellType.PORTAL:
        # Unpaired portals still render, as '?'
        pair_id = portal_ids.get(index)
        return str(pair_id % 10) if pair_id is not None else "?"
    if cell_type is CellType.GRASS:
        if index in path:
            return PATH_GLYPH
        if index in enclosed:
            return ENCLOSED_GLYPH
    return _GLYPHS[cell_type]


def render_board(
    puzzle: Puzzle,
    walls: Iterable[CellIndex] = (),
    enclosed: Iterable[CellIndex] = (),
    escape_path: Iterable[CellIndex] = (),
    cursor: tuple[int, int] | None = None,
    cell_width: int = 3,
    color: bool = True,
) -> str:
    """
    Render a puzzle board as a boxed character grid.

    Args:
        puzzle: The puzzle to render
        walls: Indices of placed walls
        enclosed: Indices to mark as enclosed
        escape_path: Indices on the horse's way out
        cursor: Optional (row, col) to highlight
        cell_width: Characters per cell (default 3)
        color: If False, return plain text with no ANSI codes

    Returns:
        Rendered board, lines joined with newlines
    """
    wall_set = set(walls)
    enclosed_set = set(enclosed)
    path_set = set(escape_path)
    portal_ids = portal_colors(puzzle.portals)

    size = puzzle.grid_size
    border_width = 2  # left and right borders
    grid_width = size * cell_width + border_width
    title = f" {puzzle.name} " if puzzle.name else ""

    frame: Colorizer = chalk.green if color else _plain
    lines: list[str] = []

    # Top border with title
    title_line = "┌" + "─" * (grid_width - 2) + "┐"
    if title and len(title) <= grid_width - 2:
        title_start = (grid_width - len(title)) // 2
        title_line = (
            "┌" +
            "─" * (title_start - 1) +
            title +
            "─" * (grid_width - title_start - len(title) - 1) +
            "┐"
        )
    lines.append(frame(title_line))

    for row in range(size):
        line_parts = [frame("│")]

        for col in range(size):
            index = puzzle.cell_index(row, col)
            char = cell_glyph(puzzle, row, col, wall_set, enclosed_set, path_set, portal_ids)
            content = char if cell_width == 1 else char.center(cell_width)

            if color:
                if cursor == (row, col):
                    content = chalk.bgWhite.black(content)
                elif index in wall_set:
                    content = chalk.white.bold(content)
                elif index in path_set:
                    content = chalk.bgRed.white(content)
                elif index in portal_ids:
                    content = PORTAL_COLORS[portal_ids[index] % len(PORTAL_COLORS)](content)
                elif puzzle.cell_type(row, col) is CellType.WATER:
                    content = chalk.blue(content)
                elif index in enclosed_set:
                    content = chalk.bgYellow.black(content)
                elif puzzle.cell_type(row, col) is CellType.CHERRY:
                    content = chalk.red(content)
                else:
                    content = chalk.green(content)

            line_parts.append(content)

        line_parts.append(frame("│"))
        lines.append("".join(line_parts))

    # Bottom border
    lines.append(frame("└" + "─" * (grid_width - 2) + "┘"))

    return "\n".join(lines)


def submission_summary(puzzle: Puzzle, submission: Submission, rules: ScoringRules = ScoringRules()) -> str:
    """One line describing how a submission went."""
    if submission.horse_enclosed:
        return f"Score: {submission.score} ({score_breakdown(puzzle, submission.enclosed, rules)})"
    if submission.escape_path:
        return f"The horse escapes in {len(submission.escape_path) - 1} steps"
    return "The horse escapes"


def render_submission(
    puzzle: Puzzle,
    walls: Iterable[CellIndex],
    submission: Submission,
    rules: ScoringRules = ScoringRules(),
    color: bool = True,
) -> str:
    """Board with the submission's enclosure or escape path, plus a summary line."""
    board = render_board(
        puzzle,
        walls=walls,
        enclosed=submission.enclosed,
        escape_path=submission.escape_path,
        color=color,
    )
    return board + "\n" + submission_summary(puzzle, submission, rules)
