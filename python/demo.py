"""
Demonstration scripts for the Horsepen enclosure engine.
"""

import logging
import sys

from ascii_render import render_board, render_submission
from enclosure import enclosed_cells, escape_path, reachable_from_boundary
from game import GameState, ToggleOutcome
from grid_parser import parse_board, parse_puzzle

# Boards with walls already drawn in ('#'), keyed by name
BOARDS = dict(
    pen=(
        "#####\n"
        "#...#\n"
        "#.H.#\n"
        "#...#\n"
        "#####"
    ),
    gap=(
        "##.##\n"
        "#...#\n"
        "#.H.#\n"
        "#...#\n"
        "#####"
    ),
    pocket=(
        "#####\n"
        "#..##\n"
        "#.H##\n"
        "#..##\n"
        "#####"
    ),
    portal=(
        "1######\n"
        "#.....#\n"
        "#.....#\n"
        "#..H..#\n"
        "#.....#\n"
        "#....1#\n"
        "#######"
    ),
)

# Puzzles to play, without walls
LAYOUTS = dict(
    meadow=(
        ".......\n"
        "..~~...\n"
        ".~.C...\n"
        "...H..~\n"
        "..1....\n"
        ".....1.\n"
        "......."
    ),
    river=(
        "~~~~~~~\n"
        "~.....~\n"
        "~.C.1.~\n"
        "...H...\n"
        "~.....~\n"
        "~..C..~\n"
        "~~~1~~~"
    ),
)


def enclosure_demo() -> None:
    """Show which cells each predefined board encloses."""
    for name, text in BOARDS.items():
        puzzle, walls = parse_board(text, name=name)
        enclosed = enclosed_cells(puzzle.grid_size, walls, puzzle.is_water, puzzle.portals)
        reachable = reachable_from_boundary(puzzle.grid_size, walls, puzzle.is_water, puzzle.portals)

        print("=" * 40)
        print(f"Board '{name}': {len(enclosed)} enclosed, {len(reachable)} reachable from the edge")
        print("=" * 40)
        print(render_board(puzzle, walls=walls, enclosed=enclosed))
        print()


def escape_demo() -> None:
    """Show the horse's shortest way out on boards that leak."""
    for name in ("gap", "portal"):
        puzzle, walls = parse_board(BOARDS[name], name=name)
        path = escape_path(
            puzzle.grid_size, puzzle.horse_row, puzzle.horse_col, walls, puzzle.is_water, puzzle.portals
        )

        print("=" * 40)
        print(f"Escape from '{name}': {[divmod(i, puzzle.grid_size) for i in path]}")
        print("=" * 40)
        print(render_board(puzzle, walls=walls, escape_path=path))
        print()


def game_demo() -> None:
    """Play a scripted game: place a few walls, then submit."""
    puzzle = parse_puzzle(LAYOUTS["river"], budget=6, name="river")
    game = GameState(puzzle)

    for row, col in [(3, 0), (3, 1), (3, 6), (3, 5), (6, 2), (6, 4), (0, 0)]:
        outcome = game.toggle_wall(row, col)
        print(f"toggle_wall({row}, {col}) -> {outcome.value}, {game.remaining_walls} walls left")
        if outcome is ToggleOutcome.NO_WALLS_LEFT:
            break

    print()
    submission = game.submit()
    print(render_submission(puzzle, game.walls, submission))


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "-v":
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    enclosure_demo()
    escape_demo()
    game_demo()
