"""
Interactive demo for Horsepen.
Display a puzzle and place walls with keyboard commands, then submit.
"""

import logging
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_board, submission_summary
from demo import LAYOUTS
from game import GameState, ToggleOutcome, score_breakdown
from grid_parser import parse_puzzle
from grid_types import DELTAS, Direction, Puzzle


class InteractiveDemo:
    """Interactive demo for wall placement."""

    def __init__(self, puzzle: Puzzle) -> None:
        self.game = GameState(puzzle)
        self.cursor = (puzzle.horse_row, puzzle.horse_col)
        self.escape_preview: list[int] = []
        self.console = Console()
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with board and status."""
        game = self.game
        puzzle = game.puzzle
        submission = game.submission

        if submission is not None:
            board = render_board(
                puzzle,
                walls=game.walls,
                enclosed=submission.enclosed,
                escape_path=submission.escape_path,
                cursor=self.cursor,
            )
        else:
            board = render_board(puzzle, walls=game.walls, escape_path=self.escape_preview, cursor=self.cursor)

        status = Text()
        status.append("Walls left: ", style="bold")
        status.append(f"{game.remaining_walls} / {puzzle.max_walls}\n")
        status.append("Cursor: ", style="bold")
        row, col = self.cursor
        status.append(f"[{row}, {col}] {puzzle.cell_type(row, col).value}\n\n")

        # Convert ANSI-colored board text to Rich Text
        status.append(Text.from_ansi(board))
        status.append("\n\n")

        if submission is not None:
            style = "bold green" if submission.horse_enclosed else "bold red"
            status.append(submission_summary(puzzle, submission, game.rules) + "\n\n", style=style)

        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D or arrows - Move cursor\n")
        status.append("  Space - Toggle wall\n")
        status.append("  E - Show escape path\n")
        status.append("  Enter - Submit (once)\n")
        status.append("  R - Reset\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        title = f"Horsepen - {puzzle.name}" if puzzle.name else "Horsepen"
        return Panel(status, title=title, border_style="green", width=80)

    def move_cursor(self, direction: Direction) -> None:
        dr, dc = DELTAS[direction]
        size = self.game.puzzle.grid_size
        row = min(max(self.cursor[0] + dr, 0), size - 1)
        col = min(max(self.cursor[1] + dc, 0), size - 1)
        self.cursor = (row, col)

    def toggle_wall(self) -> None:
        row, col = self.cursor
        outcome = self.game.toggle_wall(row, col)
        self.escape_preview = []
        match outcome:
            case ToggleOutcome.PLACED:
                self.status_message = f"✓ Wall placed at [{row}, {col}]"
            case ToggleOutcome.REMOVED:
                self.status_message = f"✓ Wall removed from [{row}, {col}]"
            case ToggleOutcome.NOT_GRASS:
                self.status_message = "✗ Walls only go on grass"
            case ToggleOutcome.NO_WALLS_LEFT:
                self.status_message = "✗ No walls left"
            case ToggleOutcome.ALREADY_SUBMITTED:
                self.status_message = "✗ Already submitted - press R to start over"

    def show_escape(self) -> None:
        if self.game.submitted:
            return
        self.escape_preview = self.game.preview_escape()
        if self.escape_preview:
            self.status_message = f"The horse can escape in {len(self.escape_preview) - 1} steps"
        else:
            self.status_message = "The horse is penned in"

    def submit(self) -> None:
        already = self.game.submitted
        submission = self.game.submit()
        if already:
            self.status_message = "Already submitted"
        elif submission.horse_enclosed:
            self.status_message = f"✓ Enclosed! {score_breakdown(self.game.puzzle, submission.enclosed, self.game.rules)}"
        else:
            self.status_message = "✗ The horse got away"

    def reset(self) -> None:
        self.game.reset()
        self.escape_preview = []
        self.status_message = "Board reset"

    def run(self) -> None:
        """Run the interactive demo."""
        moves = {
            "w": Direction.N,
            "s": Direction.S,
            "a": Direction.W,
            "d": Direction.E,
            readchar.key.UP: Direction.N,
            readchar.key.DOWN: Direction.S,
            readchar.key.LEFT: Direction.W,
            readchar.key.RIGHT: Direction.E,
        }

        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()
                    lowered = key.lower()

                    if lowered == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key in moves or lowered in moves:
                        self.move_cursor(moves.get(key) or moves[lowered])
                    elif key == " ":
                        self.toggle_wall()
                    elif lowered == "e":
                        self.show_escape()
                    elif key in (readchar.key.ENTER, "\r", "\n"):
                        self.submit()
                    elif lowered == "r":
                        self.reset()
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(puzzle: Puzzle) -> None:
    demo = InteractiveDemo(puzzle)
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "sublime":
        # Running from IDE - just render the initial state
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

        print("Running from IDE - rendering initial state")
        print()

        puzzle = parse_puzzle(LAYOUTS["meadow"], name="meadow")
        print(render_board(puzzle))
        print(f"Escape path: {GameState(puzzle).preview_escape()}")
    else:
        name = sys.argv[1] if len(sys.argv) > 1 else "meadow"
        main(parse_puzzle(LAYOUTS[name], name=name))
