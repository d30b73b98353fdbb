"""
Test suite for the enclosure engine: graph adapter, boundary reachability
and escape paths.
"""

from textwrap import dedent

import pytest

from enclosure import (
    BoardGraph,
    GridGraph,
    cell_index,
    edge_cells,
    enclosed_cells,
    escape_path,
    find_escape_path,
    flood_from_edges,
    is_edge_cell,
    reachable_from_boundary,
)
from grid_parser import parse_board


def no_water(row: int, col: int) -> bool:
    return False


def idx(row: int, col: int, size: int = 5) -> int:
    return row * size + col


def ring(size: int) -> set[int]:
    """Every boundary cell of a size x size grid."""
    return {r * size + c for r, c in edge_cells(size)}


# =============================================================================
# Test Grid Graph Adapter
# =============================================================================


class TestCellIndex:
    """Tests for coordinate helpers."""

    def test_row_major(self) -> None:
        """Index is row * size + col."""
        assert cell_index(5, 0, 0) == 0
        assert cell_index(5, 2, 3) == 13
        assert cell_index(5, 4, 4) == 24

    @pytest.mark.parametrize("row,col", [(5, 0), (0, 5), (-1, 0), (0, -1)])
    def test_out_of_range_raises(self, row: int, col: int) -> None:
        """Coordinates outside the grid fail fast instead of clamping."""
        with pytest.raises(ValueError, match="outside the grid"):
            cell_index(5, row, col)

    def test_is_edge_cell(self) -> None:
        """Outer rows and columns are edges, the rest is interior."""
        assert is_edge_cell(5, 0, 2)
        assert is_edge_cell(5, 4, 2)
        assert is_edge_cell(5, 2, 0)
        assert is_edge_cell(5, 2, 4)
        assert not is_edge_cell(5, 1, 1)
        assert not is_edge_cell(5, 2, 3)

    def test_single_cell_is_edge(self) -> None:
        """A 1x1 grid's only cell is on every ring."""
        assert is_edge_cell(1, 0, 0)
        assert list(edge_cells(1)) == [(0, 0)] * 4

    def test_edge_cells_order(self) -> None:
        """Top row, bottom row, left column, right column."""
        assert list(edge_cells(3)) == [
            (0, 0), (0, 1), (0, 2),
            (2, 0), (2, 1), (2, 2),
            (0, 0), (1, 0), (2, 0),
            (0, 2), (1, 2), (2, 2),
        ]

    def test_ring_size(self) -> None:
        """A 5x5 grid has 16 distinct boundary cells."""
        assert len(ring(5)) == 16


class TestBoardGraph:
    """Tests for the set-backed GridGraph."""

    def test_rejects_non_positive_size(self) -> None:
        """grid_size must be at least 1."""
        with pytest.raises(ValueError, match="positive integer"):
            BoardGraph(0)

    def test_rejects_bool_size(self) -> None:
        """True is not a grid size, even though bool subclasses int."""
        with pytest.raises(ValueError, match="positive integer"):
            BoardGraph(True)


    def test_traversable(self) -> None:
        """Walls and water block; everything else is ground."""
        graph = BoardGraph(3, walls={0}, is_water=lambda r, c: (r, c) == (1, 1), portals={2: 8, 8: 2})

        assert not graph.is_traversable(0, 0)
        assert not graph.is_traversable(1, 1)
        assert graph.is_traversable(0, 2)  # portals sit on ground
        assert graph.is_traversable(2, 2)

    def test_neighbor_order(self) -> None:
        """Up, down, left, right."""
        graph = BoardGraph(3)
        assert graph.neighbors(1, 1) == [1, 7, 3, 5]

    def test_neighbors_clipped_at_bounds(self) -> None:
        """Corners and edges only list cells inside the grid."""
        graph = BoardGraph(3)
        assert graph.neighbors(0, 0) == [3, 1]
        assert graph.neighbors(2, 2) == [5, 7]
        assert graph.neighbors(0, 1) == [4, 0, 2]

    def test_neighbors_skip_blocked(self) -> None:
        """Walls and water are never listed as orthogonal neighbors."""
        graph = BoardGraph(3, walls={1}, is_water=lambda r, c: (r, c) == (1, 2))
        assert graph.neighbors(1, 1) == [7, 3]

    def test_portal_partner_last(self) -> None:
        """The portal partner follows the four orthogonal neighbors."""
        graph = BoardGraph(3, portals={4: 0, 0: 4})
        assert graph.neighbors(1, 1) == [1, 7, 3, 5, 0]

    def test_portal_skips_traversability(self) -> None:
        """A portal into a wall is still listed."""
        graph = BoardGraph(3, walls={8}, portals={4: 8})
        assert graph.neighbors(1, 1) == [1, 7, 3, 5, 8]

    def test_one_sided_portal(self) -> None:
        """Each portal entry is read on its own."""
        graph = BoardGraph(3, portals={0: 4})
        assert graph.neighbors(0, 0) == [3, 1, 4]
        assert graph.neighbors(1, 1) == [1, 7, 3, 5]

    def test_satisfies_protocol(self) -> None:
        """BoardGraph can be used wherever a GridGraph is expected."""
        graph: GridGraph = BoardGraph(2)
        assert graph.grid_size == 2


# =============================================================================
# Test Boundary Reachability
# =============================================================================


class TestEnclosedCells:
    """Tests for enclosed_cells and reachable_from_boundary."""

    @pytest.mark.parametrize("size", [1, 2, 3, 5, 8])
    def test_open_grid_encloses_nothing(self, size: int) -> None:
        """With no walls and no water every cell touches the open boundary."""
        assert enclosed_cells(size, set(), no_water) == set()

    def test_full_ring_encloses_interior(self) -> None:
        """A 5x5 wall ring pens in exactly the nine interior cells."""
        enclosed = enclosed_cells(5, ring(5), no_water)

        assert enclosed == {
            idx(1, 1), idx(1, 2), idx(1, 3),
            idx(2, 1), idx(2, 2), idx(2, 3),
            idx(3, 1), idx(3, 2), idx(3, 3),
        }
        assert not enclosed & ring(5)

    def test_gap_at_top_opens_interior(self) -> None:
        """Leaving (0, 2) open makes the whole interior reachable."""
        walls = ring(5) - {idx(0, 2)}
        assert enclosed_cells(5, walls, no_water) == set()

    @pytest.mark.parametrize(
        "gap",
        [(r, c) for r, c in sorted(set(edge_cells(6))) if (r, c) not in {(0, 0), (0, 5), (5, 0), (5, 5)}],
    )
    def test_any_side_gap_opens_interior(self, gap: tuple[int, int]) -> None:
        """Any single non-corner gap in the ring lets the boundary in."""
        walls = ring(6) - {idx(*gap, size=6)}
        assert enclosed_cells(6, walls, no_water) == set()

    def test_corner_gap_stays_closed(self) -> None:
        """An open corner has no orthogonal way into the interior."""
        walls = ring(5) - {idx(0, 0)}

        assert reachable_from_boundary(5, walls, no_water) == {idx(0, 0)}
        assert len(enclosed_cells(5, walls, no_water)) == 9

    def test_interior_wall_column_makes_pocket(self) -> None:
        """A wall down column 3 leaves the left 2x3 pocket enclosed."""
        walls = ring(5) | {idx(1, 3), idx(2, 3), idx(3, 3)}

        assert enclosed_cells(5, walls, no_water) == {
            idx(1, 1), idx(1, 2),
            idx(2, 1), idx(2, 2),
            idx(3, 1), idx(3, 2),
        }

    def test_u_shape_open_at_bottom(self) -> None:
        """Walls on three sides leave nothing enclosed."""
        walls = {idx(0, c) for c in range(5)} | {idx(r, 0) for r in range(1, 4)} | {idx(r, 4) for r in range(1, 4)}
        assert enclosed_cells(5, walls, no_water) == set()

    def test_reachable_between_wall_columns(self) -> None:
        """Walled side columns leave the middle reachable from top and bottom."""
        walls = {idx(r, 0) for r in range(5)} | {idx(r, 4) for r in range(5)}

        reachable = reachable_from_boundary(5, walls, no_water)

        assert reachable == {idx(r, c) for r in range(5) for c in range(1, 4)}

    def test_water_blocks_like_walls(self) -> None:
        """Water in the only gap keeps the interior enclosed."""
        walls = ring(5) - {idx(0, 2)}

        def is_water(row: int, col: int) -> bool:
            return (row, col) == (0, 2)

        enclosed = enclosed_cells(5, walls, is_water)

        assert len(enclosed) == 9
        assert idx(0, 2) not in enclosed

    def test_surrounded_water_not_enclosed(self) -> None:
        """Water is never part of the pen, even when walled in."""

        def is_water(row: int, col: int) -> bool:
            return (row, col) == (2, 2)

        enclosed = enclosed_cells(5, ring(5), is_water)

        assert idx(2, 2) not in enclosed
        assert len(enclosed) == 8

    def test_fully_walled_grid(self) -> None:
        """Nothing seeds the flood when every boundary cell is blocked."""
        assert reachable_from_boundary(5, ring(5), no_water) == set()

    def test_single_cell_grid(self) -> None:
        """The lone cell of a 1x1 grid is on the boundary."""
        assert reachable_from_boundary(1, set(), no_water) == {0}
        assert enclosed_cells(1, set(), no_water) == set()
        assert reachable_from_boundary(1, {0}, no_water) == set()
        assert enclosed_cells(1, {0}, no_water) == set()

    def test_portal_from_boundary_reaches_interior(self) -> None:
        """A portal pair from an open corner into the pen opens the pen."""
        walls = ring(5) - {idx(0, 0)}
        portals = {idx(0, 0): idx(2, 2), idx(2, 2): idx(0, 0)}

        assert enclosed_cells(5, walls, no_water, portals) == set()
        assert idx(2, 2) in reachable_from_boundary(5, walls, no_water, portals)

    def test_portal_between_interior_cells(self) -> None:
        """Portals joining two penned cells change nothing."""
        portals = {idx(1, 1): idx(3, 3), idx(3, 3): idx(1, 1)}
        assert len(enclosed_cells(5, ring(5), no_water, portals)) == 9

    def test_one_way_portal_only_leaves(self) -> None:
        """An entry pointing out of the pen does not let the boundary in."""
        walls = ring(5) - {idx(0, 0)}
        portals = {idx(2, 2): idx(0, 0)}

        assert len(enclosed_cells(5, walls, no_water, portals)) == 9

    def test_idempotent(self) -> None:
        """Same inputs, same answer."""
        walls = ring(5) | {idx(1, 3), idx(2, 3), idx(3, 3)}
        first = enclosed_cells(5, walls, no_water)
        second = enclosed_cells(5, walls, no_water)
        assert first == second

    def test_inputs_not_mutated(self) -> None:
        """The wall set and portal map are read-only to the engine."""
        walls = frozenset(ring(5))
        portals = {idx(1, 1): idx(3, 3), idx(3, 3): idx(1, 1)}
        enclosed_cells(5, walls, no_water, portals)
        assert walls == frozenset(ring(5))
        assert portals == {idx(1, 1): idx(3, 3), idx(3, 3): idx(1, 1)}

    def test_from_board_picture(self) -> None:
        """Boards drawn with '#' walls give the same answer as index sets."""
        puzzle, walls = parse_board(
            dedent("""
            #####
            #..##
            #.H##
            #..##
            #####
            """)
        )
        enclosed = enclosed_cells(puzzle.grid_size, walls, puzzle.is_water, puzzle.portals)
        assert enclosed == {idx(1, 1), idx(1, 2), idx(2, 1), idx(2, 2), idx(3, 1), idx(3, 2)}


# =============================================================================
# Test Escape Path
# =============================================================================


def assert_connected(path: list[int], size: int, portals: dict[int, int]) -> None:
    """Each step is an orthogonal move or a portal jump."""
    for a, b in zip(path, path[1:]):
        (ar, ac), (br, bc) = divmod(a, size), divmod(b, size)
        orthogonal = abs(ar - br) + abs(ac - bc) == 1
        assert orthogonal or portals.get(a) == b, f"{a} -> {b} is not a move"


class TestEscapePath:
    """Tests for escape_path and find_escape_path."""

    def test_source_on_boundary(self) -> None:
        """A horse already on the edge escapes where it stands."""
        assert escape_path(5, 0, 2, set(), no_water) == [idx(0, 2)]
        assert escape_path(5, 3, 4, ring(5) - {idx(3, 4)}, no_water) == [idx(3, 4)]

    def test_single_cell_grid(self) -> None:
        """The only cell of a 1x1 grid is its own exit."""
        assert escape_path(1, 0, 0, set(), no_water) == [0]

    def test_source_is_wall(self) -> None:
        """A blocked source gives an empty path."""
        assert escape_path(5, 2, 2, {idx(2, 2)}, no_water) == []

    def test_source_is_water(self) -> None:
        """A source standing in water gives an empty path."""
        assert escape_path(5, 2, 2, set(), lambda r, c: (r, c) == (2, 2)) == []

    def test_enclosed_source(self) -> None:
        """No way out through a complete ring."""
        assert escape_path(5, 2, 2, ring(5), no_water) == []

    def test_out_of_range_source_raises(self) -> None:
        """Bad source coordinates fail fast."""
        with pytest.raises(ValueError, match="outside the grid"):
            escape_path(5, 5, 0, set(), no_water)

    def test_open_grid_goes_up_first(self) -> None:
        """On an open board the northward exit is found first."""
        assert escape_path(5, 2, 2, set(), no_water) == [idx(2, 2), idx(1, 2), idx(0, 2)]

    def test_through_top_gap(self) -> None:
        """The path runs through the only opening."""
        walls = ring(5) - {idx(0, 2)}
        assert escape_path(5, 2, 2, walls, no_water) == [idx(2, 2), idx(1, 2), idx(0, 2)]

    def test_through_bottom_gap(self) -> None:
        """With the gap at the bottom the path heads south."""
        walls = ring(5) - {idx(4, 2)}
        assert escape_path(5, 2, 2, walls, no_water) == [idx(2, 2), idx(3, 2), idx(4, 2)]

    def test_tie_break_north_before_south(self) -> None:
        """Equal exits above and below: up wins."""
        walls = ring(5) - {idx(0, 2), idx(4, 2)}
        assert escape_path(5, 2, 2, walls, no_water) == [idx(2, 2), idx(1, 2), idx(0, 2)]

    def test_tie_break_west_before_east(self) -> None:
        """Equal exits left and right: left wins."""
        walls = ring(5) - {idx(2, 0), idx(2, 4)}
        assert escape_path(5, 2, 2, walls, no_water) == [idx(2, 2), idx(2, 1), idx(2, 0)]

    def test_portal_counts_as_one_step(self) -> None:
        """A portal next to the horse beats a three-step walk."""
        size = 7
        portals = {idx(3, 4, size): idx(0, 0, size), idx(0, 0, size): idx(3, 4, size)}

        path = escape_path(size, 3, 3, set(), no_water, portals)

        assert path == [idx(3, 3, size), idx(3, 4, size), idx(0, 0, size)]

    def test_walk_to_portal_inside_pen(self) -> None:
        """Inside a closed pen the only exit is the portal back to the edge."""
        puzzle, walls = parse_board(
            dedent("""
            1######
            #.....#
            #.....#
            #..H..#
            #.....#
            #....1#
            #######
            """)
        )
        size = puzzle.grid_size

        path = escape_path(size, puzzle.horse_row, puzzle.horse_col, walls, puzzle.is_water, puzzle.portals)

        assert path[0] == puzzle.horse_index
        assert path[-1] == idx(0, 0, size)
        assert path[-2] == idx(5, 5, size)
        assert len(path) == 6  # four steps to the portal, one jump
        assert_connected(path, size, puzzle.portals)

    def test_path_avoids_water(self) -> None:
        """Water is stepped around, never through."""
        puzzle, walls = parse_board(
            dedent("""
            ##.##
            #~~~#
            #.H.#
            #...#
            #####
            """)
        )

        path = escape_path(5, 2, 2, walls, puzzle.is_water, puzzle.portals)

        assert path == []

    def test_shortest_around_obstacle(self) -> None:
        """The route bends around a wall and stays shortest."""
        puzzle, walls = parse_board(
            dedent("""
            ###.#
            #.#.#
            #.H.#
            #...#
            #####
            """)
        )

        path = escape_path(5, 2, 2, walls, puzzle.is_water, puzzle.portals)

        assert path == [idx(2, 2), idx(2, 3), idx(1, 3), idx(0, 3)]

    def test_custom_graph(self) -> None:
        """Any GridGraph works, not just BoardGraph."""

        class BitmaskGraph:
            """Walls packed into an int, one bit per cell."""

            def __init__(self, grid_size: int, wall_bits: int) -> None:
                self.grid_size = grid_size
                self.wall_bits = wall_bits

            def is_traversable(self, row: int, col: int) -> bool:
                return not (self.wall_bits >> (row * self.grid_size + col)) & 1

            def neighbors(self, row: int, col: int) -> list[int]:
                out = []
                for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
                    nr, nc = row + dr, col + dc
                    if 0 <= nr < self.grid_size and 0 <= nc < self.grid_size and self.is_traversable(nr, nc):
                        out.append(nr * self.grid_size + nc)
                return out

        wall_bits = sum(1 << i for i in ring(5) - {idx(0, 2)})
        graph = BitmaskGraph(5, wall_bits)

        assert find_escape_path(graph, 2, 2) == [idx(2, 2), idx(1, 2), idx(0, 2)]
        assert len(flood_from_edges(graph)) == 10
