import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from ghostmaze.dungeon.generator import generate_level
from ghostmaze.dungeon.tiles import WallCell, WallGrid
from ghostmaze.errors import GridNotBoundError
from ghostmaze.navigation import GridTransform, NavigationGrid


CORRIDORS = [
    "#######",
    "#.....#",
    "#.###.#",
    "#.....E",
    "#######",
]


@pytest.fixture
def nav():
    n = NavigationGrid()
    n.set_grid(WallGrid.from_ascii(CORRIDORS), (0.0, 0.0), (1.0, 1.0))
    return n


# ---- Coordinates ---------------------------------------------------------

def test_world_to_grid_ceil_x_floor_y():
    t = GridTransform(origin=(-10.0, 4.0), cell_size=(2.0, 0.5))
    # x: ceil(3 / 2) = 2 ; y: floor(1.3 / 0.5) = 2
    assert t.world_to_grid((-7.0, 5.3)) == (2, 2)
    # Exact multiples are unaffected by the rounding direction
    assert t.world_to_grid((-6.0, 5.0)) == (2, 2)
    # Just past a boundary: x rounds up, y rounds down
    assert t.world_to_grid((-5.9, 5.49)) == (3, 2)


def test_grid_to_world_floors_both_axes():
    t = GridTransform(origin=(-10.0, 4.0), cell_size=(2.0, 0.5))
    assert t.grid_to_world((2, 2)) == (-6, 5)
    assert t.grid_to_world((3, 3)) == (-4, math.floor(5.5))


def test_round_trip_formula():
    t = GridTransform(origin=(0.0, 0.0), cell_size=(1.0, 1.0))
    for p in [(0, 0), (3, 7), (12, 5)]:
        assert t.grid_to_world(t.world_to_grid(p)) == p
    # Fractional positions: x snaps up, y snaps down, each within one cell
    assert t.grid_to_world(t.world_to_grid((3.4, 7.6))) == (4, 7)


def test_cell_center():
    t = GridTransform(origin=(1.0, 2.0), cell_size=(2.0, 4.0))
    assert t.cell_center((0, 0)) == (2.0, 4.0)
    assert t.cell_center((3, 1)) == (8.0, 8.0)


def test_transform_rejects_non_positive_cells():
    with pytest.raises(ValueError):
        GridTransform(cell_size=(0.0, 1.0))


# ---- Binding and player tracking ----------------------------------------

def test_unbound_grid_raises():
    with pytest.raises(GridNotBoundError):
        NavigationGrid().find_path((1, 1), (1, 1))


def test_set_grid_accepts_nested_sequences_and_finds_exit():
    n = NavigationGrid()
    rows = [list(r) for r in WallGrid.from_ascii(CORRIDORS).rows]
    n.set_grid(rows)
    assert isinstance(n.grid, WallGrid)
    assert n.exit_location == (6, 3)
    assert (n.width, n.height) == (7, 5)


def test_bound_grid_is_immutable(nav):
    grid = nav.grid
    assert isinstance(grid.rows, tuple) and isinstance(grid.rows[0], tuple)
    changed = grid.with_cells([((1, 1), WallCell.WALL)])
    assert nav.grid.get(1, 1) == WallCell.PASSAGE
    assert changed.get(1, 1) == WallCell.WALL


def test_player_location_converted_and_overwritten(nav):
    assert nav.player_location is None
    assert nav.player_world_location is None
    nav.set_player_location((2.0, 1.0))
    assert nav.player_location == (2, 1)
    nav.set_player_location((5.0, 3.0))
    assert nav.player_location == (5, 3)
    assert nav.player_world_location == (5, 3)


def test_is_near_exit(nav):
    assert nav.is_near_exit() is False
    nav.set_player_location((5.0, 2.0))  # diagonal to the exit at (6, 3)
    assert nav.is_near_exit() is True
    nav.set_player_location((5.0, 3.0))
    assert nav.is_near_exit() is True
    nav.set_player_location((4.0, 3.0))
    assert nav.is_near_exit() is False


def test_is_near_exit_false_without_exit():
    n = NavigationGrid()
    n.set_grid(WallGrid.from_ascii(["###", "#.#", "###"]))
    n.set_player_location((1.0, 1.0))
    assert n.exit_location is None
    assert n.is_near_exit() is False


# ---- Detection -----------------------------------------------------------

def test_detect_player_along_open_row_and_column(nav):
    nav.set_player_location((5.0, 1.0))
    assert nav.detect_player((1.0, 1.0)) is True
    nav.set_player_location((1.0, 3.0))
    assert nav.detect_player((1.0, 1.0)) is True


def test_detect_player_blocked_by_wall(nav):
    nav.set_player_location((3.0, 3.0))
    # Straight down from (3, 1) passes through the wall at (3, 2)
    assert nav.detect_player((3.0, 1.0)) is False


def test_detect_player_not_on_a_ray(nav):
    nav.set_player_location((3.0, 3.0))
    assert nav.detect_player((1.0, 1.0)) is False


def test_detect_player_on_origin(nav):
    nav.set_player_location((2.0, 1.0))
    assert nav.detect_player((2.0, 1.0)) is True


def test_detect_player_unset_or_outside(nav):
    assert nav.detect_player((1.0, 1.0)) is False
    nav.set_player_location((1.0, 1.0))
    assert nav.detect_player((-5.0, -5.0)) is False
    assert nav.detect_player((50.0, 50.0)) is False


def test_rays_stay_inside_the_border_ring(nav):
    # The exit sits in the outer ring, so rays stop before reaching it
    nav.set_player_location((6.0, 3.0))
    assert nav.detect_player((1.0, 3.0)) is False


def test_detect_matches_brute_force_on_generated_level():
    level = generate_level(15, 15, seed=21)
    n = NavigationGrid.from_level(level)
    grid = level.grid
    passages = grid.cells(WallCell.PASSAGE)
    player = passages[len(passages) // 2]
    n.set_player_location(player)

    for origin in passages:
        expected = False
        if origin[0] == player[0] or origin[1] == player[1]:
            xs = range(min(origin[0], player[0]), max(origin[0], player[0]) + 1)
            ys = range(min(origin[1], player[1]), max(origin[1], player[1]) + 1)
            expected = all(grid.get(x, y) != WallCell.WALL for x in xs for y in ys)
        assert n.detect_player(origin) is expected, origin


# ---- Pathfinding ---------------------------------------------------------

def test_path_to_self(nav):
    assert nav.find_path((1, 1), (1, 1)) == [(1, 1)]


def test_path_rejects_walls_and_out_of_bounds(nav):
    assert nav.find_path((0, 0), (1, 1)) == []
    assert nav.find_path((1, 1), (3, 2)) == []
    assert nav.find_path((-1, 1), (1, 1)) == []
    assert nav.find_path((1, 1), (7, 3)) == []


def test_path_unreachable_is_empty():
    n = NavigationGrid()
    n.set_grid(WallGrid.from_ascii([
        "#####",
        "#.#.#",
        "#####",
    ]))
    assert n.find_path((1, 1), (3, 1)) == []


def test_path_reaches_exit(nav):
    path = nav.find_path((1, 1), (6, 3))
    assert path[0] == (1, 1) and path[-1] == (6, 3)
    assert len(path) == 8


def test_tie_break_prefers_first_encountered(open_room):
    n = NavigationGrid()
    n.set_grid(open_room)
    assert n.find_path((1, 1), (3, 3)) == [(1, 1), (2, 1), (3, 1), (3, 2), (3, 3)]


def test_paths_are_shortest_and_symmetric():
    from ghostmaze.dungeon.connectivity import path_length_bfs

    level = generate_level(21, 21, seed=8)
    n = NavigationGrid.from_level(level)
    cells = level.grid.cells(WallCell.PASSAGE)
    pairs = [(cells[i], cells[-1 - i * 3]) for i in range(0, 40, 4)]
    for a, b in pairs:
        forward = n.find_path(a, b)
        backward = n.find_path(b, a)
        assert len(forward) == len(backward) == path_length_bfs(level.grid, a, b) + 1
        for (x1, y1), (x2, y2) in zip(forward, forward[1:]):
            assert abs(x1 - x2) + abs(y1 - y2) == 1
            assert level.grid.is_walkable(x2, y2)


def test_concurrent_queries_agree():
    level = generate_level(25, 25, seed=77)
    n = NavigationGrid.from_level(level)
    cells = level.grid.cells(WallCell.PASSAGE)
    n.set_player_location(cells[0])
    jobs = [(cells[i], cells[-1 - i]) for i in range(16)]
    expected = [n.find_path(a, b) for a, b in jobs]

    with ThreadPoolExecutor(max_workers=8) as pool:
        paths = list(pool.map(lambda ab: n.find_path(*ab), jobs))
        seen = list(pool.map(n.detect_player, cells[:32]))

    assert paths == expected
    assert seen == [n.detect_player(c) for c in cells[:32]]


def test_corner_cell_is_a_real_player_position():
    n = NavigationGrid()
    n.set_grid(WallGrid.from_ascii([
        "#E###",
        "#...#",
        "#####",
    ]))
    assert n.is_near_exit() is False
    n.set_player_location((0.0, 0.0))
    assert n.player_location == (0, 0)
    assert n.is_near_exit() is True


def test_path_accepts_whole_float_endpoints(nav):
    assert nav.find_path((1.0, 1.0), (3, 1)) == [(1, 1), (2, 1), (3, 1)]


@pytest.mark.parametrize(
    "start,end",
    [((1.5, 1), (3, 1)), ((1, 1), (3, 1.25)), ((1,), (3, 1)), (None, (3, 1)), ((float("nan"), 1), (3, 1))],
)
def test_path_rejects_malformed_endpoints(nav, start, end):
    assert nav.find_path(start, end) == []
