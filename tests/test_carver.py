import random

import pytest

from ghostmaze.dungeon.carver import Direction, HuntAndKillCarver, Link, carve
from ghostmaze.errors import CarveLoopError, GenerationError


def _find(parent, a):
    while parent[a] != a:
        parent[a] = parent[parent[a]]
        a = parent[a]
    return a


@pytest.mark.parametrize("width,height", [(5, 5), (7, 5), (9, 9), (11, 7), (15, 15), (21, 13)])
def test_carve_builds_spanning_tree(width, height):
    wl, hl = width // 2, height // 2
    n = wl * hl
    result = carve(wl, hl, random.Random(width * 100 + height))

    assert len(result.links) == n - 1

    cells = [cell for cell, _ in result.visitation_order]
    assert len(cells) == n
    assert set(cells) == {(x, y) for x in range(wl) for y in range(hl)}
    assert [k for _, k in result.visitation_order] == list(range(1, n + 1))

    # Every link joins two adjacent cells from different components: no cycles
    parent = {c: c for c in cells}
    for link in result.links:
        assert abs(link.x1 - link.x2) + abs(link.y1 - link.y2) == 1
        ra, rb = _find(parent, (link.x1, link.y1)), _find(parent, (link.x2, link.y2))
        assert ra != rb, "carving produced a cycle"
        parent[ra] = rb


def test_iteration_guard_is_never_approached():
    for seed in range(40):
        rng = random.Random(seed)
        wl, hl = rng.randint(1, 12), rng.randint(1, 12)
        result = carve(wl, hl, rng)
        n = wl * hl
        assert result.iterations <= 2 * n - 1
        assert result.iterations == len(result.links) + result.hunts


def test_walk_links_follow_the_current_cell():
    # Each link starts either where the previous one ended or at a hunted cell
    result = carve(6, 6, random.Random(3))
    visited = {result.visitation_order[0][0]}
    for link in result.links:
        assert (link.x1, link.y1) in visited
        assert (link.x2, link.y2) not in visited
        visited.add((link.x2, link.y2))


def test_same_seed_same_maze():
    a = carve(8, 6, random.Random(99))
    b = carve(8, 6, random.Random(99))
    c = carve(8, 6, random.Random(100))
    assert a.links == b.links
    assert a.visitation_order == b.visitation_order
    assert a.links != c.links


def test_on_visit_called_for_every_cell():
    seen = []
    result = carve(4, 3, random.Random(1), on_visit=lambda cell, k, total: seen.append((cell, k, total)))
    assert [(cell, k) for cell, k, _ in seen] == list(result.visitation_order)
    assert {total for _, _, total in seen} == {12}


def test_single_cell_and_empty_grids():
    one = carve(1, 1, random.Random(0))
    assert one.links == ()
    assert one.visitation_order == (((0, 0), 1),)
    assert one.iterations == 0

    empty = carve(0, 4, random.Random(0))
    assert empty.links == ()
    assert empty.visitation_order == ()


def test_runaway_guard_raises_loudly(caplog):
    carver = HuntAndKillCarver(iteration_factor=0)
    with pytest.raises(CarveLoopError) as info:
        carver.carve(4, 4, random.Random(5))
    assert isinstance(info.value, GenerationError)
    assert "did not terminate" in str(info.value)
    assert any(r.levelname == "ERROR" for r in caplog.records)


def test_direction_opposites():
    for d in Direction:
        assert d.opposite.opposite is d
        assert (d.dx + d.opposite.dx, d.dy + d.opposite.dy) == (0, 0)


def test_link_is_a_value():
    assert Link(0, 0, 1, 0) == Link(0, 0, 1, 0)
    assert len({Link(0, 0, 1, 0), Link(0, 0, 1, 0)}) == 1
