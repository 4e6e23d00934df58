from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from ..dungeon.tiles import Point, WallCell, WallGrid

logger = logging.getLogger(__name__)

CARDINAL_STEPS: Tuple[Point, ...] = ((-1, 0), (1, 0), (0, 1), (0, -1))


def chebyshev_distance(ax: int, ay: int, bx: int, by: int) -> int:
    return max(abs(ax - bx), abs(ay - by))


def in_inset(grid: WallGrid, x: int, y: int) -> bool:
    """True when (x, y) lies inside the grid minus its outermost ring."""
    return 1 <= x < grid.width - 1 and 1 <= y < grid.height - 1


def cast_ray(grid: WallGrid, x: int, y: int, step: Point) -> Iterator[Point]:
    """
    Yield cells along a cardinal ray, starting at the origin itself.

    The ray stops before leaving the 1-cell inset box or at the first wall. The
    border ring is walls everywhere except at the exit, which bounds the march.
    """
    dx, dy = step
    while in_inset(grid, x, y) and grid.rows[y][x] != WallCell.WALL:
        yield x, y
        x += dx
        y += dy


def sees_target(grid: WallGrid, origin: Point, target: Optional[Point]) -> bool:
    """
    Checks whether target lies on one of the four cardinal rays from origin with no wall between.
    """
    if target is None:
        return False
    for step in CARDINAL_STEPS:
        for cell in cast_ray(grid, origin[0], origin[1], step):
            if cell == target:
                logger.debug("Ray %s from %s reached target %s", step, origin, target)
                return True
    return False
