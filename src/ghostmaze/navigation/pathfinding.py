from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from ..dungeon.tiles import Point, WallGrid

logger = logging.getLogger(__name__)


def manhattan_distance(a: Point, b: Point) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass
class PathNode:
    """A position during the A* search.

    g: cost of the path from the start node to this node.
    h: Manhattan estimate of the remaining cost to the end node.
    """

    position: Point
    parent: Optional["PathNode"]
    g: int
    h: int

    @property
    def f(self) -> int:
        return self.g + self.h


def find_path(grid: WallGrid, start: Point, end: Point) -> List[Point]:
    """Shortest 4-connected path from start to end, both inclusive.

    Returns an empty list when either endpoint is out of bounds, a wall or not a
    whole-number cell, or when end is unreachable. The open set keeps insertion
    order, so among nodes with equal f the first one encountered is expanded;
    relaxing a node updates its parent and g in place without moving it.
    """
    start, end = _as_cell(start), _as_cell(end)
    if start is None or end is None:
        logger.debug("find_path rejected non-integral endpoints")
        return []
    if not grid.in_bounds(*start) or not grid.in_bounds(*end):
        logger.debug("find_path rejected out-of-bounds endpoints %s -> %s", start, end)
        return []
    if not grid.is_walkable(*start) or not grid.is_walkable(*end):
        logger.debug("find_path rejected wall endpoints %s -> %s", start, end)
        return []

    open_nodes: Dict[Point, PathNode] = {start: PathNode(start, None, 0, manhattan_distance(start, end))}
    closed: Set[Point] = set()

    while open_nodes:
        # min() keeps the first of equal keys, which is the earliest inserted node
        current = min(open_nodes.values(), key=lambda n: n.f)
        if current.position == end:
            return _reconstruct(current)

        del open_nodes[current.position]
        closed.add(current.position)

        for neighbor in grid.neighbors4(*current.position):
            if neighbor in closed or not grid.is_walkable(*neighbor):
                continue
            g = current.g + 1
            node = open_nodes.get(neighbor)
            if node is None:
                open_nodes[neighbor] = PathNode(neighbor, current, g, manhattan_distance(neighbor, end))
            elif g < node.g:
                node.parent = current
                node.g = g

    logger.debug("find_path found no route %s -> %s", start, end)
    return []


def _as_cell(point) -> Optional[Point]:
    """Integer cell for a 2-sequence of whole numbers, None for anything else."""
    try:
        x, y = point
        if int(x) != x or int(y) != y:
            return None
        return int(x), int(y)
    except (TypeError, ValueError, OverflowError):
        return None


def _reconstruct(node: PathNode) -> List[Point]:
    path: List[Point] = []
    current: Optional[PathNode] = node
    while current is not None:
        path.append(current.position)
        current = current.parent
    path.reverse()
    return path
