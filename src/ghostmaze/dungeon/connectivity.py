from collections import deque
from typing import Dict, Optional, Set, Tuple

from .tiles import Point, WallGrid


def bfs_distances(grid: WallGrid, start: Point) -> Dict[Point, int]:
    """Breadth-first step counts from start to every walkable cell it reaches (4-neigh)."""
    if not grid.is_walkable(*start):
        return {}
    dist = {start: 0}
    q = deque([start])
    while q:
        x, y = q.popleft()
        d = dist[(x, y)]
        for nx, ny in grid.neighbors4(x, y):
            if (nx, ny) not in dist and grid.is_walkable(nx, ny):
                dist[(nx, ny)] = d + 1
                q.append((nx, ny))
    return dist


def path_length_bfs(grid: WallGrid, start: Point, goal: Point) -> Optional[int]:
    """Shortest path length on walkable cells; returns number of steps or None."""
    if not grid.is_walkable(*goal):
        return None
    return bfs_distances(grid, start).get(goal)


def largest_connected_region(grid: WallGrid) -> Set[Tuple[int, int]]:
    """Return set of coordinates belonging to the largest connected walkable region (4-neigh)."""
    visited: Set[Point] = set()
    best: Set[Point] = set()
    for y in range(grid.height):
        for x in range(grid.width):
            if not grid.is_walkable(x, y) or (x, y) in visited:
                continue
            comp = set(bfs_distances(grid, (x, y)))
            visited |= comp
            if len(comp) > len(best):
                best = comp
    return best


def is_fully_connected(grid: WallGrid) -> bool:
    walkable = sum(1 for y in range(grid.height) for x in range(grid.width) if grid.is_walkable(x, y))
    return len(largest_connected_region(grid)) == walkable
