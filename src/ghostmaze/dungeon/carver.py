from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..errors import CarveLoopError
from .tiles import Point

logger = logging.getLogger(__name__)

# Iterations allowed per logical cell before the walk is declared runaway.
# A correct walk needs at most 2N - 1 iterations (N - 1 links plus at most N hunts).
ITERATION_FACTOR = 10

VisitCallback = Callable[[Point, int, int], None]


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass
class LogicalCell:
    visited: bool = False
    link_up: bool = False
    link_down: bool = False
    link_left: bool = False
    link_right: bool = False

    def is_linked(self, direction: Direction) -> bool:
        return getattr(self, _LINK_ATTR[direction])

    def link(self, direction: Direction) -> None:
        setattr(self, _LINK_ATTR[direction], True)


_LINK_ATTR = {
    Direction.UP: "link_up",
    Direction.DOWN: "link_down",
    Direction.LEFT: "link_left",
    Direction.RIGHT: "link_right",
}


@dataclass(frozen=True)
class Link:
    """A carved connection between two adjacent logical cells."""

    x1: int
    y1: int
    x2: int
    y2: int


@dataclass(frozen=True)
class CarveResult:
    links: Tuple[Link, ...]
    visitation_order: Tuple[Tuple[Point, int], ...]
    iterations: int = 0
    hunts: int = 0


@dataclass
class _LogicalGrid:
    width: int
    height: int
    cells: List[LogicalCell] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.cells = [LogicalCell() for _ in range(self.width * self.height)]

    def at(self, x: int, y: int) -> LogicalCell:
        return self.cells[y * self.width + x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def can_link(self, x: int, y: int, direction: Direction) -> bool:
        nx, ny = x + direction.dx, y + direction.dy
        if not self.in_bounds(nx, ny):
            return False
        return not self.at(x, y).is_linked(direction) and not self.at(nx, ny).visited

    def has_available_direction(self, x: int, y: int) -> bool:
        return any(self.can_link(x, y, d) for d in Direction)


class HuntAndKillCarver:
    """Hunt-and-Kill spanning tree walk over the logical (half-resolution) grid.

    Algorithm:
    - Start at a random cell and mark it visited.
    - Walk: while the current cell has an unvisited neighbour, shuffle the four
      directions and link to the first unvisited neighbour in shuffled order.
    - Hunt: on a dead end, scan row-major for a visited cell that still has an
      unvisited neighbour and resume the walk from there.
    - Stop once every cell is visited; the links then form a spanning tree.
    """

    def __init__(self, iteration_factor: int = ITERATION_FACTOR) -> None:
        self.iteration_factor = int(iteration_factor)

    def carve(
        self,
        width: int,
        height: int,
        rng: random.Random,
        on_visit: Optional[VisitCallback] = None,
    ) -> CarveResult:
        total = width * height
        if total <= 0:
            return CarveResult(links=(), visitation_order=())

        grid = _LogicalGrid(width, height)
        links: List[Link] = []
        order: List[Tuple[Point, int]] = []

        def visit(cx: int, cy: int) -> None:
            grid.at(cx, cy).visited = True
            k = len(order) + 1
            order.append(((cx, cy), k))
            if on_visit is not None:
                on_visit((cx, cy), k, total)

        x = rng.randrange(width)
        y = rng.randrange(height)
        visit(x, y)

        max_iterations = total * self.iteration_factor
        iterations = 0
        hunts = 0
        while len(order) < total:
            iterations += 1
            if iterations > max_iterations:
                logger.error(
                    "Carving walk exceeded %d iterations on %dx%d grid (%d/%d visited)",
                    max_iterations, width, height, len(order), total,
                )
                raise CarveLoopError(
                    f"Hunt-and-Kill did not terminate within {max_iterations} iterations "
                    f"({len(order)}/{total} cells visited at ({x},{y}))"
                )

            if grid.has_available_direction(x, y):
                directions = list(Direction)
                rng.shuffle(directions)
                for direction in directions:
                    if grid.can_link(x, y, direction):
                        nx, ny = x + direction.dx, y + direction.dy
                        grid.at(x, y).link(direction)
                        grid.at(nx, ny).link(direction.opposite)
                        links.append(Link(x, y, nx, ny))
                        x, y = nx, ny
                        visit(x, y)
                        break
            else:
                x, y = self._hunt(grid, x, y)
                hunts += 1

        logger.debug(
            "Carved %dx%d logical grid: %d links, %d hunts, %d iterations",
            width, height, len(links), hunts, iterations,
        )
        return CarveResult(
            links=tuple(links),
            visitation_order=tuple(order),
            iterations=iterations,
            hunts=hunts,
        )

    @staticmethod
    def _hunt(grid: _LogicalGrid, x: int, y: int) -> Point:
        for hy in range(grid.height):
            for hx in range(grid.width):
                if grid.at(hx, hy).visited and grid.has_available_direction(hx, hy):
                    return hx, hy
        # Unreachable while unvisited cells remain; the iteration guard reports it.
        return x, y


def carve(
    width_logical: int,
    height_logical: int,
    rng: random.Random,
    on_visit: Optional[VisitCallback] = None,
) -> CarveResult:
    """Run a Hunt-and-Kill walk with the default iteration guard."""
    return HuntAndKillCarver().carve(width_logical, height_logical, rng, on_visit=on_visit)
