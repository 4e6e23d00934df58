from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Dict, List, Tuple

from ..errors import ExitPlacementError
from .tiles import Point, WallCell, WallGrid

logger = logging.getLogger(__name__)


class Edge(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


def border_candidates(grid: WallGrid) -> Dict[Edge, List[Point]]:
    """Eligible exit positions per edge.

    A border cell is eligible when it is a wall and the cell one step inward is a passage.
    """
    w, h = grid.width, grid.height
    candidates: Dict[Edge, List[Point]] = {edge: [] for edge in Edge}
    if w < 2 or h < 2:
        return candidates

    def consider(edge: Edge, border: Point, inner: Point) -> None:
        if grid.get(*border) == WallCell.WALL and grid.get(*inner) == WallCell.PASSAGE:
            candidates[edge].append(border)

    for x in range(w):
        consider(Edge.TOP, (x, 0), (x, 1))
        consider(Edge.BOTTOM, (x, h - 1), (x, h - 2))
    for y in range(h):
        consider(Edge.LEFT, (0, y), (1, y))
        consider(Edge.RIGHT, (w - 1, y), (w - 2, y))
    return candidates


def place_exit(grid: WallGrid, rng: random.Random) -> Tuple[WallGrid, Point]:
    """Turn one eligible border cell into the single exit.

    An edge is chosen uniformly at random; if it has no eligible cell the remaining
    edges are tried in random order. The exit is then picked uniformly among that
    edge's eligible cells.
    """
    candidates = border_candidates(grid)
    edges = list(Edge)
    rng.shuffle(edges)
    for edge in edges:
        options = candidates[edge]
        if not options:
            logger.debug("No eligible exit cell on %s edge", edge.value)
            continue
        exit_pos = options[rng.randrange(len(options))]
        logger.debug("Placing exit on %s edge at %s (%d candidates)", edge.value, exit_pos, len(options))
        return grid.with_cells([(exit_pos, WallCell.EXIT)]), exit_pos
    raise ExitPlacementError(
        f"No border cell adjacent to a passage on {grid.width}x{grid.height} grid"
    )
