from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .scaler import to_full_index
from .tiles import FloorCell, FloorGrid, Point, WallCell, WallGrid

logger = logging.getLogger(__name__)

WorldPoint = Tuple[float, float]


@dataclass(frozen=True)
class SpawnPools:
    """Candidate world positions for entity placement.

    - early: cells explored during the first 40% of the carving walk (player start).
    - late: cells explored during the last 20% of the walk (key and ghosts).
    - open: every passage on floor, row-major (coins and traps).
    """

    early: Tuple[WorldPoint, ...] = ()
    late: Tuple[WorldPoint, ...] = ()
    open: Tuple[WorldPoint, ...] = ()


class RegionClassifier:
    """Buckets cells by visitation order while the maze is being carved.

    Passed to the carver as its visit callback. Order ``k`` (1-based) of ``total``
    cells lands in ``late`` when ``k >= 0.8 * total``, otherwise in ``early`` when
    ``k <= 0.4 * total``. Comparisons are done in integers to avoid float rounding.
    Positions are recorded in full-resolution grid coordinates.
    """

    def __init__(self) -> None:
        self.early: List[Point] = []
        self.late: List[Point] = []

    def observe(self, cell: Point, k: int, total: int) -> None:
        if k <= 0:
            self.early.clear()
            self.late.clear()
            return
        full = (to_full_index(cell[0]), to_full_index(cell[1]))
        if 5 * k >= 4 * total:
            self.late.append(full)
        elif 5 * k <= 2 * total:
            self.early.append(full)

    __call__ = observe


def collect_open_cells(grid: WallGrid, floor: FloorGrid) -> List[Point]:
    """Every cell that is both a passage and floor, row-major."""
    cells = [
        (x, y)
        for y in range(grid.height)
        for x in range(grid.width)
        if grid.rows[y][x] == WallCell.PASSAGE and floor[y][x] == FloorCell.FLOOR
    ]
    logger.debug("Collected %d open cells", len(cells))
    return cells
