from __future__ import annotations

import logging
from typing import Iterable, List

from .carver import Link
from .tiles import WallCell, WallGrid

logger = logging.getLogger(__name__)


def to_full_index(index: int) -> int:
    """Map a logical index onto the full-resolution grid (passages on odd coordinates)."""
    return 2 * index + 1


def scale_links(links: Iterable[Link], width: int, height: int) -> WallGrid:
    """Expand logical links into a full-resolution wall/passage grid.

    Both endpoints of every link and the cell between them become passages;
    everything else stays wall.
    """
    tiles: List[List[WallCell]] = [[WallCell.WALL for _ in range(width)] for _ in range(height)]
    count = 0
    for link in links:
        ax, ay = to_full_index(link.x1), to_full_index(link.y1)
        bx, by = to_full_index(link.x2), to_full_index(link.y2)
        mx, my = (ax + bx) // 2, (ay + by) // 2
        for x, y in ((ax, ay), (mx, my), (bx, by)):
            tiles[y][x] = WallCell.PASSAGE
        count += 1
    logger.debug("Scaled %d links onto %dx%d grid", count, width, height)
    return WallGrid(tiles)
