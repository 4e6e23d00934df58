from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

GridPoint = Tuple[int, int]
WorldPoint = Tuple[float, float]


@dataclass(frozen=True)
class GridTransform:
    """Affine mapping between world space and grid cells.

    The rounding is intentionally asymmetric: world -> grid uses ceil on x and
    floor on y, grid -> world floors both axes. Placement code downstream relies
    on these exact formulas.
    """

    origin: WorldPoint = (0.0, 0.0)
    cell_size: WorldPoint = (1.0, 1.0)

    def __post_init__(self) -> None:
        if self.cell_size[0] <= 0 or self.cell_size[1] <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")

    def world_to_grid(self, world: WorldPoint) -> GridPoint:
        ox, oy = self.origin
        cw, ch = self.cell_size
        return math.ceil((world[0] - ox) / cw), math.floor((world[1] - oy) / ch)

    def grid_to_world(self, cell: GridPoint) -> GridPoint:
        ox, oy = self.origin
        cw, ch = self.cell_size
        return math.floor(cell[0] * cw + ox), math.floor(cell[1] * ch + oy)

    def cell_center(self, cell: GridPoint) -> WorldPoint:
        """World-space centre of a cell."""
        ox, oy = self.origin
        cw, ch = self.cell_size
        return (ox + (cell[0] + 0.5) * cw, oy + (cell[1] + 0.5) * ch)
