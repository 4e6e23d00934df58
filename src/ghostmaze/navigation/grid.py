from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from ..dungeon.tiles import Point, WallCell, WallGrid
from ..errors import GridNotBoundError
from .pathfinding import find_path
from .raycast import chebyshev_distance, sees_target
from .transform import GridPoint, GridTransform, WorldPoint

if TYPE_CHECKING:
    from ..dungeon.generator import Level

logger = logging.getLogger(__name__)


class NavigationGrid:
    """
    Runtime query surface over a finished level.

    Holds the immutable wall grid, the world<->grid transform, the exit and the
    tracked player location. Queries only read the bound grid, so any number of
    agents may call detect_player/find_path concurrently. The player location is
    the single mutable field; it is written and read under a lock (last writer wins).
    """

    def __init__(self) -> None:
        self._grid: Optional[WallGrid] = None
        self._transform = GridTransform()
        self._exit: Optional[Point] = None
        self._player: Optional[GridPoint] = None
        self._player_lock = threading.Lock()

    @classmethod
    def from_level(cls, level: "Level") -> "NavigationGrid":
        nav = cls()
        nav.set_grid(level.grid, level.transform.origin, level.transform.cell_size)
        return nav

    # ---- Binding ---------------------------------------------------------
    def set_grid(
        self,
        grid: Union[WallGrid, Sequence[Sequence[WallCell]]],
        origin: WorldPoint = (0.0, 0.0),
        cell_size: WorldPoint = (1.0, 1.0),
    ) -> None:
        """Bind a finished grid and its world transform. Locates the exit cell."""
        if not isinstance(grid, WallGrid):
            grid = WallGrid(grid)
        if self._grid is not None:
            logger.info("Rebinding navigation grid (%r -> %r)", self._grid, grid)
        self._grid = grid
        self._transform = GridTransform(origin=tuple(origin), cell_size=tuple(cell_size))
        self._exit = grid.find(WallCell.EXIT)
        with self._player_lock:
            self._player = None
        logger.debug("Navigation grid bound: %r, exit=%s, transform=%s", grid, self._exit, self._transform)

    @property
    def grid(self) -> WallGrid:
        if self._grid is None:
            raise GridNotBoundError("set_grid() must be called before querying the navigation grid")
        return self._grid

    @property
    def transform(self) -> GridTransform:
        return self._transform

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def exit_location(self) -> Optional[Point]:
        return self._exit

    # ---- Coordinates -----------------------------------------------------
    def world_to_grid(self, world: WorldPoint) -> GridPoint:
        return self._transform.world_to_grid(world)

    def grid_to_world(self, cell: GridPoint) -> GridPoint:
        return self._transform.grid_to_world(cell)

    def cell_center(self, cell: GridPoint) -> WorldPoint:
        return self._transform.cell_center(cell)

    # ---- Player tracking -------------------------------------------------
    def set_player_location(self, world: WorldPoint) -> None:
        cell = self.world_to_grid(world)
        with self._player_lock:
            self._player = cell

    @property
    def player_location(self) -> Optional[GridPoint]:
        with self._player_lock:
            return self._player

    @property
    def player_world_location(self) -> Optional[GridPoint]:
        player = self.player_location
        return None if player is None else self.grid_to_world(player)

    def is_near_exit(self) -> bool:
        """True when the player stands on or next to (diagonals included) the exit.

        An unset player is ``None``, so grid cell (0, 0) is an ordinary position
        here and counts as near an exit at (1, 0), (0, 1) or (1, 1).
        """
        player = self.player_location
        if player is None or self._exit is None:
            return False
        return chebyshev_distance(player[0], player[1], self._exit[0], self._exit[1]) <= 1

    # ---- Queries ---------------------------------------------------------
    def detect_player(self, origin_world: WorldPoint) -> bool:
        """Whether the player is in cardinal line of sight of a world position."""
        player = self.player_location
        if player is None:
            return False
        return sees_target(self.grid, self.world_to_grid(origin_world), player)

    def find_path(self, start: GridPoint, end: GridPoint) -> List[GridPoint]:
        """A* route between two grid cells; empty when invalid or unreachable."""
        return find_path(self.grid, start, end)
