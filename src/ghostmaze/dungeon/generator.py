from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..errors import GenerationError
from ..navigation.transform import GridTransform, WorldPoint
from ..rng import CARVE_DOMAIN, EXIT_DOMAIN, RNGManager, SeedLike
from .carver import HuntAndKillCarver
from .connectivity import is_fully_connected
from .exit_placer import place_exit
from .regions import RegionClassifier, SpawnPools, collect_open_cells
from .scaler import scale_links
from .tiles import FloorGrid, Point, WallGrid, floor_layer

logger = logging.getLogger(__name__)

# Fewer logical cells than this cannot form a maze with a reachable exit.
MIN_LOGICAL_CELLS = 2


@dataclass(frozen=True)
class Level:
    """A finished level: immutable grid, spawn pools, exit and world transform."""

    width: int
    height: int
    grid: WallGrid
    floor: FloorGrid
    pools: SpawnPools
    exit_location: Optional[Point]
    transform: GridTransform = field(default_factory=GridTransform)
    seed_hex: str = ""
    degenerate: bool = False

    @property
    def origin(self) -> WorldPoint:
        return self.transform.origin

    @property
    def cell_size(self) -> WorldPoint:
        return self.transform.cell_size

    def signature(self) -> str:
        """Deterministic signature of the grid content."""
        raw = "\n".join(self.grid.to_str_lines()).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()


class LevelGenerator:
    """Runs carving, scaling, exit placement and region classification once per level.

    Usage:
      level = LevelGenerator().generate(21, 21, seed=42)
    """

    def __init__(self, carver: Optional[HuntAndKillCarver] = None) -> None:
        self.carver = carver or HuntAndKillCarver()

    def generate(
        self,
        width: int,
        height: int,
        seed: SeedLike = None,
        *,
        origin: WorldPoint = (0.0, 0.0),
        cell_size: WorldPoint = (1.0, 1.0),
    ) -> Level:
        if width < 0 or height < 0:
            raise ValueError(f"Level dimensions must be non-negative, got {width}x{height}")
        transform = GridTransform(origin=origin, cell_size=cell_size)
        rngm = RNGManager(seed)
        logical_w, logical_h = width // 2, height // 2
        floor = floor_layer(width, height)

        if logical_w * logical_h < MIN_LOGICAL_CELLS:
            logger.warning(
                "Level %dx%d is degenerate (%dx%d logical cells); returning an all-wall grid",
                width, height, logical_w, logical_h,
            )
            return Level(
                width=width,
                height=height,
                grid=WallGrid.filled(width, height),
                floor=floor,
                pools=SpawnPools(),
                exit_location=None,
                transform=transform,
                seed_hex=rngm.get_master_seed_hex(),
                degenerate=True,
            )

        classifier = RegionClassifier()
        carved = self.carver.carve(
            logical_w,
            logical_h,
            rngm.context_rng(CARVE_DOMAIN, width, height),
            on_visit=classifier,
        )
        grid = scale_links(carved.links, width, height)
        if not is_fully_connected(grid):
            raise GenerationError(f"Scaled {width}x{height} grid is not fully connected")
        grid, exit_location = place_exit(grid, rngm.context_rng(EXIT_DOMAIN, width, height))
        open_cells = collect_open_cells(grid, floor)

        pools = SpawnPools(
            early=self._to_world(transform, classifier.early),
            late=self._to_world(transform, classifier.late),
            open=self._to_world(transform, open_cells),
        )
        logger.info(
            "Generated %dx%d level (seed %s): exit=%s, pools early=%d late=%d open=%d",
            width, height, rngm.get_master_seed_hex(), exit_location, len(pools.early), len(pools.late), len(pools.open),
        )
        return Level(
            width=width,
            height=height,
            grid=grid,
            floor=floor,
            pools=pools,
            exit_location=exit_location,
            transform=transform,
            seed_hex=rngm.get_master_seed_hex(),
        )

    @staticmethod
    def _to_world(transform: GridTransform, cells: List[Point]) -> Tuple[WorldPoint, ...]:
        return tuple(transform.cell_center(c) for c in cells)


def generate_level(
    width: int,
    height: int,
    seed: SeedLike = None,
    *,
    origin: WorldPoint = (0.0, 0.0),
    cell_size: WorldPoint = (1.0, 1.0),
) -> Level:
    return LevelGenerator().generate(width, height, seed, origin=origin, cell_size=cell_size)
