from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from .dungeon.generator import Level
from .spawning import SpawnPlan


class SpawnReport(BaseModel):
    """Spawn positions in world space."""

    player: Optional[Tuple[float, float]] = Field(default=None, description="Player start")
    key: Optional[Tuple[float, float]] = Field(default=None, description="Key position")
    npcs: List[Tuple[float, float]] = Field(default_factory=list, description="Ghost starts")
    traps: List[Tuple[float, float]] = Field(default_factory=list, description="Trap positions")
    coins: List[Tuple[float, float]] = Field(default_factory=list, description="Coin positions")

    @classmethod
    def from_plan(cls, plan: SpawnPlan) -> "SpawnReport":
        return cls(
            player=plan.player,
            key=plan.key,
            npcs=list(plan.npcs),
            traps=list(plan.traps),
            coins=list(plan.coins),
        )


class LevelReport(BaseModel):
    """JSON-friendly summary of a generated level, diffable across runs."""

    width: int = Field(..., description="Full-resolution width")
    height: int = Field(..., description="Full-resolution height")
    seed: str = Field("", description="Master seed as hex")
    signature: str = Field(..., description="BLAKE2b digest of the grid rows")
    degenerate: bool = Field(False, description="True when the size is too small for a maze")
    exit: Optional[Tuple[int, int]] = Field(default=None, description="Exit cell in grid coordinates")
    origin: Tuple[float, float] = (0.0, 0.0)
    cell_size: Tuple[float, float] = (1.0, 1.0)
    rows: List[str] = Field(default_factory=list, description="ASCII rows ('#' wall, '.' passage, 'E' exit)")
    early_pool: List[Tuple[float, float]] = Field(default_factory=list)
    late_pool: List[Tuple[float, float]] = Field(default_factory=list)
    open_pool_size: int = 0
    spawns: Optional[SpawnReport] = None

    @classmethod
    def from_level(cls, level: Level, plan: Optional[SpawnPlan] = None) -> "LevelReport":
        return cls(
            width=level.width,
            height=level.height,
            seed=level.seed_hex,
            signature=level.signature(),
            degenerate=level.degenerate,
            exit=level.exit_location,
            origin=level.origin,
            cell_size=level.cell_size,
            rows=level.grid.to_str_lines(),
            early_pool=list(level.pools.early),
            late_pool=list(level.pools.late),
            open_pool_size=len(level.pools.open),
            spawns=SpawnReport.from_plan(plan) if plan is not None else None,
        )
