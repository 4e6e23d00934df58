from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import SpawnSettings
from .dungeon.generator import Level
from .dungeon.regions import WorldPoint
from .rng import SPAWN_DOMAIN, RNGManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpawnPlan:
    """Concrete world positions for every entity placed on a level."""

    player: Optional[WorldPoint] = None
    key: Optional[WorldPoint] = None
    npcs: Tuple[WorldPoint, ...] = ()
    traps: Tuple[WorldPoint, ...] = ()
    coins: Tuple[WorldPoint, ...] = ()

    @property
    def occupied(self) -> Tuple[WorldPoint, ...]:
        fixed = tuple(p for p in (self.player, self.key) if p is not None)
        return fixed + self.npcs


class SpawnPlanner:
    """Chooses spawn points from a level's pools.

    - player: one early-pool cell, far (in walk order) from the key.
    - key: one late-pool cell.
    - npcs: ``npc_count`` late-pool cells, repeats allowed.
    - traps, then coins: drawn without replacement from a shared copy of the open
      pool minus occupied cells, so traps and coins never overlap.
    """

    def __init__(self, settings: Optional[SpawnSettings] = None, rng: Optional[random.Random] = None) -> None:
        self.settings = settings or SpawnSettings()
        self.rng = rng or random.Random()

    def plan(self, level: Level) -> SpawnPlan:
        if level.degenerate:
            logger.warning("Degenerate level; nothing to spawn")
            return SpawnPlan()

        pools = level.pools
        player = self._pick_one(pools.early, "player")
        key = self._pick_one(pools.late, "key")
        npcs: List[WorldPoint] = []
        if pools.late:
            npcs = [self.rng.choice(pools.late) for _ in range(self.settings.npc_count)]
        elif self.settings.npc_count:
            logger.warning("No late-pool locations available for %d npcs", self.settings.npc_count)

        occupied = {p for p in (player, key) if p is not None} | set(npcs)
        available = [p for p in pools.open if p not in occupied]
        traps = self._draw(available, self.settings.trap_count)
        coins = self._draw(available, self.settings.coin_count)
        if len(traps) < self.settings.trap_count or len(coins) < self.settings.coin_count:
            logger.warning(
                "Open pool exhausted: placed %d/%d traps and %d/%d coins",
                len(traps), self.settings.trap_count, len(coins), self.settings.coin_count,
            )

        plan = SpawnPlan(player=player, key=key, npcs=tuple(npcs), traps=tuple(traps), coins=tuple(coins))
        logger.debug("Spawn plan: player=%s key=%s npcs=%d traps=%d coins=%d",
                     player, key, len(npcs), len(traps), len(coins))
        return plan

    def _pick_one(self, pool: Sequence[WorldPoint], what: str) -> Optional[WorldPoint]:
        if not pool:
            logger.warning("No valid spawn locations available for %s", what)
            return None
        return pool[self.rng.randrange(len(pool))]

    def _draw(self, available: List[WorldPoint], count: int) -> List[WorldPoint]:
        """Remove and return up to ``count`` random entries from ``available``."""
        drawn: List[WorldPoint] = []
        while len(drawn) < count and available:
            drawn.append(available.pop(self.rng.randrange(len(available))))
        return drawn


def plan_for_level(level: Level, settings: Optional[SpawnSettings] = None) -> SpawnPlan:
    """Plan spawns with an RNG derived from the level's own seed, so plans are reproducible."""
    rngm = RNGManager(bytes.fromhex(level.seed_hex))
    rng = rngm.context_rng(SPAWN_DOMAIN, level.width, level.height)
    return SpawnPlanner(settings, rng).plan(level)
