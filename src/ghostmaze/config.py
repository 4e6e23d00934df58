from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "ghostmaze"
SETTINGS_FILENAME = "settings.yaml"

ENV_WIDTH = "GHOSTMAZE_WIDTH"
ENV_HEIGHT = "GHOSTMAZE_HEIGHT"
ENV_SEED = "GHOSTMAZE_SEED"
ENV_NPCS = "GHOSTMAZE_NPCS"
ENV_COINS = "GHOSTMAZE_COINS"
ENV_TRAPS = "GHOSTMAZE_TRAPS"


def default_settings_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / SETTINGS_FILENAME


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _as_pair(name: str, value: Any) -> Tuple[float, float]:
    try:
        x, y = value
        return float(x), float(y)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a pair of numbers, got {value!r}") from exc


@dataclass
class SpawnSettings:
    """How many of each entity the spawn planner places per level."""

    npc_count: int = 3
    coin_count: int = 10
    trap_count: int = 10

    def __post_init__(self) -> None:
        for name in ("npc_count", "coin_count", "trap_count"):
            value = _as_int(name, getattr(self, name))
            if value < 0:
                raise ConfigError(f"{name} must be >= 0, got {value}")
            setattr(self, name, value)


@dataclass
class GenerationSettings:
    """Level generation configuration.

    - width/height: full-resolution grid size. Odd sizes keep a solid border ring;
      anything below 3 in either axis produces a degenerate all-wall level.
    - seed: master seed (int or str); None draws a fresh random seed per level.
    - origin/cell_size: world placement of the grid.
    - spawns: entity counts for SpawnPlanner.

    Usage:
      settings = GenerationSettings.load().override(**GenerationSettings.env_overrides())
    """

    width: int = 21
    height: int = 21
    seed: Optional[Union[int, str]] = None
    origin: Tuple[float, float] = (0.0, 0.0)
    cell_size: Tuple[float, float] = (1.0, 1.0)
    spawns: SpawnSettings = field(default_factory=SpawnSettings)

    def __post_init__(self) -> None:
        self.width = _as_int("width", self.width)
        self.height = _as_int("height", self.height)
        if self.width < 0 or self.height < 0:
            raise ConfigError(f"width/height must be >= 0, got {self.width}x{self.height}")
        self.origin = _as_pair("origin", self.origin)
        self.cell_size = _as_pair("cell_size", self.cell_size)
        if self.cell_size[0] <= 0 or self.cell_size[1] <= 0:
            raise ConfigError(f"cell_size must be positive, got {self.cell_size}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, (int, str))):
            raise ConfigError(f"seed must be an integer or a string, got {self.seed!r}")
        if isinstance(self.spawns, Mapping):
            try:
                self.spawns = SpawnSettings(**self.spawns)
            except TypeError as exc:
                raise ConfigError(f"Invalid spawns settings: {exc}") from exc
        elif not isinstance(self.spawns, SpawnSettings):
            raise ConfigError(f"spawns must be a mapping of counts, got {self.spawns!r}")

    # ---- Construction ----------------------------------------------------
    @classmethod
    def _from_dict(cls, data: Mapping[str, Any]) -> "GenerationSettings":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
        kwargs = {k: v for k, v in data.items() if k in known}
        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    @classmethod
    def _deep_merge(cls, base: dict, overlay: Mapping[str, Any]) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, Mapping) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "origin": list(self.origin),
            "cell_size": list(self.cell_size),
            "spawns": dataclasses.asdict(self.spawns),
        }

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GenerationSettings":
        """Load settings from defaults and an optional YAML override file.

        With no path, the per-user config file is used when it exists.
        """
        explicit = path is not None
        path = Path(path) if explicit else default_settings_path()
        if not path.exists():
            if explicit:
                logger.warning("Settings file not found: %s", path)
            return cls()
        with path.open("r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Settings file {path} must contain a mapping, got {type(raw).__name__}")
        logger.info("Loaded settings from %s", path)
        return cls._from_dict(cls._deep_merge(cls().to_dict(), raw))

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved settings to %s", path)

    @staticmethod
    def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Collect overrides from GHOSTMAZE_* environment variables."""
        env = os.environ if environ is None else environ
        changes: Dict[str, Any] = {}
        if env.get(ENV_WIDTH):
            changes["width"] = _as_int(ENV_WIDTH, env[ENV_WIDTH])
        if env.get(ENV_HEIGHT):
            changes["height"] = _as_int(ENV_HEIGHT, env[ENV_HEIGHT])
        if env.get(ENV_SEED):
            raw = env[ENV_SEED].strip()
            changes["seed"] = int(raw) if raw.lstrip("-").isdigit() else raw
        spawns: Dict[str, int] = {}
        for var, key in ((ENV_NPCS, "npc_count"), (ENV_COINS, "coin_count"), (ENV_TRAPS, "trap_count")):
            if env.get(var):
                spawns[key] = _as_int(var, env[var])
        if spawns:
            changes["spawns"] = spawns
        return changes

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        return cls().override(**cls.env_overrides(environ))

    def override(self, **changes: Any) -> "GenerationSettings":
        """Return a validated copy with the given (non-None) values replaced."""
        changes = {k: v for k, v in changes.items() if v is not None}
        spawns = changes.pop("spawns", None)
        if isinstance(spawns, SpawnSettings):
            spawns = dataclasses.asdict(spawns)
        data = self.to_dict()
        if isinstance(spawns, Mapping):
            data["spawns"] = self._deep_merge(data["spawns"], spawns)
        elif spawns is not None:
            data["spawns"] = spawns
        data.update(changes)
        return self._from_dict(data)
