from importlib.metadata import version, PackageNotFoundError

from .dungeon import Level, WallCell, generate_level
from .navigation import NavigationGrid

__all__ = ["__version__", "Level", "WallCell", "generate_level", "NavigationGrid"]

try:
    __version__ = version("ghostmaze")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
