from .grid import NavigationGrid
from .pathfinding import find_path, manhattan_distance
from .transform import GridTransform

__all__ = ["NavigationGrid", "GridTransform", "find_path", "manhattan_distance"]
