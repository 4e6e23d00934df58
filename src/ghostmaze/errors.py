class GhostMazeError(Exception):
    """Base error for ghostmaze domain exceptions."""


class GenerationError(GhostMazeError):
    """Raised when a level cannot be generated in a valid state."""


class CarveLoopError(GenerationError):
    """Raised when the carving walk exceeds its iteration bound (a logic defect)."""


class ExitPlacementError(GenerationError):
    """Raised when no border cell is eligible to become the exit."""


class GridNotBoundError(GhostMazeError):
    """Raised when a navigation query is made before a grid has been bound."""


class ConfigError(GhostMazeError, ValueError):
    """Raised when generation settings are invalid."""
