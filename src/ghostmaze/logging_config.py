import logging
import os

ENV_LOG_LEVEL = "GHOSTMAZE_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count to a log level: none is WARNING, one INFO, more DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def resolve_level(verbosity: int = 0, environ=None) -> int:
    """GHOSTMAZE_LOG_LEVEL (a level name such as ``debug``) wins over the verbosity count.

    Unknown names are ignored.
    """
    env = os.environ if environ is None else environ
    name = (env.get(ENV_LOG_LEVEL) or "").strip().upper()
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    return level_for_verbosity(verbosity)


def configure_logging(verbosity: int = 0) -> int:
    """Configure the root logger for the command line and return the chosen level."""
    level = resolve_level(verbosity)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return level
