from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .config import GenerationSettings
from .dungeon.generator import Level, generate_level
from .errors import GhostMazeError
from .logging_config import configure_logging
from .navigation.grid import NavigationGrid
from .report import LevelReport
from .spawning import plan_for_level

logger = logging.getLogger(__name__)


def _parse_point(text: str) -> Tuple[int, int]:
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected X,Y, got {text!r}") from exc
    return x, y


def _seed(text: str):
    return int(text) if text.lstrip("-").isdigit() else text


def parse_args(argv=None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--width", type=int, default=None, help="Grid width (odd keeps a solid border)")
    common.add_argument("--height", type=int, default=None, help="Grid height")
    common.add_argument("--seed", type=_seed, default=None, help="Master seed (int or string)")
    common.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a settings YAML file to load/override defaults.",
    )
    common.add_argument("--format", choices=("ascii", "json"), default="ascii", help="Output format")
    common.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    parser = argparse.ArgumentParser(
        prog="ghostmaze",
        description="ghostmaze - Hunt-and-Kill maze levels with A* navigation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("generate", parents=[common], help="Generate a level and print it")

    path = sub.add_parser("path", parents=[common], help="Generate a level and route between two cells")
    path.add_argument("--from", dest="start", type=_parse_point, required=True, help="Start cell X,Y")
    path.add_argument("--to", dest="end", type=_parse_point, required=True, help="Goal cell X,Y")

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    """File settings, then GHOSTMAZE_* environment, then command line flags."""
    settings = GenerationSettings.load(args.settings_path)
    settings = settings.override(**GenerationSettings.env_overrides())
    return settings.override(width=args.width, height=args.height, seed=args.seed)


def _build_level(settings: GenerationSettings) -> Level:
    return generate_level(
        settings.width,
        settings.height,
        settings.seed,
        origin=settings.origin,
        cell_size=settings.cell_size,
    )


def _cmd_generate(args: argparse.Namespace, settings: GenerationSettings) -> int:
    level = _build_level(settings)
    plan = plan_for_level(level, settings.spawns)
    if args.format == "json":
        print(LevelReport.from_level(level, plan).model_dump_json(indent=2))
    else:
        print("\n".join(level.grid.to_str_lines()))
        print(f"seed={level.seed_hex} exit={level.exit_location} signature={level.signature()}")
    return 0


def _cmd_path(args: argparse.Namespace, settings: GenerationSettings) -> int:
    level = _build_level(settings)
    nav = NavigationGrid.from_level(level)
    route: List[Tuple[int, int]] = nav.find_path(args.start, args.end)
    if args.format == "json":
        print(json.dumps({"start": args.start, "end": args.end, "path": route}))
    else:
        overlay = {cell: "*" for cell in route}
        if route:
            overlay[route[0]] = "S"
            overlay[route[-1]] = "G"
        print("\n".join(level.grid.to_str_lines(overlay)))
        print(f"steps={max(len(route) - 1, 0)}" if route else "no path")
    return 0 if route else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = build_settings(args)
        if args.command == "path":
            return _cmd_path(args, settings)
        return _cmd_generate(args, settings)
    except GhostMazeError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
