import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from ghostmaze.dungeon.tiles import WallGrid  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep user config files and GHOSTMAZE_* variables out of every test."""
    for var in ("GHOSTMAZE_WIDTH", "GHOSTMAZE_HEIGHT", "GHOSTMAZE_SEED",
                "GHOSTMAZE_NPCS", "GHOSTMAZE_COINS", "GHOSTMAZE_TRAPS", "GHOSTMAZE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("ghostmaze.config.user_config_dir", lambda appname: str(tmp_path / "user-config"))
    yield


@pytest.fixture
def open_room():
    # 3x3 open interior inside a wall ring
    return WallGrid.from_ascii([
        "#####",
        "#...#",
        "#...#",
        "#...#",
        "#####",
    ])
