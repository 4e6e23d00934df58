from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

Point = Tuple[int, int]

# Ordered for deterministic traversal
NEIGHBOR_OFFSETS: Tuple[Point, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class WallCell(IntEnum):
    WALL = 0
    PASSAGE = 1
    EXIT = 2

    @property
    def glyph(self) -> str:
        """Single-character visualization used by the CLI and in logs."""
        return {WallCell.WALL: "#", WallCell.PASSAGE: ".", WallCell.EXIT: "E"}[self]


class FloorCell(IntEnum):
    """Ground layer marker. Every cell is currently floor."""

    FLOOR = 0


class WallGrid:
    """Immutable full-resolution grid of wall cells.

    Coordinates are (x, y) with (0,0) at top-left; x grows to the right, y grows down.
    Rows are stored as tuples so a bound grid can be shared between any number of
    readers without copying or locking.
    """

    __slots__ = ("_width", "_height", "_rows")

    def __init__(self, rows: Sequence[Sequence[WallCell]]) -> None:
        frozen = tuple(tuple(WallCell(c) for c in row) for row in rows)
        width = len(frozen[0]) if frozen else 0
        for row in frozen:
            if len(row) != width:
                raise ValueError("All rows must be same width")
        self._rows: Tuple[Tuple[WallCell, ...], ...] = frozen
        self._width = width
        self._height = len(frozen)

    @classmethod
    def filled(cls, width: int, height: int, cell: WallCell = WallCell.WALL) -> "WallGrid":
        return cls([[cell] * width for _ in range(height)])

    @classmethod
    def from_ascii(cls, rows: Sequence[str]) -> "WallGrid":
        """Build a grid from ASCII rows ('#' wall, 'E' exit, anything else passage)."""
        lookup = {"#": WallCell.WALL, "E": WallCell.EXIT}
        return cls([[lookup.get(ch, WallCell.PASSAGE) for ch in row] for row in rows])

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def rows(self) -> Tuple[Tuple[WallCell, ...], ...]:
        return self._rows

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> WallCell:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell out of bounds: ({x},{y}) not in [0,{self._width})x[0,{self._height})")
        return self._rows[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._rows[y][x] != WallCell.WALL

    def neighbors4(self, x: int, y: int) -> Iterator[Point]:
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def cells(self, kind: WallCell) -> List[Point]:
        """All coordinates holding ``kind``, row-major."""
        return [(x, y) for y, row in enumerate(self._rows) for x, c in enumerate(row) if c == kind]

    def find(self, kind: WallCell) -> Optional[Point]:
        for y, row in enumerate(self._rows):
            for x, c in enumerate(row):
                if c == kind:
                    return (x, y)
        return None

    def with_cells(self, changes: Iterable[Tuple[Point, WallCell]]) -> "WallGrid":
        """Return a new grid with the given cells replaced."""
        rows = [list(row) for row in self._rows]
        for (x, y), cell in changes:
            if not self.in_bounds(x, y):
                raise IndexError(f"Cell out of bounds: ({x},{y})")
            rows[y][x] = cell
        return WallGrid(rows)

    def to_str_lines(self, overlay: Optional[dict] = None) -> List[str]:
        overlay = overlay or {}
        return [
            "".join(overlay.get((x, y), c.glyph) for x, c in enumerate(row))
            for y, row in enumerate(self._rows)
        ]

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """Deterministic, hashable snapshot of the cells for equality tests."""
        return tuple(tuple(int(c) for c in row) for row in self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WallGrid):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"WallGrid({self._width}x{self._height})"


FloorGrid = Tuple[Tuple[FloorCell, ...], ...]


def floor_layer(width: int, height: int) -> FloorGrid:
    return tuple(tuple(FloorCell.FLOOR for _ in range(width)) for _ in range(height))
