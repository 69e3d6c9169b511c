"""Rectangular cell store with bounded or toroidal Moore-neighborhood queries.

Cells are addressed ``(x, y)`` with ``0 <= x < width`` and ``0 <= y < height``
and hold packed integer values (see ``domain.group``).  Storage is a signed
32-bit ``numpy`` array indexed ``[x, y]``.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from schelling_explorer.config.constants import EMPTY_CELL

Coordinate = tuple[int, int]


class BoundaryMode(Enum):
    """How neighborhood queries treat the grid edges."""

    BOUNDED = "bounded"
    TOROIDAL = "toroidal"


class NeighborhoodBuffer:
    """Reusable pair of coordinate lists filled by neighbor queries.

    One buffer is owned by the engine and handed to every evaluation so the
    per-agent neighborhood scan does not allocate.
    """

    __slots__ = ("xs", "ys")

    def __init__(self) -> None:
        self.xs: list[int] = []
        self.ys: list[int] = []

    def clear(self) -> None:
        self.xs.clear()
        self.ys.clear()

    def append(self, x: int, y: int) -> None:
        self.xs.append(x)
        self.ys.append(y)

    def __len__(self) -> int:
        return len(self.xs)

    def coordinates(self) -> list[Coordinate]:
        """Return the buffered coordinates as ``(x, y)`` tuples."""
        return list(zip(self.xs, self.ys, strict=True))


class Grid:
    """2D addressable store of packed cell values."""

    def __init__(self, width: int, height: int, fill: int = EMPTY_CELL) -> None:
        if width < 1:
            raise ValueError("width must be >= 1")
        if height < 1:
            raise ValueError("height must be >= 1")
        self.width = width
        self.height = height
        self._cells = np.full((width, height), fill, dtype=np.int32)

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height})"

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the live cell array."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def _check(self, x: int, y: int) -> None:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} grid")

    def get(self, x: int, y: int) -> int:
        self._check(x, y)
        return int(self._cells[x, y])

    def set(self, x: int, y: int, value: int) -> None:
        self._check(x, y)
        self._cells[x, y] = value

    def swap_cells(self, a: Coordinate, b: Coordinate) -> None:
        """Exchange the values held at ``a`` and ``b``."""
        ax, ay = a
        bx, by = b
        self._check(ax, ay)
        self._check(bx, by)
        cells = self._cells
        cells[ax, ay], cells[bx, by] = cells[bx, by], cells[ax, ay]

    def fill(self, value: int) -> None:
        self._cells.fill(value)

    def snapshot(self) -> np.ndarray:
        """Return an independent, read-only copy of the current cell values."""
        copy = self._cells.copy()
        copy.flags.writeable = False
        return copy

    def count(self, value: int) -> int:
        return int(np.count_nonzero(self._cells == value))

    def values_at(self, buffer: NeighborhoodBuffer) -> np.ndarray:
        """Gather the values of every coordinate held in ``buffer``."""
        return self._cells[buffer.xs, buffer.ys]

    def moore_neighbors(
        self,
        x: int,
        y: int,
        radius: int,
        mode: BoundaryMode,
        out: NeighborhoodBuffer | None = None,
    ) -> NeighborhoodBuffer:
        """Collect the Moore neighborhood of ``(x, y)`` into ``out``.

        Offsets are visited x-outer, y-inner from ``-radius`` to ``radius``
        with the center skipped, so the order is stable for a given query.
        Toroidal mode wraps every offset and always yields
        ``(2 * radius + 1) ** 2 - 1`` entries (wrapped duplicates included);
        bounded mode drops offsets that fall off the grid.
        """
        self._check(x, y)
        if radius < 1:
            raise ValueError("radius must be >= 1")
        buffer = out if out is not None else NeighborhoodBuffer()
        buffer.clear()
        width = self.width
        height = self.height
        toroidal = mode is BoundaryMode.TOROIDAL
        for dx in range(-radius, radius + 1):
            nx = x + dx
            if toroidal:
                nx %= width
            elif nx < 0 or nx >= width:
                continue
            for dy in range(-radius, radius + 1):
                if dx == 0 and dy == 0:
                    continue
                ny = y + dy
                if toroidal:
                    ny %= height
                elif ny < 0 or ny >= height:
                    continue
                buffer.append(nx, ny)
        return buffer


def neighborhood_size(radius: int) -> int:
    """Number of slots in an unclipped Moore neighborhood of ``radius``."""
    return (2 * radius + 1) ** 2 - 1
