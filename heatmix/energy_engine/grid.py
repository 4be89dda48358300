"""Footprint grid: a rectangular height map of storey counts.

Cells are stored in a flat row-major list indexed by ``y * width + x``.
Heights are storeys above ground; 0 means the cell is outside the footprint.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, Optional, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from heatmix.exceptions import IncompleteGridError

logger = logging.getLogger(__name__)


class Cell(BaseModel):
    """A single grid cell. Coordinates are fixed, height is editable."""
    model_config = ConfigDict(validate_assignment=True)

    x: int = Field(ge=0, frozen=True)
    y: int = Field(ge=0, frozen=True)
    height: int = Field(default=0, ge=0)


class Direction(Enum):
    """Offsets to the neighbouring cells; north is +y."""
    NORTH = (0, 1)
    EAST = (1, 0)
    SOUTH = (0, -1)
    WEST = (-1, 0)
    NORTH_EAST = (1, 1)
    SOUTH_EAST = (1, -1)
    SOUTH_WEST = (-1, -1)
    NORTH_WEST = (-1, 1)


ORTHOGONAL = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)
DIAGONAL = (Direction.NORTH_EAST, Direction.SOUTH_EAST, Direction.SOUTH_WEST, Direction.NORTH_WEST)


class Grid:
    """A ``width × depth`` height map."""

    def __init__(self, width: int, depth: int):
        if width < 0 or depth < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {width}x{depth}")
        self.width = width
        self.depth = depth
        self._cells: list[Optional[Cell]] = [
            Cell(x=x, y=y) for y in range(depth) for x in range(width)
        ]

    # --- construction ---

    @classmethod
    def from_cells(cls, cells: Sequence[Sequence[Optional[Cell]]]) -> "Grid":
        """Copy a column-major ``cells[x][y]`` array; missing cells stay missing."""
        width = len(cells)
        depth = len(cells[0]) if width else 0
        grid = cls(width, depth)
        for x in range(width):
            for y in range(depth):
                source = cells[x][y] if y < len(cells[x]) else None
                grid._cells[grid._index(x, y)] = (
                    None if source is None else Cell(x=x, y=y, height=source.height)
                )
        return grid

    @classmethod
    def from_heights(cls, heights: Sequence[Sequence[int]] | np.ndarray) -> "Grid":
        """Build a grid from a ``heights[x][y]`` array of whole storey counts."""
        raw = np.asarray(heights)
        if raw.ndim != 2:
            raise ValueError(f"Height map must be two-dimensional, got shape {raw.shape}")
        if raw.size and (
            not np.issubdtype(raw.dtype, np.number)
            or not np.all(np.isfinite(raw))
            or np.any(raw != np.floor(raw))
        ):
            raise ValueError("Heights must be whole storey counts")
        array = raw.astype(int)
        grid = cls(array.shape[0], array.shape[1])
        for cell in grid.cells():
            cell.height = int(array[cell.x, cell.y])
        return grid

    def copy(self) -> "Grid":
        return Grid.from_cells(self.columns())

    # --- access ---

    def _index(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.depth

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at ``(x, y)`` or None when outside the grid."""
        if not self.in_bounds(x, y):
            return None
        return self._cells[self._index(x, y)]

    def set_height(self, x: int, y: int, height: int) -> None:
        cell = self.get_cell(x, y)
        if cell is None:
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.depth} grid")
        cell.height = height

    def fill_rectangle(self, x: int, y: int, length: int, depth: int, height: int) -> None:
        """Set every cell of the ``length × depth`` block at ``(x, y)``."""
        for cx in range(x, x + length):
            for cy in range(y, y + depth):
                self.set_height(cx, cy, height)

    def cells(self) -> Iterator[Cell]:
        for cell in self._cells:
            if cell is not None:
                yield cell

    def columns(self) -> list[list[Optional[Cell]]]:
        """Cells as a column-major ``[x][y]`` array."""
        return [[self.get_cell(x, y) for y in range(self.depth)] for x in range(self.width)]

    @property
    def has_null_cells(self) -> bool:
        return any(cell is None for cell in self._cells)

    def validate(self) -> None:
        """Raise IncompleteGridError unless every cell is present."""
        if self.has_null_cells:
            missing = sum(1 for cell in self._cells if cell is None)
            raise IncompleteGridError(
                f"Grid {self.width}x{self.depth} is missing {missing} of {len(self._cells)} cells"
            )

    def heights(self) -> np.ndarray:
        """Heights as a ``(width, depth)`` integer array."""
        self.validate()
        array = np.zeros((self.width, self.depth), dtype=int)
        for cell in self._cells:
            array[cell.x, cell.y] = cell.height
        return array

    def level_cell_counts(self, levels: int = 10) -> list[int]:
        """Number of cells at each height, indexed by height."""
        counts = np.bincount(self.heights().ravel(), minlength=levels)
        return [int(c) for c in counts]

    # --- neighbourhood ---

    def cell_neighbour_elevation_difference(self, cell: Cell, include_diagonals: bool = False) -> list[int]:
        """Height of *cell* minus each neighbour's height.

        Order is N, E, S, W and, with diagonals, NE, SE, SW, NW.
        A neighbour outside the grid counts as ground level, so the
        difference is the cell's own height.
        """
        directions = ORTHOGONAL + DIAGONAL if include_diagonals else ORTHOGONAL
        diffs = []
        for direction in directions:
            dx, dy = direction.value
            other = self.get_cell(cell.x + dx, cell.y + dy)
            diffs.append(cell.height if other is None else cell.height - other.height)
        return diffs

    def is_edge(self, cell: Optional[Cell], direction: Direction) -> bool:
        """True if the neighbour in *direction* differs in height or is off-grid."""
        if cell is None:
            return False
        dx, dy = direction.value
        other = self.get_cell(cell.x + dx, cell.y + dy)
        if other is None:
            return True
        return cell.height != other.height

    # --- dimension calculations ---

    def calculate_gross_area(self) -> float:
        """Floor area summed over all storeys (one cell = one m² per storey)."""
        h = self.heights()
        return float(h[h > 0].sum())

    def calculate_horizontal_area(self) -> float:
        """Footprint area: the number of occupied cells (roof = ground floor)."""
        return float(np.count_nonzero(self.heights() > 0))

    def calculate_wall_area(self, story_height: float) -> float:
        """Exposed wall area.

        Every cell contributes ``(own height - neighbour height) * story_height``
        for each orthogonal neighbour lower than itself; the area outside the
        grid is at ground level.
        """
        h = self.heights()
        padded = np.pad(h, 1)
        total = 0
        for dx, dy in (d.value for d in ORTHOGONAL):
            neighbour = padded[1 + dx:1 + dx + self.width, 1 + dy:1 + dy + self.depth]
            diff = h - neighbour
            total += int(diff[diff > 0].sum())
        return total * story_height

    def calculate_envelope_area(self, story_height: float) -> float:
        """Walls plus roof and ground floor."""
        return self.calculate_wall_area(story_height) + 2 * self.calculate_horizontal_area()

    def calculate_volume(self, story_height: float) -> float:
        return float(self.heights().sum()) * story_height

    def highest_level(self) -> int:
        h = self.heights()
        return int(h.max()) if h.size else 0

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, depth={self.depth})"
