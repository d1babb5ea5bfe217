"""
Sparse 2D grid of cell categories.

The grid is the backing store for generation: rooms are written into it,
corridor carving reads it for costs and promotes empty cells to corridors.
"""

from enum import IntEnum
from typing import Dict, Iterator, Tuple

import numpy as np

# A grid cell, as (x, y)
Cell = Tuple[int, int]


class CellType(IntEnum):
    """Category of a dungeon cell."""

    NONE = 0
    ROOM = 1
    CORRIDOR = 2


class Grid2D:
    """
    Map from integer coordinates to CellType.

    Any coordinate can be read or written, including negative ones.
    Unset cells read as CellType.NONE. Staying inside the dungeon extent
    is the caller's job.
    """

    def __init__(self) -> None:
        self._cells: Dict[Cell, CellType] = {}

    def __getitem__(self, cell: Cell) -> CellType:
        return self._cells.get(cell, CellType.NONE)

    def __setitem__(self, cell: Cell, category: CellType) -> None:
        if category == CellType.NONE:
            self._cells.pop(cell, None)
        else:
            self._cells[cell] = category

    def __len__(self) -> int:
        """Number of cells that are not NONE."""
        return len(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid2D):
            return NotImplemented
        return self._cells == other._cells

    def cells_of(self, category: CellType) -> Iterator[Cell]:
        """Yield every cell of the given category, ordered by (y, x)."""
        matching = [cell for cell, cat in self._cells.items() if cat == category]
        matching.sort(key=lambda cell: (cell[1], cell[0]))
        yield from matching

    def count(self, category: CellType) -> int:
        return sum(1 for cat in self._cells.values() if cat == category)

    def to_array(self, size: int) -> np.ndarray:
        """
        Export the square region [0, size) x [0, size) as a dense array.

        The array is indexed [x, y] and holds CellType values. Cells outside
        the region are dropped.
        """
        array = np.zeros((size, size), dtype=np.int8)
        for (x, y), category in self._cells.items():
            if 0 <= x < size and 0 <= y < size:
                array[x, y] = int(category)
        return array
