"""
Room placement.

Rooms are proposed at random locations and sizes. A candidate is rejected
if it leaves the dungeon extent, or if its bounds grown by one cell on
every side overlap a room that is already committed. That one-cell buffer
keeps rooms from touching, so every room stays visually distinct and
corridors have somewhere to run.

Placement never retries beyond the configured number of samples, so a
crowded extent simply ends up with fewer rooms.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from .config import GeneratorConfig
from .grid import Cell, CellType, Grid2D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Room:
    """
    An axis-aligned rectangle of cells.

    Bounds are half-open: the room covers x_min <= x < x_max and
    y_min <= y < y_max.
    """

    x: int
    y: int
    width: int
    height: int
    room_id: int = -1

    @property
    def x_min(self) -> int:
        return self.x

    @property
    def y_min(self) -> int:
        return self.y

    @property
    def x_max(self) -> int:
        return self.x + self.width

    @property
    def y_max(self) -> int:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Geometric center of the rectangle."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def center_cell(self) -> Cell:
        """The cell holding the center, truncated toward zero."""
        cx, cy = self.center
        return (int(cx), int(cy))

    def buffered(self, margin: int = 1) -> "Room":
        """Return this room grown by margin cells on every side."""
        return Room(
            x=self.x - margin,
            y=self.y - margin,
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
            room_id=self.room_id,
        )

    def intersects(self, other: "Room") -> bool:
        """True if the two rectangles overlap on both axes (touching is not overlap)."""
        return not (
            self.x_min >= other.x_max
            or self.x_max <= other.x_min
            or self.y_min >= other.y_max
            or self.y_max <= other.y_min
        )

    def contains(self, cell: Cell) -> bool:
        x, y = cell
        return self.x_min <= x < self.x_max and self.y_min <= y < self.y_max

    def cells(self) -> Iterator[Cell]:
        """Yield every cell in the room, row by row."""
        for y in range(self.y_min, self.y_max):
            for x in range(self.x_min, self.x_max):
                yield (x, y)

    def fits_within(self, size: int) -> bool:
        """
        True if the room lies inside a square extent of the given size.

        The far edge is exclusive of the last row and column, matching the
        placement rule the generator has always used.
        """
        return (
            self.x_min >= 0
            and self.x_max < size
            and self.y_min >= 0
            and self.y_max < size
        )


def place_rooms(
    grid: Grid2D,
    config: GeneratorConfig,
    rng: random.Random,
    on_commit: Optional[Callable[[Room], None]] = None,
) -> List[Room]:
    """
    Sample config.room_count candidate rooms and commit the ones that fit.

    Committed rooms are written into the grid as CellType.ROOM and given
    sequential room ids in commit order.

    Args:
        grid: Grid to write room cells into
        config: Extent, sample count and size range
        rng: Seeded random source for the run
        on_commit: Called with each room as it is committed

    Returns:
        The committed rooms, in commit order. May be shorter than
        config.room_count, or empty.
    """
    rooms: List[Room] = []

    for _ in range(config.room_count):
        x = rng.randrange(0, config.size)
        y = rng.randrange(0, config.size)
        width = rng.randint(config.room_min_size, config.room_max_size)
        height = rng.randint(config.room_min_size, config.room_max_size)

        candidate = Room(x, y, width, height, room_id=len(rooms))
        buffer = candidate.buffered()

        if not candidate.fits_within(config.size):
            continue
        if any(existing.intersects(buffer) for existing in rooms):
            continue

        rooms.append(candidate)
        for cell in candidate.cells():
            grid[cell] = CellType.ROOM

        if on_commit is not None:
            on_commit(candidate)

    logger.debug(
        "Placed %d rooms from %d samples in a %dx%d extent",
        len(rooms),
        config.room_count,
        config.size,
        config.size,
    )

    return rooms
