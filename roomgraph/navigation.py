"""
Per-room navigation fields for runtime pathfinding.

Each room keeps two dense arrays over its local grid, both indexed [x, y]:

- movement_penalty: static terrain cost. 0 means the cell can never be
  entered; any positive value is added to the cost of stepping onto it.
  Filled once, from an obstacle query, when the room is set up.
- item_obstacles: dynamic blocking by moveable items. 0 means an item is
  currently sitting on the cell. Rebuilt in full whenever items move.

Local cell (0, 0) is the room's lower bound in world cells.
"""

import math
from dataclasses import dataclass
from typing import Callable, Collection, Hashable, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from .config import NavigationConfig
from .grid import Cell

if TYPE_CHECKING:
    from .astar import Waypoint
    from .rooms import Room

# query(world_cell) -> movement cost, or None if the cell is impassable
ObstacleQuery = Callable[[Cell], Optional[int]]


@dataclass
class MoveableItem:
    """A moveable obstacle, described by its world-space bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def move_by(self, dx: float, dy: float) -> None:
        self.min_x += dx
        self.max_x += dx
        self.min_y += dy
        self.max_y += dy


def terrain_query(
    tile_at: Callable[[Cell], Hashable],
    unwalkable_tiles: Collection[Hashable],
    preferred_path_tile: Optional[Hashable] = None,
    config: Optional[NavigationConfig] = None,
) -> ObstacleQuery:
    """
    Build an obstacle query from a collision tile lookup.

    Cells whose tile is in unwalkable_tiles are impassable, cells painted
    with preferred_path_tile get the preferred-path penalty, everything
    else gets the default penalty.
    """
    config = config or NavigationConfig()

    def query(cell: Cell) -> Optional[int]:
        tile = tile_at(cell)
        if tile in unwalkable_tiles:
            return None
        if preferred_path_tile is not None and tile == preferred_path_tile:
            return config.preferred_path_movement_penalty
        return config.default_movement_penalty

    return query


class RoomNavigation:
    """
    Navigation fields and moveable obstacles for one room.

    Bounds are inclusive world cells, so the fields have shape
    (upper.x - lower.x + 1, upper.y - lower.y + 1).
    """

    def __init__(
        self,
        lower_bound: Cell,
        upper_bound: Cell,
        query: Optional[ObstacleQuery] = None,
        config: Optional[NavigationConfig] = None,
    ) -> None:
        self.config = config or NavigationConfig()
        self.lower_bound: Cell = lower_bound
        self.upper_bound: Cell = upper_bound

        width = upper_bound[0] - lower_bound[0] + 1
        height = upper_bound[1] - lower_bound[1] + 1
        if width < 1 or height < 1:
            raise ValueError(
                f"upper bound {upper_bound} is below lower bound {lower_bound}"
            )

        self.movement_penalty: np.ndarray = self._build_movement_penalty(
            width, height, query
        )
        self.item_obstacles: np.ndarray = np.full(
            (width, height), self.config.default_movement_penalty, dtype=int
        )
        self.moveable_items: List[MoveableItem] = []

    @classmethod
    def from_room(
        cls,
        room: "Room",
        query: Optional[ObstacleQuery] = None,
        config: Optional[NavigationConfig] = None,
    ) -> "RoomNavigation":
        """Create navigation fields covering a generated room."""
        return cls(
            lower_bound=(room.x_min, room.y_min),
            upper_bound=(room.x_max - 1, room.y_max - 1),
            query=query,
            config=config,
        )

    def _build_movement_penalty(
        self, width: int, height: int, query: Optional[ObstacleQuery]
    ) -> np.ndarray:
        penalty = np.full((width, height), self.config.default_movement_penalty, dtype=int)
        if query is None:
            return penalty

        for x in range(width):
            for y in range(height):
                cost = query(self.to_world_cell((x, y)))
                if cost is None:
                    penalty[x, y] = 0
                elif cost < 0:
                    raise ValueError(
                        f"obstacle query returned negative cost {cost} "
                        f"for cell {self.to_world_cell((x, y))}"
                    )
                else:
                    penalty[x, y] = cost
        return penalty

    @property
    def shape(self) -> Tuple[int, int]:
        return self.movement_penalty.shape

    def to_local(self, cell: Cell) -> Cell:
        """Translate a world cell into this room's local grid."""
        return (cell[0] - self.lower_bound[0], cell[1] - self.lower_bound[1])

    def to_world_cell(self, local: Cell) -> Cell:
        return (local[0] + self.lower_bound[0], local[1] + self.lower_bound[1])

    def contains_cell(self, cell: Cell) -> bool:
        """True if the world cell is inside the room's bounds."""
        return (
            self.lower_bound[0] <= cell[0] <= self.upper_bound[0]
            and self.lower_bound[1] <= cell[1] <= self.upper_bound[1]
        )

    def cell_to_world(self, local: Cell) -> "Waypoint":
        """World position of the center of a local cell."""
        world_x, world_y = self.to_world_cell(local)
        size = self.config.cell_size
        origin_x, origin_y = self.config.origin
        return (
            origin_x + world_x * size + size * 0.5,
            origin_y + world_y * size + size * 0.5,
        )

    def world_to_cell(self, point: Tuple[float, float]) -> Cell:
        """World cell containing a world-space point."""
        size = self.config.cell_size
        origin_x, origin_y = self.config.origin
        return (
            math.floor((point[0] - origin_x) / size),
            math.floor((point[1] - origin_y) / size),
        )

    def add_moveable_item(self, item: MoveableItem) -> None:
        """Track a moveable item and refresh the obstacle field."""
        self.moveable_items.append(item)
        self.update_moveable_obstacles()

    def update_moveable_obstacles(self) -> None:
        """
        Rebuild the item obstacle field from the tracked items.

        Every cell touched by an item's bounding box is blocked. Parts of a
        box that lie outside the room are ignored.
        """
        self.item_obstacles.fill(self.config.default_movement_penalty)
        width, height = self.shape

        for item in self.moveable_items:
            min_x, min_y = self.to_local(self.world_to_cell((item.min_x, item.min_y)))
            max_x, max_y = self.to_local(self.world_to_cell((item.max_x, item.max_y)))

            min_x, min_y = max(min_x, 0), max(min_y, 0)
            max_x, max_y = min(max_x, width - 1), min(max_y, height - 1)
            if min_x > max_x or min_y > max_y:
                continue

            self.item_obstacles[min_x : max_x + 1, min_y : max_y + 1] = 0

    def find_path(self, start_cell: Cell, goal_cell: Cell) -> Optional[List["Waypoint"]]:
        """Route between two world cells of this room. See astar.build_path."""
        from .astar import build_path

        return build_path(self, start_cell, goal_cell)
