"""
A* pathfinding inside a single room, for agents moving at runtime.

Costs are integers: an orthogonal step costs 10 and a diagonal step 14
(10 * sqrt(2), rounded), plus the movement penalty of the cell being
entered. The heuristic uses the same 10/14 metric.

Diagonal steps between two blocked orthogonal neighbours are allowed.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple, TYPE_CHECKING

import numpy as np

from .grid import Cell

if TYPE_CHECKING:
    from .navigation import RoomNavigation

logger = logging.getLogger(__name__)

ORTHOGONAL_STEP_COST: int = 10
DIAGONAL_STEP_COST: int = 14

# A world-space point (x, y)
Waypoint = Tuple[float, float]


@dataclass(eq=False)
class PathNode:
    """Search state for one cell of the room's local grid."""

    position: Cell
    g_cost: int = 0
    h_cost: int = 0
    parent: Optional["PathNode"] = None

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost


def grid_distance(a: Cell, b: Cell) -> int:
    """Octile distance in 10/14 units between two cells."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])

    # The shorter axis is covered by diagonal steps, the rest orthogonally
    if dx > dy:
        return DIAGONAL_STEP_COST * dy + ORTHOGONAL_STEP_COST * (dx - dy)
    return DIAGONAL_STEP_COST * dx + ORTHOGONAL_STEP_COST * (dy - dx)


def find_shortest_path(
    start: Cell,
    goal: Cell,
    movement_penalty: np.ndarray,
    item_obstacles: np.ndarray,
) -> Optional[PathNode]:
    """
    Run A* over a room's local grid.

    Args:
        start: Local starting cell
        goal: Local target cell
        movement_penalty: Terrain cost per cell, 0 for impassable
        item_obstacles: 0 where a moveable item blocks the cell

    Returns:
        The goal PathNode, whose parent chain leads back to start, or None
        if the goal cannot be reached.

    Raises:
        ValueError: If the fields differ in shape, or start or goal is
            outside them.
    """
    if movement_penalty.shape != item_obstacles.shape:
        raise ValueError(
            f"field shapes differ: {movement_penalty.shape} vs {item_obstacles.shape}"
        )
    width, height = movement_penalty.shape

    for name, cell in (("start", start), ("goal", goal)):
        if not (0 <= cell[0] < width and 0 <= cell[1] < height):
            raise ValueError(f"{name} {cell} is outside the {width}x{height} room grid")

    nodes: Dict[Cell, PathNode] = {}

    def node_at(position: Cell) -> PathNode:
        node = nodes.get(position)
        if node is None:
            node = PathNode(position)
            nodes[position] = node
        return node

    start_node = node_at(start)
    goal_node = node_at(goal)

    open_list: List[PathNode] = [start_node]
    open_positions: Set[Cell] = {start}
    closed: Set[Cell] = set()

    while open_list:
        # Stable sort, so equal F costs keep their list order
        open_list.sort(key=lambda node: node.f_cost)
        current = open_list.pop(0)
        open_positions.discard(current.position)

        if current is goal_node:
            return current

        closed.add(current.position)

        cx, cy = current.position
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue

                x, y = cx + dx, cy + dy
                if not (0 <= x < width and 0 <= y < height):
                    continue
                penalty = int(movement_penalty[x, y])
                if penalty == 0 or item_obstacles[x, y] == 0:
                    continue
                if (x, y) in closed:
                    continue

                neighbor = node_at((x, y))
                new_g_cost = current.g_cost + grid_distance(current.position, (x, y)) + penalty
                is_open = (x, y) in open_positions

                if new_g_cost < neighbor.g_cost or not is_open:
                    neighbor.g_cost = new_g_cost
                    neighbor.h_cost = grid_distance((x, y), goal)
                    neighbor.parent = current

                    if not is_open:
                        open_list.append(neighbor)
                        open_positions.add((x, y))

    return None


def build_path(
    navigation: "RoomNavigation",
    start_cell: Cell,
    goal_cell: Cell,
) -> Optional[List[Waypoint]]:
    """
    Find a path between two world cells of a room.

    Args:
        navigation: The room's navigation fields
        start_cell: Starting world cell
        goal_cell: Target world cell

    Returns:
        World-space waypoints at cell centers, ordered from start to goal
        with both ends included, or None if no path exists.

    Raises:
        ValueError: If start or goal is outside the room.
    """
    goal_node = find_shortest_path(
        navigation.to_local(start_cell),
        navigation.to_local(goal_cell),
        navigation.movement_penalty,
        navigation.item_obstacles,
    )

    if goal_node is None:
        logger.debug("No path from %s to %s", start_cell, goal_cell)
        return None

    waypoints: List[Waypoint] = []
    node: Optional[PathNode] = goal_node
    while node is not None:
        waypoints.append(navigation.cell_to_world(node.position))
        node = node.parent
    waypoints.reverse()
    return waypoints
