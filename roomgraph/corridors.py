"""
Corridor pathfinding for dungeon generation.

Corridors are found with A* over the whole dungeon extent. Nothing is
impassable at generation time; instead every cell has a penalty that
depends on what is already there, so corridors avoid cutting through
rooms and merge into corridors that already exist.
"""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from .config import CorridorCosts
from .grid import Cell, CellType, Grid2D

logger = logging.getLogger(__name__)

# A path is a list of cells (x, y), ordered from start to goal
Path = List[Cell]

ORTHOGONAL_STEPS: Tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL_STEPS: Tuple[Cell, ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))


@dataclass
class PathCost:
    """Cost of stepping onto a cell, and whether it may be stepped on at all."""

    cost: float
    traversable: bool = True


# cost_function(current, neighbor) -> PathCost
CostFunction = Callable[[Cell, Cell], PathCost]


def euclidean_distance(a: Cell, b: Cell) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


class CorridorPathfinder:
    """A* over a square size x size grid of cells."""

    def __init__(self, size: int, diagonal: bool = True) -> None:
        self.size = size
        self.diagonal = diagonal
        self._steps = ORTHOGONAL_STEPS + DIAGONAL_STEPS if diagonal else ORTHOGONAL_STEPS

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.size and 0 <= y < self.size

    def find_path(
        self,
        start: Cell,
        goal: Cell,
        cost_function: CostFunction,
    ) -> Optional[Path]:
        """
        Find the cheapest path from start to goal.

        Args:
            start: Starting cell
            goal: Target cell
            cost_function: Returns the PathCost of stepping from a cell onto
                one of its neighbours

        Returns:
            List of cells from start to goal (both included), or None if
            the goal cannot be reached.

        Raises:
            ValueError: If start or goal is outside the grid.
        """
        if not self.in_bounds(start):
            raise ValueError(f"start {start} is outside the {self.size}x{self.size} grid")
        if not self.in_bounds(goal):
            raise ValueError(f"goal {goal} is outside the {self.size}x{self.size} grid")

        # Ties on priority pop in insertion order
        counter = itertools.count()
        open_heap: List[Tuple[float, int, Cell]] = [(0.0, next(counter), start)]
        g_cost: Dict[Cell, float] = {start: 0.0}
        parent: Dict[Cell, Optional[Cell]] = {start: None}
        closed: Set[Cell] = set()

        while open_heap:
            _, _, current = heapq.heappop(open_heap)
            if current in closed:
                # Stale entry left behind by a cheaper route
                continue
            closed.add(current)

            if current == goal:
                return _reconstruct_path(parent, goal)

            for dx, dy in self._steps:
                neighbor = (current[0] + dx, current[1] + dy)
                if not self.in_bounds(neighbor) or neighbor in closed:
                    continue

                path_cost = cost_function(current, neighbor)
                if not path_cost.traversable:
                    continue

                new_cost = g_cost[current] + path_cost.cost
                if new_cost < g_cost.get(neighbor, math.inf):
                    g_cost[neighbor] = new_cost
                    parent[neighbor] = current
                    priority = new_cost + euclidean_distance(neighbor, goal)
                    heapq.heappush(open_heap, (priority, next(counter), neighbor))

        logger.debug("No corridor path from %s to %s", start, goal)
        return None


def _reconstruct_path(parent: Dict[Cell, Optional[Cell]], goal: Cell) -> Path:
    path: Path = []
    cell: Optional[Cell] = goal
    while cell is not None:
        path.append(cell)
        cell = parent[cell]
    path.reverse()
    return path


def corridor_cost_function(grid: Grid2D, costs: CorridorCosts) -> CostFunction:
    """
    The standard corridor policy: penalise rooms, prefer existing corridors.

    Every cell is traversable.
    """
    penalties = {
        CellType.ROOM: costs.room,
        CellType.NONE: costs.empty,
        CellType.CORRIDOR: costs.corridor,
    }

    def cost_function(current: Cell, neighbor: Cell) -> PathCost:
        return PathCost(cost=penalties[grid[neighbor]], traversable=True)

    return cost_function


def carve_corridor(grid: Grid2D, path: Path) -> List[Cell]:
    """
    Promote every empty cell on the path to a corridor.

    Room and corridor cells along the path are left as they are.

    Returns:
        The cells that were promoted, in path order.
    """
    carved: List[Cell] = []
    for cell in path:
        if grid[cell] == CellType.NONE:
            grid[cell] = CellType.CORRIDOR
            carved.append(cell)
    return carved
