"""
Dungeon Generation Algorithm
============================

1. Place rooms: sample random rectangles, keep those that fit inside the
   extent and stay one cell clear of every room already placed.
2. Triangulate: Delaunay-triangulate the room centers. Its edges join
   rooms that are natural neighbours.
3. Select hallways: take the minimum spanning tree of the triangulation
   so every room is reachable, then re-add a few of the remaining edges
   at random so the dungeon has loops.
4. Pathfind hallways: for each selected edge, run A* between the two
   room centers and carve the empty cells along the path into corridor.

Every room cell is handed to the tile placer when its room is committed,
and every corridor cell when it is carved, so each cell is placed once.
"""

import dataclasses
import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from .config import GeneratorConfig, NavigationConfig, resolve_seed
from .corridors import CorridorPathfinder, Path, carve_corridor, corridor_cost_function
from .delaunay import Edge, Triangulation, Vertex, triangulate
from .grid import Cell, CellType, Grid2D
from .mst import add_loop_edges, minimum_spanning_tree
from .navigation import ObstacleQuery, RoomNavigation
from .rooms import Room, place_rooms

logger = logging.getLogger(__name__)

# place_tile(cell, category, owner_room); owner_room is None for corridors
TilePlacer = Callable[[Cell, CellType, Optional[Room]], None]


@dataclass
class Corridor:
    """A carved hallway between the two rooms of a selected edge."""

    start_room: Room
    end_room: Room
    path: Path
    # Cells this corridor turned from NONE into CORRIDOR
    carved: List[Cell] = field(default_factory=list)


@dataclass
class DungeonLayout:
    """Everything a generation run produced."""

    seed: int
    size: int
    grid: Grid2D
    rooms: List[Room]
    triangulation: Triangulation
    tree_edges: List[Edge]
    selected_edges: List[Edge]
    corridors: List[Corridor]

    def room_at(self, cell: Cell) -> Optional[Room]:
        """Return the room containing cell, or None."""
        for room in self.rooms:
            if room.contains(cell):
                return room
        return None

    def corridor_cells(self) -> List[Cell]:
        return list(self.grid.cells_of(CellType.CORRIDOR))

    def navigation_for(
        self,
        room: Room,
        query: Optional[ObstacleQuery] = None,
        config: Optional[NavigationConfig] = None,
    ) -> RoomNavigation:
        """Build runtime navigation fields for one of the layout's rooms."""
        return RoomNavigation.from_room(room, query=query, config=config)


class DungeonGenerator:
    """Runs the generation phases for one configuration."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        place_tile: Optional[TilePlacer] = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.place_tile = place_tile

    def generate(self) -> DungeonLayout:
        config = self.config
        seed = resolve_seed(config.seed)
        rng = random.Random(seed)
        grid = Grid2D()

        rooms = place_rooms(grid, config, rng, on_commit=self._place_room)
        triangulation = self._triangulate(rooms)
        tree_edges, selected_edges = self._create_hallways(triangulation, rng)
        corridors = self._pathfind_hallways(grid, selected_edges)

        logger.info(
            "Generated dungeon seed=%d: %d rooms, %d edges (%d loops), %d corridor cells",
            seed,
            len(rooms),
            len(selected_edges),
            len(selected_edges) - len(tree_edges),
            grid.count(CellType.CORRIDOR),
        )

        return DungeonLayout(
            seed=seed,
            size=config.size,
            grid=grid,
            rooms=rooms,
            triangulation=triangulation,
            tree_edges=tree_edges,
            selected_edges=selected_edges,
            corridors=corridors,
        )

    def _place_room(self, room: Room) -> None:
        if self.place_tile is None:
            return
        for cell in room.cells():
            self.place_tile(cell, CellType.ROOM, room)

    def _triangulate(self, rooms: List[Room]) -> Triangulation:
        vertices = [Vertex(*room.center, item=room) for room in rooms]
        triangulation = triangulate(vertices)
        logger.debug(
            "Triangulated %d room centers into %d triangles, %d edges",
            len(vertices),
            len(triangulation.triangles),
            len(triangulation.edges),
        )
        return triangulation

    def _create_hallways(
        self, triangulation: Triangulation, rng: random.Random
    ) -> Tuple[List[Edge], List[Edge]]:
        """
        Pick the tree and loop edges that will become corridors.

        With two rooms, or with room centers collinear enough that the
        triangulation does not span every room, the complete graph over the
        rooms is used for the tree instead so the dungeon stays connected.
        """
        vertices = triangulation.vertices
        if len(vertices) < 2:
            return [], []

        edges = list(triangulation.edges)
        tree = minimum_spanning_tree(edges, edges[0].u) if edges else []

        if len(tree) < len(vertices) - 1:
            logger.debug(
                "Triangulation spans %d of %d rooms; connecting all pairs",
                len(tree) + 1 if tree else 0,
                len(vertices),
            )
            all_pairs = [Edge(u, v) for u, v in itertools.combinations(vertices, 2)]
            tree = minimum_spanning_tree(all_pairs, all_pairs[0].u)

        # Loops only ever come from the triangulation
        selected = add_loop_edges(edges, tree, self.config.loop_chance, rng)
        return tree, selected

    def _pathfind_hallways(self, grid: Grid2D, edges: List[Edge]) -> List[Corridor]:
        costs = self.config.corridor_costs
        pathfinder = CorridorPathfinder(self.config.size, diagonal=costs.diagonal)
        cost_function = corridor_cost_function(grid, costs)
        corridors: List[Corridor] = []

        for edge in edges:
            start_room = edge.u.item
            end_room = edge.v.item
            start = start_room.center_cell
            goal = end_room.center_cell

            path = pathfinder.find_path(start, goal, cost_function)
            if path is None:
                logger.warning(
                    "No corridor between room %d and room %d",
                    start_room.room_id,
                    end_room.room_id,
                )
                continue

            carved = carve_corridor(grid, path)
            if self.place_tile is not None:
                for cell in carved:
                    self.place_tile(cell, CellType.CORRIDOR, None)

            corridors.append(Corridor(start_room, end_room, path, carved))

        return corridors


def generate_dungeon(
    config: Optional[GeneratorConfig] = None,
    place_tile: Optional[TilePlacer] = None,
    **overrides: Any,
) -> DungeonLayout:
    """
    Generate a dungeon.

    Parameters:
        config: Generation settings; defaults to GeneratorConfig()
        place_tile: Optional callback invoked once per room and corridor cell
        overrides: GeneratorConfig fields to replace, e.g. seed=42

    Returns:
        The populated DungeonLayout
    """
    if config is None:
        config = GeneratorConfig(**overrides)
    elif overrides:
        config = dataclasses.replace(config, **overrides)

    return DungeonGenerator(config, place_tile).generate()
