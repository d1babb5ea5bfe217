"""Procedural room-graph dungeon generation and room-local pathfinding."""

from roomgraph.config import (
    CorridorCosts,
    GeneratorConfig,
    NavigationConfig,
    resolve_seed,
)
from roomgraph.grid import Cell, CellType, Grid2D
from roomgraph.rooms import Room, place_rooms
from roomgraph.delaunay import Edge, Triangle, Triangulation, Vertex, triangulate
from roomgraph.mst import add_loop_edges, minimum_spanning_tree
from roomgraph.corridors import (
    CorridorPathfinder,
    PathCost,
    carve_corridor,
    corridor_cost_function,
)
from roomgraph.navigation import MoveableItem, RoomNavigation, terrain_query
from roomgraph.astar import PathNode, build_path, find_shortest_path, grid_distance
from roomgraph.generator import (
    Corridor,
    DungeonGenerator,
    DungeonLayout,
    generate_dungeon,
)
