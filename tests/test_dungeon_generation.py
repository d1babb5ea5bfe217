"""Unit tests for verifying generated dungeons are fully connected."""

import dataclasses
import itertools
from collections import Counter, deque
from typing import Deque, Set, Tuple

import pytest

from roomgraph.config import CorridorCosts, GeneratorConfig, NavigationConfig
from roomgraph.generator import DungeonGenerator, generate_dungeon
from roomgraph.grid import CellType, Grid2D


def get_walkable_cells(grid: Grid2D) -> Set[Tuple[int, int]]:
    """Every room and corridor cell of the grid."""
    return set(grid.cells_of(CellType.ROOM)) | set(grid.cells_of(CellType.CORRIDOR))


def flood_fill_from(start: Tuple[int, int], walkable: Set[Tuple[int, int]]) -> Set[Tuple[int, int]]:
    """
    Perform flood fill starting from a cell, returning all reachable cells.
    Corridors are carved with diagonal steps, so all eight neighbours count.
    """
    visited: Set[Tuple[int, int]] = {start}
    queue: Deque[Tuple[int, int]] = deque([start])

    while queue:
        x, y = queue.popleft()
        for dx, dy in itertools.product((-1, 0, 1), repeat=2):
            neighbor = (x + dx, y + dy)
            if neighbor in walkable and neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return visited


def is_dungeon_connected(grid: Grid2D) -> Tuple[bool, str]:
    """
    Check if all walkable cells in the dungeon are connected.

    Returns:
        Tuple of (is_connected, message) where message explains any issues
    """
    walkable = get_walkable_cells(grid)
    if not walkable:
        return False, "No walkable cells found in dungeon"

    reachable = flood_fill_from(next(iter(walkable)), walkable)
    unreachable = walkable - reachable

    if unreachable:
        return False, f"Found {len(unreachable)} unreachable cells out of {len(walkable)} total"

    return True, f"All {len(walkable)} walkable cells are connected"


class TestDungeonConnectivity:
    """Test that generated dungeons have all areas connected."""

    def test_default_dungeon_is_connected(self):
        layout = generate_dungeon(seed=42)

        is_connected, message = is_dungeon_connected(layout.grid)
        assert is_connected, f"default dungeon not connected: {message}"

    @pytest.mark.parametrize("seed", range(0, 30))
    def test_random_dungeons_are_connected(self, seed):
        layout = generate_dungeon(seed=seed, size=40, room_count=60, room_max_size=8)
        assert len(layout.rooms) > 1

        is_connected, message = is_dungeon_connected(layout.grid)
        assert is_connected, f"seed {seed} not connected: {message}"

    @pytest.mark.parametrize("seed", range(0, 10))
    def test_orthogonal_corridors_are_connected(self, seed):
        costs = CorridorCosts(diagonal=False)
        layout = generate_dungeon(seed=seed, size=30, room_count=40, corridor_costs=costs)

        is_connected, message = is_dungeon_connected(layout.grid)
        assert is_connected, f"seed {seed} not connected: {message}"

    @pytest.mark.parametrize("seed", range(0, 10))
    def test_every_room_center_is_walkable(self, seed):
        layout = generate_dungeon(seed=seed, size=30, room_count=40)
        walkable = get_walkable_cells(layout.grid)
        reachable = flood_fill_from(layout.rooms[0].center_cell, walkable)

        for room in layout.rooms:
            assert room.center_cell in reachable


class TestHallwaySelection:
    """Tests for the spanning tree and loop edges chosen between rooms."""

    @pytest.mark.parametrize("seed", range(0, 10))
    def test_tree_spans_every_room(self, seed):
        layout = generate_dungeon(seed=seed, size=40, room_count=60)

        assert len(layout.tree_edges) == len(layout.rooms) - 1
        endpoints = {e.u.item for e in layout.tree_edges} | {e.v.item for e in layout.tree_edges}
        assert endpoints == set(layout.rooms)

    def test_no_loops_when_chance_is_zero(self):
        layout = generate_dungeon(seed=5, size=40, room_count=60, loop_chance=0.0)
        assert layout.selected_edges == layout.tree_edges

    def test_every_edge_when_chance_is_one(self):
        layout = generate_dungeon(seed=5, size=40, room_count=60, loop_chance=1.0)

        expected = set(layout.tree_edges) | set(layout.triangulation.edges)
        assert set(layout.selected_edges) == expected
        assert len(layout.selected_edges) == len(expected)

    def test_one_corridor_per_selected_edge(self):
        layout = generate_dungeon(seed=8, size=40, room_count=60, loop_chance=0.5)
        assert len(layout.corridors) == len(layout.selected_edges)

    def test_two_rooms_are_joined(self):
        """Two rooms give no triangles, but still get a corridor."""
        for seed in range(100):
            layout = generate_dungeon(seed=seed, size=12, room_count=3, room_min_size=3, room_max_size=4)
            if len(layout.rooms) == 2:
                break
        else:
            pytest.skip("no seed produced exactly two rooms")

        assert layout.triangulation.triangles == []
        assert len(layout.tree_edges) == 1
        is_connected, message = is_dungeon_connected(layout.grid)
        assert is_connected, message

    def test_single_room_has_no_hallways(self):
        layout = generate_dungeon(seed=1, size=10, room_count=1, room_min_size=2, room_max_size=2)

        assert len(layout.rooms) <= 1
        assert layout.selected_edges == []
        assert layout.corridors == []
        assert layout.grid.count(CellType.CORRIDOR) == 0

    def test_no_rooms(self):
        layout = generate_dungeon(seed=1, room_count=0)

        assert layout.rooms == []
        assert len(layout.grid) == 0
        assert layout.corridors == []


class TestCorridorCells:
    """Tests for the carved corridor cells."""

    @pytest.mark.parametrize("seed", range(0, 5))
    def test_corridors_stay_inside_extent(self, seed):
        layout = generate_dungeon(seed=seed, size=25, room_count=40)

        for x, y in layout.corridor_cells():
            assert 0 <= x < layout.size and 0 <= y < layout.size

    def test_corridor_cells_lie_on_corridor_paths(self):
        layout = generate_dungeon(seed=17, size=30, room_count=50)

        on_paths = {cell for corridor in layout.corridors for cell in corridor.path}
        assert set(layout.corridor_cells()) <= on_paths

    def test_carved_cells_are_disjoint(self):
        """Each corridor cell is carved by exactly one corridor."""
        layout = generate_dungeon(seed=17, size=30, room_count=50, loop_chance=1.0)

        carved = [cell for corridor in layout.corridors for cell in corridor.carved]
        assert len(carved) == len(set(carved))
        assert set(carved) == set(layout.corridor_cells())

    def test_room_cells_are_never_overwritten(self):
        layout = generate_dungeon(seed=23, size=30, room_count=50)

        for room in layout.rooms:
            for cell in room.cells():
                assert layout.grid[cell] == CellType.ROOM

    def test_paths_join_room_centers(self):
        layout = generate_dungeon(seed=4, size=30, room_count=50)

        for corridor in layout.corridors:
            assert corridor.path[0] == corridor.start_room.center_cell
            assert corridor.path[-1] == corridor.end_room.center_cell


class TestTilePlacement:
    """Tests for the tile placement callback."""

    def test_each_cell_is_placed_once(self):
        placed = []
        layout = generate_dungeon(
            seed=12, size=30, room_count=50,
            place_tile=lambda cell, category, room: placed.append((cell, category, room)),
        )

        counts = Counter(cell for cell, _, _ in placed)
        assert all(count == 1 for count in counts.values())
        assert set(counts) == get_walkable_cells(layout.grid)

    def test_callback_reports_category_and_owner(self):
        placed = []
        layout = generate_dungeon(
            seed=12, size=30, room_count=50,
            place_tile=lambda cell, category, room: placed.append((cell, category, room)),
        )

        for cell, category, room in placed:
            assert layout.grid[cell] == category
            if category == CellType.ROOM:
                assert room.contains(cell)
            else:
                assert room is None

    def test_rooms_are_placed_before_corridors(self):
        categories = []
        generate_dungeon(
            seed=2, size=30, room_count=50,
            place_tile=lambda cell, category, room: categories.append(category),
        )

        first_corridor = categories.index(CellType.CORRIDOR)
        assert CellType.ROOM not in categories[first_corridor:]


class TestDeterminism:
    """Same inputs, same dungeon."""

    def test_same_seed_same_layout(self):
        first = generate_dungeon(seed=77, size=30, room_count=50)
        second = generate_dungeon(seed=77, size=30, room_count=50)

        assert first.rooms == second.rooms
        assert first.grid == second.grid
        assert first.selected_edges == second.selected_edges

    def test_different_seeds_differ(self):
        first = generate_dungeon(seed=1, size=30, room_count=50)
        second = generate_dungeon(seed=2, size=30, room_count=50)
        assert first.rooms != second.rooms

    def test_unseeded_run_can_be_replayed(self):
        first = generate_dungeon(size=30, room_count=50)
        assert isinstance(first.seed, int)

        replay = generate_dungeon(seed=first.seed, size=30, room_count=50)
        assert replay.grid == first.grid


class TestGenerateDungeonArguments:
    """Tests for config handling in generate_dungeon."""

    def test_defaults(self):
        layout = generate_dungeon(seed=3)
        assert layout.size == 15

    def test_overrides_replace_config_fields(self):
        config = GeneratorConfig(size=20, room_count=30, seed=9)

        layout = generate_dungeon(config, size=25)

        assert layout.size == 25
        assert layout.seed == 9
        assert config.size == 20

    def test_generator_class(self):
        config = GeneratorConfig(size=20, room_count=30, seed=9)
        layout = DungeonGenerator(config).generate()
        assert layout.grid == generate_dungeon(config).grid

    @pytest.mark.parametrize("overrides", [
        {"size": 0},
        {"room_count": -1},
        {"room_min_size": 0},
        {"room_min_size": 6, "room_max_size": 5},
        {"loop_chance": 1.5},
        {"loop_chance": -0.1},
    ])
    def test_invalid_config_raises(self, overrides):
        with pytest.raises(ValueError):
            GeneratorConfig(**overrides)

    def test_invalid_override_raises(self):
        with pytest.raises(ValueError):
            generate_dungeon(GeneratorConfig(), size=-3)

    @pytest.mark.parametrize("overrides", [
        {"default_movement_penalty": 0},
        {"preferred_path_movement_penalty": 0},
        {"cell_size": 0.0},
    ])
    def test_invalid_navigation_config_raises(self, overrides):
        with pytest.raises(ValueError):
            NavigationConfig(**overrides)


class TestLayoutNavigation:
    """Tests for runtime navigation built from a generated layout."""

    def test_navigation_covers_room(self):
        layout = generate_dungeon(seed=6, size=30, room_count=40)
        room = layout.rooms[0]

        navigation = layout.navigation_for(room)

        assert navigation.shape == (room.width, room.height)
        assert navigation.lower_bound == (room.x_min, room.y_min)

    def test_agent_can_cross_largest_room(self):
        layout = generate_dungeon(seed=6, size=30, room_count=40)
        room = max(layout.rooms, key=lambda r: r.width * r.height)
        navigation = layout.navigation_for(room)

        start = (room.x_min, room.y_min)
        goal = (room.x_max - 1, room.y_max - 1)
        waypoints = navigation.find_path(start, goal)

        assert waypoints[0] == navigation.cell_to_world(navigation.to_local(start))
        assert waypoints[-1] == navigation.cell_to_world(navigation.to_local(goal))

    def test_room_at(self):
        layout = generate_dungeon(seed=6, size=30, room_count=40)
        room = layout.rooms[-1]

        assert layout.room_at(room.center_cell) == room
        assert layout.room_at((-1, -1)) is None

    def test_dataclass_replace_keeps_costs(self):
        costs = CorridorCosts(room=50.0)
        config = dataclasses.replace(GeneratorConfig(corridor_costs=costs), seed=1)
        layout = DungeonGenerator(config).generate()
        assert layout.seed == 1
