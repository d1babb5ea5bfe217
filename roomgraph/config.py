"""
Configuration for dungeon generation and room navigation.

Defaults follow the tuning of the dungeon the generator was built for:
a small 15x15 test extent with many sampled rooms, and the enemy
movement penalties used by room initialisation.
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class CorridorCosts:
    """Per-cell penalties used when carving corridors between rooms."""

    # Cutting through an existing room is strongly discouraged
    room: float = 10.0
    # Fresh ground
    empty: float = 5.0
    # Re-using a corridor that is already carved
    corridor: float = 1.0
    # 8-way neighbour expansion when True, 4-way otherwise
    diagonal: bool = True


@dataclass
class GeneratorConfig:
    """Inputs for a single generation run."""

    # Side length of the square dungeon extent, in cells
    size: int = 15
    # Number of room placement samples (not a guaranteed room count)
    room_count: int = 100
    # Inclusive room side length range
    room_min_size: int = 1
    room_max_size: int = 5
    # Probability of re-adding each non-tree edge as a loop
    loop_chance: float = 0.125
    # None means "use a time-based seed"
    seed: Optional[int] = None
    corridor_costs: CorridorCosts = field(default_factory=CorridorCosts)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"size must be positive, got {self.size}")
        if self.room_count < 0:
            raise ValueError(f"room_count must not be negative, got {self.room_count}")
        if self.room_min_size < 1:
            raise ValueError(
                f"room_min_size must be at least 1, got {self.room_min_size}"
            )
        if self.room_min_size > self.room_max_size:
            raise ValueError(
                f"room_min_size ({self.room_min_size}) is larger than "
                f"room_max_size ({self.room_max_size})"
            )
        if not 0.0 <= self.loop_chance <= 1.0:
            raise ValueError(f"loop_chance must be in [0, 1], got {self.loop_chance}")


@dataclass
class NavigationConfig:
    """Movement penalties and world-space layout of room navigation grids."""

    # Penalty for an ordinary walkable cell
    default_movement_penalty: int = 40
    # Penalty for cells painted as the preferred enemy path
    preferred_path_movement_penalty: int = 1
    # World units per cell
    cell_size: float = 1.0
    # World position of cell (0, 0)'s lower-left corner
    origin: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self) -> None:
        if self.default_movement_penalty < 1:
            raise ValueError("default_movement_penalty must be positive")
        if self.preferred_path_movement_penalty < 1:
            raise ValueError("preferred_path_movement_penalty must be positive")
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")


def resolve_seed(seed: Optional[int]) -> int:
    """Return seed unchanged, or a time-based seed when seed is None."""
    if seed is not None:
        return seed
    return time.time_ns() % 2**32
