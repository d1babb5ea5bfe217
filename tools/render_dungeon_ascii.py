#!/usr/bin/env python3
"""
Render a generated dungeon as ASCII art for debugging.

Usage:
    uv run tools/render_dungeon_ascii.py [--size N] [--rooms N] [--seed S] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import roomgraph
sys.path.insert(0, str(Path(__file__).parent.parent))

from roomgraph.generator import DungeonLayout, generate_dungeon
from roomgraph.grid import CellType


CELL_TO_ASCII = {
    CellType.NONE: " ",
    CellType.ROOM: ".",
    CellType.CORRIDOR: "#",
}


def render_dungeon_ascii(layout: DungeonLayout) -> str:
    """Convert a dungeon layout to an ASCII string, one text row per y."""
    lines = []
    for y in range(layout.size):
        line = ""
        for x in range(layout.size):
            line += CELL_TO_ASCII.get(layout.grid[(x, y)], "?")
        lines.append(line.rstrip())
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Render dungeon as ASCII art")
    parser.add_argument("--size", type=int, default=40, help="Side length of the dungeon extent")
    parser.add_argument("--rooms", type=int, default=60, help="Number of room placement samples")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log generation steps")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    layout = generate_dungeon(seed=args.seed, size=args.size, room_count=args.rooms)

    print(render_dungeon_ascii(layout))

    # Print some debug info
    print(f"\n--- Debug Info ---")
    print(f"Seed: {layout.seed}")
    print(f"Map size: {layout.size}x{layout.size} cells")
    print(f"Rooms generated: {len(layout.rooms)}")
    print(
        f"Hallways: {len(layout.selected_edges)} "
        f"({len(layout.selected_edges) - len(layout.tree_edges)} loops)"
    )
    print(f"Corridor cells: {len(layout.corridor_cells())}")


if __name__ == "__main__":
    main()
