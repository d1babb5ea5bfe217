#!/usr/bin/env python3
"""
Render a dungeon to an image file for visual inspection.

Cells are painted through the generator's tile placement callback, so the
image shows exactly what a game would receive. Room cells on a room's
west or south edge are shaded apart from the room's middle.

Usage:
    uv run tools/render_dungeon_image.py                    # Default: 40x40, random seed
    uv run tools/render_dungeon_image.py --rooms 100        # 100 placement samples
    uv run tools/render_dungeon_image.py --seed 42          # Reproducible dungeon
    uv run tools/render_dungeon_image.py --show-edges       # Draw the hallway graph
    uv run tools/render_dungeon_image.py --output my.png    # Custom output path
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from roomgraph.generator import generate_dungeon
from roomgraph.grid import Cell, CellType
from roomgraph.rooms import Room

CELL_PIXELS = 16

# BGR colours
BACKGROUND = (24, 24, 24)
ROOM_MIDDLE = (160, 160, 160)
ROOM_WEST_EDGE = (120, 120, 150)
ROOM_SOUTH_EDGE = (150, 120, 120)
CORRIDOR = (60, 140, 200)
TREE_EDGE = (0, 200, 0)
LOOP_EDGE = (0, 0, 220)


class CellPainter:
    """Tile placement callback that paints cells into a BGR image."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.image = np.full((size * CELL_PIXELS, size * CELL_PIXELS, 3), BACKGROUND, dtype=np.uint8)

    def __call__(self, cell: Cell, category: CellType, room: Optional[Room]) -> None:
        if category == CellType.CORRIDOR:
            colour = CORRIDOR
        elif cell[0] == room.x_min:
            colour = ROOM_WEST_EDGE
        elif cell[1] == room.y_min:
            colour = ROOM_SOUTH_EDGE
        else:
            colour = ROOM_MIDDLE

        top_left = self.to_pixel(cell)
        bottom_right = (top_left[0] + CELL_PIXELS - 1, top_left[1] + CELL_PIXELS - 1)
        cv2.rectangle(self.image, top_left, bottom_right, colour, -1)

    def to_pixel(self, cell: Cell):
        """Top-left pixel of a cell; y grows upward in the dungeon, downward in images."""
        x, y = cell
        return (x * CELL_PIXELS, (self.size - 1 - y) * CELL_PIXELS)

    def point_to_pixel(self, x: float, y: float):
        return (int(x * CELL_PIXELS), int((self.size - y) * CELL_PIXELS))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a dungeon to an image file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--size",
        type=int,
        default=40,
        help="Side length of the dungeon extent in cells (default: 40)",
    )
    parser.add_argument(
        "--rooms", "-r",
        type=int,
        default=60,
        help="Number of room placement samples (default: 60)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducible dungeons",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default="dungeon_render.png",
        help="Output image path (default: dungeon_render.png)",
    )
    parser.add_argument(
        "--show-edges",
        action="store_true",
        help="Overlay the selected hallway edges between room centers",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log generation steps")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    painter = CellPainter(args.size)
    layout = generate_dungeon(
        seed=args.seed, size=args.size, room_count=args.rooms, place_tile=painter
    )
    print(f"Seed: {layout.seed}")
    print(f"Dungeon size: {layout.size}x{layout.size} cells")

    image = painter.image

    # Optionally overlay the hallway graph
    if args.show_edges:
        tree = set(layout.tree_edges)
        for edge in layout.selected_edges:
            colour = TREE_EDGE if edge in tree else LOOP_EDGE
            cv2.line(
                image,
                painter.point_to_pixel(edge.u.x, edge.u.y),
                painter.point_to_pixel(edge.v.x, edge.v.y),
                colour,
                2,
            )

    # Save image
    output_path = Path(args.output)
    cv2.imwrite(str(output_path), image)
    print(f"Saved to: {output_path.absolute()}")

    # Print room info
    print(f"\nRooms ({len(layout.rooms)}):")
    for room in layout.rooms:
        print(f"  Room {room.room_id}: at cell ({room.x}, {room.y}), size {room.width}x{room.height}")


if __name__ == "__main__":
    main()
