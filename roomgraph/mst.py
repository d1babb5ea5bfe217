"""
Minimum spanning tree over room connections, plus optional loop edges.
"""

import logging
import random
from typing import List, Sequence, Set

from .delaunay import Edge, Vertex

logger = logging.getLogger(__name__)


def minimum_spanning_tree(edges: Sequence[Edge], start: Vertex) -> List[Edge]:
    """
    Prim's algorithm over an edge list.

    Grows a tree from start. Each step picks the lightest edge with exactly
    one endpoint already in the tree; on equal weights the edge that comes
    first in the list wins. Stops when no edge leaves the tree, so a
    disconnected edge set yields a tree over start's component only.

    Returns:
        Tree edges in the order they were chosen.
    """
    closed: Set[Vertex] = {start}
    tree: List[Edge] = []

    while True:
        chosen = None
        min_weight = float("inf")

        for edge in edges:
            open_ends = (edge.u not in closed) + (edge.v not in closed)
            if open_ends != 1:
                continue
            weight = edge.weight
            if weight < min_weight:
                chosen = edge
                min_weight = weight

        if chosen is None:
            break

        tree.append(chosen)
        closed.add(chosen.u)
        closed.add(chosen.v)

    return tree


def add_loop_edges(
    edges: Sequence[Edge],
    tree: Sequence[Edge],
    probability: float,
    rng: random.Random,
) -> List[Edge]:
    """
    Re-add non-tree edges at random to give the dungeon alternate routes.

    Each edge in edges that is not in tree is kept independently with the
    given probability, in list order.

    Returns:
        The tree edges followed by the re-added loop edges.
    """
    selected: List[Edge] = list(tree)
    in_tree = set(tree)
    loops = 0

    for edge in edges:
        if edge in in_tree:
            continue
        if rng.random() < probability:
            selected.append(edge)
            loops += 1

    logger.debug("Re-added %d of %d non-tree edges", loops, len(edges) - len(in_tree))
    return selected
