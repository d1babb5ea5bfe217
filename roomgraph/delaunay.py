"""
Delaunay triangulation of room centers.

Bowyer-Watson incremental construction: start from a super-triangle that
encloses every point, insert points one at a time, remove the triangles
whose circumcircle contains the new point and re-fan the hole from it.
Triangles touching the super-triangle are dropped at the end.

The resulting edges connect rooms that are geometric neighbours, which
is the candidate graph the spanning tree is picked from.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Twice-signed-area below this is treated as collinear
DEGENERATE_EPSILON: float = 1e-9

# How far the super-triangle reaches past the point cloud, in multiples
# of the cloud's largest extent
SUPER_TRIANGLE_SCALE: float = 20.0


@dataclass(frozen=True)
class Vertex:
    """A 2D point, tagged with the item (usually a Room) it stands for."""

    x: float
    y: float
    item: Any = field(default=None, compare=False, repr=False)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Vertex") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class Edge:
    """An unordered pair of vertices. Edge(a, b) == Edge(b, a)."""

    __slots__ = ("u", "v")

    def __init__(self, u: Vertex, v: Vertex) -> None:
        self.u = u
        self.v = v

    @property
    def weight(self) -> float:
        """Euclidean length of the edge."""
        return self.u.distance_to(self.v)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return (self.u == other.u and self.v == other.v) or (
            self.u == other.v and self.v == other.u
        )

    def __hash__(self) -> int:
        return hash(frozenset((self.u, self.v)))

    def __repr__(self) -> str:
        return f"Edge({self.u.position}, {self.v.position})"


class Triangle:
    """
    A non-degenerate triangle with its circumcircle cached.

    Use Triangle.create(), which returns None for collinear points.
    """

    __slots__ = ("a", "b", "c", "center", "radius_sq")

    def __init__(
        self,
        a: Vertex,
        b: Vertex,
        c: Vertex,
        center: Tuple[float, float],
        radius_sq: float,
    ) -> None:
        self.a = a
        self.b = b
        self.c = c
        self.center = center
        self.radius_sq = radius_sq

    @classmethod
    def create(cls, a: Vertex, b: Vertex, c: Vertex) -> Optional["Triangle"]:
        """Build a triangle, or return None if the points are (nearly) collinear."""
        d = 2.0 * (a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y))
        if abs(d) < DEGENERATE_EPSILON:
            return None

        a_sq = a.x * a.x + a.y * a.y
        b_sq = b.x * b.x + b.y * b.y
        c_sq = c.x * c.x + c.y * c.y
        ux = (a_sq * (b.y - c.y) + b_sq * (c.y - a.y) + c_sq * (a.y - b.y)) / d
        uy = (a_sq * (c.x - b.x) + b_sq * (a.x - c.x) + c_sq * (b.x - a.x)) / d

        radius_sq = (a.x - ux) ** 2 + (a.y - uy) ** 2
        if not math.isfinite(radius_sq):
            return None
        return cls(a, b, c, (ux, uy), radius_sq)

    @property
    def vertices(self) -> Tuple[Vertex, Vertex, Vertex]:
        return (self.a, self.b, self.c)

    def edges(self) -> Tuple[Edge, Edge, Edge]:
        return (Edge(self.a, self.b), Edge(self.b, self.c), Edge(self.c, self.a))

    def has_vertex(self, vertex: Vertex) -> bool:
        return vertex == self.a or vertex == self.b or vertex == self.c

    def circumcircle_contains(self, vertex: Vertex) -> bool:
        """True if vertex lies inside or on this triangle's circumcircle."""
        dx = vertex.x - self.center[0]
        dy = vertex.y - self.center[1]
        return dx * dx + dy * dy <= self.radius_sq

    def __repr__(self) -> str:
        return f"Triangle({self.a.position}, {self.b.position}, {self.c.position})"


@dataclass
class Triangulation:
    """Output of triangulate(): the input vertices, triangles and unique edges."""

    vertices: List[Vertex]
    triangles: List[Triangle] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


def _super_triangle(vertices: Sequence[Vertex]) -> Triangle:
    min_x = min(v.x for v in vertices)
    min_y = min(v.y for v in vertices)
    max_x = max(v.x for v in vertices)
    max_y = max(v.y for v in vertices)

    delta = max(max_x - min_x, max_y - min_y, 1.0) * SUPER_TRIANGLE_SCALE
    mid_x = (min_x + max_x) / 2
    mid_y = (min_y + max_y) / 2

    triangle = Triangle.create(
        Vertex(mid_x - delta, mid_y - delta),
        Vertex(mid_x, mid_y + delta),
        Vertex(mid_x + delta, mid_y - delta),
    )
    # The three corners are never collinear
    assert triangle is not None
    return triangle


def triangulate(vertices: Iterable[Vertex]) -> Triangulation:
    """
    Compute the Delaunay triangulation of the given vertices.

    Fewer than three vertices give an empty triangulation. Degenerate
    triangles produced while re-fanning a hole are skipped rather than
    kept with an infinite circumcircle.

    Returns:
        A Triangulation whose edges are unique and listed in the order
        they were first found.
    """
    points = list(vertices)
    result = Triangulation(vertices=points)
    if len(points) < 3:
        return result

    super_triangle = _super_triangle(points)
    triangles: List[Triangle] = [super_triangle]

    for vertex in points:
        bad = [t for t in triangles if t.circumcircle_contains(vertex)]
        if not bad:
            logger.debug("Vertex %s fell outside every triangle; skipped", vertex)
            continue

        # Edges of the hole are the ones that belong to exactly one bad triangle
        edge_counts: Dict[Edge, int] = {}
        for triangle in bad:
            for edge in triangle.edges():
                edge_counts[edge] = edge_counts.get(edge, 0) + 1

        bad_ids = {id(t) for t in bad}
        triangles = [t for t in triangles if id(t) not in bad_ids]

        for edge, count in edge_counts.items():
            if count != 1:
                continue
            triangle = Triangle.create(edge.u, edge.v, vertex)
            if triangle is None:
                logger.debug("Skipped degenerate triangle %s-%s", edge, vertex)
                continue
            triangles.append(triangle)

    result.triangles = [
        t
        for t in triangles
        if not any(t.has_vertex(s) for s in super_triangle.vertices)
    ]

    seen: Dict[Edge, None] = {}
    for triangle in result.triangles:
        for edge in triangle.edges():
            seen.setdefault(edge, None)
    result.edges = list(seen)

    return result
