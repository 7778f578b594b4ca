"""Triangulation of simple planar polygons by smallest-angle ear cutting."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Sequence

Point = Sequence[float]
Edge = tuple[int, int]


class _Triangulation:
    def __init__(self) -> None:
        self.indices: list[int] = []

    def append(self, i0: int, i1: int, i2: int) -> None:
        self.indices.extend((i0, i1, i2))

    def set(self, tri: int, i0: int, i1: int, i2: int) -> None:
        self.indices[3 * tri:3 * tri + 3] = [i0, i1, i2]

    def find_triangle(self, edge: Edge) -> tuple[int, int] | None:
        """Triangle holding the directed edge and its opposite vertex, newest first."""
        a, b = edge
        for tri in range(len(self.indices) // 3 - 1, -1, -1):
            t0, t1, t2 = self.indices[3 * tri:3 * tri + 3]
            if t0 == a and t1 == b:
                return tri, t2
            if t1 == a and t2 == b:
                return tri, t0
            if t2 == a and t0 == b:
                return tri, t1
        return None


def _det3(rows: Sequence[Sequence[float]]) -> float:
    (a, b, c), (d, e, f), (g, h, i) = rows
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def triangulate_polygon(polygon: Sequence[Point]) -> list[int]:
    """Triangle vertex indices covering a counter-clockwise polygon.

    Repeatedly cuts off the vertex with the smallest interior angle and then
    flips shared edges to satisfy the Delaunay condition.
    """
    points = [(float(p[0]), float(p[1])) for p in polygon]
    triangulation = _Triangulation()
    node_ids = list(range(len(points)))
    angles = [0.0] * len(points)

    def neighbour(i: int, step: int) -> int:
        return (i + step) % len(node_ids)

    def compute_angle(i: int) -> None:
        prev_x, prev_y = points[node_ids[neighbour(i, -1)]]
        px, py = points[node_ids[i]]
        post_x, post_y = points[node_ids[neighbour(i, 1)]]
        angle = math.atan2(prev_y - py, prev_x - px) - math.atan2(post_y - py, post_x - px)
        if angle < 0.0:
            angle += 2.0 * math.pi
        angles[i] = angle

    for i in range(len(node_ids)):
        compute_angle(i)

    edges: deque[Edge] = deque()
    while len(node_ids) > 2:
        min_idx = min(range(len(node_ids)), key=angles.__getitem__)
        i0 = node_ids[neighbour(min_idx, -1)]
        i1 = node_ids[min_idx]
        i2 = node_ids[neighbour(min_idx, 1)]
        triangulation.append(i0, i1, i2)
        edges.extend(((i0, i1), (i1, i2), (i2, i0)))

        while edges:
            idx0, idx2 = edges.popleft()
            left = triangulation.find_triangle((idx0, idx2))
            right = triangulation.find_triangle((idx2, idx0))
            if left is None or right is None:
                continue
            left_tri, idx3 = left
            right_tri, idx1 = right
            p3 = points[idx3]
            rows = []
            for idx in (idx0, idx1, idx2):
                dx = points[idx][0] - p3[0]
                dy = points[idx][1] - p3[1]
                rows.append((dx, dy, dx * dx + dy * dy))
            if _det3(rows) > 0.0:
                triangulation.set(left_tri, idx0, idx1, idx3)
                triangulation.set(right_tri, idx1, idx2, idx3)
                edges.extend(((idx0, idx1), (idx1, idx2), (idx2, idx3), (idx3, idx0)))

        del node_ids[min_idx]
        del angles[min_idx]
        compute_angle(neighbour(min_idx, -1))
        compute_angle(neighbour(min_idx, 0))

    return triangulation.indices