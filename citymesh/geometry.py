"""Ribbons, coordinate normalization, triangulation, walls and roofs.

Scene space is Y-up: a normalized ring point ``(x, y)`` lifted to height
``h`` becomes the vertex ``(x, h, y)``.
"""

import logging

import mapbox_earcut as earcut
import numpy as np

from .errors import NormalizationError, TriangulationError

logger = logging.getLogger(__name__)


# ── Ribbons ─────────────────────────────────────────────────────────────

def shoelace_area(points) -> float:
    """Area of a polygon given as a sequence of ``(x, y)`` points."""
    pts = np.asarray(points, dtype=np.float64)
    xs, ys = pts[:, 0], pts[:, 1]
    # each vertex paired with its predecessor
    prev_xs = np.roll(xs, 1)
    prev_ys = np.roll(ys, 1)
    return 0.5 * abs(float(np.sum(xs * prev_ys) - np.sum(ys * prev_xs)))


def compute_ribbon(x: float, y: float, next_x: float, next_y: float,
                   thickness: float) -> list:
    """Thin quadrilateral around the segment ``(x, y) -> (next_x, next_y)``.

    Three candidates are built: both coordinates offset (diagonal), only Y
    offset, and only X offset.  The largest one wins, which is the one
    closest to perpendicular to the segment.  Ties go to Y, then X, then
    diagonal.
    """
    t = thickness
    diagonal = [(next_x + t, next_y + t), (next_x - t, next_y - t),
                (x - t, y - t), (x + t, y + t)]
    x_offset = [(next_x + t, next_y), (next_x - t, next_y),
                (x - t, y), (x + t, y)]
    y_offset = [(next_x, next_y + t), (next_x, next_y - t),
                (x, y - t), (x, y + t)]

    candidates = [
        (shoelace_area(y_offset), y_offset),
        (shoelace_area(x_offset), x_offset),
        (shoelace_area(diagonal), diagonal),
    ]
    largest = max(area for area, _ in candidates)
    # areas equal up to rounding count as a tie
    tolerance = largest * 1e-9
    for area, quad in candidates:
        if area >= largest - tolerance:
            return quad


# ── Coordinate normalization ────────────────────────────────────────────

def normalize_ring(ring, bbox, scale: float) -> list:
    """Rescale raw points into ``[-scale/2, scale/2]`` on both axes."""
    if bbox.width == 0 or bbox.height == 0:
        raise NormalizationError(
            f"Degenerate bounding box ({bbox.width} x {bbox.height}); "
            f"cannot normalize coordinates")
    half = scale / 2
    return [
        ((x - bbox.x_min) / bbox.width * scale - half,
         (y - bbox.y_min) / bbox.height * scale - half)
        for x, y in ring
    ]


def normalize_objects(objects, bbox, scale: float) -> list:
    """Fill ``normalized_*`` rings of every object from the frozen box."""
    if not objects:
        return objects
    if bbox.is_empty:
        raise NormalizationError("No coordinates were recorded in the bounding box")
    bbox.freeze()

    for obj in objects:
        obj.normalized_outer_ring = normalize_ring(obj.outer_ring, bbox, scale)
        obj.normalized_hole_rings = [
            normalize_ring(hole, bbox, scale) for hole in obj.hole_rings
        ]
    logger.info(f"Normalized {len(objects)} objects into a "
                f"{scale} x {scale} scene window")
    return objects


# ── Triangulation ───────────────────────────────────────────────────────

def triangulate(outer_ring, hole_rings=()) -> np.ndarray:
    """Ear-clip a polygon with holes.

    Returns an ``(M, 3)`` array of indices into the concatenation of the
    outer ring followed by every hole ring.
    """
    rings = [outer_ring, *hole_rings]
    coords = np.array([pt for ring in rings for pt in ring],
                      dtype=np.float64).reshape(-1, 2)
    ring_ends = np.cumsum([len(ring) for ring in rings]).astype(np.uint32)

    indices = earcut.triangulate_float64(coords, ring_ends)
    if len(indices) % 3 != 0:
        raise TriangulationError(
            f"Triangulation returned {len(indices)} indices, "
            f"not a multiple of 3")
    return np.asarray(indices, dtype=np.int64).reshape(-1, 3)


def lift_rings(rings, height: float) -> np.ndarray:
    """Vertices of every ring, in order, lifted to *height*."""
    return np.array([[x, height, y] for ring in rings for x, y in ring],
                    dtype=np.float64).reshape(-1, 3)


# ── Walls ───────────────────────────────────────────────────────────────

def extrude_walls(outer_ring, height: float):
    """Vertical quads from *height* down to the ground along the outer ring.

    The first ``n`` vertices are the top ring and the next ``n`` their
    ground projections.  Each quad is ``(prev_top, top, ground, prev_ground)``.
    """
    n = len(outer_ring)
    top = lift_rings([outer_ring], height)
    ground = lift_rings([outer_ring], 0.0)
    verts = np.vstack([top, ground])

    quads = []
    for i in range(n):
        prev = i - 1 if i > 0 else n - 1
        quads.append([prev, i, n + i, n + prev])
    return verts, np.array(quads, dtype=np.int64).reshape(-1, 4)


# ── Roofs ───────────────────────────────────────────────────────────────

def ring_centroid(ring) -> tuple:
    """Vertex average of a ring (not the area centroid)."""
    pts = np.asarray(ring, dtype=np.float64)
    cx, cy = pts.mean(axis=0)
    return float(cx), float(cy)


def pitched_roof(outer_ring, eave_height: float, roof_height: float):
    """Triangle fan from every eave edge up to the raised centroid.

    Each edge is split at its midpoint so it contributes two triangles,
    ``(prev, mid, apex)`` and ``(mid, i, apex)``.  Vertices are the eave
    ring, then the ``n`` edge midpoints, then the apex.
    """
    n = len(outer_ring)
    cx, cy = ring_centroid(outer_ring)
    eave = lift_rings([outer_ring], eave_height)

    mids = []
    for i in range(n):
        prev = i - 1 if i > 0 else n - 1
        mids.append((eave[prev] + eave[i]) / 2)
    apex = [cx, eave_height + roof_height, cy]
    verts = np.vstack([eave, np.array(mids).reshape(-1, 3), [apex]])

    apex_index = 2 * n
    faces = []
    for i in range(n):
        prev = i - 1 if i > 0 else n - 1
        mid = n + i
        faces.append([prev, mid, apex_index])
        faces.append([mid, i, apex_index])
    return verts, np.array(faces, dtype=np.int64).reshape(-1, 3)
