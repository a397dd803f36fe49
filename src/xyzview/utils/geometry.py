"""Boundary (convex hull) detection and elevation transforms.

Two boundary policies:
- horizontal: project to (x, y), Andrew's monotone chain hull
- volumetric: 3D convex hull via Qhull (scipy), with a principal-plane
  fallback for degenerate (zero-volume) clouds
"""

from __future__ import annotations

import logging
from typing import Literal, Sequence

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .points import Point, points_to_array

logger = logging.getLogger(__name__)

BoundaryMode = Literal["horizontal", "volumetric"]
BOUNDARY_MODES: tuple[str, ...] = ("horizontal", "volumetric")

# Relative singular-value threshold below which an axis has no extent
_RANK_TOL = 1e-9


def _cross(o: list[float], a: list[float], b: list[float]) -> float:
    """Z component of (a - o) x (b - o); > 0 for a counter-clockwise turn."""
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _half_chain(pts: list[list[float]], order) -> list[int]:
    chain: list[int] = []
    for i in order:
        # Pop on cross <= 0: collinear chain points are dropped
        while len(chain) >= 2 and _cross(pts[chain[-2]], pts[chain[-1]], pts[i]) <= 0:
            chain.pop()
        chain.append(i)
    return chain


def convex_hull_2d(xy: np.ndarray) -> list[int]:
    """Andrew's monotone chain convex hull.

    Rows are not deduplicated. They are stably sorted by (x, y), so among
    rows sharing a position the chain keeps a single, input-order dependent
    representative.

    Args:
        xy: (N, 2) array of planar coordinates.

    Returns:
        Row indices of the hull vertices in counter-clockwise order.
        Fewer than 3 rows returns every row.
    """
    xy = np.asarray(xy, dtype=np.float64)
    n = len(xy)
    if n < 3:
        return list(range(n))

    # lexsort is stable; last key is the primary one
    order = np.lexsort((xy[:, 1], xy[:, 0])).tolist()
    pts = xy.tolist()

    lower = _half_chain(pts, order)
    upper = _half_chain(pts, reversed(order))

    # Last point of each chain is the first point of the other
    return lower[:-1] + upper[:-1]


def _horizontal_boundary(xyz: np.ndarray, include_stacked: bool) -> set[int]:
    xy = xyz[:, :2]
    hull = convex_hull_2d(xy)
    if not include_stacked:
        return set(hull)

    hull_positions = {tuple(xy[i]) for i in hull}
    return {i for i, pos in enumerate(map(tuple, xy)) if pos in hull_positions}


def _principal_frame(xyz: np.ndarray) -> tuple[int, np.ndarray]:
    """Return (rank, principal axes) of a centered point set."""
    centered = xyz - xyz.mean(axis=0)
    _, s, vt = np.linalg.svd(centered, full_matrices=False)
    if s[0] == 0:
        return 0, vt
    rank = int(np.sum(s > s[0] * _RANK_TOL))
    return rank, vt


def _degenerate_boundary(xyz: np.ndarray, rank: int, vt: np.ndarray) -> set[int]:
    """Boundary of a zero-volume cloud, computed in its own subspace."""
    n = len(xyz)
    if rank == 0:
        logger.warning(f"All {n} points coincide; every point is a boundary point")
        return set(range(n))

    centered = xyz - xyz.mean(axis=0)
    if rank == 1:
        t = centered @ vt[0]
        logger.warning("Collinear cloud; boundary is the two extreme points")
        return {int(np.argmin(t)), int(np.argmax(t))}

    flat_axes = np.flatnonzero(np.ptp(xyz, axis=0) == 0)
    if len(flat_axes) == 1:
        # Axis-aligned plane: drop the flat axis, no rotation round-off
        keep = [a for a in range(3) if a != flat_axes[0]]
        logger.warning(f"Planar cloud (axis {flat_axes[0]} flat); using 2D hull")
        return set(convex_hull_2d(xyz[:, keep]))

    logger.warning("Planar cloud; using 2D hull in the principal plane")
    return set(convex_hull_2d(centered @ vt[:2].T))


def _volumetric_boundary(xyz: np.ndarray) -> set[int]:
    n = len(xyz)
    if n < 4:
        return set(range(n))

    rank, vt = _principal_frame(xyz)
    if rank < 3:
        return _degenerate_boundary(xyz, rank, vt)

    try:
        hull = ConvexHull(xyz)
    except QhullError as e:
        # Numerically flat clouds that passed the rank test
        logger.warning(f"Qhull failed ({e.__class__.__name__}); treating cloud as planar")
        return _degenerate_boundary(xyz, 2, vt)
    return {int(i) for i in hull.vertices}


def identify_boundary_points(
    points: Sequence[Point],
    mode: BoundaryMode = "horizontal",
    *,
    include_stacked: bool = False,
) -> set[int]:
    """Identify the points lying on the convex hull of the cloud.

    In horizontal mode the default returns one representative index per hull
    (x, y) position; points stacked above or below it are not included.

    Args:
        points: Point cloud.
        mode: "horizontal" (2D hull of the (x, y) projection, z ignored) or
            "volumetric" (3D hull).
        include_stacked: Horizontal mode only. Also return every point whose
            (x, y) equals a hull position, not just the one representative
            the monotone chain keeps.

    Returns:
        Set of original indices, all in [0, len(points)).

    Raises:
        ValueError: on an unknown mode.
    """
    if mode not in BOUNDARY_MODES:
        raise ValueError(f"Unknown boundary mode '{mode}', expected one of {BOUNDARY_MODES}")

    n = len(points)
    if n == 0:
        return set()
    if n < 3:
        return set(range(n))

    xyz = points_to_array(points)
    if mode == "horizontal":
        boundary = _horizontal_boundary(xyz, include_stacked)
    else:
        boundary = _volumetric_boundary(xyz)

    logger.debug(f"Boundary ({mode}): {len(boundary)}/{n} points")
    return boundary


def invert_elevation(points: Sequence[Point]) -> list[Point]:
    """Negate z on every point; x, y and color pass through."""
    return [p.with_z(-p.z) for p in points]
