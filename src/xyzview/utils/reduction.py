"""Point cloud density reduction.

Methods:
- voxel: one centroid per occupied voxel, voxel edge derived from the
  average point spacing and the target percentage
- gradient: keep the interior points with the steepest sampled local
  elevation change

Both methods keep the given boundary indices unconditionally and only reduce
the remaining (interior) points:

1. total_target = max(1, floor(n * p / 100))
2. boundary count >= total_target -> return the boundary points only
3. interior_target = max(1, total_target - boundary count)
4. output = boundary points (ascending index) ++ reduced interior
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .points import Color, Point, points_to_array

logger = logging.getLogger(__name__)

REDUCTION_METHODS: tuple[str, ...] = ("voxel", "gradient")
_METHOD_ALIASES = {"zgradient": "gradient"}
ACCEPTED_METHODS: tuple[str, ...] = REDUCTION_METHODS + tuple(_METHOD_ALIASES)

GRADIENT_SAMPLES = 10  # random neighbours drawn per interior point
GRADIENT_MAX_DISTANCE = 10.0  # horizontal distance limit for a neighbour
_GRADIENT_CHUNK = 200_000  # rows scored per batch


@dataclass
class _Partition:
    points: Sequence[Point]
    boundary: list[Point]
    interior_indices: list[int]
    total_target: int
    interior_target: int

    @property
    def interior(self) -> list[Point]:
        return [self.points[i] for i in self.interior_indices]

    @property
    def resolved(self) -> list[Point] | None:
        """Final result when no interior reduction is needed."""
        if not self.interior_indices:
            return list(self.points)
        if len(self.boundary) >= self.total_target:
            return list(self.boundary)
        return None


def _check_percentage(target_percentage: float) -> None:
    if not target_percentage > 0:
        raise ValueError(f"target_percentage must be > 0, got {target_percentage}")


def _partition(
    points: Sequence[Point],
    target_percentage: float,
    boundary_indices: Iterable[int] | None,
) -> _Partition:
    n = len(points)
    keep = sorted({int(i) for i in (boundary_indices if boundary_indices is not None else ())})
    for idx in keep:
        if not 0 <= idx < n:
            raise IndexError(f"Boundary index {idx} out of range for {n} points")

    keep_set = set(keep)
    total_target = max(1, math.floor(n * target_percentage / 100))
    return _Partition(
        points=points,
        boundary=[points[i] for i in keep],
        interior_indices=[i for i in range(n) if i not in keep_set],
        total_target=total_target,
        interior_target=max(1, total_target - len(keep)),
    )


# ── Voxel centroids ──────────────────────────────────────────────────

def _voxel_size(volume: float, n: int, target_percentage: float) -> float:
    avg_spacing = (volume / n) ** (1.0 / 3.0)
    scale_factor = (100.0 / target_percentage) ** 1.5
    # ~no reduction near 100%, never a zero-size voxel
    return avg_spacing * max(scale_factor - 0.98, 0.001)


def _voxel_centroids(interior: list[Point], voxel_size: float) -> list[Point]:
    xyz = points_to_array(interior)
    cells = np.floor((xyz - xyz.min(axis=0)) / voxel_size).astype(np.int64)
    _, first, inverse = np.unique(cells, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)
    n_cells = len(first)

    counts = np.bincount(inverse, minlength=n_cells).astype(np.float64)
    centroids = np.column_stack([
        np.bincount(inverse, weights=xyz[:, axis], minlength=n_cells) / counts
        for axis in range(3)
    ])

    colored = np.array([p.color is not None for p in interior], dtype=np.float64)
    rgb = np.array(
        [p.color.as_tuple() if p.color is not None else (0, 0, 0) for p in interior],
        dtype=np.float64,
    )
    fully_colored = np.bincount(inverse, weights=colored, minlength=n_cells) == counts
    mean_rgb = np.column_stack([
        np.bincount(inverse, weights=rgb[:, c], minlength=n_cells) / counts for c in range(3)
    ])
    mean_rgb = np.floor(mean_rgb + 0.5).astype(int)

    result = []
    # Cells in order of first occupancy
    for cell in np.argsort(first, kind="stable"):
        color = Color(*mean_rgb[cell].tolist()) if fully_colored[cell] else None
        x, y, z = centroids[cell].tolist()
        result.append(Point(x, y, z, color))
    return result


def voxel_downsample(
    points: Sequence[Point],
    target_percentage: float,
    boundary_indices: Iterable[int] | None = None,
) -> list[Point]:
    """Grid-based voxel downsampling of the interior points.

    Each occupied voxel contributes its centroid; the voxel count only
    approximates the interior target. A zero-volume interior bounding box
    falls back to the first interior_target interior points.
    """
    _check_percentage(target_percentage)
    if target_percentage >= 100:
        return list(points)
    if len(points) == 0:
        return []

    part = _partition(points, target_percentage, boundary_indices)
    if part.resolved is not None:
        return part.resolved

    interior = part.interior
    xyz = points_to_array(interior)
    extent = xyz.max(axis=0) - xyz.min(axis=0)
    volume = float(np.prod(extent))

    if volume == 0:
        logger.warning(
            f"Interior bounding box is flat (extent={extent.tolist()}); "
            f"keeping first {part.interior_target} interior points"
        )
        reduced = interior[:part.interior_target]
    else:
        voxel_size = _voxel_size(volume, len(points), target_percentage)
        reduced = _voxel_centroids(interior, voxel_size)
        logger.debug(f"Voxel size {voxel_size:.6g} -> {len(reduced)} occupied voxels")

    result = part.boundary + reduced
    logger.info(
        f"Voxel downsample ({target_percentage}%): {len(points)} -> {len(result)} points "
        f"({len(part.boundary)} boundary kept)"
    )
    return result


# ── Elevation gradient sampling ──────────────────────────────────────

def _gradient_scores(
    xyz: np.ndarray,
    rows: np.ndarray,
    rng: np.random.Generator,
) -> np.ndarray:
    """Max |dz| / dxy over random neighbours within GRADIENT_MAX_DISTANCE."""
    n = len(xyz)
    k = min(GRADIENT_SAMPLES, n - 1)
    scores = np.zeros(len(rows), dtype=np.float64)
    if k <= 0:
        return scores

    for start in range(0, len(rows), _GRADIENT_CHUNK):
        chunk = rows[start:start + _GRADIENT_CHUNK]
        samples = rng.integers(0, n, size=(len(chunk), k))
        src = xyz[chunk][:, None, :]
        nbr = xyz[samples]

        dxy = np.hypot(nbr[..., 0] - src[..., 0], nbr[..., 1] - src[..., 1])
        dz = np.abs(nbr[..., 2] - src[..., 2])
        valid = (samples != chunk[:, None]) & (dxy > 0) & (dxy < GRADIENT_MAX_DISTANCE)
        ratio = np.where(valid, dz / np.where(valid, dxy, 1.0), 0.0)
        scores[start:start + len(chunk)] = ratio.max(axis=1)
    return scores


def gradient_downsample(
    points: Sequence[Point],
    target_percentage: float,
    boundary_indices: Iterable[int] | None = None,
    *,
    rng: np.random.Generator | None = None,
) -> list[Point]:
    """Keep the interior points with the highest sampled elevation gradient.

    Neighbours are drawn from the whole cloud, boundary points included.
    Equal scores are ordered by a random key drawn per point, so flat
    regions are thinned without positional bias.

    Args:
        points: Original point cloud.
        target_percentage: Fraction of points to retain, in (0, 100].
        boundary_indices: Indices that are always kept.
        rng: Random source; pass a seeded Generator for reproducible output.
    """
    _check_percentage(target_percentage)
    if target_percentage >= 100:
        return list(points)
    if len(points) == 0:
        return []

    part = _partition(points, target_percentage, boundary_indices)
    if part.resolved is not None:
        return part.resolved

    if rng is None:
        rng = np.random.default_rng()

    rows = np.asarray(part.interior_indices, dtype=np.int64)
    scores = _gradient_scores(points_to_array(points), rows, rng)
    tiebreak = rng.random(len(rows))

    # Primary key last: score descending, then random key descending
    order = np.lexsort((-tiebreak, -scores))
    reduced = [points[int(rows[i])] for i in order[:part.interior_target]]

    result = part.boundary + reduced
    logger.info(
        f"Gradient downsample ({target_percentage}%): {len(points)} -> {len(result)} points "
        f"({len(part.boundary)} boundary kept, max gradient {scores.max(initial=0.0):.3f})"
    )
    return result


def reduce_point_cloud(
    points: Sequence[Point],
    method: str,
    target_percentage: float,
    boundary_indices: Iterable[int] | None = None,
    *,
    rng: np.random.Generator | None = None,
) -> list[Point]:
    """Apply the selected reduction method.

    An unknown method returns the input unchanged.
    """
    method = _METHOD_ALIASES.get(method, method)
    if method == "voxel":
        return voxel_downsample(points, target_percentage, boundary_indices)
    if method == "gradient":
        return gradient_downsample(points, target_percentage, boundary_indices, rng=rng)
    logger.warning(f"Unknown reduction method '{method}', returning input unchanged")
    return list(points)
