"""I/O utilities: XYZ text parser/reader and writer."""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from .points import RED, WHITE, Color, Point

logger = logging.getLogger(__name__)

_FIELD_SEP = re.compile(r"[\s,;]+")
_COMMENT_PREFIXES = ("#", "//")


# ── Parsing ──────────────────────────────────────────────────────────

def _to_finite(token: str) -> float | None:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _to_channel(value: float) -> int:
    """Round half-up and clamp to a uint8 channel."""
    return min(255, max(0, math.floor(value + 0.5)))


def parse_line(line: str) -> Point | None:
    """Parse one XYZ line, or return None for comments and invalid lines.

    A line needs at least three finite numeric fields (x y z). Fields 4-6
    form a color only if all three are finite numbers; otherwise the point
    is uncolored. Fields may be separated by whitespace, commas or
    semicolons; anything after the sixth field is ignored.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(_COMMENT_PREFIXES):
        return None

    fields = _FIELD_SEP.split(stripped)
    if len(fields) < 3:
        return None

    coords = [_to_finite(f) for f in fields[:3]]
    if any(c is None for c in coords):
        return None
    x, y, z = coords

    color = None
    if len(fields) >= 6:
        channels = [_to_finite(f) for f in fields[3:6]]
        if all(c is not None for c in channels):
            color = Color(*(_to_channel(c) for c in channels))

    return Point(x, y, z, color)


def iter_xyz(lines: Iterable[str]) -> Iterator[Point]:
    for line in lines:
        point = parse_line(line)
        if point is not None:
            yield point


def parse_xyz(text: str) -> list[Point]:
    """Parse XYZ text content into points, skipping comments and bad lines."""
    return list(iter_xyz(text.splitlines()))


def read_xyz(path: Path) -> list[Point]:
    """Read an XYZ file line by line."""
    path = Path(path)
    with open(path, encoding="utf-8", errors="replace") as f:
        points = list(iter_xyz(f))
    logger.info(f"Loaded {len(points)} points from {path.name}")
    return points


# ── Export ───────────────────────────────────────────────────────────

def format_point(point: Point, decimal_places: int = 6) -> str:
    d = decimal_places
    line = f"{point.x:.{d}f} {point.y:.{d}f} {point.z:.{d}f}"
    if point.color is not None:
        line += f" {point.color.r} {point.color.g} {point.color.b}"
    return line


def export_to_text(points: Sequence[Point], decimal_places: int = 6) -> str:
    """Serialize points to XYZ text, one newline-terminated line per point.

    Color is written per point, only for points that have one.

    Raises:
        ValueError: if decimal_places is negative.
    """
    if decimal_places < 0:
        raise ValueError(f"decimal_places must be >= 0, got {decimal_places}")
    return "".join(format_point(p, decimal_places) + "\n" for p in points)


def write_xyz(
    path: Path,
    points: Sequence[Point],
    decimal_places: int = 6,
    header: str | None = None,
) -> Path:
    """Write points to an XYZ file, optionally preceded by a comment line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = export_to_text(points, decimal_places)
    if header:
        content = f"# {header}\n" + content
    path.write_text(content, encoding="utf-8")
    logger.info(f"Saved {len(points)} points -> {path}")
    return path


def marked_boundary_points(points: Sequence[Point], boundary_indices: Iterable[int]) -> list[Point]:
    """Color boundary points red and all other points white."""
    boundary = set(boundary_indices)
    return [p.with_color(RED if i in boundary else WHITE) for i, p in enumerate(points)]
