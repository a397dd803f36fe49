"""xyzview: point-cloud boundary detection, density reduction and export."""

from xyzview.utils.geometry import identify_boundary_points, invert_elevation
from xyzview.utils.io import export_to_text, parse_xyz, read_xyz
from xyzview.utils.points import Color, Point
from xyzview.utils.reduction import reduce_point_cloud

__version__ = "0.1.0"

__all__ = [
    "Color",
    "Point",
    "identify_boundary_points",
    "reduce_point_cloud",
    "invert_elevation",
    "export_to_text",
    "parse_xyz",
    "read_xyz",
]
