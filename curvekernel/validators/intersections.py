from typing import List, Sequence, Tuple

from shapely.geometry import LineString

from ..segments.segment import Segment


def polyline_from_segments(segments: Sequence[Segment], min_levels: int = 0, max_levels: int = 10,
                           distance_epsilon: float = 1e-3, curve_epsilon: float = 1e-3) -> List[Tuple[float, float]]:
    """Flattened coordinates of consecutive segments (shared end points appear once)."""
    coords: List[Tuple[float, float]] = []
    for segment in segments:
        for line in segment.to_piecewise_linear_segments(min_levels, max_levels, distance_epsilon, curve_epsilon):
            if not coords or coords[-1] != tuple(line.start):
                coords.append(tuple(line.start))
            coords.append(tuple(line.end))
    return coords


def has_self_intersections(segments: Sequence[Segment], **flatten_kwargs) -> bool:
    # Checked on the flattened polyline, so near-misses below the flattening tolerance can count.
    coords = polyline_from_segments(segments, **flatten_kwargs)
    if len(coords) < 2:
        return False
    line = LineString(coords)
    return not line.is_simple
