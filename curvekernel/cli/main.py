import json
import logging
from pathlib import Path
from typing import Optional, List, Dict, Any

import typer

from ..config import KernelOptions, load_options
from ..dsl.dsl_parser import parse_segments, parse_point, parse_number
from ..segments.segment import Segment, SegmentKind
from ..validators.intersections import has_self_intersections, polyline_from_segments

app = typer.Typer(help="Curve kernel CLI")


# ---------------------------
# Helpers
# ---------------------------

def _point(p) -> List[float]:
    return [round(p[0], 6), round(p[1], 6)]


def _segment_to_json(segment: Segment) -> Dict[str, Any]:
    """Convert a segment to a plain JSON-able dict."""
    if segment.kind is SegmentKind.ARC:
        data = {"center": _point(segment.center), "radius": segment.radius,
                "from": segment.start_angle, "to": segment.end_angle, "ccw": segment.anticlockwise}
    elif segment.kind is SegmentKind.ELLIPTICAL_ARC:
        data = {"center": _point(segment.center), "rx": segment.radius_x, "ry": segment.radius_y,
                "rot": segment.rotation, "from": segment.start_angle, "to": segment.end_angle,
                "ccw": segment.anticlockwise}
    else:
        data = {"points": [_point(p) for p in segment.control_points]}
    return {"type": segment.kind.value, "data": data}


def _load(segments: Path, options: Optional[Path], verbose: bool):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    opts = load_options(options) if options else KernelOptions()
    return parse_segments(Path(segments).read_text()), opts


def _fail(err: ValueError):
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(code=1)


def _emit(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


SEGMENTS = typer.Option(..., exists=True, dir_okay=False, help="Segment DSL file")
OPTIONS = typer.Option(None, exists=True, dir_okay=False, help="Kernel options YAML")
VERBOSE = typer.Option(False, "--verbose", "-v", help="DEBUG logging")


# ---------------------------
# Commands
# ---------------------------

@app.command()
def length(segments: Path = SEGMENTS, options: Optional[Path] = OPTIONS, verbose: bool = VERBOSE):
    """Approximate arc length of each segment."""
    try:
        segs, opts = _load(segments, options, verbose)
        lengths = [s.get_arc_length(opts.distance_epsilon, opts.curve_epsilon, opts.max_levels) for s in segs]
    except ValueError as err:
        _fail(err)
    _emit({"lengths": lengths, "total": sum(lengths)})


@app.command()
def dash(
    segments: Path = SEGMENTS,
    dash: str = typer.Option(..., help="Dash array, e.g. 2,3"),
    offset: float = typer.Option(0.0, help="Dash offset"),
    options: Optional[Path] = OPTIONS,
    verbose: bool = VERBOSE,
):
    """
    Dash toggle positions per segment.
    The dash state is not carried from one segment to the next.
    """
    try:
        segs, opts = _load(segments, options, verbose)
        line_dash = [parse_number(d) for d in dash.split(",") if d.strip()]
        out = []
        for s in segs:
            dv = s.get_dash_values(line_dash, offset, opts.dash_distance_epsilon, opts.dash_curve_epsilon)
            out.append({"values": dv.values, "arc_length": dv.arc_length,
                        "initially_inside": dv.initially_inside})
    except ValueError as err:
        _fail(err)
    _emit({"dashes": out})


@app.command()
def closest(
    segments: Path = SEGMENTS,
    point: str = typer.Option(..., help="Query point x,y"),
    threshold: Optional[float] = typer.Option(None, help="Refinement threshold (defaults to options)"),
    options: Optional[Path] = OPTIONS,
    verbose: bool = VERBOSE,
):
    """Points on any segment closest to --point."""
    try:
        segs, opts = _load(segments, options, verbose)
        query = parse_point(point)
        results = Segment.filter_closest_to_point_result(Segment.closest_to_point(
            segs, query, opts.closest_threshold if threshold is None else threshold))
    except ValueError as err:
        _fail(err)
    index = {id(s): i for i, s in enumerate(segs)}
    _emit({"closest": [
        {"segment": index[id(r.segment)], "t": r.t, "point": _point(r.closest_point),
         "distance_squared": r.distance_squared}
        for r in results
    ]})


@app.command()
def flatten(
    segments: Path = SEGMENTS,
    arcs: bool = typer.Option(False, help="Approximate with lines and circular arcs"),
    options: Optional[Path] = OPTIONS,
    verbose: bool = VERBOSE,
):
    """Piecewise linear (or linear-or-arc) approximation of each segment."""
    try:
        segs, opts = _load(segments, options, verbose)
        out = []
        for s in segs:
            if arcs:
                pieces = s.to_piecewise_linear_or_arc_segments(
                    opts.arc_min_levels, opts.arc_max_levels, opts.curvature_threshold,
                    opts.error_threshold, opts.error_points)
            else:
                pieces = s.to_piecewise_linear_segments(
                    opts.linear_min_levels, opts.linear_max_levels,
                    opts.linear_distance_epsilon, opts.linear_curve_epsilon)
            out.append([_segment_to_json(p) for p in pieces])
    except ValueError as err:
        _fail(err)
    _emit({"pieces": out})


@app.command()
def intersect(segments: Path = SEGMENTS, options: Optional[Path] = OPTIONS, verbose: bool = VERBOSE):
    """Pairwise intersections between the segments."""
    try:
        segs, _ = _load(segments, options, verbose)
    except ValueError as err:
        _fail(err)
    out = []
    for i in range(len(segs)):
        for j in range(i + 1, len(segs)):
            for hit in Segment.intersect(segs[i], segs[j]):
                out.append({"a": i, "b": j, "point": _point(hit.point), "a_t": hit.a_t, "b_t": hit.b_t})
    _emit({"intersections": out})


@app.command()
def overlap(segments: Path = SEGMENTS, options: Optional[Path] = OPTIONS, verbose: bool = VERBOSE):
    """Pairwise continuous overlaps (same-family segments only)."""
    try:
        segs, _ = _load(segments, options, verbose)
    except ValueError as err:
        _fail(err)
    out = []
    for i in range(len(segs)):
        for j in range(i + 1, len(segs)):
            for ov in segs[i].get_overlaps(segs[j]):
                (p_t0, p_t1), (q_t0, q_t1) = ov.get_overlap_ranges()
                out.append({"a": i, "b": j, "scale": ov.a, "offset": ov.b,
                            "a_range": [p_t0, p_t1], "b_range": [q_t0, q_t1]})
    _emit({"overlaps": out})


@app.command()
def check(segments: Path = SEGMENTS, options: Optional[Path] = OPTIONS, verbose: bool = VERBOSE):
    """
    Self-intersection check of the segments as one flattened path.
    Exits with code 2 when the path crosses itself.
    """
    try:
        segs, opts = _load(segments, options, verbose)
        flatten_kwargs = dict(min_levels=opts.linear_min_levels, max_levels=opts.linear_max_levels,
                              distance_epsilon=opts.linear_distance_epsilon,
                              curve_epsilon=opts.linear_curve_epsilon)
        crossing = has_self_intersections(segs, **flatten_kwargs)
        points = len(polyline_from_segments(segs, **flatten_kwargs))
    except ValueError as err:
        _fail(err)
    _emit({"self_intersecting": crossing, "points": points})
    if crossing:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
