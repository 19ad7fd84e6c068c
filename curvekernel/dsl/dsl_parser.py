"""
Very small segment DSL → Segment objects.

LINE x,y -> x,y
QUAD x,y -> cx,cy -> x,y
CUBIC x,y -> c1x,c1y -> c2x,c2y -> x,y
ARC cx,cy R=<radius> FROM=<angle> TO=<angle> [CCW]
ELLIPSE cx,cy RX=<radius> RY=<radius> ROT=<angle> FROM=<angle> TO=<angle> [CCW]

Numbers may be expressions, optionally braced: TO={pi/2}, 0,{sqrt(2)*10}.
Lines starting with # are comments.
"""
from typing import Dict, List, Optional, Any

from ..geometry.eval import eval_expr
from ..geometry.vector import Vector2
from ..segments.arc import Arc
from ..segments.cubic import Cubic
from ..segments.elliptical_arc import EllipticalArc
from ..segments.line import Line
from ..segments.quadratic import Quadratic
from ..segments.segment import Segment


def _split_top_level(text: str, sep: str = ",") -> List[str]:
    """Split on sep, ignoring separators nested in (...) or {...}."""
    parts, depth, current = [], 0, []
    for ch in text:
        if ch in "({":
            depth += 1
        elif ch in ")}":
            depth -= 1
        if depth == 0 and (ch == sep or (sep == " " and ch.isspace())):
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    if sep == " ":
        return [p for p in parts if p]
    return [p.strip() for p in parts]


def parse_number(text: str, env: Optional[Dict[str, Any]] = None) -> float:
    return eval_expr(text, env)


def parse_point(text: str, env: Optional[Dict[str, Any]] = None) -> Vector2:
    parts = _split_top_level(text.strip())
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Expected a point x,y: {text!r}")
    return Vector2(parse_number(parts[0], env), parse_number(parts[1], env))


def _parse_points(body: str, count: int, line: str) -> List[Vector2]:
    chunks = [seg.strip() for seg in body.split("->")]
    if len(chunks) != count:
        raise ValueError(f"Expected {count} points: {line}")
    return [parse_point(c) for c in chunks]


def _parse_keywords(tokens: List[str], required: List[str], line: str) -> Dict[str, Any]:
    """KEY=value tokens plus an optional trailing CCW flag."""
    values: Dict[str, Any] = {"CCW": False}
    for tok in tokens:
        if tok.upper() == "CCW":
            values["CCW"] = True
            continue
        if "=" not in tok:
            raise ValueError(f"Unexpected token {tok!r}: {line}")
        key, expr = tok.split("=", 1)
        key = key.upper()
        if key not in required:
            raise ValueError(f"Unknown key {key}: {line}")
        values[key] = parse_number(expr)
    missing = [k for k in required if k not in values]
    if missing:
        raise ValueError(f"Missing {', '.join(missing)}: {line}")
    return values


def parse_segment(line: str) -> Segment:
    command, _, body = line.partition(" ")
    command = command.upper()
    if command == "LINE":
        return Line(*_parse_points(body, 2, line))
    if command == "QUAD":
        return Quadratic(*_parse_points(body, 3, line))
    if command == "CUBIC":
        return Cubic(*_parse_points(body, 4, line))
    if command in ("ARC", "ELLIPSE"):
        tokens = _split_top_level(body, " ")
        if not tokens:
            raise ValueError(f"Missing center: {line}")
        center = parse_point(tokens[0])
        if command == "ARC":
            kw = _parse_keywords(tokens[1:], ["R", "FROM", "TO"], line)
            return Arc(center, kw["R"], kw["FROM"], kw["TO"], kw["CCW"])
        kw = _parse_keywords(tokens[1:], ["RX", "RY", "ROT", "FROM", "TO"], line)
        return EllipticalArc(center, kw["RX"], kw["RY"], kw["ROT"], kw["FROM"], kw["TO"], kw["CCW"])
    raise ValueError(f"Unknown line: {line}")


def parse_segments(text: str) -> List[Segment]:
    segments: List[Segment] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        segments.append(parse_segment(line))
    return segments
