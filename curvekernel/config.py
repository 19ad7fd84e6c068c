"""
Kernel tolerances and level defaults, optionally read from a YAML file:

distance_epsilon: 1e-10
curve_epsilon: 1e-8
max_levels: 15
closest_threshold: 1e-7
"""
from __future__ import annotations
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Tuple


@dataclass
class KernelOptions:
    # flatness / arc length
    distance_epsilon: float = 1e-10
    curve_epsilon: float = 1e-8
    max_levels: int = 15

    # dashes
    dash_distance_epsilon: float = 1e-10
    dash_curve_epsilon: float = 1e-8

    closest_threshold: float = 1e-7

    # piecewise linear
    linear_min_levels: int = 0
    linear_max_levels: int = 10
    linear_distance_epsilon: float = 1e-3
    linear_curve_epsilon: float = 1e-3

    # piecewise linear-or-arc
    arc_min_levels: int = 2
    arc_max_levels: int = 7
    curvature_threshold: float = 0.02
    error_threshold: float = 10.0
    error_points: Tuple[float, ...] = (0.25, 0.75)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def options_from_dict(data: Dict[str, Any]) -> KernelOptions:
    known = {f.name: f for f in fields(KernelOptions)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
    values: Dict[str, Any] = {}
    for key, value in data.items():
        default = getattr(KernelOptions, key)
        if isinstance(default, tuple):
            values[key] = tuple(float(v) for v in value)
        elif isinstance(default, int):
            values[key] = int(value)
        else:
            values[key] = float(value)
    return KernelOptions(**values)


def load_options(path) -> KernelOptions:
    """Read KernelOptions from a YAML mapping; an empty file gives the defaults."""
    import yaml

    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Options file {path} must hold a mapping")
    return options_from_dict(data)
