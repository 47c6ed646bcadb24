"""Core building blocks for ray casting.

Components:
    runtime: Taichi initialization (double precision, no fast-math)
    vec3: Vector type aliases and vector algebra
    ray: Ray data structure and ray evaluation
    interval: Real intervals bounding accepted ray parameters

None of these modules allocate Taichi fields, so they can be imported before
the runtime is initialized.
"""

from .interval import INFINITY, Interval, empty_interval, universe_interval
from .ray import Ray, make_ray, ray_at
from .runtime import init_taichi, real, resolve_arch
from .vec3 import (
    color,
    cross,
    dot,
    length,
    length_squared,
    point3,
    unit_vector,
    vec3,
    vec_div,
)

__all__ = [
    "init_taichi",
    "resolve_arch",
    "real",
    "vec3",
    "point3",
    "color",
    "dot",
    "cross",
    "length",
    "length_squared",
    "vec_div",
    "unit_vector",
    "Ray",
    "ray_at",
    "make_ray",
    "Interval",
    "INFINITY",
    "empty_interval",
    "universe_interval",
]
