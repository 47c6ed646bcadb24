"""Ray data structure for Taichi kernels.

A ray is the parametric line ``P(t) = origin + t * direction``. The direction
is not normalized; intersection code accounts for its magnitude.

Example:
    >>> import taichi as ti
    >>> from raycaster.core.ray import make_ray, ray_at
    >>> from raycaster.core.vec3 import vec3
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    ...     return ray_at(ray, 0.5).z  # -1.0
"""

import taichi as ti

from raycaster.core.runtime import real
from raycaster.core.vec3 import point3, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray (any non-zero length).
    """

    origin: point3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: real) -> point3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Any real value, including negative ones.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: point3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)
