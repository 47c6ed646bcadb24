"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves ``|Q + t*d - C|^2 = r^2`` for ``t``. Expanded, this is
the quadratic ``(d.d) t^2 - 2 d.(C-Q) t + (C-Q).(C-Q) - r^2 = 0``. Writing the
linear coefficient as ``b = -2h`` removes the factor of 2 from the quadratic
formula and the factor of 4 from the discriminant:

    t = (h -/+ sqrt(h^2 - a*c)) / a

with ``a = d.d``, ``h = d.(C-Q)`` and ``c = (C-Q).(C-Q) - r^2``. The
operations below are kept in exactly this form and order.

Example:
    >>> import taichi as ti
    >>> from raycaster.core.interval import INFINITY, Interval
    >>> from raycaster.core.ray import make_ray
    >>> from raycaster.core.vec3 import vec3
    >>> from raycaster.geometry.sphere import Sphere, hit_sphere
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
    ...     return hit_sphere(ray, sphere, Interval(min=0.0, max=INFINITY)).t  # 0.5
"""

import taichi as ti

from raycaster.core.interval import Interval
from raycaster.core.ray import Ray, ray_at
from raycaster.core.runtime import real
from raycaster.core.vec3 import dot, length_squared, point3, vec_div
from raycaster.geometry.hittable import HitRecord, face_normal, make_miss_record


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (non-negative).
    """

    center: point3
    radius: real


@ti.func
def make_sphere(center: point3, radius: real) -> Sphere:
    """Create a sphere, clamping negative radii to zero."""
    return Sphere(center=center, radius=ti.max(0.0, radius))


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval) -> HitRecord:
    """Intersect a ray with a sphere.

    The nearer root is tried first; the farther root is only considered when
    the nearer one is not strictly inside ``ray_t``. A tangent ray has a zero
    discriminant and a single root.

    Args:
        ray: The ray to test. Its direction need not be normalized.
        sphere: The sphere to test against.
        ray_t: Accepted range of the ray parameter (bounds excluded).

    Returns:
        A HitRecord. Check the hit field before reading the others.
    """
    oc = sphere.center - ray.origin
    a = length_squared(ray.direction)
    h = dot(ray.direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    rec = make_miss_record()

    if discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        root = (h - sqrtd) / a
        accepted = ray_t.surrounds(root)
        if not accepted:
            root = (h + sqrtd) / a
            accepted = ray_t.surrounds(root)

        if accepted:
            point = ray_at(ray, root)
            outward_normal = vec_div(point - sphere.center, sphere.radius)
            front_face, normal = face_normal(ray.direction, outward_normal)

            rec.hit = 1
            rec.t = root
            rec.point = point
            rec.normal = normal
            rec.front_face = front_face

    return rec
