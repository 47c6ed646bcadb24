"""Hit records and the hittable variant tags.

Every hit routine returns a :class:`HitRecord` by value. ``hit == 1`` marks a
populated record; on a miss the remaining fields carry no meaning and must not
be read. A reported hit always satisfies:

- ``t`` lies strictly inside the interval passed to the query
- ``point == ray_at(ray, t)``
- ``normal`` has unit length and points against the incoming ray
- ``front_face == 1`` iff the ray direction and the *outward* geometric
  normal form an obtuse angle

Hittables are a tagged variant (:class:`HittableKind`): a sphere in the
sphere arena, or a scene collection of spheres. Dispatch over the tag lives
in :mod:`raycaster.scene.world`.
"""

from enum import IntEnum

import taichi as ti

from raycaster.core.runtime import real
from raycaster.core.vec3 import dot, point3, vec3


class HittableKind(IntEnum):
    """Tags for the hittable variants."""

    SPHERE = 0
    COLLECTION = 1


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray hit within the query interval, 0 otherwise.
        t: The ray parameter of the hit. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal facing the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the ray hit the outside of the surface, 0 if it hit
            from inside. Only valid if hit == 1.
    """

    hit: ti.i32
    t: real
    point: point3
    normal: vec3
    front_face: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=point3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )


@ti.func
def face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a unit outward normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (front_face, normal). The normal is flipped for back faces.
    """
    front_face = 0
    normal = outward_normal
    if dot(ray_direction, outward_normal) < 0.0:
        front_face = 1
    else:
        normal = -outward_normal
    return front_face, normal
