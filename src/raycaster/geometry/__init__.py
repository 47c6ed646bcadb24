"""Geometry module: hit records and the sphere primitive.

Components:
    hittable: HitRecord, face orientation and the hittable variant tags
    sphere: Sphere primitive with analytic ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) that return a
HitRecord by value:
    rec = hit_sphere(ray, sphere, ray_t)
"""

from .hittable import HitRecord, HittableKind, face_normal, make_miss_record
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "HitRecord",
    "HittableKind",
    "face_normal",
    "make_miss_record",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]
