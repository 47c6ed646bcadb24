"""Sphere arena, scene collections and nearest-hit queries.

Spheres live in an arena of Taichi fields (structure-of-arrays layout) and are
referred to by index. A scene collection is a row of sphere indices in a 2-D
field, so several collections can share the same sphere without any pointer
ownership. Collections hold spheres only, which keeps the variant one level
deep and rules out cycles.

The Python-side handles (:class:`SphereHandle`, :class:`SceneCollection`)
build the scene; the Taichi functions (:func:`hit_collection`,
:func:`hit_hittable`) query it from kernels.

Example:
    >>> from raycaster.core.runtime import init_taichi
    >>> init_taichi("cpu")
    >>> from raycaster.scene.world import SceneCollection, add_sphere, intersect
    >>> world = SceneCollection()
    >>> world.add(add_sphere((0.0, 0.0, -1.0), 0.5))
    >>> world.add(add_sphere((0.0, -100.5, -1.0), 100.0))
    >>> intersect(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0)).t
    0.5
"""

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import taichi as ti

from raycaster.core.interval import Interval
from raycaster.core.ray import Ray, make_ray
from raycaster.core.runtime import real
from raycaster.core.vec3 import vec3
from raycaster.geometry.hittable import HitRecord, HittableKind, make_miss_record
from raycaster.geometry.sphere import Sphere, hit_sphere

logger = logging.getLogger(__name__)

# Plain int tags for comparisons inside Taichi functions
_SPHERE_TAG = int(HittableKind.SPHERE)
_COLLECTION_TAG = int(HittableKind.COLLECTION)

# Capacity of the sphere arena and of the collection table
MAX_SPHERES = 1024
MAX_COLLECTIONS = 64

# Sphere arena: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=real, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=real, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Collection table: row k lists the sphere indices of collection k
collection_members = ti.field(dtype=ti.i32, shape=(MAX_COLLECTIONS, MAX_SPHERES))
collection_sizes = ti.field(dtype=ti.i32, shape=MAX_COLLECTIONS)
num_collections = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Scene Construction (Python-side)
# =============================================================================


@dataclass(frozen=True)
class SphereHandle:
    """A sphere stored in the arena.

    Attributes:
        index: The index in the sphere arena.
        center: The center of the sphere.
        radius: The radius after clamping to >= 0.
    """

    kind: ClassVar[HittableKind] = HittableKind.SPHERE

    index: int
    center: tuple[float, float, float]
    radius: float


def clear_scene() -> None:
    """Clear the sphere arena and all collections.

    Handles created before the call become invalid.
    """
    num_spheres[None] = 0
    num_collections[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float) -> SphereHandle:
    """Add a sphere to the arena.

    Args:
        center: The center point of the sphere.
        radius: The radius. Negative values are clamped to zero.

    Returns:
        A handle to the stored sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    cx, cy, cz = (float(v) for v in center)
    radius = max(0.0, float(radius))

    sphere_centers[idx] = [cx, cy, cz]
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1
    logger.debug("Added sphere %d at (%g, %g, %g) radius %g", idx, cx, cy, cz, radius)
    return SphereHandle(index=idx, center=(cx, cy, cz), radius=radius)


def get_sphere_count() -> int:
    """Get the number of spheres in the arena."""
    return int(num_spheres[None])


def get_collection_count() -> int:
    """Get the number of allocated scene collections."""
    return int(num_collections[None])


class SceneCollection:
    """An ordered collection of spheres reduced to the nearest hit.

    Each collection owns one row of the collection table. Members are sphere
    handles; the same sphere may be added to any number of collections.
    Collections are append-only while the scene is built and must not change
    during a render.

    Attributes:
        index: The row of this collection in the collection table.
        objects: The member spheres in insertion order.

    Example:
        >>> ground = add_sphere((0.0, -100.5, -1.0), 100.0)
        >>> world = SceneCollection(add_sphere((0.0, 0.0, -1.0), 0.5), ground)
        >>> len(world)
        2
    """

    kind: ClassVar[HittableKind] = HittableKind.COLLECTION

    def __init__(self, *objects: SphereHandle) -> None:
        """Allocate a collection, optionally with initial members.

        Raises:
            RuntimeError: If the maximum number of collections is exceeded.
            TypeError: If an initial member is not a SphereHandle.
        """
        idx = num_collections[None]
        if idx >= MAX_COLLECTIONS:
            raise RuntimeError(
                f"Maximum number of scene collections ({MAX_COLLECTIONS}) exceeded"
            )
        collection_sizes[idx] = 0
        num_collections[None] = idx + 1

        self.index = idx
        self.objects: list[SphereHandle] = []
        for obj in objects:
            self.add(obj)

    def add(self, obj: SphereHandle) -> None:
        """Append a sphere to the collection.

        Raises:
            TypeError: If obj is not a SphereHandle.
            RuntimeError: If the collection is full.
        """
        if not isinstance(obj, SphereHandle):
            raise TypeError(
                f"SceneCollection members must be SphereHandle, got {type(obj).__name__}"
            )
        size = len(self.objects)
        if size >= MAX_SPHERES:
            raise RuntimeError(f"Maximum collection size ({MAX_SPHERES}) exceeded")
        collection_members[self.index, size] = obj.index
        collection_sizes[self.index] = size + 1
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all members (the table row stays allocated)."""
        self.objects.clear()
        collection_sizes[self.index] = 0

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[SphereHandle]:
        return iter(self.objects)

    def __repr__(self) -> str:
        return f"SceneCollection(index={self.index}, size={len(self.objects)})"


Hittable = SphereHandle | SceneCollection


def hittable_handle(obj: Hittable) -> tuple[int, int]:
    """Get the (kind, index) tag used to dispatch a hittable in kernels.

    Raises:
        TypeError: If obj is not a SphereHandle or SceneCollection.
    """
    if not isinstance(obj, (SphereHandle, SceneCollection)):
        raise TypeError(f"Not a hittable: {type(obj).__name__}")
    return int(obj.kind), obj.index


# =============================================================================
# Scene Queries (Taichi-side)
# =============================================================================


@ti.func
def load_sphere(index: ti.i32) -> Sphere:
    """Read a sphere from the arena."""
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index])


@ti.func
def hit_collection(collection: ti.i32, ray: Ray, ray_t: Interval) -> HitRecord:
    """Find the nearest hit among the members of a collection.

    Each member is queried with the upper bound shrunk to the closest hit so
    far, so the result is the globally nearest hit regardless of member order.

    Args:
        collection: The collection index.
        ray: The ray to test.
        ray_t: Accepted range of the ray parameter (bounds excluded).

    Returns:
        The record of the nearest hit, or a miss record.
    """
    closest_so_far = ray_t.max
    result = make_miss_record()

    for k in range(collection_sizes[collection]):
        sphere = load_sphere(collection_members[collection, k])
        rec = hit_sphere(ray, sphere, Interval(min=ray_t.min, max=closest_so_far))
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result


@ti.func
def hit_hittable(kind: ti.i32, index: ti.i32, ray: Ray, ray_t: Interval) -> HitRecord:
    """Dispatch a hit query over the hittable variants.

    Args:
        kind: The HittableKind tag.
        index: Sphere arena index or collection index, depending on kind.
        ray: The ray to test.
        ray_t: Accepted range of the ray parameter (bounds excluded).

    Returns:
        A HitRecord. Unknown tags produce a miss.
    """
    rec = make_miss_record()
    if kind == _SPHERE_TAG:
        rec = hit_sphere(ray, load_sphere(index), ray_t)
    elif kind == _COLLECTION_TAG:
        rec = hit_collection(index, ray, ray_t)
    return rec


@dataclass(frozen=True)
class HitResult:
    """A hit reported to Python code.

    Attributes:
        t: The ray parameter of the hit.
        point: The intersection point.
        normal: Unit normal facing the incoming ray.
        front_face: True if the ray hit the outside of the surface.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool


@ti.kernel
def _intersect_kernel(
    kind: ti.i32,
    index: ti.i32,
    origin: ti.types.ndarray(),
    direction: ti.types.ndarray(),
    t_min: real,
    t_max: real,
    out: ti.types.ndarray(),
) -> ti.i32:
    did_hit = 0
    # One serial iteration, so the member loop in hit_collection is not the
    # outermost (parallelized) loop of this kernel
    ti.loop_config(serialize=True)
    for _ in range(1):
        ray = make_ray(
            vec3(origin[0], origin[1], origin[2]),
            vec3(direction[0], direction[1], direction[2]),
        )
        rec = hit_hittable(kind, index, ray, Interval(min=t_min, max=t_max))
        out[0] = rec.t
        for c in ti.static(range(3)):
            out[1 + c] = rec.point[c]
            out[4 + c] = rec.normal[c]
        out[7] = ti.cast(rec.front_face, real)
        did_hit = rec.hit
    return did_hit


def intersect(
    world: Hittable,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float = 0.0,
    t_max: float = math.inf,
) -> HitResult | None:
    """Intersect a single ray with a hittable from Python.

    Args:
        world: A SphereHandle or SceneCollection.
        origin: The ray origin.
        direction: The ray direction (need not be normalized).
        t_min: Lower bound of the accepted ray parameter (excluded).
        t_max: Upper bound of the accepted ray parameter (excluded).

    Returns:
        The nearest hit inside (t_min, t_max), or None.

    Raises:
        TypeError: If world is not a hittable.
    """
    kind, index = hittable_handle(world)
    out = np.zeros(8, dtype=np.float64)
    did_hit = _intersect_kernel(
        kind,
        index,
        np.ascontiguousarray(origin, dtype=np.float64),
        np.ascontiguousarray(direction, dtype=np.float64),
        float(t_min),
        float(t_max),
        out,
    )
    if not did_hit:
        return None
    return HitResult(
        t=float(out[0]),
        point=(float(out[1]), float(out[2]), float(out[3])),
        normal=(float(out[4]), float(out[5]), float(out[6])),
        front_face=bool(out[7]),
    )
