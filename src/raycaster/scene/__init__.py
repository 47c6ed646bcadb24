"""Scene module: sphere arena, scene collections and preset scenes.

Components:
    world: Sphere arena, SceneCollection, nearest-hit queries and dispatch
    presets: Ready-made scenes paired with a configured camera

Scene data is organized for Taichi access:
    - Structure-of-Arrays layout for sphere centers and radii
    - Collections stored as rows of sphere indices, so spheres can be shared

These modules allocate Taichi fields; import them after
raycaster.core.runtime.init_taichi().
"""

from .world import (
    MAX_COLLECTIONS,
    MAX_SPHERES,
    HitResult,
    Hittable,
    SceneCollection,
    SphereHandle,
    add_sphere,
    clear_scene,
    get_collection_count,
    get_sphere_count,
    hit_collection,
    hit_hittable,
    hittable_handle,
    intersect,
    load_sphere,
)

# Note: presets is NOT imported here to avoid a circular import with the
# camera module. Import it directly:
#   from raycaster.scene.presets import create_ground_scene

__all__ = [
    "SphereHandle",
    "SceneCollection",
    "Hittable",
    "HitResult",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "get_collection_count",
    "hittable_handle",
    "intersect",
    "load_sphere",
    "hit_collection",
    "hit_hittable",
    "MAX_SPHERES",
    "MAX_COLLECTIONS",
]
