"""Taichi-based ray caster for scenes of analytic spheres.

This package renders a static scene of spheres by casting rays from a pinhole
camera through a viewport and coloring each sample by the surface normal of
the nearest hit, or by a sky gradient when nothing is hit:
- Analytic ray-sphere intersection with interval-bounded root selection
- Nearest-hit reduction over scene collections
- Multi-sample anti-aliasing with a seeded, reproducible sample generator
- Row-ordered pixel output to pluggable sinks (PPM, PNG, NumPy buffers)

Subpackages:
    core: Taichi runtime setup, vector algebra, rays and intervals
    geometry: Hit records and the sphere primitive
    scene: Sphere arena, scene collections and preset scenes
    camera: Camera model with ray generation and the render loop
    preview: Image sinks, export and display utilities
"""

__version__ = "0.1.0"
