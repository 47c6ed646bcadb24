"""Unit tests for the Ray data structure."""

import taichi as ti


class TestRay:
    """Tests for ray construction and evaluation."""

    def test_make_ray_keeps_direction_length(self):
        """Test that make_ray does not normalize the direction."""
        from raycaster.core.ray import make_ray
        from raycaster.core.vec3 import vec3

        origin = ti.Vector.field(3, dtype=ti.f64, shape=())
        direction = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -2.0))
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        assert tuple(origin[None].to_numpy()) == (1.0, 2.0, 3.0)
        assert tuple(direction[None].to_numpy()) == (0.0, 0.0, -2.0)

    def test_ray_at(self):
        """Test ray_at at zero, positive and negative parameters."""
        from raycaster.core.ray import make_ray, ray_at
        from raycaster.core.vec3 import vec3

        results = ti.Vector.field(3, dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 0.0, 0.0), vec3(0.0, 2.0, 0.0))
            results[0] = ray_at(ray, 0.0)
            results[1] = ray_at(ray, 1.5)
            results[2] = ray_at(ray, -1.0)

        test_kernel()
        assert tuple(results[0].to_numpy()) == (1.0, 0.0, 0.0)
        assert tuple(results[1].to_numpy()) == (1.0, 3.0, 0.0)
        assert tuple(results[2].to_numpy()) == (1.0, -2.0, 0.0)
