"""Tests for the sphere arena, scene collections and nearest-hit queries.

Tests cover:
- Adding spheres and radius clamping
- Collection construction, capacity and type errors
- Nearest-hit reduction and its independence of insertion order
- Spheres shared between collections
- Dispatch over the hittable variants from Python
"""

import itertools
import math

import pytest


class TestSphereArena:
    """Tests for the sphere arena."""

    def test_add_sphere_returns_handle(self):
        """Test that add_sphere stores the sphere and returns its index."""
        from raycaster.scene.world import add_sphere, get_sphere_count

        first = add_sphere((0.0, 0.0, -1.0), 0.5)
        second = add_sphere((0.0, -100.5, -1.0), 100.0)

        assert first.index == 0
        assert second.index == 1
        assert second.center == (0.0, -100.5, -1.0)
        assert second.radius == 100.0
        assert get_sphere_count() == 2

    def test_add_sphere_clamps_negative_radius(self):
        """Test that a negative radius is stored as zero."""
        from raycaster.scene.world import add_sphere, sphere_radii

        handle = add_sphere((0.0, 0.0, 0.0), -3.0)

        assert handle.radius == 0.0
        assert sphere_radii[handle.index] == 0.0

    def test_clear_scene(self):
        """Test that clear_scene empties the arena and the collection table."""
        from raycaster.scene.world import (
            SceneCollection,
            add_sphere,
            clear_scene,
            get_collection_count,
            get_sphere_count,
        )

        SceneCollection(add_sphere((0.0, 0.0, -1.0), 0.5))
        clear_scene()

        assert get_sphere_count() == 0
        assert get_collection_count() == 0

    def test_arena_capacity(self):
        """Test that exceeding the arena raises RuntimeError."""
        from raycaster.scene.world import MAX_SPHERES, add_sphere

        for k in range(MAX_SPHERES):
            add_sphere((float(k), 0.0, 0.0), 0.1)

        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, 0.0), 0.1)


class TestSceneCollection:
    """Tests for SceneCollection construction."""

    def test_empty_collection(self):
        """Test that a new collection has no members."""
        from raycaster.scene.world import SceneCollection

        world = SceneCollection()

        assert len(world) == 0
        assert list(world) == []

    def test_members_keep_insertion_order(self):
        """Test add() and construction with initial members."""
        from raycaster.scene.world import SceneCollection, add_sphere

        a = add_sphere((0.0, 0.0, -1.0), 0.5)
        b = add_sphere((0.0, -100.5, -1.0), 100.0)
        c = add_sphere((1.0, 0.0, -1.0), 0.5)

        world = SceneCollection(a, b)
        world.add(c)

        assert list(world) == [a, b, c]
        assert len(world) == 3

    def test_clear_removes_members(self):
        """Test that clear() leaves the collection allocated but empty."""
        from raycaster.scene.world import SceneCollection, add_sphere, intersect

        world = SceneCollection(add_sphere((0.0, 0.0, -1.0), 0.5))
        world.clear()

        assert len(world) == 0
        assert intersect(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0)) is None

    @pytest.mark.parametrize("bad", [None, 42, (0.0, 0.0, -1.0), "sphere"])
    def test_add_rejects_non_spheres(self, bad):
        """Test that only sphere handles can be added."""
        from raycaster.scene.world import SceneCollection

        world = SceneCollection()
        with pytest.raises(TypeError):
            world.add(bad)

    def test_collections_cannot_nest(self):
        """Test that adding a collection to a collection raises TypeError."""
        from raycaster.scene.world import SceneCollection

        outer = SceneCollection()
        inner = SceneCollection()
        with pytest.raises(TypeError):
            outer.add(inner)

    def test_collection_table_capacity(self):
        """Test that exceeding the collection table raises RuntimeError."""
        from raycaster.scene.world import MAX_COLLECTIONS, SceneCollection

        for _ in range(MAX_COLLECTIONS):
            SceneCollection()

        with pytest.raises(RuntimeError, match="Maximum number of scene collections"):
            SceneCollection()

    def test_hittable_handle(self):
        """Test the dispatch tags of both variants."""
        from raycaster.geometry.hittable import HittableKind
        from raycaster.scene.world import SceneCollection, add_sphere, hittable_handle

        sphere = add_sphere((0.0, 0.0, -1.0), 0.5)
        world = SceneCollection(sphere)

        assert hittable_handle(sphere) == (int(HittableKind.SPHERE), sphere.index)
        assert hittable_handle(world) == (int(HittableKind.COLLECTION), world.index)
        with pytest.raises(TypeError):
            hittable_handle([sphere])


class TestNearestHit:
    """Tests for nearest-hit queries."""

    def test_single_sphere(self):
        """Test a query against a lone sphere handle."""
        from raycaster.scene.world import add_sphere, intersect

        sphere = add_sphere((0.0, 0.0, -1.0), 0.5)
        result = intersect(sphere, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result is not None
        assert result.t == 0.5
        assert result.point == (0.0, 0.0, -0.5)
        assert result.normal == (0.0, 0.0, 1.0)
        assert result.front_face is True

    def test_empty_collection_misses(self):
        """Test that an empty collection reports no hit."""
        from raycaster.scene.world import SceneCollection, intersect

        world = SceneCollection()
        assert intersect(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0)) is None

    def test_nearest_of_overlapping_spheres(self):
        """Test that the nearest of several spheres along the ray wins."""
        from raycaster.scene.world import SceneCollection, add_sphere, intersect

        world = SceneCollection(
            add_sphere((0.0, 0.0, -5.0), 1.0),
            add_sphere((0.0, 0.0, -2.0), 0.5),
            add_sphere((0.0, 0.0, -10.0), 3.0),
        )
        result = intersect(world, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result is not None
        assert result.t == 1.5

    def test_result_is_independent_of_member_order(self):
        """Test the nearest hit for every insertion order of the members."""
        from raycaster.scene.world import (
            SceneCollection,
            add_sphere,
            clear_scene,
            intersect,
        )

        specs = [
            ((0.0, 0.0, -1.0), 0.5),
            ((0.0, -100.5, -1.0), 100.0),
            ((0.2, 0.1, -3.0), 1.0),
        ]
        rays = [
            ((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)),
            ((0.0, 0.0, 0.0), (0.3, -0.4, -1.0)),
            ((0.0, 0.0, 0.0), (0.0, -1.0, -0.2)),
            ((0.0, 0.0, 0.0), (0.8, 0.5, -1.0)),
        ]

        expected = None
        for order in itertools.permutations(specs):
            clear_scene()
            world = SceneCollection(*(add_sphere(c, r) for c, r in order))
            results = [intersect(world, o, d) for o, d in rays]
            if expected is None:
                expected = results
            assert results == expected

        assert expected[0].t == 0.5
        assert expected[3] is None

    def test_shared_sphere_in_two_collections(self):
        """Test that one sphere can belong to two collections."""
        from raycaster.scene.world import SceneCollection, add_sphere, intersect

        shared = add_sphere((0.0, 0.0, -1.0), 0.5)
        first = SceneCollection(shared)
        # A small sphere in front of the shared one, on the same axis
        second = SceneCollection(add_sphere((0.0, 0.0, -0.3), 0.1), shared)

        origin, axis = (0.0, 0.0, 0.0), (0.0, 0.0, -1.0)
        assert intersect(first, origin, axis).t == 0.5
        assert abs(intersect(second, origin, axis).t - 0.2) < 1e-12

        # Off axis the small sphere is missed and both collections see the shared one
        oblique = (0.45, 0.0, -1.0)
        hit_first = intersect(first, origin, oblique)
        hit_second = intersect(second, origin, oblique)
        assert hit_first is not None
        assert hit_second == hit_first

    def test_interval_bounds_are_respected(self):
        """Test that hits outside (t_min, t_max) are ignored."""
        from raycaster.scene.world import SceneCollection, add_sphere, intersect

        world = SceneCollection(
            add_sphere((0.0, 0.0, -1.0), 0.5),
            add_sphere((0.0, 0.0, -4.0), 0.5),
        )
        origin, direction = (0.0, 0.0, 0.0), (0.0, 0.0, -1.0)

        assert intersect(world, origin, direction, t_max=0.5) is None
        assert intersect(world, origin, direction, t_min=0.5).t == 1.5
        assert intersect(world, origin, direction, t_min=2.0).t == 3.5
        assert intersect(world, origin, direction, t_min=5.0) is None

    def test_hit_normal_is_unit(self):
        """Test |normal| == 1 and t within range for a grid of rays."""
        from raycaster.scene.world import SceneCollection, add_sphere, intersect

        world = SceneCollection(
            add_sphere((0.0, 0.0, -1.0), 0.5),
            add_sphere((0.0, -100.5, -1.0), 100.0),
        )
        hits = 0
        for x in (-0.9, -0.4, 0.0, 0.3, 0.8):
            for y in (-0.9, -0.3, 0.0, 0.2, 0.7):
                result = intersect(world, (0.0, 0.0, 0.0), (x, y, -1.0))
                if result is None:
                    continue
                hits += 1
                assert 0.0 < result.t < math.inf
                norm = math.sqrt(sum(c * c for c in result.normal))
                assert abs(norm - 1.0) < 1e-12

        assert hits > 0
