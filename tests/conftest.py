"""Pytest configuration for ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field allocated by an earlier runtime.
    """
    from raycaster.core.runtime import init_taichi

    init_taichi("cpu", random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the sphere arena and collections around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the scene fields are allocated after Taichi is initialized
    from raycaster.scene.world import clear_scene

    clear_scene()
    yield
    clear_scene()
