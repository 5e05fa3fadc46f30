"""Pytest configuration for raykernel tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear primitive and material tables before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the tables are created after Taichi is initialized
    from raykernel.materials.emitter import clear_emitter_materials
    from raykernel.scene.manager import _clear_material_tracking
    from raykernel.scene.primitives import clear_primitives

    def _clear_all():
        clear_primitives()
        clear_emitter_materials()
        _clear_material_tracking()

    _clear_all()

    yield

    _clear_all()
