"""Unit tests for the SceneManager.

Tests cover:
- Emitter material registration and validation
- Material type tracking and lookup
- Primitive addition with materials
- Emissive spheres and light ids
- Scene clearing
- GPU-side material dispatch through propagate()
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture
def fresh_scene():
    """Create a fresh SceneManager for each test."""
    from raykernel.scene.manager import SceneManager

    scene = SceneManager()
    yield scene
    scene.clear()


class TestMaterialRegistration:
    """Tests for material registration."""

    def test_add_emitter_material(self, fresh_scene):
        """Test adding an emitter material."""
        mat_id = fresh_scene.add_emitter_material(color=(4.0, 4.0, 4.0))
        assert mat_id == 0
        assert fresh_scene.get_material_count() == 1

    def test_add_multiple_materials(self, fresh_scene):
        """Test that material IDs are assigned sequentially."""
        ids = [fresh_scene.add_emitter_material(color=(i, i, i)) for i in range(4)]
        assert ids == [0, 1, 2, 3]
        assert fresh_scene.get_material_count() == 4

    def test_material_validation(self, fresh_scene):
        """Test that a negative color raises ValueError."""
        with pytest.raises(ValueError):
            fresh_scene.add_emitter_material(color=(1.0, -1.0, 1.0))
        assert fresh_scene.get_material_count() == 0

    def test_get_material_info(self, fresh_scene):
        """Test retrieving material info."""
        from raykernel.scene.manager import MaterialType

        mat_id = fresh_scene.add_emitter_material(color=(0.2, 0.4, 0.6))
        info = fresh_scene.get_material_info(mat_id)
        assert info is not None
        assert info.material_type == MaterialType.EMITTER
        assert info.type_index == 0
        assert info.params["color"] == (0.2, 0.4, 0.6)
        assert fresh_scene.get_material_info(99) is None


class TestMaterialTypeTracking:
    """Tests for the GPU-side material type tables."""

    def test_get_material_type_gpu(self, fresh_scene):
        """Test material type and index lookup in a kernel."""
        from raykernel.scene.manager import (
            MaterialType,
            get_material_type,
            get_material_type_index,
        )

        fresh_scene.add_emitter_material(color=(1.0, 1.0, 1.0))
        fresh_scene.add_emitter_material(color=(2.0, 2.0, 2.0))

        types = ti.field(dtype=ti.i32, shape=3)
        indices = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            for i in range(3):
                types[i] = get_material_type(i)
                indices[i] = get_material_type_index(i)

        test_kernel()
        assert types.to_numpy().tolist() == [MaterialType.EMITTER, MaterialType.EMITTER, -1]
        assert indices.to_numpy().tolist() == [0, 1, -1]


class TestPrimitiveAddition:
    """Tests for adding primitives through the manager."""

    def test_add_primitives_with_material(self, fresh_scene):
        """Test adding each primitive kind."""
        from raykernel.geometry.geom import NO_LIGHT, GeomKind

        mat = fresh_scene.add_emitter_material(color=(1.0, 1.0, 1.0))
        p = fresh_scene.add_plane((0, 0, 0), (0, 1, 0), mat)
        d = fresh_scene.add_disc((0, 2, 0), (0, -1, 0), 0.5, mat)
        s = fresh_scene.add_sphere((0, 1, 0), 0.25, mat)

        assert (p, d, s) == (0, 1, 2)
        assert fresh_scene.get_geom_count() == 3
        assert [g.kind for g in fresh_scene.geoms] == [
            GeomKind.PLANE,
            GeomKind.DISC,
            GeomKind.SPHERE,
        ]
        assert fresh_scene.geoms[0].radius is None
        assert fresh_scene.geoms[2].normal is None
        assert fresh_scene.geoms[2].light_id == NO_LIGHT

    def test_invalid_material(self, fresh_scene):
        """Test that primitives must reference an existing material."""
        with pytest.raises(ValueError, match="Invalid material_id"):
            fresh_scene.add_sphere((0, 0, 0), 1.0, material_id=0)
        with pytest.raises(ValueError, match="Invalid material_id"):
            fresh_scene.add_plane((0, 0, 0), (0, 1, 0), material_id=-1)
        assert fresh_scene.get_geom_count() == 0

    def test_invalid_geometry(self, fresh_scene):
        """Test that geometry validation errors propagate."""
        mat = fresh_scene.add_emitter_material(color=(1.0, 1.0, 1.0))
        with pytest.raises(ValueError):
            fresh_scene.add_disc((0, 0, 0), (0, 0, 0), 1.0, mat)
        with pytest.raises(ValueError):
            fresh_scene.add_sphere((0, 0, 0), 0.0, mat)
        assert fresh_scene.geoms == []


class TestEmissiveSpheres:
    """Tests for add_emitter_sphere and light bookkeeping."""

    def test_light_ids_are_sequential(self, fresh_scene):
        g0, m0 = fresh_scene.add_emitter_sphere((0, 3, 0), 0.5, color=(5.0, 5.0, 5.0))
        other = fresh_scene.add_emitter_material(color=(0.1, 0.1, 0.1))
        fresh_scene.add_sphere((0, 0, 0), 1.0, other)
        g1, m1 = fresh_scene.add_emitter_sphere((2, 3, 0), 0.5, color=(1.0, 0.0, 0.0))

        lights = fresh_scene.get_light_geoms()
        assert [g.geom_index for g in lights] == [g0, g1]
        assert [g.light_id for g in lights] == [0, 1]
        assert (m0, m1) == (0, 2)

    def test_light_id_follows_highest_in_use(self, fresh_scene):
        """Test that an emitter sphere never reuses an explicit light id."""
        mat = fresh_scene.add_emitter_material(color=(1.0, 1.0, 1.0))
        fresh_scene.add_sphere((0, 0, 0), 1.0, mat, light_id=1)
        fresh_scene.add_emitter_sphere((2, 0, 0), 0.5, color=(2.0, 2.0, 2.0))

        assert [g.light_id for g in fresh_scene.get_light_geoms()] == [1, 2]

    def test_duplicate_light_id_rejected(self, fresh_scene):
        mat = fresh_scene.add_emitter_material(color=(1.0, 1.0, 1.0))
        fresh_scene.add_sphere((0, 0, 0), 1.0, mat, light_id=0)
        with pytest.raises(ValueError, match="Duplicate light_id"):
            fresh_scene.add_sphere((2, 0, 0), 1.0, mat, light_id=0)
        assert fresh_scene.get_geom_count() == 1
        assert len(fresh_scene.get_light_geoms()) == 1


class TestSceneClearing:
    """Tests for clearing the scene."""

    def test_clear_scene(self, fresh_scene):
        """Test that clear removes materials and primitives."""
        from raykernel.materials.emitter import get_emitter_material_count

        fresh_scene.add_emitter_sphere((0, 0, 0), 1.0, color=(1.0, 1.0, 1.0))
        fresh_scene.clear()

        assert fresh_scene.get_material_count() == 0
        assert fresh_scene.get_geom_count() == 0
        assert get_emitter_material_count() == 0
        assert fresh_scene.materials == []
        assert fresh_scene.geoms == []

    def test_new_manager_resets_tables(self, fresh_scene):
        """Test that constructing a second manager empties the shared tables."""
        from raykernel.scene.manager import SceneManager, get_material_type

        fresh_scene.add_emitter_sphere((0, 0, 0), 1.0, color=(1.0, 1.0, 1.0))
        second = SceneManager()

        assert second.get_geom_count() == 0
        assert second.get_material_count() == 0
        assert fresh_scene.get_geom_count() == 0

        types = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            types[None] = get_material_type(0)

        test_kernel()
        assert types[None] == -1


class TestCapacityInfo:
    """Tests for capacity reporting."""

    def test_capacity_methods(self, fresh_scene):
        from raykernel.scene.manager import MAX_MATERIALS
        from raykernel.scene.primitives import MAX_GEOMS

        assert fresh_scene.get_max_geoms() == MAX_GEOMS
        assert fresh_scene.get_max_materials() == MAX_MATERIALS


class TestMaterialDispatchIntegration:
    """Tests for propagate() called from a kernel."""

    def test_propagate_dispatch(self, fresh_scene):
        """Test that a hit on an emitter sphere terminates with its color."""
        from raykernel.core.intersection import is_hit
        from raykernel.core.ray import Ray, is_zero_length, make_white_light_ray, vec3
        from raykernel.geometry.geom import intersect_geom
        from raykernel.scene.manager import propagate
        from raykernel.scene.primitives import load_geom

        fresh_scene.add_emitter_material(color=(9.0, 9.0, 9.0))
        geom_index, _ = fresh_scene.add_emitter_sphere((0, 0, -3), 1.0, color=(0.2, 0.4, 0.6))

        hit = ti.field(dtype=ti.i32, shape=())
        terminated = ti.field(dtype=ti.i32, shape=())
        color = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(idx: ti.i32):
            geom = load_geom(idx)
            ray = Ray(origin=vec3(0.0), direction=vec3(0.0, 0.0, -1.0))
            isect = intersect_geom(ray, geom)
            hit[None] = is_hit(isect)
            incoming = make_white_light_ray(ray.origin, ray.direction)
            out = propagate(geom.material_id, incoming, isect)
            terminated[None] = is_zero_length(out)
            color[None] = out.color

        test_kernel(geom_index)
        assert hit[None] == 1
        assert terminated[None] == 1
        assert np.allclose(color[None].to_numpy(), [0.2, 0.4, 0.6], atol=1e-6)

    def test_propagate_invalid_material(self, fresh_scene):
        """Test that an unknown material ID yields a dead light ray."""
        from raykernel.core.intersection import miss_intersection
        from raykernel.core.ray import is_black, is_zero_length, make_white_light_ray, vec3
        from raykernel.scene.manager import propagate

        flags = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            incoming = make_white_light_ray(vec3(0.0), vec3(0.0, 0.0, 1.0))
            out = propagate(42, incoming, miss_intersection())
            flags[0] = is_black(out)
            flags[1] = is_zero_length(out)

        test_kernel()
        assert flags.to_numpy().tolist() == [1, 1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
