"""Scene module for primitive and material tables.

Components:
    primitives: Taichi-field storage for planes, discs and spheres
    manager: Unified material IDs, material dispatch and the SceneManager
    queries: Python-scope intersection, bounds, sampling and shading queries

The scene owns materials and area-light descriptors; primitives refer to
them by id. Tables are written from Python scope while building the scene
and are read-only while kernels run.
"""

from .manager import (
    MAX_MATERIALS,
    GeomInfo,
    MaterialInfo,
    MaterialType,
    SceneManager,
    get_material_type,
    get_material_type_index,
    propagate,
)
from .primitives import (
    MAX_GEOMS,
    add_disc,
    add_plane,
    add_sphere,
    clear_primitives,
    get_geom_count,
    get_geom_kind,
    load_geom,
)
from .queries import (
    area,
    bounds,
    intersect,
    intersect_shadow,
    propagate_color,
    sample_point,
)

__all__ = [
    # Primitives
    "MAX_GEOMS",
    "add_plane",
    "add_disc",
    "add_sphere",
    "clear_primitives",
    "get_geom_count",
    "get_geom_kind",
    "load_geom",
    # Manager
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "GeomInfo",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "propagate",
    # Queries
    "intersect",
    "intersect_shadow",
    "bounds",
    "sample_point",
    "area",
    "propagate_color",
]
