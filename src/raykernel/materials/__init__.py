"""Materials module.

A material turns the light ray arriving at a hit point into the outgoing
light ray:

    propagate(incoming, intersection) -> outgoing

Components:
    emitter: Light source material that terminates the path and scales the
        carried color by its own color

Material properties are stored in Taichi fields and addressed by index from
kernels.
"""

from .emitter import (
    MAX_EMITTER_MATERIALS,
    EmitterMaterial,
    add_emitter_material,
    clear_emitter_materials,
    get_emitter_color,
    get_emitter_material_count,
    propagate_emitter,
    propagate_emitter_by_id,
)

__all__ = [
    "EmitterMaterial",
    "propagate_emitter",
    "propagate_emitter_by_id",
    "add_emitter_material",
    "clear_emitter_materials",
    "get_emitter_material_count",
    "get_emitter_color",
    "MAX_EMITTER_MATERIALS",
]
