"""Taichi ray-intersection and light-transport kernel.

This package provides the per-ray building blocks of a Monte Carlo renderer,
written as Taichi functions that inline into the integrator's kernels:
- Epsilon-aware numeric predicates shared by every primitive
- Rays, light rays, intersection records and bounding boxes
- Geometric primitives (planes, discs, spheres) with intersection, bounds
  and area-light sampling
- An emitter material that terminates light paths

Subpackages:
    core: Numeric predicates, ray algebra, intersection records, boxes, sampling
    geometry: Primitive definitions and the tagged Geom variant
    materials: Material models
    scene: Primitive and material tables, dispatch and Python-side queries
"""

__version__ = "0.1.0"
