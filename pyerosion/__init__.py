"""
PyErosion - particle-based hydraulic erosion of height fields.

A Python package simulating hydraulic erosion with discrete fluid droplets.
Droplets fall on a height field, slide down its gradient, dissolve and carry
material, deposit it where they slow down, and evaporate. Terrain updates run
in Taichi kernels; particle storage is a pooled NumPy arena so that tens of
thousands of droplets can be created and destroyed every frame without
per-particle allocation.

Key Features:
- Row-major height field with half-open cell lookup and boundary-safe gradients
- Procedural height models (dome, ellipsoid, ridge, pyramid, block)
- Pooled particle storage with LIFO slot reuse and stale-handle detection
- Identifier-keyed particle registry with deferred culling
- World and box spawners driven by one seeded random generator
- Capacity-based dissolution/deposition, evaporation, friction and roughness
- Hot-swappable parameters, pause state and model/spawner switching
- Read-only snapshots (heights, particle render points, statistics) for hosts

Core Components:
- grid: HeightField, HeightFieldModel, Taichi grid helpers
- pool: ParticlePool particle slot allocator
- particles: Particle handles, spawners and the ParticleRegistry
- erosion: ErosionEngine, ErosionParams, advance kernel
- general_algorithms: Random sampling helpers (Box-Muller)
- constants: Default parameters and numerical thresholds
- environment: Taichi initialisation helpers

Basic Usage:
    import pyerosion as pe

    pe.environment.initialise()             # ti.init on the CPU backend

    engine = pe.erosion.ErosionEngine(seed = 0)
    engine.params.paused = False

    for frame in range(600):
        engine.step(1.0)
        snap = engine.snapshot()            # heights, particle points, stats

Rendering, windowing, GUI and persistence are left to the host application.
"""

__version__ = "0.1.0"

# Import all submodules in alphabetical order
from . import constants
from . import environment
from . import erosion
from . import errors
from . import general_algorithms
from . import grid
from . import logging_config
from . import particles
from . import pool

from .errors import AllocationError, StaleHandleError

# Export all submodules
__all__ = [
    "AllocationError",
    "StaleHandleError",
    "constants",
    "environment",
    "erosion",
    "errors",
    "general_algorithms",
    "grid",
    "logging_config",
    "particles",
    "pool",
]
