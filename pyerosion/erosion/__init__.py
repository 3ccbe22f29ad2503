"""
Particle-based hydraulic erosion submodule for PyErosion.

This submodule drives the simulation: droplets are spawned over the terrain,
slide down the height gradient, dissolve terrain when they can carry more
sediment and deposit it when they carry too much, evaporate, and are culled
when they leave the field, stop moving, reach bare ground or dry up.

Core Classes:
- ErosionEngine: Owns terrain, particles, random source and parameters; step(dt)
- ErosionParams: Hot-swappable configuration (validated every step)
- EngineStats: Step time moving average, active and killed particle counts

Kernels:
- advance_particles: Serialized per-particle update over the height field

Physical Background:
Each droplet obeys F = m a on the surface, with the force given by the height
gradient and the mass by volume * fluid density. Its equilibrium sediment
capacity is volume * speed * height drop over the step; the difference with
the carried sediment drives dissolution (under capacity) or deposition (over
capacity) at the rates set in ErosionParams.

Usage:
    import taichi as ti
    import pyerosion as pe

    ti.init(ti.cpu)

    engine = pe.erosion.ErosionEngine(seed = 42)
    engine.params.update(paused = False, particles_per_step = 128)

    for frame in range(1000):
        engine.step(dt = 1.0)

    terrain = engine.heightfield.heights_2d
    print(engine.stats)

    # Switching model resets terrain, particles and statistics on the next step
    engine.params.heightfield_model = "ridge"
    engine.step(1.0)
"""

from .params import ErosionParams, EngineStats
from .engine import ErosionEngine
from .kernels import advance_particles

__all__ = [
    "ErosionEngine",
    "ErosionParams",
    "EngineStats",
    "advance_particles",
]
