"""
Droplet particles for PyErosion.

This submodule defines the particles that erode the height field, how new
ones are created, and the registry that tracks the live population.

Core Classes:
- Particle: Handle to a particle stored in a pool slot (stale-safe)
- ParticleState: Detached particle values (position, velocity, volume, sediment)
- ParticleRegistry: Live particles keyed by never-reused integer identifiers
- ParticleSpawner: Closed set of spawning strategies (WORLD, BOX)
- SpawnContext: World rectangle and maximum volume handed to a spawner

Usage:
    import numpy as np
    import pyerosion as pe

    rng = np.random.default_rng(0)
    registry = pe.particles.ParticleRegistry()
    ctx = pe.particles.SpawnContext(pe.grid.Rect(0, 0, 5, 5), max_volume = 5.)

    pid, particle = registry.spawn()
    particle.load(pe.particles.ParticleSpawner.BOX.spawn(rng, ctx))

    for pid, particle in registry.iterate():
        print(pid, particle.position, particle.volume)
"""

from .particle import Particle, ParticleState
from .registry import ParticleRegistry
from .spawners import ParticleSpawner, SpawnContext

__all__ = [
    "Particle",
    "ParticleState",
    "ParticleRegistry",
    "ParticleSpawner",
    "SpawnContext",
]
