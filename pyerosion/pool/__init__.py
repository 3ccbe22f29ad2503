"""
Particle Storage Pooling System for PyErosion.

This submodule implements the allocator behind the particle population.
Thousands of droplets are created and destroyed every second; instead of
allocating each one, the pool recycles slots of a contiguous arena so that
the erosion kernels can read and write all particles through a handful of
NumPy arrays.

Core Classes:
- ParticlePool: Free-list allocator over a growable structure-of-arrays arena
- Slot: (index, generation) handle to a checked-out slot

Key Features:
- LIFO reuse: the most recently released slot is handed out first
- Growth by doubling: the arena only grows, existing indices never move
- Stale handle detection: releasing a slot bumps its generation
- Failure safety: a failed growth raises AllocationError and leaves the pool intact

Usage Patterns:
    from pyerosion.pool import ParticlePool

    pool = ParticlePool(capacity = 1024)

    slot = pool.allocate()
    pool.position[slot.index] = (1.0, 2.0, 0.5)
    pool.volume[slot.index] = 3.0

    pool.release(slot)
    pool.is_live(slot)        # False: the handle is stale
    print(pool.stats())       # {'total': 1, 'in_use': 0, 'available': 1, 'capacity': 1024}

Most code does not use the pool directly: ParticleRegistry owns one and
exposes particles by identifier.
"""

from .pool import (
    ParticlePool,
    Slot,
)

__all__ = [
    "ParticlePool",
    "Slot",
]
