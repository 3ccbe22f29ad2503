"""
Identifier-keyed collection of live particles.

The registry owns a ParticlePool and maps monotonically increasing integer
identifiers to pool slots. Identifiers are never reused, even after their
particle is removed; pool slots are.
"""

import numpy as np

from .. import constants as cte
from ..errors import AllocationError
from ..pool import ParticlePool
from .particle import Particle


class ParticleRegistry:
    """
    Live particle population on top of a ParticlePool.

    Attributes:
        pool (ParticlePool): Storage for every live particle

    Usage:
        registry = ParticleRegistry()
        pid, particle = registry.spawn()
        particle.volume = 2.0

        for pid, particle in registry.iterate():
            ...

        registry.remove(pid)
    """

    def __init__(self, pool = None):
        self.pool = ParticlePool() if pool is None else pool
        self._slots = {}  # id -> Slot
        self._next_id = 0

    @property
    def next_id(self) -> int:
        return self._next_id

    def spawn(self):
        """
        Create a particle in a fresh slot under the next identifier.

        Returns:
            tuple: (identifier, Particle) where the particle is ready to be
                initialised by the caller

        Raises:
            AllocationError: If no slot can be allocated. The registry and the
                pool are unchanged and the identifier is not consumed.
        """
        slot = self.pool.allocate()
        pid = self._next_id
        try:
            self._slots[pid] = slot
        except MemoryError as e:
            self.pool.release(slot)
            raise AllocationError("Could not register a new particle") from e
        self._next_id += 1
        return pid, Particle(self.pool, slot)

    def get(self, pid):
        """Particle for a live identifier, or None."""
        slot = self._slots.get(pid)
        if slot is None:
            return None
        return Particle(self.pool, slot)

    def remove(self, pid):
        """
        Remove a particle and return its slot to the pool.

        Removing an unknown or already removed identifier is a no-op.
        """
        slot = self._slots.pop(pid, None)
        if slot is not None:
            self.pool.release(slot)

    def iterate(self):
        """
        Lazily traverse all live (identifier, Particle) pairs, each exactly once.

        Order is unspecified. Entries removed while the traversal is running
        are skipped once their removal has happened.
        """
        for pid, slot in list(self._slots.items()):
            if self._slots.get(pid) is slot:
                yield pid, Particle(self.pool, slot)

    def __iter__(self):
        return self.iterate()

    def __len__(self):
        return len(self._slots)

    def __contains__(self, pid):
        return pid in self._slots

    def count(self) -> int:
        return len(self._slots)

    def clear(self):
        """Remove every particle. The identifier counter is not reset."""
        for slot in self._slots.values():
            self.pool.release(slot)
        self._slots.clear()

    def live_arrays(self):
        """
        Identifiers and slot indices of all live particles, in traversal order.

        Returns:
            tuple: (ids as int64 array, slot indices as contiguous int32 array)
        """
        n = len(self._slots)
        ids = np.fromiter(self._slots.keys(), dtype = np.int64, count = n)
        slots = np.fromiter((s.index for s in self._slots.values()), dtype = np.int32, count = n)
        return ids, slots

    def render_points(self, heightfield):
        """
        Points at which a renderer should draw the live particles.

        Each particle inside the field is placed slightly above the surface of
        its cell; particles outside the field are skipped.

        Args:
            heightfield (HeightField): Field the particles move on

        Returns:
            np.ndarray: float32 array of shape (N, 3) with (x, y, height)
        """
        _, slots = self.live_arrays()
        if slots.size == 0:
            return np.zeros((0, 3), dtype = np.float32)

        pos = self.pool.position[slots]
        idx = heightfield.cell_indices_of(pos)
        inside = idx >= 0

        points = np.empty((int(inside.sum()), 3), dtype = np.float32)
        points[:, :2] = pos[inside, :2]
        points[:, 2] = heightfield.heights[idx[inside]] + cte.PARTICLE_RENDER_OFFSET * heightfield.cell_size
        return points
