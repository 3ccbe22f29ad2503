"""
Particle Slot Pool Module

Reusable storage for droplet particles. The pool owns a structure-of-arrays
arena (positions, velocities, volumes, sediments) that grows by doubling and
never shrinks, plus a LIFO free list of released slots. Allocation pops the
most recently released slot, or carves the next untouched slot from the
arena when the free list is empty.

Slots are handed out as (index, generation) pairs. Releasing a slot bumps its
generation, so any handle kept past a release is detected as stale instead of
silently aliasing the next particle that reuses the storage.

The arena arrays are plain contiguous NumPy arrays, which the erosion kernels
receive directly as Taichi ndarray arguments. Growing the arena replaces the
arrays; array views taken before a growth no longer alias the pool.
"""

import logging
from typing import NamedTuple

import numpy as np

from .. import constants as cte
from ..errors import AllocationError

logger = logging.getLogger(__name__)


class Slot(NamedTuple):
    """
    Handle to one checked-out particle slot.

    Attributes:
        index: Position of the slot in the arena arrays
        generation: Generation of the slot when it was allocated
    """
    index: int
    generation: int


class ParticlePool:
    """
    Free-list allocator over a growable particle arena.

    Attributes:
        position: Positions, float32 array of shape (capacity, 3)
        velocity: Velocities, float32 array of shape (capacity, 3)
        volume: Volumes, float32 array of shape (capacity,)
        sediment: Carried sediment, float32 array of shape (capacity,)
        generation: Per-slot generation counters, int64 array of shape (capacity,)

    Usage:
        pool = ParticlePool(capacity = 256)
        slot = pool.allocate()
        pool.volume[slot.index] = 2.0
        pool.release(slot)
        assert pool.allocate().index == slot.index   # LIFO reuse
    """

    def __init__(self, capacity: int = cte.POOL_INIT_CAPACITY):
        """
        Create a pool with storage for `capacity` slots.

        No slot is checked out initially; slots are carved on demand.

        Args:
            capacity: Initial arena size (at least 1)

        Raises:
            AllocationError: If the initial arena cannot be allocated
        """
        capacity = max(1, int(capacity))
        self._free = []  # stack of released slot indices, top = next reused
        self._carved = 0  # slots [0, _carved) have been handed out at least once

        try:
            self.position = np.zeros((capacity, 3), dtype = np.float32)
            self.velocity = np.zeros((capacity, 3), dtype = np.float32)
            self.volume = np.zeros(capacity, dtype = np.float32)
            self.sediment = np.zeros(capacity, dtype = np.float32)
            self.generation = np.zeros(capacity, dtype = np.int64)
            self._in_use = np.zeros(capacity, dtype = bool)
        except MemoryError as e:
            raise AllocationError(f"Could not allocate particle arena of {capacity} slots") from e

    @property
    def capacity(self) -> int:
        return self.volume.shape[0]

    def allocate(self) -> Slot:
        """
        Check out one slot.

        Reuses the most recently released slot when there is one, otherwise
        carves a new slot from the arena, growing it if full. The slot is
        reset to a resting particle of volume 1 and no sediment.

        Returns:
            Slot: Handle to the checked-out slot

        Raises:
            AllocationError: If the arena is full and cannot grow
        """
        if self._free:
            index = self._free.pop()
        else:
            if self._carved == self.capacity:
                self._grow()
            index = self._carved
            self._carved += 1

        self._in_use[index] = True
        self.position[index] = 0.
        self.velocity[index] = 0.
        self.volume[index] = 1.
        self.sediment[index] = 0.
        return Slot(index, int(self.generation[index]))

    def release(self, slot: Slot):
        """
        Return a slot to the free list.

        The slot's generation is bumped, invalidating every outstanding handle
        to it.

        Raises:
            ValueError: If the slot is not currently checked out by this handle
        """
        if not self.is_live(slot):
            raise ValueError(f"Slot {slot} is not checked out")

        index = slot.index
        self._in_use[index] = False
        self.generation[index] += 1
        self._free.append(index)

    def is_live(self, slot: Slot) -> bool:
        """True if `slot` is checked out and no release happened since."""
        index = slot.index
        return (0 <= index < self._carved
                and bool(self._in_use[index])
                and int(self.generation[index]) == slot.generation)

    def _grow(self):
        """
        Double the arena, keeping every existing slot at its index.

        Raises:
            AllocationError: If the larger arrays cannot be allocated. The pool
                is left untouched in that case.
        """
        old = self.capacity
        new = 2 * old
        try:
            grown = {}
            for name in ("position", "velocity", "volume", "sediment", "generation", "_in_use"):
                arr = getattr(self, name)
                big = np.zeros((new,) + arr.shape[1:], dtype = arr.dtype)
                big[:old] = arr
                grown[name] = big
        except MemoryError as e:
            logger.error("Particle arena cannot grow beyond %d slots", old)
            raise AllocationError(f"Particle arena cannot grow beyond {old} slots") from e

        # Swap only once every array was allocated
        for name, big in grown.items():
            setattr(self, name, big)
        logger.debug("Particle arena grown from %d to %d slots", old, new)

    def stats(self) -> dict:
        """
        Get pool usage statistics.

        Returns:
            dict: Statistics containing:
                - total: Number of slots carved so far
                - in_use: Number of slots currently checked out
                - available: Number of released slots waiting for reuse
                - capacity: Arena size
        """
        available = len(self._free)
        return {
            "total": self._carved,
            "in_use": self._carved - available,
            "available": available,
            "capacity": self.capacity,
        }
