"""
Droplet particle handle and value types.

A live particle is a slot in a ParticlePool. Particle is a thin handle that
reads and writes that slot; ParticleState is a detached value (what a spawner
produces, or a copy taken for inspection).
"""

from dataclasses import dataclass, field

import numpy as np

from ..errors import StaleHandleError


@dataclass
class ParticleState:
	"""
	Detached particle values.

	Attributes:
		position (np.ndarray): (x, y, height); the height component is only
			spawn bookkeeping, particles are snapped to the surface when advanced
		velocity (np.ndarray): (vx, vy, vz)
		volume (float): Fluid volume, mass is volume * fluid density
		sediment (float): Dissolved material carried
	"""
	position: np.ndarray = field(default_factory = lambda: np.zeros(3, dtype = np.float32))
	velocity: np.ndarray = field(default_factory = lambda: np.zeros(3, dtype = np.float32))
	volume: float = 1.
	sediment: float = 0.


class Particle:
	"""
	Mutable handle to a particle stored in a pool slot.

	Every access checks that the slot has not been released since the handle
	was created and raises StaleHandleError otherwise. `position` and
	`velocity` return writable views into the pool arena; do not keep them
	across a step, the arena may be reallocated when it grows.
	"""

	__slots__ = ("_pool", "_slot")

	def __init__(self, pool, slot):
		self._pool = pool
		self._slot = slot

	@property
	def slot(self):
		return self._slot

	@property
	def is_valid(self):
		return self._pool.is_live(self._slot)

	def _index(self):
		if not self._pool.is_live(self._slot):
			raise StaleHandleError(f"Particle slot {self._slot} was released")
		return self._slot.index

	@property
	def position(self):
		return self._pool.position[self._index()]

	@position.setter
	def position(self, value):
		self._pool.position[self._index()] = value

	@property
	def velocity(self):
		return self._pool.velocity[self._index()]

	@velocity.setter
	def velocity(self, value):
		self._pool.velocity[self._index()] = value

	@property
	def volume(self):
		return float(self._pool.volume[self._index()])

	@volume.setter
	def volume(self, value):
		self._pool.volume[self._index()] = value

	@property
	def sediment(self):
		return float(self._pool.sediment[self._index()])

	@sediment.setter
	def sediment(self, value):
		self._pool.sediment[self._index()] = value

	def load(self, state):
		"""Overwrite this particle with the values of a ParticleState."""
		i = self._index()
		self._pool.position[i] = state.position
		self._pool.velocity[i] = state.velocity
		self._pool.volume[i] = state.volume
		self._pool.sediment[i] = state.sediment

	def state(self):
		"""Copy of the particle values as a ParticleState."""
		i = self._index()
		return ParticleState(
			position = self._pool.position[i].copy(),
			velocity = self._pool.velocity[i].copy(),
			volume = float(self._pool.volume[i]),
			sediment = float(self._pool.sediment[i]),
		)

	def __eq__(self, other):
		if not isinstance(other, Particle):
			return NotImplemented
		return self._pool is other._pool and self._slot == other._slot

	def __hash__(self):
		return hash((id(self._pool), self._slot))

	def __repr__(self):
		if not self.is_valid:
			return f"Particle(slot={self._slot}, released)"
		s = self.state()
		return f"Particle(pos={s.position.tolist()}, vel={s.velocity.tolist()}, volume={s.volume:.4g}, sediment={s.sediment:.4g})"
