"""
Particle spawning strategies.

A spawner turns a random source into the initial state of a new droplet: a
random volume in (0, max_volume], a downward velocity with small Gaussian
jitter in the horizontal plane, and a random horizontal position. The
variants differ only in where droplets fall.

Available Spawners:
- WORLD: Uniform over the whole world rectangle
- BOX: Uniform over a fixed 1 x 1 box offset by 1.5 from the world origin,
  which sits on top of the default height models
"""

import enum
from typing import NamedTuple

import numpy as np

from .. import constants as cte
from ..general_algorithms import sample_unit_gaussian, uniform_open_closed
from .particle import ParticleState


class SpawnContext(NamedTuple):
	"""
	World information a spawner needs.

	Attributes:
		world_rect (Rect): Simulation rectangle (x, y, w, h)
		max_volume (float): Upper bound of the spawn volume
	"""
	world_rect: tuple
	max_volume: float


class ParticleSpawner(enum.IntEnum):
	"""Closed set of spawning strategies."""

	WORLD = 0
	BOX = 1

	@classmethod
	def coerce(cls, value):
		"""
		Convert a member, its integer value or its (case-insensitive) name to a member.

		Raises:
			ValueError: If the value does not name a spawner
		"""
		if isinstance(value, cls):
			return value
		if isinstance(value, str):
			try:
				return cls[value.strip().upper()]
			except KeyError:
				raise ValueError(f"Unknown particle spawner '{value}'. Available: {[m.name.lower() for m in cls]}") from None
		return cls(value)

	def spawn(self, rng, ctx):
		"""
		Draw the initial state of a new particle.

		Args:
			rng (np.random.Generator): Random source
			ctx (SpawnContext): World rectangle and maximum volume

		Returns:
			ParticleState: Fresh particle with no sediment
		"""
		# Falling straight down, jittered horizontally
		z = sample_unit_gaussian(rng)
		velocity = np.array([
			z[0] * cte.SPAWN_VELOCITY_STD,
			z[1] * cte.SPAWN_VELOCITY_STD,
			-1.,
		], dtype = np.float32)

		# Random volume, hence random mass
		volume = float(uniform_open_closed(rng)) * ctx.max_volume

		x0, y0, w, h = ctx.world_rect
		if self is ParticleSpawner.WORLD:
			x = rng.random() * w + x0
			y = rng.random() * h + y0
		else:
			x = rng.random() * cte.BOX_SPAWN_SIZE + x0 + cte.BOX_SPAWN_OFFSET
			y = rng.random() * cte.BOX_SPAWN_SIZE + y0 + cte.BOX_SPAWN_OFFSET

		return ParticleState(
			position = np.array([x, y, cte.SPAWN_HEIGHT], dtype = np.float32),
			velocity = velocity,
			volume = volume,
			sediment = 0.,
		)
