"""
High-level ErosionEngine class driving the droplet simulation.

The engine owns the height field, the particle registry (and through it the
particle pool), one seeded random generator and the tunable parameters. A
host calls step(dt) once per frame and reads snapshots in between; nothing
else mutates simulation state.
"""

import dataclasses
import logging
import time

import numpy as np

from .. import constants as cte
from ..errors import AllocationError
from ..general_algorithms import sample_unit_gaussian
from ..grid import HeightField, Rect
from ..particles import ParticleRegistry, SpawnContext
from ..pool import ParticlePool
from . import kernels
from .params import EngineStats, ErosionParams

logger = logging.getLogger(__name__)


class ErosionEngine:
	"""
	Steppable particle-based hydraulic erosion simulation.

	States:
		paused: step() only applies configuration changes
		running: step() spawns, advances, and culls particles

	Configuration (self.params) may be edited freely between steps. At the
	start of each step the engine compares the requested height model and
	spawner with the active ones; a model change remaps the field and clears
	the particles and statistics in the same step, even when paused.

	Attributes:
		world_rect (Rect): Simulation rectangle
		params (ErosionParams): Requested configuration
		heightfield_model (HeightFieldModel): Active height model
		spawner (ParticleSpawner): Active spawning strategy
		heightfield (HeightField): Terrain
		registry (ParticleRegistry): Live particles
		rng (np.random.Generator): Random source of every stochastic term
		seed (int): Seed of rng
	"""

	def __init__(self, world_rect = None, params = None, cell_size:float = cte.CELL_SIZE,
		seed = None, pool_capacity:int = cte.POOL_INIT_CAPACITY):
		"""
		Build the terrain and an empty particle population.

		Args:
			world_rect (Rect | tuple, optional): Simulation rectangle.
				Default: (WORLD_X, WORLD_Y, WORLD_W, WORLD_H)
			params (ErosionParams, optional): Initial configuration; its height
				model and spawner become the active ones. Default: ErosionParams()
			cell_size (float, optional): Height field cell size. Default: CELL_SIZE
			seed (int, optional): Random seed. Default: fresh OS entropy
			pool_capacity (int, optional): Initial particle arena size

		Raises:
			ValueError: On invalid geometry or parameters
			AllocationError: If the height field or particle arena cannot be allocated
		"""
		if world_rect is None:
			world_rect = Rect(cte.WORLD_X, cte.WORLD_Y, cte.WORLD_W, cte.WORLD_H)
		self.world_rect = Rect(*world_rect)

		self.params = ErosionParams() if params is None else params
		self.params.validate()

		if seed is None:
			seed = np.random.SeedSequence().entropy
		self.seed = seed
		self.rng = np.random.default_rng(seed)
		logger.debug("Simulation RNG seed: %d", seed)

		self.heightfield_model = self.params.heightfield_model
		self.spawner = self.params.spawner

		self.heightfield = HeightField(self.heightfield_model, self.world_rect, cell_size)
		self.registry = ParticleRegistry(ParticlePool(pool_capacity))
		self._stats = EngineStats()

		logger.info("Erosion engine ready: %dx%d cells, model %s, spawner %s",
			self.heightfield.num_rows, self.heightfield.num_cols,
			self.heightfield_model.name.lower(), self.spawner.name.lower())

	@property
	def stats(self):
		"""Copy of the current statistics."""
		return dataclasses.replace(self._stats)

	@property
	def is_paused(self):
		return bool(self.params.paused)

	def reset(self):
		"""Remap the field under the active model and drop every particle and statistic."""
		self.heightfield.remap(self.heightfield_model)
		self.registry.clear()
		self._stats.particles_active = 0
		self._stats.particles_killed = 0

	def step(self, dt:float):
		"""
		Advance the simulation by one frame.

		Args:
			dt (float): Time step, non-negative

		Raises:
			ValueError: On invalid parameters or a negative time step
			AllocationError: If spawning cannot obtain storage. Particles spawned
				before the failure stay registered; nothing is left half-built.
		"""
		self.params.validate()
		self._apply_config()
		if self.params.paused:
			return

		if not dt >= 0:
			raise ValueError(f"dt must be non-negative, got {dt}")

		start = time.perf_counter()

		try:
			self._spawn()
		except AllocationError:
			self._stats.particles_active = self.registry.count()
			raise
		killed = self._advance(float(dt))

		self._stats.particles_killed += killed
		self._stats.particles_active = self.registry.count()

		# Exponential moving average
		elapsed_ms = (time.perf_counter() - start) * 1e3
		self._stats.step_time_ms = cte.STATS_SMOOTHING * self._stats.step_time_ms + (1. - cte.STATS_SMOOTHING) * elapsed_ms

	def _apply_config(self):
		requested = self.params.heightfield_model
		if requested != self.heightfield_model:
			logger.info("Height field model changed: %s -> %s", self.heightfield_model.name.lower(), requested.name.lower())
			self.heightfield_model = requested
			self.reset()

		if self.params.spawner != self.spawner:
			logger.info("Particle spawner changed: %s -> %s", self.spawner.name.lower(), self.params.spawner.name.lower())
			self.spawner = self.params.spawner

	def _spawn(self):
		ctx = SpawnContext(self.world_rect, self.params.max_particle_volume)
		for _ in range(int(self.params.particles_per_step)):
			_, particle = self.registry.spawn()
			particle.load(self.spawner.spawn(self.rng, ctx))

	def _advance(self, dt):
		"""
		Run the advance kernel over every live particle and cull the flagged ones.

		Returns:
			int: Number of particles culled
		"""
		n = self.registry.count()
		if n == 0:
			return 0

		ids, slots = self.registry.live_arrays()
		gauss = np.ascontiguousarray(sample_unit_gaussian(self.rng, n), dtype = np.float32)
		unif = self.rng.random(n, dtype = np.float32)
		cull = np.zeros(n, dtype = np.int32)

		pool = self.registry.pool
		hf = self.heightfield
		p = self.params
		kernels.advance_particles(
			hf.z, slots,
			pool.position, pool.velocity, pool.volume, pool.sediment,
			gauss, unif, cull,
			n, dt,
			hf.x0, hf.y0, hf.cell_size, hf.num_rows, hf.num_cols,
			p.fluid_density, p.surface_friction, p.surface_roughness,
			p.deposition_rate, p.dissolution_rate, p.evaporation_rate,
			p.min_particle_volume, int(bool(p.mass_transfer)),
		)

		# Removal waits until the pass is over so the registry is never mutated mid-traversal
		culled = ids[cull != 0]
		for pid in culled:
			self.registry.remove(int(pid))
		return int(culled.size)

	def snapshot(self):
		"""
		Read-only copy of the state a renderer needs.

		Returns:
			dict: heights (np.ndarray, (rows, cols)), particles (np.ndarray,
				(N, 3) render points), stats (EngineStats)
		"""
		return {
			"heights": self.heightfield.heights_2d,
			"particles": self.registry.render_points(self.heightfield),
			"stats": self.stats,
		}

	def destroy(self):
		"""Free the height field storage. The engine must not be stepped afterwards."""
		self.heightfield.destroy()
		self.registry.clear()
