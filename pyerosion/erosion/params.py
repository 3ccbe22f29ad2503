"""
Tunable erosion parameters and engine statistics.

ErosionParams is the configuration surface a host (settings panel, script,
test) edits between steps. The engine re-validates it at the start of every
step, so any field can be changed at any time.
"""

import dataclasses
from dataclasses import dataclass

from .. import constants as cte
from ..grid import HeightFieldModel
from ..particles import ParticleSpawner


@dataclass
class ErosionParams:
	"""
	Hot-swappable erosion settings.

	Attributes:
		particles_per_step (int): Particles spawned per step
		max_particle_volume (float): Upper bound of the spawn volume
		fluid_density (float): Density turning volume into mass
		surface_friction (float): Velocity damping per unit time
		surface_roughness (float): Scale of the per-step Gaussian velocity noise
		deposition_rate (float): Settling rate when a particle is over capacity
		dissolution_rate (float): Pick-up rate when a particle is under capacity
		evaporation_rate (float): Fraction of volume lost per unit time
		min_particle_volume (float): Particles below this volume are culled
		mass_transfer (bool): Capacity-based erosion/deposition when True,
			random wear of the terrain when False
		paused (bool): When True, steps only apply configuration changes
		heightfield_model (HeightFieldModel): Requested height model; changing it
			resets the field and the particles on the next step
		spawner (ParticleSpawner): Requested spawning strategy
	"""
	particles_per_step: int = cte.PARTICLES_PER_STEP
	max_particle_volume: float = cte.MAX_PARTICLE_VOLUME
	fluid_density: float = cte.FLUID_DENSITY
	surface_friction: float = cte.SURFACE_FRICTION
	surface_roughness: float = cte.SURFACE_ROUGHNESS
	deposition_rate: float = cte.DEPOSITION_RATE
	dissolution_rate: float = cte.DISSOLUTION_RATE
	evaporation_rate: float = cte.EVAPORATION_RATE
	min_particle_volume: float = cte.MIN_PARTICLE_VOLUME
	mass_transfer: bool = True
	paused: bool = True
	heightfield_model: HeightFieldModel = HeightFieldModel.DOME
	spawner: ParticleSpawner = ParticleSpawner.BOX

	def __post_init__(self):
		self.validate()

	def validate(self):
		"""
		Check every value and normalise enum fields given as names or integers.

		Raises:
			ValueError: If a value is out of range or names no model/spawner
		"""
		self.heightfield_model = HeightFieldModel.coerce(self.heightfield_model)
		self.spawner = ParticleSpawner.coerce(self.spawner)

		if int(self.particles_per_step) != self.particles_per_step or self.particles_per_step < 0:
			raise ValueError(f"particles_per_step must be a non-negative integer, got {self.particles_per_step}")
		if not self.max_particle_volume > 0:
			raise ValueError(f"max_particle_volume must be positive, got {self.max_particle_volume}")
		if not self.fluid_density > 0:
			raise ValueError(f"fluid_density must be positive, got {self.fluid_density}")
		if not self.min_particle_volume >= 0:
			raise ValueError(f"min_particle_volume must be non-negative, got {self.min_particle_volume}")

		for name in ("surface_friction", "surface_roughness", "deposition_rate", "dissolution_rate", "evaporation_rate"):
			value = getattr(self, name)
			if not value >= 0:
				raise ValueError(f"{name} must be non-negative, got {value}")

	def update(self, **kwargs):
		"""
		Set several parameters by name and re-validate.

		Raises:
			ValueError: On unknown names or invalid values
		"""
		names = {f.name for f in dataclasses.fields(self)}
		unknown = set(kwargs) - names
		if unknown:
			raise ValueError(f"Unknown erosion parameters: {sorted(unknown)}")
		for key, value in kwargs.items():
			setattr(self, key, value)
		self.validate()

	def to_dict(self) -> dict:
		"""Plain dictionary of all parameters, enums given by lowercase name."""
		d = dataclasses.asdict(self)
		d["heightfield_model"] = self.heightfield_model.name.lower()
		d["spawner"] = self.spawner.name.lower()
		return d

	@classmethod
	def from_dict(cls, d: dict):
		"""
		Build parameters from a dictionary; missing keys take their defaults.

		Raises:
			ValueError: On unknown keys or invalid values
		"""
		names = {f.name for f in dataclasses.fields(cls)}
		unknown = set(d) - names
		if unknown:
			raise ValueError(f"Unknown erosion parameters: {sorted(unknown)}")
		return cls(**d)


@dataclass
class EngineStats:
	"""
	Engine monitoring values.

	Attributes:
		step_time_ms (float): Exponential moving average of the running step duration
		particles_active (int): Live particles after the last step
		particles_killed (int): Particles culled since the last reset
	"""
	step_time_ms: float = 0.
	particles_active: int = 0
	particles_killed: int = 0
