import pytest

from pyerosion.erosion import EngineStats, ErosionParams
from pyerosion.grid import HeightFieldModel
from pyerosion.particles import ParticleSpawner


def test_defaults():
	p = ErosionParams()
	assert p.paused
	assert p.mass_transfer
	assert p.heightfield_model is HeightFieldModel.DOME
	assert p.spawner is ParticleSpawner.BOX
	assert p.particles_per_step == 64
	assert p.fluid_density == 1000.


def test_enum_fields_accept_names():
	p = ErosionParams(heightfield_model = "ridge", spawner = "world")
	assert p.heightfield_model is HeightFieldModel.RIDGE
	assert p.spawner is ParticleSpawner.WORLD


@pytest.mark.parametrize("field,value", [
	("particles_per_step", -1),
	("particles_per_step", 2.5),
	("max_particle_volume", 0.),
	("fluid_density", -3.),
	("min_particle_volume", -0.1),
	("surface_friction", -1.),
	("surface_roughness", float("nan")),
	("deposition_rate", -0.1),
	("dissolution_rate", -0.1),
	("evaporation_rate", -0.1),
	("heightfield_model", "volcano"),
	("spawner", "cloud"),
])
def test_invalid_values_are_rejected(field, value):
	with pytest.raises(ValueError):
		ErosionParams(**{field: value})

	p = ErosionParams()
	setattr(p, field, value)
	with pytest.raises(ValueError):
		p.validate()


def test_update():
	p = ErosionParams()
	p.update(paused = False, particles_per_step = 8, heightfield_model = "pyramid")
	assert not p.paused
	assert p.particles_per_step == 8
	assert p.heightfield_model is HeightFieldModel.PYRAMID

	with pytest.raises(ValueError):
		p.update(viscosity = 2.)


def test_dict_round_trip():
	p = ErosionParams(spawner = "world", evaporation_rate = 0.01)
	d = p.to_dict()
	assert d["spawner"] == "world"
	assert d["heightfield_model"] == "dome"
	assert ErosionParams.from_dict(d) == p

	with pytest.raises(ValueError):
		ErosionParams.from_dict({"gravity": 9.81})


def test_stats_start_at_zero():
	assert EngineStats() == EngineStats(0., 0, 0)
