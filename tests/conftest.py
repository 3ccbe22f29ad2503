import numpy as np
import pytest

import pyerosion as pe
from pyerosion.grid import HeightField, HeightFieldModel, Rect


@pytest.fixture(scope = "session", autouse = True)
def taichi_env():
	# One Taichi runtime for the whole session: a second ti.init would free every field
	pe.environment.initialise(random_seed = 0)
	yield


@pytest.fixture
def field10():
	"""10 x 10 field of unit cells at the origin."""
	hf = HeightField(HeightFieldModel.DOME, Rect(0., 0., 10., 10.), 1.)
	yield hf
	hf.destroy()


@pytest.fixture
def make_engine():
	"""Factory for running engines; every engine built is destroyed at teardown."""
	engines = []

	def _make(world_rect = (0., 0., 10., 10.), cell_size = 1., seed = 0, **params):
		params.setdefault("paused", False)
		p = pe.erosion.ErosionParams(**params)
		engine = pe.erosion.ErosionEngine(world_rect = world_rect, params = p, cell_size = cell_size, seed = seed)
		engines.append(engine)
		return engine

	yield _make
	for engine in engines:
		engine.destroy()


def ramp_heights(n_rows, n_cols, base = 1., slope = 0.1):
	"""Heights rising along x (columns): base + slope * col."""
	col = np.arange(n_cols, dtype = np.float32)
	return np.tile(base + slope * col, (n_rows, 1))
