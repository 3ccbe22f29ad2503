"""
Random sampling helpers.

Gaussian noise is produced with the Box-Muller transform over pairs of
uniform draws from a numpy.random.Generator, so every stochastic term of a
simulation derives from the engine's single seeded generator.

Available Functions:
    - uniform_open_closed: Uniform samples in (0, 1]
    - sample_unit_gaussian: Pairs of independent standard normal samples
"""

import numpy as np


def uniform_open_closed(rng, size = None):
	"""
	Uniform samples in (0, 1].

	Generator.random draws from [0, 1); reflecting the interval excludes 0,
	which keeps logarithms and volumes finite and positive.
	"""
	return 1. - rng.random(size)


def sample_unit_gaussian(rng, size = None):
	"""
	Draw pairs of independent standard normal samples (Box-Muller transform).

	Args:
		rng (np.random.Generator): Random source
		size (int, optional): Number of pairs. Default: a single pair

	Returns:
		np.ndarray: Shape (2,) when size is None, (size, 2) otherwise
	"""
	u1 = uniform_open_closed(rng, size)
	u2 = rng.random(size)

	r = np.sqrt(-2. * np.log(u1))
	theta = 2. * np.pi * u2

	return np.stack((r * np.cos(theta), r * np.sin(theta)), axis = -1)
