"""
General Algorithms Module

Host-side helpers shared by the particle spawners and the erosion engine.

Available Algorithms:
    - sampling: Box-Muller Gaussian pairs and (0, 1] uniform draws from a
      numpy.random.Generator

Example Usage:
    ```python
    import numpy as np
    from pyerosion.general_algorithms import sample_unit_gaussian

    rng = np.random.default_rng(42)
    z1, z2 = sample_unit_gaussian(rng)          # one pair
    noise = sample_unit_gaussian(rng, 1000)     # shape (1000, 2)
    ```
"""

from .sampling import sample_unit_gaussian, uniform_open_closed

__all__ = [
    'sample_unit_gaussian',
    'uniform_open_closed',
]
