"""
Headless erosion run: step the engine, print statistics, and save the final
height field to a .npy file.
"""
import logging

import numpy as np
import taichi as ti

import pyerosion as pe


N_STEPS = 600
DT = 1.
SEED = 42
PRINT_EVERY = 100

pe.logging_config.setup_logging(logging.INFO)
pe.environment.initialise(ti.cpu)

params = pe.erosion.ErosionParams(
	paused = False,
	heightfield_model = "ridge",
	spawner = "world",
	particles_per_step = 256,
)
engine = pe.erosion.ErosionEngine(params = params, seed = SEED)

z0 = engine.heightfield.heights_2d

for it in range(N_STEPS):
	engine.step(DT)

	if(it % PRINT_EVERY == 0):
		s = engine.stats
		print(f"step {it}: {s.particles_active} active, {s.particles_killed} killed, {s.step_time_ms:.2f} ms")

snap = engine.snapshot()
dz = snap["heights"] - z0
print(f"Eroded {-dz[dz < 0].sum() * engine.heightfield.cell_size**2:.4f}, deposited {dz[dz > 0].sum() * engine.heightfield.cell_size**2:.4f}")

np.save("eroded_ridge.npy", snap["heights"])
engine.destroy()
