"""
Droplet advance kernel.

One call moves every live particle by one time step over the height field,
exchanges material between particles and terrain, evaporates them, and flags
the ones that must be culled. Particle storage is the ParticlePool arena,
passed as NumPy arrays; the height field is the HeightField's Taichi field.

Particles are processed strictly in order (serialized loop): a particle sees
the terrain already modified by the particles before it in the same step.
The outcome therefore depends on traversal order, but never on scheduling.

Per particle, in order:
1. Resolve its cell. Outside the field, or no volume left -> cull.
2. Cell at or below HEIGHT_EPS -> zero the cell, cull.
3. Gradient weaker than GRADIENT_EPS -> cull (the particle cannot move).
4. Newtonian motion in the plane: a = -grad(h) / (volume * density),
   v += dt * a - roughness * N(0, 1); p += dt * v; v *= 1 - dt * friction.
   The particle is snapped onto the surface of the cell it starts the tick in.
5. Mass transfer at the starting cell (see below), or random wear of the
   terrain when mass transfer is disabled.
6. Evaporation: volume *= 1 - dt * evaporation. Dry (volume <= 0), below
   the minimum volume, or moved outside the field -> cull.

Mass transfer uses an equilibrium capacity
	c_eq = max(0, volume * |v| * (h_before - h_after))
and the driving force c_eq - sediment. Under capacity the particle dissolves
terrain (sediment up, height down), over capacity it deposits (sediment down,
height up). Deposits are limited to the carried sediment and dissolution to
the available height, so sediment and heights stay non-negative and
sediment * volume + height is conserved by each exchange.

Stochastic terms are drawn on the host and passed in (gauss, unif), which
keeps a seeded engine reproducible.
"""

import taichi as ti

from .. import constants as cte
from ..grid import gridfuncs as gf


@ti.kernel
def advance_particles(
	z: ti.template(),
	slots: ti.types.ndarray(dtype = ti.i32, ndim = 1),
	pos: ti.types.ndarray(dtype = ti.f32, ndim = 2),
	vel: ti.types.ndarray(dtype = ti.f32, ndim = 2),
	volume: ti.types.ndarray(dtype = ti.f32, ndim = 1),
	sediment: ti.types.ndarray(dtype = ti.f32, ndim = 1),
	gauss: ti.types.ndarray(dtype = ti.f32, ndim = 2),
	unif: ti.types.ndarray(dtype = ti.f32, ndim = 1),
	cull: ti.types.ndarray(dtype = ti.i32, ndim = 1),
	n: ti.i32,
	dt: ti.f32,
	x0: ti.f32,
	y0: ti.f32,
	cell_size: ti.f32,
	n_rows: ti.i32,
	n_cols: ti.i32,
	fluid_density: ti.f32,
	surface_friction: ti.f32,
	surface_roughness: ti.f32,
	deposition_rate: ti.f32,
	dissolution_rate: ti.f32,
	evaporation_rate: ti.f32,
	min_volume: ti.f32,
	mass_transfer: ti.i32
):
	"""
	Advance n particles by one step.

	Args:
		z (ti.template): Height field, row-major, shape (n_rows * n_cols,)
		slots (ndarray): Pool slot index of each particle, shape (n,)
		pos, vel (ndarray): Pool position and velocity arenas, shape (capacity, 3)
		volume, sediment (ndarray): Pool volume and sediment arenas, shape (capacity,)
		gauss (ndarray): Standard normal pairs for the roughness noise, shape (n, 2)
		unif (ndarray): Uniform [0, 1) draws for the wear rule, shape (n,)
		cull (ndarray): Output flags, set to 1 for particles to remove, shape (n,)
		n (ti.i32): Number of particles to advance
		dt (ti.f32): Time step
		x0, y0, cell_size, n_rows, n_cols: Height field geometry
		fluid_density ... min_volume (ti.f32): Physical parameters
		mass_transfer (ti.i32): 1 for capacity-based transfer, 0 for random wear
	"""
	ti.loop_config(serialize = True)
	for k in range(n):
		s = slots[k]

		# x <=> columns, y <=> rows
		x = pos[s, 0]
		y = pos[s, 1]

		idx = gf.cell_index(x, y, x0, y0, cell_size, n_rows, n_cols)
		if idx < 0 or volume[s] <= 0.:
			cull[k] = 1
			continue

		h_start = z[idx]
		if h_start <= cte.HEIGHT_EPS:
			z[idx] = 0.
			cull[k] = 1
			continue

		grad = gf.surface_gradient(z, x, y, x0, y0, cell_size, n_rows, n_cols)
		if grad.norm() < cte.GRADIENT_EPS:
			cull[k] = 1
			continue

		# F = m a; the height gradient gives the planar force on a particle snapped to the surface
		mass = volume[s] * fluid_density
		vx = vel[s, 0] - dt * grad[0] / mass - surface_roughness * gauss[k, 0]
		vy = vel[s, 1] - dt * grad[1] / mass - surface_roughness * gauss[k, 1]

		xn = x + dt * vx
		yn = y + dt * vy

		damping = 1. - dt * surface_friction
		vx *= damping
		vy *= damping

		pos[s, 0] = xn
		pos[s, 1] = yn
		# Snapped to the surface of the cell it stood on when the tick started
		pos[s, 2] = h_start
		vel[s, 0] = vx
		vel[s, 1] = vy
		vel[s, 2] = 0.

		idx_next = gf.cell_index(xn, yn, x0, y0, cell_size, n_rows, n_cols)

		if mass_transfer != 0:
			h_next = gf.height_or_zero(z, idx_next)
			speed = ti.sqrt(vx * vx + vy * vy)
			c_eq = ti.max(0., volume[s] * speed * (h_start - h_next))
			drive = c_eq - sediment[s]

			if drive < 0.:
				# Deposit
				amount = ti.min(dt * deposition_rate * (-drive), sediment[s])
				sediment[s] -= amount
				z[idx] += amount * volume[s]
			else:
				# Dissolve
				amount = ti.min(dt * dissolution_rate * drive, z[idx] / volume[s])
				sediment[s] += amount
				z[idx] = ti.max(0., z[idx] - amount * volume[s])
		else:
			# Random wear of the terrain under the particle
			loss = unif[k] * dt * volume[s] * cte.FALLBACK_EROSION_SCALE
			z[idx] = ti.max(0., z[idx] - loss)

		volume[s] *= 1. - dt * evaporation_rate
		# Dry particles have no mass, whatever min_volume is
		if volume[s] <= 0. or volume[s] < min_volume or idx_next < 0:
			cull[k] = 1
