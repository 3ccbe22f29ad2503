"""
Procedural height models used to initialise and reset a height field.

Each model is a closed-form surface evaluated at cell centres. The set is
small and fixed, so models are exposed as members of the HeightFieldModel
enumeration and dispatched at kernel compile time with ti.static: every
(model, field) pair compiles to a branch-free kernel.

All models are authored around the point (MODEL_CX, MODEL_CY), which sits
inside the default 5 x 5 world. Radicands that would turn negative outside a
model's footprint are guarded so the surface falls back to 0 instead of NaN.

Available Models:
- DOME: Half sphere of radius 1
- ELLIPSOID: Dome squeezed along y, scaled to 0.75 height
- RIDGE: Flat-topped ridge elongated along y with steep flanks
- PYRAMID: Square pyramid of height 1 (L1 cone)
- BLOCK: Unit-height cube on a 1 x 1 footprint
"""

import enum

import taichi as ti

from .. import constants as cte


class HeightFieldModel(enum.IntEnum):
	"""
	Closed set of procedural height models.

	The integer value of a member is the compile-time selector passed to the
	Taichi kernels.
	"""

	DOME = 0
	ELLIPSOID = 1
	RIDGE = 2
	PYRAMID = 3
	BLOCK = 4

	@classmethod
	def coerce(cls, value):
		"""
		Convert a member, its integer value or its (case-insensitive) name to a member.

		Raises:
			ValueError: If the value does not name a model
		"""
		if isinstance(value, cls):
			return value
		if isinstance(value, str):
			try:
				return cls[value.strip().upper()]
			except KeyError:
				raise ValueError(f"Unknown height field model '{value}'. Available: {[m.name.lower() for m in cls]}") from None
		return cls(value)


@ti.func
def height_dome(x:ti.f32, y:ti.f32) -> ti.f32:
	x1 = x - cte.MODEL_CX
	y1 = y - cte.MODEL_CY
	r2 = x1 * x1 + y1 * y1

	h = 0.
	# Outside the unit circle the radicand is negative
	if r2 <= 1.:
		h = ti.sqrt(1. - r2)
	return h


@ti.func
def height_ellipsoid(x:ti.f32, y:ti.f32) -> ti.f32:
	x1 = x - cte.MODEL_CX
	y1 = y - cte.MODEL_CY
	r2 = x1 * x1 + 2. * y1 * y1

	h = 0.
	if r2 <= 1.:
		h = 0.75 * ti.sqrt(1. - r2)
	return h


@ti.func
def height_ridge(x:ti.f32, y:ti.f32) -> ti.f32:
	x1 = x - cte.MODEL_CX
	y1 = y - cte.MODEL_CY
	yy = y1 * y1
	r2 = x1 * x1 + 0.5 * yy

	h = 0.
	if r2 <= 1.:
		# Eighth root flattens the crest, the y term caps it
		h = ti.min(0.7 + 0.1 * yy, 0.85 * ti.sqrt(ti.sqrt(ti.sqrt(1. - r2))))
	return h


@ti.func
def height_pyramid(x:ti.f32, y:ti.f32) -> ti.f32:
	x1 = x - cte.MODEL_CX
	y1 = y - cte.MODEL_CY
	return ti.max(0., 1. - ti.abs(x1) - ti.abs(y1))


@ti.func
def height_block(x:ti.f32, y:ti.f32) -> ti.f32:
	lo_x = cte.MODEL_CX - 0.5
	lo_y = cte.MODEL_CY - 0.5
	h = 0.
	if x >= lo_x and x <= lo_x + 1. and y >= lo_y and y <= lo_y + 1.:
		h = 1.
	return h


@ti.func
def evaluate(model:ti.template(), x:ti.f32, y:ti.f32) -> ti.f32:
	"""
	Evaluate the selected model at world position (x, y).

	Args:
		model: Integer value of a HeightFieldModel member (compile-time)
		x, y: World coordinates

	Returns:
		ti.f32: Surface height, never negative
	"""
	h = 0.
	if ti.static(model == HeightFieldModel.DOME.value):
		h = height_dome(x, y)
	elif ti.static(model == HeightFieldModel.ELLIPSOID.value):
		h = height_ellipsoid(x, y)
	elif ti.static(model == HeightFieldModel.RIDGE.value):
		h = height_ridge(x, y)
	elif ti.static(model == HeightFieldModel.PYRAMID.value):
		h = height_pyramid(x, y)
	elif ti.static(model == HeightFieldModel.BLOCK.value):
		h = height_block(x, y)
	return h


@ti.kernel
def fill_from_model(z:ti.template(), model:ti.template(), x0:ti.f32, y0:ti.f32, cell_size:ti.f32, n_cols:ti.i32):
	"""
	Evaluate a height model at every cell centre of a row-major field.

	Args:
		z (ti.template): Height field, shape (n_rows * n_cols,)
		model (ti.template): Integer value of a HeightFieldModel member
		x0, y0 (ti.f32): World coordinates of the field origin (lower-left corner)
		cell_size (ti.f32): Cell edge length
		n_cols (ti.i32): Number of columns (x-direction)
	"""
	for i in z:
		row = i // n_cols
		col = i % n_cols
		# x <=> columns, y <=> rows
		x = x0 + (ti.cast(col, ti.f32) + 0.5) * cell_size
		y = y0 + (ti.cast(row, ti.f32) + 0.5) * cell_size
		z[i] = evaluate(model, x, y)
