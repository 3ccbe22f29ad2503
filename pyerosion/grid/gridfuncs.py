"""
Taichi-scope grid helpers for row-major height fields.

These functions mirror the Python-side queries of HeightField
(cell_index_of, height_at, surface_gradient) so that kernels and host code
share the exact same boundary rules:

- Bounds are half-open: the field origin maps to cell 0, origin + extent is
  outside the field.
- Out-of-field lookups return index -1 and height 0. Treating missing
  neighbours as height 0 makes the field behave like a plateau ending in a
  cliff at its edges.

Grid geometry is passed explicitly rather than read from module globals, so
several fields of different sizes can coexist in one process.
"""

import taichi as ti


@ti.func
def cell_index(x:ti.f32, y:ti.f32, x0:ti.f32, y0:ti.f32, cell_size:ti.f32, n_rows:ti.i32, n_cols:ti.i32) -> ti.i32:
	"""
	Map a world position to a flat row-major cell index.

	Returns:
		ti.i32: Cell index, or -1 if (x, y) lies outside the field
	"""
	idx = -1
	# Float extent test first: rejects NaN and inf before the integer cast
	if x >= x0 and y >= y0 and x < x0 + n_cols * cell_size and y < y0 + n_rows * cell_size:
		col = ti.cast(ti.floor((x - x0) / cell_size), ti.i32)
		row = ti.cast(ti.floor((y - y0) / cell_size), ti.i32)
		if col >= 0 and row >= 0 and col < n_cols and row < n_rows:
			idx = row * n_cols + col
	return idx


@ti.func
def height_or_zero(z:ti.template(), idx:ti.i32) -> ti.f32:
	h = 0.
	if idx >= 0:
		h = z[idx]
	return h


@ti.func
def surface_gradient(z:ti.template(), x:ti.f32, y:ti.f32, x0:ti.f32, y0:ti.f32,
	cell_size:ti.f32, n_rows:ti.i32, n_cols:ti.i32):
	"""
	Central finite difference of the height over one cell in x and y.

	Neighbours outside the field count as height 0.

	Returns:
		ti.math.vec2: (dh/dx, dh/dy)
	"""
	hr = height_or_zero(z, cell_index(x + cell_size, y, x0, y0, cell_size, n_rows, n_cols))
	hl = height_or_zero(z, cell_index(x - cell_size, y, x0, y0, cell_size, n_rows, n_cols))
	hd = height_or_zero(z, cell_index(x, y + cell_size, x0, y0, cell_size, n_rows, n_cols))
	hu = height_or_zero(z, cell_index(x, y - cell_size, x0, y0, cell_size, n_rows, n_cols))

	return ti.math.vec2((hr - hl) / (2. * cell_size), (hd - hu) / (2. * cell_size))
