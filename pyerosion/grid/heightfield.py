"""
Height field: the terrain droplets erode.

A HeightField is a fixed row-major grid over a world rectangle whose heights
live in a Taichi field, so erosion kernels update them in place. Host-side
queries (cell lookup, height, gradient) follow the same rules as the
Taichi-scope helpers in gridfuncs, including float32 cell lookup.
"""

import logging
import math
from typing import NamedTuple

import numpy as np
import taichi as ti

from ..errors import AllocationError
from .models import HeightFieldModel, fill_from_model

logger = logging.getLogger(__name__)


class Rect(NamedTuple):
	"""Axis-aligned world rectangle: origin (x, y) and extent (w, h)."""
	x: float
	y: float
	w: float
	h: float


class HeightField:
	"""
	Row-major 2D grid of surface heights over a rectangular world region.

	The grid topology (rows, columns, cell size, origin) is fixed at
	construction; only the height values change afterwards. Heights live in a
	Taichi field so that erosion kernels can update them in place, and are
	copied to NumPy for host-side snapshots.

	Attributes:
		num_rows (int): Number of rows (y-direction)
		num_cols (int): Number of columns (x-direction)
		cell_size (float): Cell edge length in world units
		x0, y0 (float): World coordinates of the lower-left corner
		rshp (tuple): Reshape tuple (num_rows, num_cols) for 2D views
		z (ti.field): Heights, shape (num_rows * num_cols,)

	Convention: x <=> columns, y <=> rows. Cell (row, col) has flat index
	row * num_cols + col.
	"""

	def __init__(self, model, rect, cell_size:float):
		"""
		Allocate the grid covering `rect` and evaluate `model` at each cell centre.

		Args:
			model (HeightFieldModel | str | int): Initial height model
			rect (Rect | tuple): World rectangle (x, y, w, h)
			cell_size (float): Cell edge length, must be positive

		Raises:
			ValueError: If the cell size is not positive or the grid would be empty
			AllocationError: If the height storage cannot be allocated
		"""
		model = HeightFieldModel.coerce(model)
		rect = Rect(*rect)
		if not cell_size > 0:
			raise ValueError(f"cell_size must be positive, got {cell_size}")

		# Floor of the extent in cells
		self.num_cols = int(math.floor(rect.w / cell_size))
		self.num_rows = int(math.floor(rect.h / cell_size))
		if self.num_cols <= 0 or self.num_rows <= 0:
			raise ValueError(f"World rectangle {tuple(rect)} holds no cell of size {cell_size}")

		self.cell_size = float(cell_size)
		self.x0 = float(rect.x)
		self.y0 = float(rect.y)
		self.rshp = (self.num_rows, self.num_cols)

		self._snodetree = None
		self.z = self._allocate(self.num_rows * self.num_cols)
		self.remap(model)

	def _allocate(self, n):
		try:
			fb = ti.FieldsBuilder()
			z = ti.field(ti.f32)
			fb.dense(ti.i, n).place(z)
			self._snodetree = fb.finalize()
		except (MemoryError, RuntimeError) as e:
			logger.error("Could not allocate height field of %d cells", n)
			raise AllocationError(f"Could not allocate height field of {n} cells") from e
		return z

	@property
	def size(self):
		return self.num_rows * self.num_cols

	@property
	def rect(self):
		return Rect(self.x0, self.y0, self.num_cols * self.cell_size, self.num_rows * self.cell_size)

	def remap(self, model):
		"""
		Re-evaluate every cell centre under `model`, in place.

		Geometry is unchanged. Evaluating the same model twice yields identical
		height arrays.
		"""
		model = HeightFieldModel.coerce(model)
		fill_from_model(self.z, int(model), self.x0, self.y0, self.cell_size, self.num_cols)

	def cell_indices_of(self, points):
		"""
		Map many world positions to flat row-major cell indices at once.

		Arithmetic is done in float32, like the erosion kernels and the
		particle arena, so host queries and kernels agree on positions lying
		right at a cell or field edge. Non-finite positions are outside.

		Args:
			points (np.ndarray): Shape (N, k) with k >= 2; only the (x, y)
				columns are used

		Returns:
			np.ndarray: int64 cell indices, shape (N,), -1 outside the field
		"""
		with np.errstate(over = "ignore", invalid = "ignore"):
			pts = np.atleast_2d(np.asarray(points, dtype = np.float32))
			x = pts[:, 0]
			y = pts[:, 1]

			x0 = np.float32(self.x0)
			y0 = np.float32(self.y0)
			s = np.float32(self.cell_size)

			# Float extent test first: rejects NaN and inf before the integer cast
			inside = ((x >= x0) & (y >= y0)
				& (x < x0 + np.float32(self.num_cols) * s)
				& (y < y0 + np.float32(self.num_rows) * s))
			col = np.floor((x[inside] - x0) / s).astype(np.int64)
			row = np.floor((y[inside] - y0) / s).astype(np.int64)

		ok = (col >= 0) & (row >= 0) & (col < self.num_cols) & (row < self.num_rows)
		idx = np.full(x.shape, -1, dtype = np.int64)
		idx[np.flatnonzero(inside)[ok]] = row[ok] * self.num_cols + col[ok]
		return idx

	def cell_index_of(self, point):
		"""
		Map a world position to a flat row-major cell index.

		Bounds are half-open: the origin maps to cell 0, while origin + extent
		is outside. Never raises.

		Args:
			point: World position; only the first two components (x, y) are used

		Returns:
			int | None: Cell index, or None outside the field
		"""
		idx = int(self.cell_indices_of([(point[0], point[1])])[0])
		if idx < 0:
			return None
		return idx

	def height_at(self, point):
		"""Height of the cell containing `point`, or 0 outside the field."""
		idx = self.cell_index_of(point)
		if idx is None:
			return 0.
		return float(self.z[idx])

	def surface_gradient(self, x, y):
		"""
		Central finite difference of the height over one cell in x and y.

		Neighbours outside the field are taken as height 0, which is the
		boundary condition the erosion kernels use too.

		Returns:
			np.ndarray: (dh/dx, dh/dy, 0.), the vertical component is always 0
		"""
		s = self.cell_size
		hr = self.height_at((x + s, y))
		hl = self.height_at((x - s, y))
		hd = self.height_at((x, y + s))
		hu = self.height_at((x, y - s))

		return np.array([(hr - hl) / (2 * s), (hd - hu) / (2 * s), 0.])

	@property
	def heights(self):
		"""Row-major copy of all heights, shape (num_rows * num_cols,)."""
		return self.z.to_numpy()

	@property
	def heights_2d(self):
		"""Copy of all heights, shape (num_rows, num_cols)."""
		return self.z.to_numpy().reshape(self.rshp)

	def load_heights(self, heights):
		"""
		Replace every height with host data.

		Args:
			heights (np.ndarray): Array with num_rows * num_cols elements, either
				flat row-major or shaped (num_rows, num_cols). Negative values are
				clamped to 0.

		Raises:
			ValueError: If the number of elements does not match the grid
		"""
		heights = np.asarray(heights, dtype = np.float32)
		if heights.size != self.size:
			raise ValueError(f"Expected {self.size} heights ({self.num_rows}x{self.num_cols}), got {heights.size}")
		self.z.from_numpy(np.ascontiguousarray(np.maximum(heights, 0.).ravel()))

	def destroy(self):
		"""Free the Taichi storage. The field must not be used afterwards."""
		if self._snodetree is not None:
			self._snodetree.destroy()
			self._snodetree = None
