import numpy as np
import pytest

from pyerosion.grid import HeightField, HeightFieldModel, Rect


def test_cell_index_at_origin(field10):
	hf = field10
	assert hf.num_cols == 10
	assert hf.num_rows == 10

	# in bounds
	assert hf.cell_index_of((0, 0)) == 0
	assert hf.cell_index_of((1, 1)) == hf.num_cols + 1
	assert hf.cell_index_of((9.9, 9.9)) == 10 * 10 - 1
	# out of bounds
	assert hf.cell_index_of((-1, -1)) is None
	assert hf.cell_index_of((10, 10)) is None


def test_cell_index_with_offset_origin():
	hf = HeightField(HeightFieldModel.DOME, Rect(5., 5., 10., 10.), 1.)
	try:
		# Same number of cells despite the offset
		assert hf.num_cols == 10
		assert hf.num_rows == 10

		assert hf.cell_index_of((5, 5)) == 0
		assert hf.cell_index_of((6, 6)) == hf.num_cols + 1
		assert hf.cell_index_of((14.9, 14.9)) == 10 * 10 - 1
		assert hf.cell_index_of((0, 0)) is None
		assert hf.cell_index_of((15, 15)) is None
	finally:
		hf.destroy()


def test_shifting_the_world_shifts_every_query(field10):
	dx, dy = 5., -3.
	shifted = HeightField(HeightFieldModel.DOME, Rect(dx, dy, 10., 10.), 1.)
	try:
		assert (shifted.num_rows, shifted.num_cols) == (field10.num_rows, field10.num_cols)
		# Quarter-cell steps are exact in binary floating point
		for x in np.arange(-1., 11., 0.25):
			for y in np.arange(-1., 11., 0.25):
				assert field10.cell_index_of((x, y)) == shifted.cell_index_of((x + dx, y + dy))
	finally:
		shifted.destroy()


def test_cell_index_rejects_non_finite_points(field10):
	assert field10.cell_index_of((np.nan, 1.)) is None
	assert field10.cell_index_of((1., np.inf)) is None
	assert field10.cell_index_of((-np.inf, -np.inf)) is None


def test_row_major_layout(field10):
	# x <=> columns, y <=> rows
	assert field10.cell_index_of((3.5, 0.5)) == 3
	assert field10.cell_index_of((0.5, 3.5)) == 30


@pytest.mark.parametrize("model", [HeightFieldModel.DOME, HeightFieldModel.ELLIPSOID, HeightFieldModel.RIDGE])
def test_dome_models_are_non_negative(model):
	hf = HeightField(model, Rect(0., 0., 5., 5.), 1. / 64.)
	try:
		h = hf.heights
		assert np.all(np.isfinite(h))
		assert np.all(h >= 0.)
		assert h.max() > 0.5
	finally:
		hf.destroy()


def test_models_are_evaluated_at_cell_centres():
	hf = HeightField(HeightFieldModel.ELLIPSOID, Rect(0., 0., 5., 5.), 1. / 16.)
	try:
		s = hf.cell_size
		x = (np.arange(hf.num_cols) + 0.5) * s
		y = (np.arange(hf.num_rows) + 0.5) * s
		xx, yy = np.meshgrid(x, y)  # shape (rows, cols)
		r2 = (xx - 2.) ** 2 + 2. * (yy - 2.) ** 2
		expected = 0.75 * np.sqrt(np.maximum(0., 1. - r2))

		np.testing.assert_allclose(hf.heights_2d, expected, atol = 1e-5)
	finally:
		hf.destroy()


def test_pyramid_and_block_models():
	hf = HeightField(HeightFieldModel.PYRAMID, Rect(0., 0., 5., 5.), 1. / 4.)
	try:
		assert hf.height_at((2.1, 2.1)) == pytest.approx(1. - 0.125 - 0.125, abs = 1e-6)
		assert hf.height_at((4.5, 4.5)) == 0.

		hf.remap(HeightFieldModel.BLOCK)
		assert hf.height_at((2.1, 1.9)) == 1.
		assert hf.height_at((0.5, 0.5)) == 0.
		assert set(np.unique(hf.heights)) <= {0., 1.}
	finally:
		hf.destroy()


def test_remap_is_idempotent(field10):
	field10.remap(HeightFieldModel.RIDGE)
	first = field10.heights.tobytes()
	field10.remap(HeightFieldModel.RIDGE)
	assert field10.heights.tobytes() == first


def test_remap_restores_after_edits(field10):
	before = field10.heights
	field10.load_heights(np.zeros(field10.size))
	field10.remap("dome")
	np.testing.assert_array_equal(field10.heights, before)


def test_height_at(field10):
	field10.load_heights(np.arange(100, dtype = np.float32))
	assert field10.height_at((2.5, 3.5)) == 32.
	assert field10.height_at((-0.1, 3.5)) == 0.
	assert field10.height_at((10., 3.5)) == 0.


def test_surface_gradient_interior_and_edges(field10):
	# h = col, so dh/dx = 1 and dh/dy = 0 away from the edges
	field10.load_heights(np.tile(np.arange(10, dtype = np.float32), (10, 1)))

	np.testing.assert_allclose(field10.surface_gradient(4.5, 4.5), [1., 0., 0.])

	# Missing neighbours count as height 0
	np.testing.assert_allclose(field10.surface_gradient(0.5, 4.5), [(1. - 0.) / 2., 0., 0.])
	np.testing.assert_allclose(field10.surface_gradient(9.5, 4.5), [(0. - 8.) / 2., 0., 0.])

	gy_top = field10.surface_gradient(4.5, 9.5)[1]
	assert gy_top == pytest.approx((0. - 4.) / 2.)


def test_load_heights_validation(field10):
	with pytest.raises(ValueError):
		field10.load_heights(np.zeros(99))

	field10.load_heights(-np.ones((10, 10)))
	assert np.all(field10.heights == 0.)


def test_invalid_geometry():
	with pytest.raises(ValueError):
		HeightField(HeightFieldModel.DOME, Rect(0., 0., 10., 10.), 0.)
	with pytest.raises(ValueError):
		HeightField(HeightFieldModel.DOME, Rect(0., 0., 0.5, 10.), 1.)
	with pytest.raises(ValueError):
		HeightField("volcano", Rect(0., 0., 10., 10.), 1.)


def test_fractional_extent_is_floored():
	hf = HeightField(HeightFieldModel.PYRAMID, Rect(0., 0., 10.9, 4.2), 1.)
	try:
		assert hf.rshp == (4, 10)
		assert hf.rect == Rect(0., 0., 10., 4.)
	finally:
		hf.destroy()


def test_many_points_are_looked_up_at_once(field10):
	xs, ys = np.meshgrid(np.arange(-1., 11., 0.25), np.arange(-1., 11., 0.25))
	points = np.stack((xs.ravel(), ys.ravel()), axis = 1)

	idx = field10.cell_indices_of(points)

	inside = (points[:, 0] >= 0.) & (points[:, 0] < 10.) & (points[:, 1] >= 0.) & (points[:, 1] < 10.)
	expected = np.where(inside, np.floor(points[:, 1]) * 10 + np.floor(points[:, 0]), -1).astype(np.int64)
	np.testing.assert_array_equal(idx, expected)
	assert [field10.cell_index_of(p) for p in points[:20]] == [None if i < 0 else i for i in idx[:20].tolist()]


def test_lookup_uses_single_precision(field10):
	# Particle positions are float32: a coordinate that rounds to the far edge is outside
	assert field10.cell_index_of((10. - 1e-9, 5.5)) is None
	just_inside = float(np.nextafter(np.float32(10.), np.float32(0.)))
	assert field10.cell_index_of((just_inside, 5.5)) == 59

	mixed = np.array([[np.nan, 1., 0.], [1., np.inf, 0.], [just_inside, 5.5, 7.]])
	assert field10.cell_indices_of(mixed).tolist() == [-1, -1, 59]
