"""
Height field management for PyErosion.

This submodule provides the 2D grid of surface heights that droplets erode,
the procedural models used to initialise it, and the Taichi-scope helpers
kernels use to query it.

Core Classes:
- HeightField: Row-major height grid over a world rectangle
- HeightFieldModel: Closed set of procedural surfaces (dome, ellipsoid, ridge, pyramid, block)
- Rect: World rectangle (x, y, w, h)

Key Features:
- Half-open cell lookup: the origin maps to cell 0, origin + extent is outside
- Boundary-safe central-difference gradients (missing neighbours count as height 0)
- In-place remapping under any model without changing grid geometry
- NumPy snapshots for renderers (flat or (rows, cols))

Usage:
    import taichi as ti
    import pyerosion as pe

    ti.init(ti.cpu)

    field = pe.grid.HeightField(pe.grid.HeightFieldModel.DOME, pe.grid.Rect(0, 0, 5, 5), 1. / 64.)
    idx = field.cell_index_of((2.0, 2.0))        # None outside the field
    h = field.height_at((2.0, 2.0))               # 0 outside the field
    gx, gy, _ = field.surface_gradient(2.5, 2.0)

    field.remap("pyramid")
    relief = field.heights_2d                     # (rows, cols) NumPy copy
"""

from .models import HeightFieldModel
from .heightfield import HeightField, Rect
from . import gridfuncs

__all__ = [
    "HeightField",
    "HeightFieldModel",
    "Rect",
    "gridfuncs",
]
