"""
Taichi environment initialization for PyErosion.

Taichi must be initialised before any height field is created. Host
applications usually call ti.init themselves; initialise() is a convenience
that picks the CPU backend by default and refuses to run twice, since a second
ti.init would silently invalidate every field already allocated.
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

_INITIALISED = False


def initialise(arch=None, **kwargs):
	"""
	Initialize Taichi for PyErosion.

	Args:
		arch: Taichi backend (ti.cpu, ti.gpu, ...). Default: ti.cpu
		**kwargs: Forwarded to ti.init (debug, random_seed, ...)

	Raises:
		RuntimeError: If already initialized
	"""
	global _INITIALISED
	if(_INITIALISED):
		raise RuntimeError("PyErosion Taichi environment already initialized")

	kwargs.setdefault("default_fp", ti.f32)
	ti.init(arch = ti.cpu if arch is None else arch, **kwargs)
	_INITIALISED = True
	logger.debug("Taichi initialised (arch=%s)", arch)


def is_initialised():
	return _INITIALISED


def reboot():
	"""
	Reset the Taichi runtime.

	Frees every Taichi field, including the ones held by existing height
	fields and engines, which must not be used afterwards.
	"""
	global _INITIALISED
	ti.reset()
	_INITIALISED = False
