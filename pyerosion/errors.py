"""
Exception types raised by PyErosion.

Only two failure classes exist in the simulation core: storage that cannot be
obtained (AllocationError) and particle handles that outlive their pool slot
(StaleHandleError). Grid queries outside the field are not errors; they return
None (or 0 for heights) and drive particle culling.
"""


class AllocationError(MemoryError):
	"""
	Backing storage for the height field, the particle arena or the registry
	could not be obtained or grown.

	Raised before any committed state is modified, so the object that raised
	it is still consistent and usable.
	"""


class StaleHandleError(LookupError):
	"""
	A particle handle was used after its pool slot had been released.

	Slots are recycled in LIFO order; the per-slot generation counter lets a
	handle detect that its storage now belongs to another particle.
	"""
