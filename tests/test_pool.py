import numpy as np
import pytest

from pyerosion.errors import AllocationError
from pyerosion.pool import ParticlePool, Slot


def test_fresh_slots_are_carved_in_order():
	pool = ParticlePool(capacity = 8)
	slots = [pool.allocate() for _ in range(5)]
	assert [s.index for s in slots] == [0, 1, 2, 3, 4]
	assert pool.stats() == {"total": 5, "in_use": 5, "available": 0, "capacity": 8}


def test_released_slot_is_reused_first():
	pool = ParticlePool(capacity = 8)
	slots = [pool.allocate() for _ in range(5)]

	pool.release(slots[0])
	assert pool.stats()["available"] == 1

	reused = pool.allocate()
	assert reused.index == slots[0].index
	assert pool.stats()["available"] == 0


def test_reuse_is_lifo():
	pool = ParticlePool(capacity = 8)
	a, b, c = pool.allocate(), pool.allocate(), pool.allocate()
	pool.release(a)
	pool.release(c)

	assert pool.allocate().index == c.index
	assert pool.allocate().index == a.index
	# Free list exhausted: carve the next untouched slot
	assert pool.allocate().index == 3


def test_release_invalidates_handles():
	pool = ParticlePool(capacity = 4)
	slot = pool.allocate()
	assert pool.is_live(slot)

	pool.release(slot)
	assert not pool.is_live(slot)

	again = pool.allocate()
	assert again.index == slot.index
	assert again.generation != slot.generation
	assert pool.is_live(again)
	assert not pool.is_live(slot)


def test_double_release_is_rejected():
	pool = ParticlePool(capacity = 4)
	slot = pool.allocate()
	pool.release(slot)
	with pytest.raises(ValueError):
		pool.release(slot)
	with pytest.raises(ValueError):
		pool.release(Slot(3, 0))


def test_allocated_slot_is_reset():
	pool = ParticlePool(capacity = 4)
	slot = pool.allocate()
	pool.position[slot.index] = (1., 2., 3.)
	pool.sediment[slot.index] = 0.7
	pool.release(slot)

	slot = pool.allocate()
	np.testing.assert_array_equal(pool.position[slot.index], [0., 0., 0.])
	assert pool.volume[slot.index] == 1.
	assert pool.sediment[slot.index] == 0.


def test_arena_grows_and_keeps_data():
	pool = ParticlePool(capacity = 2)
	slots = [pool.allocate() for _ in range(2)]
	pool.volume[slots[1].index] = 4.5

	more = [pool.allocate() for _ in range(3)]
	assert pool.capacity == 8
	assert [s.index for s in more] == [2, 3, 4]
	assert pool.volume[slots[1].index] == 4.5
	assert all(pool.is_live(s) for s in slots + more)


def test_arena_never_shrinks():
	pool = ParticlePool(capacity = 1)
	slots = [pool.allocate() for _ in range(10)]
	capacity = pool.capacity
	for s in slots:
		pool.release(s)
	assert pool.capacity == capacity
	assert pool.stats()["available"] == 10


def test_failed_growth_leaves_pool_intact(monkeypatch):
	pool = ParticlePool(capacity = 2)
	first = pool.allocate()
	pool.allocate()

	def no_memory(*args, **kwargs):
		raise MemoryError

	monkeypatch.setattr(np, "zeros", no_memory)
	with pytest.raises(AllocationError):
		pool.allocate()
	monkeypatch.undo()

	assert pool.capacity == 2
	assert pool.stats()["in_use"] == 2
	assert pool.is_live(first)
	assert pool.allocate().index == 2
