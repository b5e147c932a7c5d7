import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tinyunix.umalloc import HEADER_SIZE, MIN_GROWTH_UNITS, Allocator

CHUNK = HEADER_SIZE * MIN_GROWTH_UNITS


def test_sbrk_moves_break():
    heap = Allocator(limit=100)
    assert heap.sbrk(0) == 0
    assert heap.sbrk(40) == 0
    assert heap.sbrk(-10) == 40
    assert heap.brk == 30


def test_sbrk_limits():
    heap = Allocator(limit=100)
    with pytest.raises(MemoryError):
        heap.sbrk(101)
    with pytest.raises(MemoryError):
        heap.sbrk(-1)
    assert heap.brk == 0


def test_first_allocation_grows_by_minimum():
    heap = Allocator(limit=4 * CHUNK)
    address = heap.malloc(1)
    assert heap.brk == CHUNK
    assert address % HEADER_SIZE == 0
    assert HEADER_SIZE <= address < heap.brk


def test_allocation_fails_when_heap_cannot_grow():
    heap = Allocator(limit=CHUNK - 1)
    with pytest.raises(MemoryError):
        heap.malloc(1)
    assert heap.brk == 0


def test_allocations_do_not_overlap():
    heap = Allocator(limit=4 * CHUNK)
    sizes = [1, 15, 16, 17, 100, 1000, 3]
    blocks = sorted((heap.malloc(n), n) for n in sizes)
    for (a, n), (b, _) in zip(blocks, blocks[1:]):
        assert a + n <= b - HEADER_SIZE
    assert all(a + n <= heap.brk for a, n in blocks)


def test_freeing_everything_coalesces_heap():
    heap = Allocator(limit=4 * CHUNK)
    addresses = [heap.malloc(n) for n in (10, 200, 3000, 5)]
    for address in addresses[::2] + addresses[1::2]:
        heap.free(address)
    assert heap.free_blocks() == [(0, heap.brk)]


def test_freed_block_is_reused():
    heap = Allocator(limit=4 * CHUNK)
    first = heap.malloc(64)
    heap.free(first)
    assert heap.malloc(64) == first
    assert heap.brk == CHUNK


def test_large_request_grows_past_minimum():
    request = 2 * CHUNK
    heap = Allocator(limit=8 * CHUNK)
    address = heap.malloc(request)
    assert heap.brk >= request + HEADER_SIZE
    assert address + request <= heap.brk


def test_free_errors():
    heap = Allocator(limit=4 * CHUNK)
    address = heap.malloc(8)
    with pytest.raises(ValueError):
        heap.free(address + 1)
    heap.free(address)
    with pytest.raises(ValueError):
        heap.free(address)


def test_exhaust_free_and_allocate_again():
    heap = Allocator(limit=1 << 20)
    blocks = []
    with pytest.raises(MemoryError):
        while True:
            blocks.append(heap.malloc(10001))
    assert len(blocks) > 0
    for address in blocks:
        heap.free(address)
    assert heap.malloc(1024 * 20) >= HEADER_SIZE


@settings(max_examples=60, deadline=None)
@given(ops=st.lists(st.tuples(st.booleans(), st.integers(0, 5000)), max_size=60))
def test_heap_invariants(ops):
    heap = Allocator(limit=1 << 22)
    live = []
    for allocate, n in ops:
        if allocate or not live:
            live.append((heap.malloc(n), n))
        else:
            address, _ = live.pop(n % len(live))
            heap.free(address)

        free = heap.free_blocks()
        for (a, size), (b, _) in zip(free, free[1:]):
            assert a + size < b
        assert all(0 <= a and a + size <= heap.brk and size > 0 for a, size in free)

        used = sorted((a - HEADER_SIZE, a + n) for a, n in live)
        spans = sorted(used + [(a, a + size) for a, size in free])
        for (_, end), (start, _) in zip(spans, spans[1:]):
            assert end <= start
        assert all(end <= heap.brk for _, end in spans)

    for address, _ in live:
        heap.free(address)
    if heap.brk:
        assert heap.free_blocks() == [(0, heap.brk)]