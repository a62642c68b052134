import pytest

from systemslab.memlib import MAX_HEAP, HeapExhaustedError, SimulatedHeap


def test_default_size_is_max_heap():
    heap = SimulatedHeap()
    assert heap.max_heap == MAX_HEAP
    assert heap.heapsize() == 0


def test_sbrk_returns_old_break():
    heap = SimulatedHeap(1024)
    first = heap.sbrk(16)
    second = heap.sbrk(32)
    assert first == heap.heap_lo()
    assert second == first + 16
    assert heap.heapsize() == 48


def test_heap_hi_is_last_byte():
    heap = SimulatedHeap(1024)
    heap.sbrk(100)
    assert heap.heap_hi() == heap.heap_lo() + heap.heapsize() - 1


def test_sbrk_negative_raises():
    heap = SimulatedHeap(1024)
    heap.sbrk(8)
    with pytest.raises(HeapExhaustedError):
        heap.sbrk(-1)
    assert heap.heapsize() == 8


def test_sbrk_beyond_limit_raises_and_keeps_break():
    heap = SimulatedHeap(64)
    heap.sbrk(60)
    with pytest.raises(HeapExhaustedError):
        heap.sbrk(5)
    assert heap.heapsize() == 60
    assert heap.sbrk(4) == 60


def test_heap_exhausted_is_memory_error():
    heap = SimulatedHeap(0)
    with pytest.raises(MemoryError):
        heap.sbrk(1)


def test_reset_brk_empties_heap():
    heap = SimulatedHeap(256)
    heap.sbrk(128)
    heap.reset_brk()
    assert heap.heapsize() == 0
    assert heap.sbrk(8) == heap.heap_lo()


def test_word_round_trip_and_byte_order():
    heap = SimulatedHeap(64)
    heap.write_word(8, 0x01020304)
    assert heap.read_word(8) == 0x01020304
    assert heap.read(8, 4) == bytes([0x04, 0x03, 0x02, 0x01])


def test_write_word_truncates_to_32_bits():
    heap = SimulatedHeap(64)
    heap.write_word(0, (1 << 32) + 7)
    assert heap.read_word(0) == 7


def test_read_write_round_trip():
    heap = SimulatedHeap(64)
    heap.write(10, b"payload")
    assert heap.read(10, 7) == b"payload"


def test_fill_uses_low_byte():
    heap = SimulatedHeap(64)
    heap.fill(4, 0x1AB, 5)
    assert heap.read(4, 5) == bytes([0xAB]) * 5
    assert heap.read(9, 1) == b"\x00"


def test_out_of_range_access_raises():
    heap = SimulatedHeap(16)
    with pytest.raises(IndexError):
        heap.read_word(14)
    with pytest.raises(IndexError):
        heap.write(-1, b"x")


def test_pagesize_is_power_of_two():
    size = SimulatedHeap(16).pagesize()
    assert size > 0
    assert size & (size - 1) == 0