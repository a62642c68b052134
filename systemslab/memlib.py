"""A simulated memory system with a brk-style heap that can only grow."""

from __future__ import annotations

import mmap

MAX_HEAP = 20 * (1 << 20)
ALIGNMENT = 8


class HeapExhaustedError(MemoryError):
    """Raised when the simulated heap cannot grow by the requested amount."""


class SimulatedHeap:
    """A fixed block of simulated memory with a movable break pointer.

    Addresses are integer offsets into the block; the heap starts at 0.
    """

    def __init__(self, max_heap: int = MAX_HEAP) -> None:
        if max_heap < 0:
            raise ValueError("max_heap must not be negative")
        self.max_heap = max_heap
        self._mem = bytearray(max_heap)
        self._brk = 0

    def sbrk(self, incr: int) -> int:
        """Grow the heap by ``incr`` bytes and return the start of the new area."""
        if incr < 0 or self._brk + incr > self.max_heap:
            raise HeapExhaustedError("mem_sbrk failed. Ran out of memory...")
        old_brk = self._brk
        self._brk += incr
        return old_brk

    def reset_brk(self) -> None:
        """Make the heap empty again."""
        self._brk = 0

    def heap_lo(self) -> int:
        """Address of the first heap byte."""
        return 0

    def heap_hi(self) -> int:
        """Address of the last heap byte."""
        return self._brk - 1

    def heapsize(self) -> int:
        """Current heap size in bytes."""
        return self._brk

    def pagesize(self) -> int:
        """The system page size."""
        return mmap.PAGESIZE

    def _check(self, addr: int, n: int) -> None:
        if addr < 0 or n < 0 or addr + n > self.max_heap:
            raise IndexError(f"access of {n} bytes at {addr} is outside simulated memory")

    def read_word(self, addr: int) -> int:
        """Read an unsigned 32-bit little-endian word."""
        self._check(addr, 4)
        return int.from_bytes(self._mem[addr:addr + 4], "little")

    def write_word(self, addr: int, value: int) -> None:
        """Write an unsigned 32-bit little-endian word."""
        self._check(addr, 4)
        self._mem[addr:addr + 4] = (value & 0xFFFFFFFF).to_bytes(4, "little")

    def read(self, addr: int, n: int) -> bytes:
        """Read ``n`` bytes starting at ``addr``."""
        self._check(addr, n)
        return bytes(self._mem[addr:addr + n])

    def write(self, addr: int, data: bytes) -> None:
        """Copy ``data`` into memory at ``addr``."""
        self._check(addr, len(data))
        self._mem[addr:addr + len(data)] = data

    def fill(self, addr: int, value: int, n: int) -> None:
        """Set ``n`` bytes at ``addr`` to the low byte of ``value``."""
        self._check(addr, n)
        self._mem[addr:addr + n] = bytes([value & 0xFF]) * n