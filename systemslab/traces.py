"""Allocator trace files and the range list used to check allocated payloads."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple

from systemslab.memlib import ALIGNMENT, SimulatedHeap

HDRLINES = 4


class TraceError(ValueError):
    """Raised when a trace file cannot be read or is malformed."""


class PayloadError(ValueError):
    """Raised when an allocated payload is misplaced in the heap."""


class OpType(Enum):
    """The kind of allocator request a trace line makes."""

    ALLOC = "a"
    FREE = "f"
    REALLOC = "r"


@dataclass(frozen=True)
class TraceOp:
    """One allocator request: its kind, the block id, and the byte size."""

    type: OpType
    index: int
    size: int = 0


@dataclass
class Trace:
    """A parsed trace with room to remember the blocks it allocates."""

    sugg_heapsize: int
    num_ids: int
    num_ops: int
    weight: int
    ops: list[TraceOp]
    name: str = ""
    blocks: list[int | None] = field(default_factory=list)
    block_sizes: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.blocks:
            self.blocks = [None] * self.num_ids
        if not self.block_sizes:
            self.block_sizes = [0] * self.num_ids


def _int_token(tokens: Iterator[str], name: str, what: str) -> int:
    try:
        token = next(tokens)
    except StopIteration:
        raise TraceError(f"tracefile {name} ends before its {what}") from None
    try:
        return int(token)
    except ValueError:
        raise TraceError(f"tracefile {name} has a bad {what}: {token!r}") from None


def _uint_token(tokens: Iterator[str], name: str, what: str) -> int:
    value = _int_token(tokens, name, what)
    if value < 0:
        raise TraceError(f"tracefile {name} has a negative {what}: {value}")
    return value


def parse_trace(text: str, name: str = "<trace>") -> Trace:
    """Parse the text of a trace file.

    The file starts with four numbers (suggested heap size, number of block
    ids, number of requests, weight) followed by one request per line:
    ``a <id> <size>``, ``r <id> <size>`` or ``f <id>``.
    """
    tokens = iter(text.split())
    sugg_heapsize = _int_token(tokens, name, "suggested heap size")
    num_ids = _int_token(tokens, name, "number of ids")
    num_ops = _int_token(tokens, name, "number of operations")
    weight = _int_token(tokens, name, "weight")

    ops: list[TraceOp] = []
    max_index = 0
    for token in tokens:
        kind = token[0]
        if kind in ("a", "r"):
            index = _uint_token(tokens, name, "block id")
            size = _uint_token(tokens, name, "block size")
            op_type = OpType.ALLOC if kind == "a" else OpType.REALLOC
            ops.append(TraceOp(op_type, index, size))
            max_index = max(max_index, index)
        elif kind == "f":
            index = _uint_token(tokens, name, "block id")
            ops.append(TraceOp(OpType.FREE, index))
        else:
            raise TraceError(f"Bogus type character ({kind}) in tracefile {name}")

    if max_index != num_ids - 1:
        raise TraceError(
            f"tracefile {name} declares {num_ids} ids but its largest id is {max_index}"
        )
    if num_ops != len(ops):
        raise TraceError(
            f"tracefile {name} declares {num_ops} operations but holds {len(ops)}"
        )
    return Trace(sugg_heapsize, num_ids, num_ops, weight, ops, name)


def read_trace(tracedir: str, filename: str) -> Trace:
    """Read and parse the trace file ``filename`` in directory ``tracedir``."""
    path = os.path.join(tracedir, filename)
    try:
        with open(path, encoding="ascii", errors="replace") as tracefile:
            text = tracefile.read()
    except OSError as exc:
        raise TraceError(
            f"Could not open {path} in read_trace: {exc.strerror or exc}"
        ) from exc
    return parse_trace(text, path)


class Range(NamedTuple):
    """The first and last byte addresses of an allocated payload."""

    lo: int
    hi: int

    @property
    def size(self) -> int:
        return self.hi - self.lo + 1


def _addr(p: int) -> str:
    return hex(p)


class RangeList:
    """The extents of the currently allocated payloads, newest first."""

    def __init__(self) -> None:
        self._ranges: list[Range] = []

    def add(self, lo: int, size: int, heap: SimulatedHeap) -> Range:
        """Check a newly allocated payload and remember its extent.

        Raises PayloadError when the payload is misaligned, lies outside the
        heap, or overlaps a payload already recorded.
        """
        if size <= 0:
            raise ValueError("size must be positive")
        hi = lo + size - 1

        if lo % ALIGNMENT != 0:
            raise PayloadError(
                f"Payload address ({_addr(lo)}) not aligned to {ALIGNMENT} bytes"
            )

        heap_lo, heap_hi = heap.heap_lo(), heap.heap_hi()
        if lo < heap_lo or lo > heap_hi or hi < heap_lo or hi > heap_hi:
            raise PayloadError(
                f"Payload ({_addr(lo)}:{_addr(hi)}) lies outside heap "
                f"({_addr(heap_lo)}:{_addr(heap_hi)})"
            )

        for other in self._ranges:
            if other.lo <= lo <= other.hi or other.lo <= hi <= other.hi:
                raise PayloadError(
                    f"Payload ({_addr(lo)}:{_addr(hi)}) overlaps another payload "
                    f"({_addr(other.lo)}:{_addr(other.hi)})"
                )

        new = Range(lo, hi)
        self._ranges.insert(0, new)
        return new

    def remove(self, lo: int) -> None:
        """Forget the payload starting at ``lo``; unknown addresses are ignored."""
        for position, existing in enumerate(self._ranges):
            if existing.lo == lo:
                del self._ranges[position]
                return

    def clear(self) -> None:
        """Forget every payload."""
        self._ranges.clear()

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[Range]:
        return iter(list(self._ranges))