import pytest

from systemslab.memlib import SimulatedHeap
from systemslab.traces import (
    OpType,
    PayloadError,
    RangeList,
    Trace,
    TraceError,
    TraceOp,
    parse_trace,
    read_trace,
)

SAMPLE = """20000
2
5
1
a 0 512
a 1 128
r 0 640
f 1
f 0
"""


@pytest.fixture
def heap():
    h = SimulatedHeap(4096)
    h.sbrk(256)
    return h


def test_parse_header_and_ops():
    trace = parse_trace(SAMPLE, "sample")
    assert trace.sugg_heapsize == 20000
    assert trace.num_ids == 2
    assert trace.num_ops == 5
    assert trace.weight == 1
    assert trace.ops == [
        TraceOp(OpType.ALLOC, 0, 512),
        TraceOp(OpType.ALLOC, 1, 128),
        TraceOp(OpType.REALLOC, 0, 640),
        TraceOp(OpType.FREE, 1),
        TraceOp(OpType.FREE, 0),
    ]


def test_block_storage_sized_by_ids():
    trace = parse_trace(SAMPLE)
    assert len(trace.blocks) == trace.num_ids
    assert len(trace.block_sizes) == trace.num_ids
    assert all(block is None for block in trace.blocks)


def test_bogus_type_character():
    text = "0 1 2 0\na 0 8\nx 0\n"
    with pytest.raises(TraceError, match=r"Bogus type character \(x\)"):
        parse_trace(text, "bad.rep")


def test_id_count_mismatch():
    with pytest.raises(TraceError):
        parse_trace("0 3 1 0\na 0 8\n")


def test_op_count_mismatch():
    with pytest.raises(TraceError):
        parse_trace("0 1 3 0\na 0 8\nf 0\n")


def test_incomplete_header():
    with pytest.raises(TraceError):
        parse_trace("100 2\n")


def test_truncated_request():
    with pytest.raises(TraceError):
        parse_trace("0 1 1 0\na 0\n")


def test_read_trace_from_directory(tmp_path):
    (tmp_path / "sample.rep").write_text(SAMPLE)
    trace = read_trace(str(tmp_path), "sample.rep")
    assert isinstance(trace, Trace)
    assert trace.ops == parse_trace(SAMPLE).ops


def test_read_trace_missing_file(tmp_path):
    with pytest.raises(TraceError, match="Could not open"):
        read_trace(str(tmp_path), "missing.rep")


def test_range_add_records_extent(heap):
    ranges = RangeList()
    added = ranges.add(8, 24, heap)
    assert added.lo == 8
    assert added.size == 24
    assert list(ranges) == [added]


def test_ranges_iterate_newest_first(heap):
    ranges = RangeList()
    first = ranges.add(8, 8, heap)
    second = ranges.add(32, 8, heap)
    assert list(ranges) == [second, first]
    assert len(ranges) == 2


def test_misaligned_payload(heap):
    with pytest.raises(PayloadError, match="not aligned"):
        RangeList().add(12, 8, heap)


def test_payload_outside_heap(heap):
    with pytest.raises(PayloadError, match="outside heap"):
        RangeList().add(248, 16, heap)


def test_overlapping_payload(heap):
    ranges = RangeList()
    ranges.add(16, 32, heap)
    with pytest.raises(PayloadError, match="overlaps"):
        ranges.add(40, 16, heap)
    assert len(ranges) == 1


def test_zero_size_rejected(heap):
    with pytest.raises(ValueError):
        RangeList().add(8, 0, heap)


def test_remove_allows_reuse(heap):
    ranges = RangeList()
    ranges.add(16, 32, heap)
    ranges.remove(16)
    assert len(ranges) == 0
    again = ranges.add(16, 32, heap)
    assert list(ranges) == [again]


def test_remove_unknown_is_ignored(heap):
    ranges = RangeList()
    kept = ranges.add(16, 8, heap)
    ranges.remove(64)
    assert list(ranges) == [kept]


def test_clear(heap):
    ranges = RangeList()
    ranges.add(8, 8, heap)
    ranges.add(64, 8, heap)
    ranges.clear()
    assert len(ranges) == 0
    assert list(ranges) == []