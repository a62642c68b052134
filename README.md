# systemslab

A small collection of systems-programming building blocks:

- `systemslab.memlib` – a **simulated heap** (`SimulatedHeap`) with a
  brk-style break pointer that can only grow, plus word and byte access to
  the simulated memory;
- `systemslab.traces` – parsing of **allocator trace files** (`parse_trace`,
  `read_trace`) and a `RangeList` that checks allocated payloads for
  alignment, heap bounds and overlap;
- `systemslab.cycles` – a restartable **cycle counter** (`CycleCounter`), a
  K-best sampler (`KBestSampler`) and `CycleTimer`, which estimates how long a
  function takes;
- `systemslab.rio` – **robust I/O**: `readn`, `writen` and the buffered
  `RobustReader` over sockets or binary file objects;
- `systemslab.hostinfo` – a **host lookup** command;
- `systemslab.adder` – a small **CGI program** that adds two numbers.

No third-party libraries are needed.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Simulated heap

Addresses are integer offsets into a fixed block of memory; the heap starts
at 0. `sbrk` raises `HeapExhaustedError` when asked to shrink the heap or to
grow it past its maximum size.

```python
from systemslab.memlib import SimulatedHeap

heap = SimulatedHeap(4096)
start = heap.sbrk(64)          # 0
heap.write_word(start, 0x11)   # unsigned 32-bit little-endian
heap.fill(start + 8, 0xAB, 16)
heap.heapsize()                # 64
heap.reset_brk()               # empty again
```

## Trace files

A trace file starts with four numbers (suggested heap size, number of block
ids, number of requests, weight) followed by one request per line:
`a <id> <size>` allocates, `r <id> <size>` reallocates, `f <id>` frees.
Malformed files raise `TraceError`.

```python
from systemslab.traces import parse_trace, RangeList
from systemslab.memlib import SimulatedHeap

trace = parse_trace("0 2 4 1\na 0 16\na 1 8\nf 0\nf 1\n")
[op.type for op in trace.ops]   # [OpType.ALLOC, OpType.ALLOC, OpType.FREE, OpType.FREE]

heap = SimulatedHeap(4096)
heap.sbrk(64)
ranges = RangeList()
ranges.add(8, 16, heap)         # raises PayloadError if misaligned,
                                # outside the heap or overlapping
ranges.remove(8)
```

`read_trace(tracedir, filename)` reads and parses a file from disk.

## Timing

`CycleTimer.measure(func)` runs `func` until its `k` best times agree within
`epsilon` (or `maxsamples` runs have been made) and returns the best time.
By default the counter is `time.perf_counter_ns`, so results are in
nanoseconds; pass your own `CycleCounter(clock=...)` to count something else.

```python
from systemslab.cycles import CycleTimer

timer = CycleTimer(k=3, maxsamples=20, epsilon=0.01)
best = timer.measure(lambda: sum(range(10_000)))
```

## Robust I/O

```python
import io
from systemslab.rio import RobustReader, readn

reader = RobustReader(io.BytesIO(b"GET / HTTP/1.0\r\nHost: x\r\n\r\n"))
reader.readline()   # b"GET / HTTP/1.0\r\n"
reader.read(9)      # b"Host: x\r\n"
```

`readline(maxlen)` returns at most `maxlen - 1` bytes and `b""` at end of
input; `readn` reads up to `n` bytes, stopping early only at end of input;
`writen` writes all of its data.

## Commands

Print the IPv4 addresses a host name resolves to:

```
systemslab-hostinfo example.com
```

Each line reads `canonname: <name>, hostname: <address>`.

Run the adder CGI program; it reads `QUERY_STRING` (for example `3&4`) and
writes an HTTP response body with headers to standard output:

```
QUERY_STRING='3&4' systemslab-adder
```

A query string without `&` is reported on standard error and the command
exits with status 1. `systemslab.adder.render(query_string)` builds the same
response as a string.

## What this package does not do

The package provides the heap simulation, trace handling and timing pieces,
but no allocator that manages blocks inside the simulated heap and no driver
that replays traces and scores an allocator. It also has no HTTP proxy and
no web server: the robust I/O helpers and the CGI adder are there, but
nothing listens for connections or runs CGI programs.