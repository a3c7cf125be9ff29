"""Level 2: Backing Region Tests.

Fixture-driven tests here run twice: once over a plain bytearray and once over a
memory-mapped file, covering:
- Short, full, long and huge writes
- Multi-part writes and reset
- Wrap-around reads
- Caller metadata preserved around the window
- Releasing the region on close
"""

from __future__ import annotations

import mmap
from collections.abc import Callable
from pathlib import Path

from circbuf.ring_buffer import Region, RingBuffer

RingFactory = Callable[..., tuple[RingBuffer, Region]]

MULTI_PART_INPUTS = [
    b"hello world\n",
    b"this is a test\n",
    b"my cool input\n",
]


# =============================================================================
# L2-001 to L2-006: Writes
# =============================================================================


def test_short_write(make_ring: RingFactory) -> None:
    """A write smaller than capacity is returned as-is."""
    ring, _ = make_ring(offset=20, capacity=1024)
    inp = b"hello world"

    assert ring.write(inp) == len(inp)
    assert ring.getvalue() == inp


def test_full_write(make_ring: RingFactory) -> None:
    """A write of exactly capacity bytes is returned as-is."""
    inp = b"hello world"
    ring, _ = make_ring(offset=20, capacity=len(inp))

    assert ring.write(inp) == len(inp)
    assert ring.getvalue() == inp


def test_long_write_without_offset(make_ring: RingFactory) -> None:
    """Capacity 6, no offset: 'hello world' keeps ' world'."""
    ring, _ = make_ring(offset=0, capacity=6)

    ring.write(b"hello world")

    assert ring.getvalue() == b" world"


def test_long_write_with_offset(make_ring: RingFactory) -> None:
    """Capacity 6 after a 12 byte offset keeps ' world'."""
    ring, _ = make_ring(offset=12, capacity=6)

    assert ring.write(b"hello world") == 11
    assert ring.getvalue() == b" world"


def test_huge_write(make_ring: RingFactory) -> None:
    """Capacity 3 after a 12 byte offset in a 15 byte region keeps 'rld'."""
    ring, _ = make_ring(offset=12, capacity=3, region_size=15)

    assert ring.write(b"hello world") == 11
    assert ring.getvalue() == b"rld"


def test_many_small_writes_preserve_header(make_ring: RingFactory) -> None:
    """Byte-by-byte writes wrap many times without touching the header."""
    ring, region = make_ring(offset=12, capacity=3)
    header = b"matt"
    region[0:4] = header

    for value in b"hello world":
        assert ring.write(bytes([value])) == 1

    assert ring.getvalue() == b"rld"
    assert bytes(region[0:4]) == header


# =============================================================================
# L2-007 to L2-008: Multi-part Writes and Reset
# =============================================================================


def test_multi_part_write(make_ring: RingFactory) -> None:
    """Three chunks into capacity 16 keep the last 16 bytes of the stream."""
    ring, _ = make_ring(offset=4, capacity=16)

    for chunk in MULTI_PART_INPUTS:
        assert ring.write(chunk) == len(chunk)

    assert ring.total_written == sum(len(chunk) for chunk in MULTI_PART_INPUTS)
    assert ring.total_written == 41
    assert ring.getvalue() == b"t\nmy cool input\n"


def test_reset_then_write(make_ring: RingFactory) -> None:
    """After reset, only bytes written since count."""
    ring, _ = make_ring(offset=4, capacity=4)
    for chunk in MULTI_PART_INPUTS:
        ring.write(chunk)

    ring.reset()
    assert ring.write(b"hello") == 5

    assert ring.getvalue() == b"ello"
    assert ring.total_written == 5


# =============================================================================
# L2-009 to L2-010: Reads
# =============================================================================


def test_short_read_then_read_in_a_loop(make_ring: RingFactory) -> None:
    """A full window reads back exactly, then twice over when asked for 2x."""
    ring, _ = make_ring(offset=4, capacity=11)
    inp = b"hello world"
    ring.write(inp)

    assert ring.read(len(inp)) == inp

    out = bytearray(2 * ring.capacity)
    assert ring.readinto(out) == len(out)
    assert out == inp + inp
    assert ring.read_cursor == 0


def test_read_never_touches_offset_bytes(make_ring: RingFactory) -> None:
    """Reads only ever come from the window, never from the caller's bytes."""
    ring, region = make_ring(offset=3, capacity=4)
    region[0:3] = b"XYZ"
    ring.write(b"abcd")

    assert ring.read(9) == b"abcdabcda"


# =============================================================================
# L2-011 to L2-013: Region Boundaries and Lifetime
# =============================================================================


def test_bytes_outside_window_never_mutated(make_ring: RingFactory) -> None:
    """Neither the leading offset nor trailing bytes change across many wraps."""
    ring, region = make_ring(offset=4, capacity=8, region_size=16)
    region[0:4] = b"HDR!"
    region[12:16] = b"TAIL"

    for i in range(200):
        ring.write(bytes([i % 256]) * (i % 19))
    ring.reset()
    ring.write(b"0123456789abcdef")

    assert bytes(region[0:4]) == b"HDR!"
    assert bytes(region[12:16]) == b"TAIL"


def test_close_releases_region_for_resize() -> None:
    """A bytearray region can be resized again once the buffer is closed."""
    region = bytearray(8)

    with RingBuffer(region, 0, 8) as ring:
        ring.write(b"abc")

    assert ring.closed
    region.extend(b"more")
    assert len(region) == 12


def test_close_releases_mapped_region(tmp_path: Path) -> None:
    """A memory map can be closed once the buffer and its views are released."""
    path = tmp_path / "exampleTestfile"
    path.write_bytes(bytes(2 + 7))

    with path.open("r+b") as region_file:
        mapped = mmap.mmap(region_file.fileno(), 0)
        with RingBuffer(mapped, 2, 7) as ring:
            ring.write(b"hello world, I am a circular buffer!")
            with ring.snapshot() as view:
                assert bytes(view) == b"buffer!"
        mapped.flush()
        mapped.close()

    assert path.read_bytes()[2:] == b"buffer!"
