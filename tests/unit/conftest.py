"""Shared fixtures for circbuf tests."""

from __future__ import annotations

import mmap
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import IO, Any

import pytest

from circbuf.ring_buffer import Region, RingBuffer

RegionFactory = Callable[[int], Region]
RingFactory = Callable[..., tuple[RingBuffer, Region]]


@pytest.fixture(params=["slice of bytes", "memory mapped file"])
def region_factory(
    request: pytest.FixtureRequest, tmp_path: Path
) -> Iterator[RegionFactory]:
    """Provide a factory for zero-filled regions of either backing kind.

    Memory-mapped regions are backed by files under ``tmp_path``; the maps and
    files are closed on teardown.
    """
    open_files: list[IO[bytes]] = []
    maps: list[mmap.mmap] = []

    def make_region(size: int) -> Region:
        if request.param == "slice of bytes":
            return bytearray(size)

        path = tmp_path / f"region_{len(maps)}_testfile"
        path.write_bytes(bytes(size))
        region_file = path.open("r+b")
        open_files.append(region_file)
        mapped = mmap.mmap(region_file.fileno(), size)
        maps.append(mapped)
        return mapped

    yield make_region

    for mapped in maps:
        mapped.close()
    for region_file in open_files:
        region_file.close()


@pytest.fixture
def make_ring(region_factory: RegionFactory) -> Iterator[RingFactory]:
    """Provide a factory building a ring buffer over a fresh region.

    Rings are closed on teardown so their regions can be unmapped.
    """
    rings: list[RingBuffer] = []

    def _make_ring(
        offset: int,
        capacity: int,
        region_size: int | None = None,
        **kwargs: Any,
    ) -> tuple[RingBuffer, Region]:
        size = region_size if region_size is not None else offset + capacity
        region = region_factory(size)
        ring = RingBuffer(region, offset, capacity, **kwargs)
        rings.append(ring)
        return ring, region

    yield _make_ring

    for ring in rings:
        ring.close()
