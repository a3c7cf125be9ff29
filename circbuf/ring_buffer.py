"""Byte-oriented ring buffer over a borrowed region with overwrite-on-full semantics."""

from __future__ import annotations

import logging
import mmap
from types import TracebackType

from circbuf.config import RingBufferConfig
from circbuf.const import DEFAULT_WRAP_LOG_INTERVAL
from circbuf.exceptions import CursorStateError, SizeError
from circbuf.sampled_logger import make_sampled_logger

logger = logging.getLogger(__name__)

Region = bytearray | memoryview | mmap.mmap


class RingBuffer:
    """Fixed-capacity circular log over a caller-owned byte region.

    The buffer owns no memory. It interprets ``region[offset:offset + capacity]``
    (the window) as a ring and never touches the bytes outside it, so the caller
    may keep its own metadata in the first ``offset`` bytes.

    - Writes never fail; only the last ``capacity`` bytes ever written are kept.
    - Reads are raw and physical: they stream the window from an independent
      read cursor, wrapping forever, and know nothing of what was written.
    - Single-threaded; callers serialize access externally.

    The caller must keep the region alive, and its size stable, until the
    buffer is closed.
    """

    def __init__(
        self,
        region: Region,
        offset: int,
        capacity: int,
        *,
        reset_read_cursor: bool = False,
        wrap_log_interval: int = DEFAULT_WRAP_LOG_INTERVAL,
    ) -> None:
        """Initialize the ring buffer over ``region``.

        :param region: writable byte region, at least ``offset + capacity`` long
        :param offset: leading bytes of the region reserved for the caller
        :param capacity: size of the window in bytes
        :param reset_read_cursor: whether ``reset()`` also rewinds the read cursor
        :param wrap_log_interval: log the first wraparound and every Nth after it
        :raises SizeError: if the dimensions are invalid or exceed the region
        :raises TypeError: if the region is read-only
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise SizeError(f"capacity must be an integer, got {capacity!r}")
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise SizeError(f"offset must be an integer, got {offset!r}")
        if capacity <= 0:
            raise SizeError(f"capacity must be positive, got {capacity}")
        if offset < 0:
            raise SizeError(f"offset must not be negative, got {offset}")

        view = memoryview(region).cast("B")
        if view.readonly:
            view.release()
            raise TypeError("ring buffer region must be writable")
        if len(view) < offset + capacity:
            region_size = len(view)
            view.release()
            raise SizeError(
                f"region of {region_size} bytes cannot hold offset {offset} "
                f"plus capacity {capacity}"
            )

        self._region = view
        self._window = view[offset : offset + capacity]
        self._offset = offset
        self._capacity = capacity
        self._reset_read_cursor = reset_read_cursor
        self._write_cursor = 0
        self._read_cursor = 0
        self._total_written = 0
        self._closed = False
        self._log_wrap = make_sampled_logger(
            "RingBuffer write cursor wrapped %d times "
            "(total_written=%d, capacity=%d)",
            log_interval=wrap_log_interval,
            target_logger=logger,
        )

        logger.debug(
            "RingBuffer created: region=%d offset=%d capacity=%d",
            len(view),
            offset,
            capacity,
        )

    @classmethod
    def from_config(cls, region: Region, config: RingBufferConfig) -> RingBuffer:
        """Create a ring buffer over ``region`` using a resolved config."""
        return cls(
            region,
            config.offset,
            config.capacity,
            reset_read_cursor=config.reset_read_cursor,
            wrap_log_interval=config.wrap_log_interval,
        )

    @property
    def capacity(self) -> int:
        """Return the size of the window in bytes."""
        return self._capacity

    @property
    def offset(self) -> int:
        """Return the number of reserved bytes before the window."""
        return self._offset

    @property
    def total_written(self) -> int:
        """Return the number of bytes written since creation or the last reset."""
        return self._total_written

    @property
    def write_cursor(self) -> int:
        """Return the window position of the next write."""
        return self._write_cursor

    @property
    def read_cursor(self) -> int:
        """Return the window position of the next read."""
        return self._read_cursor

    @property
    def closed(self) -> bool:
        """Return True once the buffer has released its region."""
        return self._closed

    def __len__(self) -> int:
        """Return the number of bytes currently retained."""
        return min(self._total_written, self._capacity)

    def __bytes__(self) -> bytes:
        return self.getvalue()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(offset={self._offset}, "
            f"capacity={self._capacity}, total_written={self._total_written})"
        )

    def __enter__(self) -> RingBuffer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _check_open(self) -> memoryview:
        if self._closed:
            raise ValueError("I/O operation on closed ring buffer.")
        return self._window

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write data to the ring buffer, overwriting the oldest bytes.

        Only the last ``capacity`` bytes of an oversized write can survive, so
        the leading part of such a write is skipped without being copied.

        :param data: the data to write to the ring buffer
        :return: ``len(data)``, always; the whole input is consumed
        """
        window = self._check_open()
        chunk = memoryview(data).cast("B")
        data_len = len(chunk)
        self._total_written += data_len
        if not data_len:
            return 0

        capacity = self._capacity
        if data_len > capacity:
            logger.debug(
                "Write of %d bytes exceeds capacity %d; keeping the last %d",
                data_len,
                capacity,
                capacity,
            )
            chunk = chunk[data_len - capacity :]

        chunk_len = len(chunk)
        cursor = self._write_cursor
        end_space = capacity - cursor
        if chunk_len <= end_space:
            window[cursor : cursor + chunk_len] = chunk
        else:
            window[cursor:] = chunk[:end_space]
            window[: chunk_len - end_space] = chunk[end_space:]

        new_cursor = cursor + chunk_len
        if new_cursor >= capacity:
            self._log_wrap(self._total_written, capacity)
        self._write_cursor = new_cursor % capacity
        return data_len

    def readinto(self, destination: bytearray | memoryview) -> int:
        """Fill ``destination`` with window bytes starting at the read cursor.

        This is a raw physical reader, not a consumer of written data: it
        ignores the write cursor and wraps around the window as many times as
        the destination needs, so it may return stale or never-written bytes.

        :param destination: writable buffer to fill completely
        :return: ``len(destination)``, always
        :raises CursorStateError: if the read cursor has left the window
        """
        window = self._check_open()
        target = memoryview(destination).cast("B")
        if target.readonly:
            raise TypeError("readinto() destination must be writable")

        capacity = self._capacity
        cursor = self._read_cursor
        if not 0 <= cursor <= capacity:
            logger.error(
                "Read cursor %d outside window of capacity %d", cursor, capacity
            )
            raise CursorStateError(
                f"read cursor {cursor} outside window of capacity {capacity}"
            )

        requested = len(target)
        produced = 0
        while produced < requested:
            if cursor == capacity:
                cursor = 0
            step = min(requested - produced, capacity - cursor)
            target[produced : produced + step] = window[cursor : cursor + step]
            cursor += step
            produced += step

        self._read_cursor = cursor % capacity
        return produced

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes from the window, wrapping as needed.

        :param size: number of bytes to read
        :return: the bytes read
        :raises ValueError: if size is negative
        """
        if size < 0:
            raise ValueError(f"read size must not be negative, got {size}")
        out = bytearray(size)
        self.readinto(out)
        return bytes(out)

    def snapshot(self) -> memoryview:
        """Return the retained bytes, oldest first, as a read-only view.

        When the retained bytes are already contiguous and in order the view
        aliases the live window and later writes will change it. Otherwise a
        ``capacity``-sized copy is taken at call time. Release the view (or use
        it in a ``with`` block) before closing a memory-mapped region.
        """
        window = self._check_open()
        total = self._total_written
        cursor = self._write_cursor
        capacity = self._capacity

        if total >= capacity and cursor == 0:
            return window.toreadonly()
        if total > capacity:
            out = bytearray(capacity)
            older = capacity - cursor
            out[:older] = window[cursor:]
            out[older:] = window[:cursor]
            return memoryview(out).toreadonly()
        return window[:cursor].toreadonly()

    def getvalue(self) -> bytes:
        """Return an independent copy of the retained bytes, oldest first."""
        with self.snapshot() as view:
            return bytes(view)

    def reset(self) -> None:
        """Empty the buffer logically without touching the region's bytes.

        The read cursor is left where it is unless the buffer was created with
        ``reset_read_cursor=True``.
        """
        self._check_open()
        self._write_cursor = 0
        self._total_written = 0
        if self._reset_read_cursor:
            self._read_cursor = 0
        logger.debug(
            "RingBuffer reset (read cursor %s)",
            "rewound" if self._reset_read_cursor else "kept",
        )

    def close(self) -> None:
        """Release the buffer's view of the region.

        Calling close more than once is allowed.
        """
        if self._closed:
            return
        self._window.release()
        self._region.release()
        self._closed = True
        logger.debug("RingBuffer closed")
