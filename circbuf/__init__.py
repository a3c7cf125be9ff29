from .config import ConfigManager, RingBufferConfig, parse_bytes
from .exceptions import (
    CircularBufferError,
    ConfigLoadError,
    ConfigValidationError,
    CursorStateError,
    SizeError,
)
from .ring_buffer import RingBuffer

__version__ = "1.0.0"

__all__ = [
    "RingBuffer",
    "RingBufferConfig",
    "ConfigManager",
    "parse_bytes",
    "CircularBufferError",
    "SizeError",
    "CursorStateError",
    "ConfigLoadError",
    "ConfigValidationError",
]
