"""
Error taxonomy for bit cursor and Exp-Golomb operations.

Every failure is raised before the cursor changes (or after it has been
restored), so a caller catching one of these can keep using the cursor.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Category of a failed cursor operation."""
    END_OF_BUFFER = "end_of_buffer"    # read/write would pass the bit limit
    INVALID_SIZE = "invalid_size"      # zero or missing size argument
    VALUE_TOO_WIDE = "value_too_wide"  # value needs more bits than requested
    OUT_OF_RANGE = "out_of_range"      # byte offset past the buffer


class BitCursorError(Exception):
    """Base class for all cursor failures."""
    kind: ErrorKind

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class EndOfBufferError(BitCursorError, EOFError):
    kind = ErrorKind.END_OF_BUFFER


class InvalidSizeError(BitCursorError, ValueError):
    kind = ErrorKind.INVALID_SIZE


class ValueTooWideError(BitCursorError, ValueError):
    kind = ErrorKind.VALUE_TOO_WIDE


class OutOfRangeError(BitCursorError, IndexError):
    kind = ErrorKind.OUT_OF_RANGE
