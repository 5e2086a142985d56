from typing import Optional, Union

from .errors import EndOfBufferError, InvalidSizeError, OutOfRangeError, ValueTooWideError

BytesLike = Union[bytes, bytearray, memoryview]


class BitCursor:
    """
    Bit-granular read/write cursor over a fixed-length byte buffer.
    Bits are addressed MSB-first: position 0 is the top bit of byte 0.

    A bytearray passed in is used directly (the cursor takes ownership);
    anything else is copied so the cursor always holds a writable buffer.
    """

    def __init__(self, buffer: Optional[BytesLike] = None):
        if buffer is None:
            self._buffer = bytearray()
        elif isinstance(buffer, bytearray):
            self._buffer = buffer
        else:
            self._buffer = bytearray(buffer)

        self._position = 0  # bit position
        self._limit = len(self._buffer) * 8  # buffer limit in bits

    def __repr__(self):
        return f"<BitCursor position={self._position} limit={self._limit}>"

    @property
    def position(self) -> int:
        return self._position

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def bits_left(self) -> int:
        return self._limit - self._position

    def read_bit(self) -> int:
        """Read a single bit and advance by one."""
        if not 0 <= self._position < self._limit:
            raise EndOfBufferError(
                f"Cannot read bit at {self._position}, limit is {self._limit}",
                position=self._position,
            )

        byte = self._buffer[self._position >> 3]
        bit = (byte >> (7 - (self._position & 7))) & 0x01
        self._position += 1
        return bit

    def read_bits(self, size: int) -> int:
        """
        Read `size` bits and return them as an integer.
        The first bit read becomes the most significant bit of the result.
        """
        if size <= 0:
            raise InvalidSizeError(f"Read size must be positive, got {size}", position=self._position)
        if self._position < 0 or self._position + size > self._limit:
            raise EndOfBufferError(
                f"Cannot read {size} bits at {self._position}, limit is {self._limit}",
                position=self._position,
            )

        val = 0
        for _ in range(size):
            val = (val << 1) | self.read_bit()
        return val

    def write_bits(self, value: int, size: int) -> None:
        """
        Write `value` as a `size`-bit big-endian field at the current position.

        Bits are OR-ed into the buffer and never cleared, so the target
        region must be zero-initialised beforehand.
        """
        # Minimal representation of 0 is a single bit
        width = max(value.bit_length(), 1)
        if value < 0 or width > size:
            raise ValueTooWideError(
                f"Value {value} does not fit in {size} bits",
                position=self._position,
            )
        if self._position < 0 or self._position + size > self._limit:
            raise EndOfBufferError(
                f"Cannot write {size} bits at {self._position}, limit is {self._limit}",
                position=self._position,
            )

        for shift in range(size - 1, -1, -1):
            bit = (value >> shift) & 0x01
            index = self._position
            self._buffer[index >> 3] |= bit << (7 - (index & 7))
            self._position += 1

    def get_position(self) -> int:
        return self._position

    def set_position(self, position: int) -> None:
        """Absolute seek in bits. Not bounds-checked; see set_offset."""
        self._position = position

    def set_offset(self, offset: int) -> None:
        """Seek to the first bit of byte `offset`."""
        if not 0 <= offset <= len(self._buffer):
            raise OutOfRangeError(
                f"Byte offset {offset} outside buffer of {len(self._buffer)} bytes",
                position=self._position,
            )
        self._position = offset * 8

    def get_limit(self) -> int:
        """Buffer size in bits."""
        return self._limit

    def is_aligned(self) -> bool:
        return self._position % 8 == 0

    def byte_align(self) -> None:
        """Skip to next byte boundary."""
        if self._position % 8 != 0:
            self._position += 8 - (self._position % 8)

    def get_buffer(self) -> memoryview:
        """Read-only view of the underlying buffer."""
        return memoryview(self._buffer).toreadonly()

    def byte_at(self, offset: int) -> Optional[int]:
        """Byte at `offset`, or None when outside the buffer."""
        if 0 <= offset < len(self._buffer):
            return self._buffer[offset]
        return None
