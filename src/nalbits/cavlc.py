import logging
from typing import Callable, Optional, TypeVar

import numpy as np

from .bitstream import BitCursor
from .errors import BitCursorError, EndOfBufferError, InvalidSizeError, ValueTooWideError
from .rbsp import more_rbsp_data

logger = logging.getLogger(__name__)

T = TypeVar("T")

INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)


class GolombDecoder:
    """
    Exp-Golomb decoder for CAVLC syntax elements: ue(v), se(v), te(v), me(v).

    All reads go through the shared BitCursor. A decode that fails partway
    puts the cursor back where it started before the error propagates.
    """

    def __init__(self, cursor: BitCursor):
        self.cursor = cursor

    def decode_raw(self, size: Optional[int] = None) -> int:
        """Fixed-length u(n) read."""
        if size is None:
            raise InvalidSizeError("decode_raw requires a size", position=self.cursor.get_position())
        return self.cursor.read_bits(size)

    def decode_ue(self) -> int:
        """
        Read Unsigned Exponential-Golomb (ue(v)) code.
        Scans for the terminating 1 with no cap on the prefix length.
        """
        return self._rewind_on_error(self._read_ue)

    def decode_se(self) -> int:
        """
        Read Signed Exponential-Golomb (se(v)) code.
        Maps 0, 1, 2, 3, 4 ... to 0, 1, -1, 2, -2 ...
        """
        val = self.decode_ue()
        sign = ((val & 1) << 1) - 1
        return ((val >> 1) + (val & 1)) * sign

    def decode_te(self, max_value: Optional[int] = None) -> int:
        """
        Read Truncated Exponential-Golomb (te(v)) code.
        With a range of 0..1 the code is a single inverted bit.
        """
        if max_value is None:
            raise InvalidSizeError("decode_te requires a range maximum", position=self.cursor.get_position())
        if max_value > 1:
            return self.decode_ue()
        return ~self.cursor.read_bit() & 0x01

    def decode_me(self) -> int:
        """
        Read Mapped Exponential-Golomb (me(v)) code.

        Returns the raw codeNum. The coded_block_pattern mapping tables
        are not implemented, so this is equivalent to decode_ue().
        """
        return self.decode_ue()

    def decode_array(self, count: int, signed: bool = False) -> np.ndarray:
        """
        Decode `count` consecutive ue(v) (or se(v)) values.
        Either every value is decoded or the cursor is left untouched.
        """
        if count < 0:
            raise InvalidSizeError(f"Count must not be negative, got {count}", position=self.cursor.get_position())

        decode = self.decode_se if signed else self.decode_ue

        def read_all() -> np.ndarray:
            values = [decode() for _ in range(count)]
            for val in values:
                if not INT64_MIN <= val <= INT64_MAX:
                    raise ValueTooWideError(
                        f"Decoded value {val} does not fit in int64",
                        position=self.cursor.get_position(),
                    )
            return np.array(values, dtype=np.int64)

        return self._rewind_on_error(read_all)

    def more_rbsp_data(self) -> bool:
        return more_rbsp_data(self.cursor)

    def _read_ue(self) -> int:
        leading_zeros = 0
        while self.cursor.read_bit() == 0:
            leading_zeros += 1

        if leading_zeros == 0:
            return 0

        rem = self.cursor.read_bits(leading_zeros)
        return (1 << leading_zeros) - 1 + rem

    def _rewind_on_error(self, decode: Callable[[], T]) -> T:
        start = self.cursor.get_position()
        try:
            return decode()
        except BitCursorError as e:
            logger.debug("Decode failed at bit %d (started at %d): %s", self.cursor.get_position(), start, e)
            self.cursor.set_position(start)
            raise


class GolombEncoder:
    """
    Exp-Golomb writer, the inverse of GolombDecoder.

    Writes go through BitCursor.write_bits, which ORs bits in place, so the
    cursor's buffer must be zero-initialised (e.g. bytearray(n)).
    """

    def __init__(self, cursor: BitCursor):
        self.cursor = cursor

    @staticmethod
    def ue_length(value: int) -> int:
        """Length in bits of the ue(v) code for `value`."""
        if value < 0:
            raise ValueTooWideError(f"ue(v) cannot represent {value}")
        return ((value + 1).bit_length() - 1) * 2 + 1

    @staticmethod
    def se_length(value: int) -> int:
        return GolombEncoder.ue_length(GolombEncoder._se_to_ue(value))

    def encode_raw(self, value: int, size: int) -> None:
        self.cursor.write_bits(value, size)

    def encode_ue(self, value: int) -> None:
        # value + 1 written in 2n + 1 bits gives n leading zeros, the 1, then the suffix
        length = self.ue_length(value)
        position = self.cursor.get_position()
        if position + length > self.cursor.get_limit():
            raise EndOfBufferError(
                f"ue({value}) needs {length} bits at {position}, limit is {self.cursor.get_limit()}",
                position=position,
            )
        self.cursor.write_bits(value + 1, length)

    def encode_se(self, value: int) -> None:
        self.encode_ue(self._se_to_ue(value))

    def encode_te(self, value: int, max_value: Optional[int] = None) -> None:
        if max_value is None:
            raise InvalidSizeError("encode_te requires a range maximum", position=self.cursor.get_position())
        if max_value > 1:
            if value > max_value:
                raise ValueTooWideError(
                    f"te(v) with range {max_value} cannot represent {value}",
                    position=self.cursor.get_position(),
                )
            self.encode_ue(value)
            return
        if value not in (0, 1):
            raise ValueTooWideError(f"te(v) with range 1 cannot represent {value}", position=self.cursor.get_position())
        self.cursor.write_bits(value ^ 0x01, 1)

    @staticmethod
    def _se_to_ue(value: int) -> int:
        return 2 * value - 1 if value > 0 else -2 * value
