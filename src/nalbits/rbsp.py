"""
RBSP (Raw Byte Sequence Payload) helpers.

An RBSP ends with rbsp_trailing_bits(): a single stop bit set to 1 followed
by zero bits up to the next byte boundary. These helpers detect that tail
while parsing, write it while building, and strip emulation-prevention
bytes from NAL payloads before parsing starts.
"""

from .bitstream import BitCursor, BytesLike


def more_rbsp_data(cursor: BitCursor) -> bool:
    """
    Return True if syntax elements remain before the trailing bits.

    Never moves the cursor. Returns False before anything has been read
    (position 0) and at the end of the buffer.
    """
    position = cursor.get_position()
    if position >= cursor.get_limit() or position == 0:
        return False

    n_bit = position % 8
    check = position
    if n_bit == 0:
        check += 1

    tail = 1 << (8 - n_bit - 1)
    mask = (tail << 1) - 1

    offset = check // 8
    cur_byte = cursor.byte_at(offset)
    if cur_byte is None:
        return False

    has_tail = (cur_byte & mask) == tail
    next_byte = cursor.byte_at(offset + 1)
    return not (next_byte is None and has_tail)


def write_rbsp_trailing_bits(cursor: BitCursor) -> None:
    """Write the stop bit and zero-pad to the next byte boundary."""
    pad = (8 - (cursor.get_position() + 1) % 8) % 8
    cursor.write_bits(1 << pad, pad + 1)


def unescape_rbsp(payload: BytesLike) -> bytes:
    """
    Remove emulation prevention bytes: 0x000003 becomes 0x0000.
    Only the 0x03 directly following two zero bytes is dropped.
    """
    data = bytes(payload)
    out = bytearray()
    zeros = 0
    for byte in data:
        if zeros >= 2 and byte == 0x03:
            zeros = 0
            continue
        out.append(byte)
        zeros = zeros + 1 if byte == 0 else 0
    return bytes(out)
