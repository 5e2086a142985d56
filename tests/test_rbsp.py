"""
Tests for RBSP trailing-bit detection and emulation prevention removal.
"""

import pytest

from nalbits.bitstream import BitCursor
from nalbits.cavlc import GolombDecoder, GolombEncoder
from nalbits.rbsp import more_rbsp_data, write_rbsp_trailing_bits, unescape_rbsp


class TestMoreRbspData:

    @pytest.mark.parametrize("data", [b'\x00', b'\xff\xff', b'\x80'])
    def test_false_at_start(self, data):
        # Nothing consumed yet counts as no more data
        assert more_rbsp_data(BitCursor(data)) is False

    @pytest.mark.parametrize("data", [b'\x00', b'\xff\xff', b'\x80'])
    def test_false_at_limit(self, data):
        cursor = BitCursor(data)
        cursor.set_position(cursor.get_limit())
        assert more_rbsp_data(cursor) is False

    def test_empty_buffer(self):
        assert more_rbsp_data(BitCursor()) is False

    def test_stop_bit_in_last_byte(self):
        # ue=0, ue=1, stop bit, padding: 1 010 1 000
        cursor = BitCursor(b'\xa8')
        dec = GolombDecoder(cursor)
        assert dec.decode_ue() == 0
        assert more_rbsp_data(cursor) is True
        assert dec.decode_ue() == 1
        assert more_rbsp_data(cursor) is False

    def test_stop_pattern_with_following_byte(self):
        cursor = BitCursor(b'\xa8\x00')
        cursor.set_position(4)
        assert more_rbsp_data(cursor) is True

    def test_aligned_position_checks_whole_byte(self):
        cursor = BitCursor(b'\xff\x80')
        cursor.set_position(8)
        assert more_rbsp_data(cursor) is False
        # The check point moves, the cursor does not
        assert cursor.get_position() == 8

    def test_aligned_position_with_data(self):
        cursor = BitCursor(b'\xff\xc0')
        cursor.set_position(8)
        assert more_rbsp_data(cursor) is True

    def test_aligned_position_not_last_byte(self):
        cursor = BitCursor(b'\xff\x80\x00')
        cursor.set_position(8)
        assert more_rbsp_data(cursor) is True

    def test_padding_without_stop_bit(self):
        cursor = BitCursor(b'\xf0')
        cursor.set_position(4)
        assert more_rbsp_data(cursor) is True

    def test_does_not_move_cursor(self):
        cursor = BitCursor(b'\xa8')
        cursor.set_position(3)
        more_rbsp_data(cursor)
        assert cursor.get_position() == 3

    def test_decoder_delegates(self):
        dec = GolombDecoder(BitCursor(b'\xa8'))
        dec.decode_ue()
        dec.decode_ue()
        assert dec.more_rbsp_data() is False


class TestTrailingBits:

    def test_unaligned(self):
        cursor = BitCursor(bytearray(1))
        cursor.write_bits(0b101, 3)
        write_rbsp_trailing_bits(cursor)
        assert cursor.get_buffer()[0] == 0xb0
        assert cursor.is_aligned()

    def test_aligned(self):
        cursor = BitCursor(bytearray(2))
        cursor.set_offset(1)
        write_rbsp_trailing_bits(cursor)
        assert bytes(cursor.get_buffer()) == b'\x00\x80'
        assert cursor.get_position() == 16

    def test_last_bit_of_byte(self):
        cursor = BitCursor(bytearray(1))
        cursor.set_position(7)
        write_rbsp_trailing_bits(cursor)
        assert cursor.get_buffer()[0] == 0x01
        assert cursor.get_position() == 8

    def test_build_and_parse(self):
        cursor = BitCursor(bytearray(1))
        enc = GolombEncoder(cursor)
        enc.encode_ue(0)
        enc.encode_ue(1)
        write_rbsp_trailing_bits(cursor)
        assert cursor.get_buffer()[0] == 0xa8

        cursor.set_position(0)
        dec = GolombDecoder(cursor)
        values = [dec.decode_ue()]
        while dec.more_rbsp_data():
            values.append(dec.decode_ue())
        assert values == [0, 1]


@pytest.mark.parametrize("payload,expected", [
    (b'\x00\x00\x03\x01', b'\x00\x00\x01'),
    (b'\x00\x03\x01', b'\x00\x03\x01'),
    (b'\x00\x00\x03\x00\x00\x03', b'\x00\x00\x00\x00'),
    (b'\x00\x00\x00\x03', b'\x00\x00\x00'),
    (b'\x00\x00\x03\x03', b'\x00\x00\x03'),
    (b'\x67\x42\xc0\x1e', b'\x67\x42\xc0\x1e'),
    (b'', b''),
])
def test_unescape_rbsp(payload, expected):
    assert unescape_rbsp(payload) == expected


def test_unescape_then_parse():
    # pps_id=0, sps_id=0 followed by a zero run that needed escaping
    escaped = b'\xc0\x00\x00\x03\x01\x80'
    cursor = BitCursor(unescape_rbsp(escaped))
    dec = GolombDecoder(cursor)
    assert dec.decode_ue() == 0
    assert dec.decode_ue() == 0
    assert cursor.get_limit() == 5 * 8
