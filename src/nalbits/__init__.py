"""
nalbits - Bit cursor and Exp-Golomb primitives for NAL-unit bitstreams.

Reads and writes individual bits and fixed-width fields over a NAL payload,
decodes the CAVLC Exp-Golomb variants (ue, se, te, me) and detects the
rbsp_trailing_bits() stop pattern.

References:
    ITU-T H.264 (04/2017) - 7.2 Specification of syntax functions,
        9.1 Parsing process for Exp-Golomb codes.
"""

from importlib.metadata import version as _get_version, PackageNotFoundError

try:
    __version__ = _get_version("nalbits")
except PackageNotFoundError:
    # Package not installed (running from source)
    __version__ = "0.0.0-dev"

from .errors import (
    ErrorKind,
    BitCursorError,
    EndOfBufferError,
    InvalidSizeError,
    ValueTooWideError,
    OutOfRangeError,
)
from .bitstream import BitCursor
from .cavlc import GolombDecoder, GolombEncoder
from .rbsp import more_rbsp_data, write_rbsp_trailing_bits, unescape_rbsp

__all__ = [
    "__version__",
    # Cursor
    "BitCursor",
    # Exp-Golomb
    "GolombDecoder",
    "GolombEncoder",
    # RBSP
    "more_rbsp_data",
    "write_rbsp_trailing_bits",
    "unescape_rbsp",
    # Errors
    "ErrorKind",
    "BitCursorError",
    "EndOfBufferError",
    "InvalidSizeError",
    "ValueTooWideError",
    "OutOfRangeError",
]
