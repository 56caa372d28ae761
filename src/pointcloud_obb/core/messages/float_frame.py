"""Raw IEEE-754 frames for flat float sequences.

A frame is the values packed back to back in network byte order (big-endian),
with no header, length prefix or version field. Both ends must agree on the
precision out-of-band:

- ``"single"``: 4 bytes per value (``!f``)
- ``"double"``: 8 bytes per value (``!d``)
"""

import struct
from collections.abc import Sequence
from typing import Literal

FramePrecision = Literal["single", "double"]

_FORMAT_CHARS: dict[str, str] = {"single": "f", "double": "d"}


def _format_char(precision: str) -> str:
    try:
        return _FORMAT_CHARS[precision]
    except KeyError:
        raise ValueError(
            f"Unknown frame precision {precision!r}, expected one of {sorted(_FORMAT_CHARS)}"
        ) from None


def value_size(precision: FramePrecision = "single") -> int:
    """Return the number of bytes used per value."""
    return struct.calcsize("!" + _format_char(precision))


def pack_floats(values: Sequence[float], precision: FramePrecision = "single") -> bytes:
    """Pack floats into a headerless frame.

    Example:
        >>> len(pack_floats([1.0, 2.0, 3.0]))
        12
        >>> len(pack_floats([1.0, 2.0, 3.0], "double"))
        24
    """
    return struct.pack(f"!{len(values)}{_format_char(precision)}", *values)


def unpack_floats(data: bytes, precision: FramePrecision = "single") -> list[float]:
    """Unpack a headerless frame into a list of floats.

    Raises:
        ValueError: If the frame length is not a multiple of the value size
    """
    size = value_size(precision)
    if len(data) % size != 0:
        raise ValueError(f"Frame length {len(data)} is not a multiple of {size} bytes")

    count = len(data) // size
    return list(struct.unpack(f"!{count}{_format_char(precision)}", data))
