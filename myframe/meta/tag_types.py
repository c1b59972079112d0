from __future__ import annotations

from types import MappingProxyType

BYTE = 1
ASCII = 2
SHORT = 3
LONG = 4
RATIONAL = 5
UNDEFINED = 7
SLONG = 9
SRATIONAL = 10

TYPE_WIDTHS = MappingProxyType(
    {
        BYTE: 1,
        ASCII: 1,
        SHORT: 2,
        LONG: 4,
        RATIONAL: 8,
        UNDEFINED: 1,
        SLONG: 4,
        SRATIONAL: 8,
    }
)


def type_width(type_code: int) -> int | None:
    return TYPE_WIDTHS.get(type_code)
