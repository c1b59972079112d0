"""Fujifilm MakerNote IFD decoding.

The MakerNote is a private little-endian IFD.  When it begins with the
``FUJIFILM`` marker, a uint32 at byte 8 holds the directory offset; otherwise
the directory starts at byte 0.  Out-of-line values are addressed relative to
the start of the MakerNote buffer, not the enclosing file.

Every read is bounds checked so that hostile headers can only shorten the
result, never raise.
"""
from __future__ import annotations

import logging
import struct
from typing import Any, Iterator

from myframe.meta import tag_types
from myframe.models import MakerNoteEntry

LOGGER = logging.getLogger(__name__)

FUJIFILM_MARKER = b"FUJIFILM"
ENTRY_SIZE = 12
INLINE_SIZE = 4

TAG_NAMES = {
    0x1401: "film-mode",
}

_ARRAY_FORMATS = {
    tag_types.SHORT: "H",
    tag_types.LONG: "I",
}


def tag_key(tag: int) -> str:
    return TAG_NAMES.get(tag) or f"unknown-0x{tag:x}"


def _as_bytes(buffer: Any) -> bytes | None:
    if buffer is None:
        return None
    if isinstance(buffer, bytes):
        return buffer
    if isinstance(buffer, (bytearray, memoryview)):
        return bytes(buffer)
    if isinstance(buffer, (list, tuple)):
        try:
            return bytes(buffer)
        except (TypeError, ValueError):
            return None
    return None


def _ascii(raw: bytes) -> str:
    return raw.decode("latin-1").replace("\x00", "")


def _ifd_start(data: bytes) -> int | None:
    if data[:8] != FUJIFILM_MARKER:
        return 0
    if len(data) < 12:
        return None
    return struct.unpack_from("<I", data, 8)[0]


def _decode_inline(data: bytes, field_offset: int, type_code: int, count: int) -> Any:
    if type_code == tag_types.SHORT:
        return struct.unpack_from("<H", data, field_offset)[0]
    if type_code == tag_types.LONG:
        return struct.unpack_from("<I", data, field_offset)[0]
    if type_code == tag_types.SLONG:
        return struct.unpack_from("<i", data, field_offset)[0]
    if type_code == tag_types.ASCII:
        return _ascii(data[field_offset : field_offset + count])
    return struct.unpack_from("<I", data, field_offset)[0]


def _decode_out_of_line(data: bytes, start: int, type_code: int, count: int, total_bytes: int) -> Any:
    end = start + total_bytes
    if end > len(data):
        raise struct.error(f"value range {start}..{end} exceeds buffer of {len(data)} bytes")
    if type_code == tag_types.ASCII:
        return _ascii(data[start:end])
    fmt = _ARRAY_FORMATS.get(type_code)
    if fmt is not None:
        return list(struct.unpack_from(f"<{count}{fmt}", data, start))
    return list(data[start:end])


def iter_makernote_entries(buffer: Any) -> Iterator[MakerNoteEntry]:
    """Yield every entry of the MakerNote IFD whose value could be decoded.

    Stops quietly at the first entry that does not fit in the buffer.
    Entries with unknown field types or unreadable out-of-line values are
    skipped.
    """
    data = _as_bytes(buffer)
    if not data or len(data) < 2:
        return
    start = _ifd_start(data)
    if start is None or start + 2 > len(data):
        LOGGER.debug("MakerNote IFD offset %s is outside a %d byte buffer", start, len(data))
        return

    entry_count = struct.unpack_from("<H", data, start)[0]
    offset = start + 2
    for index in range(entry_count):
        if offset + ENTRY_SIZE > len(data):
            LOGGER.debug("MakerNote truncated after %d of %d entries", index, entry_count)
            return
        tag, type_code, count, value_offset = struct.unpack_from("<HHII", data, offset)
        field_offset = offset + 8
        offset += ENTRY_SIZE

        width = tag_types.type_width(type_code)
        if width is None:
            LOGGER.debug("MakerNote tag 0x%04x has unsupported type %d", tag, type_code)
            continue

        total_bytes = width * count
        if total_bytes <= INLINE_SIZE:
            value = _decode_inline(data, field_offset, type_code, count)
        else:
            try:
                value = _decode_out_of_line(data, value_offset, type_code, count, total_bytes)
            except struct.error as exc:
                LOGGER.debug("MakerNote tag 0x%04x value unreadable: %s", tag, exc)
                continue

        yield MakerNoteEntry(tag=tag, type=type_code, count=count, key=tag_key(tag), value=value)


def decode_makernote(buffer: Any) -> dict[str, Any]:
    return {entry.key: entry.value for entry in iter_makernote_entries(buffer)}
