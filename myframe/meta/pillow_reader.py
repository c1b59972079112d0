from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

from PIL import ExifTags, Image

LOGGER = logging.getLogger(__name__)


def _ratio_to_float(value: Any) -> float:
    if isinstance(value, tuple) and len(value) == 2:
        numerator, denominator = value
        if denominator == 0:
            return 0.0
        return float(numerator) / float(denominator)
    numerator = getattr(value, "numerator", None)
    denominator = getattr(value, "denominator", None)
    if numerator is not None and denominator not in (None, 0):
        return float(numerator) / float(denominator)
    return float(value)


def _dms_to_degree(values: Any, ref: str | None) -> float | None:
    if not isinstance(values, (list, tuple)) or len(values) != 3:
        return None
    try:
        d = _ratio_to_float(values[0])
        m = _ratio_to_float(values[1])
        s = _ratio_to_float(values[2])
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    degree = d + (m / 60.0) + (s / 3600.0)
    if ref and ref.upper() in {"S", "W"}:
        degree = -degree
    return degree


def _collect_exif(exif: Image.Exif, metadata: dict[str, Any]) -> None:
    for tag_id, value in exif.items():
        tag = ExifTags.TAGS.get(tag_id, str(tag_id))
        if tag in {"ExifOffset", "GPSInfo"}:
            continue
        metadata[tag] = value

    for tag_id, value in exif.get_ifd(ExifTags.IFD.Exif).items():
        tag = ExifTags.TAGS.get(tag_id, str(tag_id))
        metadata[tag] = value

    gps_info = {ExifTags.GPSTAGS.get(k, str(k)): v for k, v in exif.get_ifd(ExifTags.IFD.GPSInfo).items()}
    if not gps_info:
        return
    metadata["GPSInfo"] = gps_info
    lat = _dms_to_degree(gps_info.get("GPSLatitude"), gps_info.get("GPSLatitudeRef"))
    lon = _dms_to_degree(gps_info.get("GPSLongitude"), gps_info.get("GPSLongitudeRef"))
    if lat is not None:
        metadata["GPSLatitude"] = lat
    if lon is not None:
        metadata["GPSLongitude"] = lon


def _read(source: Any, metadata: dict[str, Any]) -> dict[str, Any]:
    try:
        with Image.open(source) as image:
            exif = image.getexif()
            if exif:
                _collect_exif(exif, metadata)
    except Exception as exc:
        LOGGER.debug("Pillow metadata read failed for %s: %s", metadata.get("SourceFile", "<bytes>"), exc)
    return metadata


def extract_metadata(path: Path) -> dict[str, Any]:
    """Flatten IFD0, Exif and GPS tags of ``path`` into a name -> value mapping.

    ``MakerNote`` keeps its raw bytes.  Files Pillow cannot identify yield a
    mapping holding only ``SourceFile``.
    """
    return _read(path, {"SourceFile": str(path)})


def extract_metadata_from_bytes(data: bytes) -> dict[str, Any]:
    return _read(io.BytesIO(data), {})
