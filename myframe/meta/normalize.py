from __future__ import annotations

import math
import re
from typing import Any

from myframe.meta.fujifilm import film_simulation, is_fujifilm
from myframe.models import PhotoExif

# Tried in order; the first present field wins.
LENS_FIELDS = ["LensSpecification", "LensInfo", "LensModel", "LensMake"]


def _normalize_lookup(raw: dict[str, Any]) -> dict[str, Any]:
    lookup: dict[str, Any] = {}
    for key, value in raw.items():
        k = str(key).strip().lower()
        if not k:
            continue
        lookup.setdefault(k, value)
        if ":" in k:
            lookup.setdefault(k.split(":")[-1], value)
    return lookup


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).replace("\x00", " ").strip()
    text = re.sub(r"\s+", " ", text)
    return text or None


def _pick(lookup: dict[str, Any], candidates: list[str]) -> Any | None:
    for key in candidates:
        value = lookup.get(key.lower())
        if value in (None, "", " "):
            continue
        return value
    return None


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
    if isinstance(value, str):
        text = _clean_text(value)
        if not text:
            return None
        if "/" in text:
            left, right = text.split("/", 1)
            try:
                denominator = float(right)
                return float(left) / denominator if denominator else None
            except ValueError:
                return None
        match = re.search(r"[-+]?\d+(\.\d+)?", text)
        return float(match.group(0)) if match else None
    try:
        number = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return number if math.isfinite(number) else None


def round_half_up(value: float) -> int:
    """Round half up; ``round()`` would send 0.5 to the even neighbour."""
    return int(math.floor(value + 0.5))


def format_number(value: Any) -> str:
    number = _to_float(value)
    if number is None:
        return str(value)
    return f"{number:g}"


def format_shutter(value: Any) -> str | None:
    seconds = _to_float(value)
    if not seconds or seconds <= 0:
        return None
    if seconds >= 1:
        return f"{round_half_up(seconds)}s"
    return f"1/{round_half_up(1 / seconds)}s"


def format_aperture(value: Any) -> str | None:
    number = _to_float(value)
    if not number:
        return None
    return f"f/{number:g}"


def format_focal(value: Any) -> str | None:
    number = _to_float(value)
    if not number:
        return None
    return f"{number:g}mm"


def format_iso(value: Any) -> str | None:
    number = _to_float(value)
    if not number:
        return None
    return f"ISO {round_half_up(number)}"


def format_lens(value: Any) -> str | None:
    """Render a lens field.

    A four element ``[min focal, max focal, min f, max f]`` lens array
    becomes ``"18-55mm f/2.8-4"``; a pair that is unknown (``0/0``) is left
    out.  Shorter arrays are joined with spaces and plain values are trimmed.
    """
    if isinstance(value, (list, tuple)):
        if len(value) >= 4:
            min_focal, max_focal, min_f, max_f = (_to_float(item) for item in value[:4])
            parts: list[str] = []
            if min_focal is not None and max_focal is not None:
                if min_focal == max_focal:
                    parts.append(f"{min_focal:g}mm")
                else:
                    parts.append(f"{min_focal:g}-{max_focal:g}mm")
            if min_f is not None and max_f is not None:
                parts.append(f"f/{min_f:g}" if min_f == max_f else f"f/{min_f:g}-{max_f:g}")
            return " ".join(parts) or None
        return _clean_text(" ".join(format_number(item) for item in value))
    return _clean_text(value)


def _format_location(lookup: dict[str, Any]) -> str | None:
    lat = _to_float(lookup.get("gpslatitude"))
    lon = _to_float(lookup.get("gpslongitude"))
    if lat is None or lon is None:
        return None
    return f"{lat:.5f}, {lon:.5f}"


def normalize_metadata(raw_metadata: dict[str, Any]) -> PhotoExif:
    lookup = _normalize_lookup(raw_metadata)

    make = _clean_text(_pick(lookup, ["Make"]))
    exif = PhotoExif(
        make=make,
        model=_clean_text(_pick(lookup, ["Model"])),
        lens=format_lens(_pick(lookup, LENS_FIELDS)),
        f_number=format_aperture(_pick(lookup, ["FNumber"])),
        shutter_speed=format_shutter(_pick(lookup, ["ExposureTime"])),
        iso=format_iso(_pick(lookup, ["ISOSpeedRatings", "PhotographicSensitivity", "ISO"])),
        focal_length=format_focal(_pick(lookup, ["FocalLength"])),
        date_time=_clean_text(_pick(lookup, ["DateTimeOriginal", "DateTime"])),
        location=_format_location(lookup),
    )
    if is_fujifilm(make):
        exif.film_simulation = film_simulation(lookup.get("makernote"))
    return exif
