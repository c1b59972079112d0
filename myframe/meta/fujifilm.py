from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from myframe.meta.makernote import decode_makernote

FILM_MODE_KEY = "film-mode"

FILM_MODES = MappingProxyType(
    {
        0: "Provia/Standard",
        256: "Studio Portrait",
        272: "Studio Portrait Enhanced Saturation",
        288: "Astia",
        304: "Studio Portrait Increased Sharpness",
        512: "Velvia",
        768: "Studio Portrait EX",
        1024: "Velvia",
        1280: "Pro Neg. Standard",
        1281: "Pro Neg. Hi",
        1536: "Classic Chrome",
        1792: "Eterna",
        2048: "Classic Negative",
        2304: "Bleach Bypass",
        2560: "Nostalgic Negative",
    }
)

VALUE_TABLES: Mapping[str, Mapping[Any, str]] = MappingProxyType(
    {
        FILM_MODE_KEY: FILM_MODES,
    }
)


def is_fujifilm(make: Any) -> bool:
    return isinstance(make, str) and "fujifilm" in make.lower()


def _lookup(table: Mapping[Any, str], value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return value
    return table.get(value, value)


def normalize_makernote(decoded: Mapping[str, Any]) -> dict[str, Any]:
    """Translate recognised MakerNote values into display labels.

    Unknown codes pass through unchanged and unrecognised keys are dropped.
    """
    normalized: dict[str, Any] = {}
    for key, table in VALUE_TABLES.items():
        value = decoded.get(key)
        if value is None:
            continue
        normalized[key] = _lookup(table, value)
    return normalized


def film_simulation(makernote: Any) -> str | None:
    normalized = normalize_makernote(decode_makernote(makernote))
    value = normalized.get(FILM_MODE_KEY)
    if value is None or value == "":
        return None
    return str(value)
