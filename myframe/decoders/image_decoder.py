from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from myframe.constants import SUPPORTED_EXTENSIONS


class RasterBackendError(RuntimeError):
    """An image could not be decoded or encoded."""


def _decode(source: Path | io.BytesIO) -> Image.Image:
    with Image.open(source) as image:
        return ImageOps.exif_transpose(image).convert("RGB").copy()


def decode_image(path: Path) -> Image.Image:
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise RasterBackendError(f"unsupported image format: {path.suffix}")
    try:
        return _decode(path)
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise RasterBackendError(f"cannot decode {path.name}: {exc}") from exc


def decode_image_bytes(data: bytes) -> Image.Image:
    try:
        return _decode(io.BytesIO(data))
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise RasterBackendError(f"cannot decode image data: {exc}") from exc
