from __future__ import annotations

import platform
from functools import lru_cache
from pathlib import Path
from typing import Callable, Sequence

from PIL import ImageDraw, ImageFont

from myframe.constants import MAX_TEXT_LINES, TOKEN_SEPARATOR
from myframe.models import LayoutResult


def _system_font_candidates(bold: bool) -> list[Path]:
    system = platform.system().lower()
    if "windows" in system:
        if bold:
            return [Path(r"C:\Windows\Fonts\arialbd.ttf"), Path(r"C:\Windows\Fonts\segoeuib.ttf")]
        return [Path(r"C:\Windows\Fonts\arial.ttf"), Path(r"C:\Windows\Fonts\segoeui.ttf")]
    if "darwin" in system:
        if bold:
            return [
                Path("/System/Library/Fonts/Supplemental/Arial Bold.ttf"),
                Path("/Library/Fonts/Arial Bold.ttf"),
                Path("/System/Library/Fonts/Helvetica.ttc"),
            ]
        return [
            Path("/System/Library/Fonts/Supplemental/Arial.ttf"),
            Path("/Library/Fonts/Arial.ttf"),
            Path("/System/Library/Fonts/Helvetica.ttc"),
        ]
    if bold:
        return [
            Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
            Path("/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf"),
            Path("/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf"),
        ]
    return [
        Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
        Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
        Path("/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"),
    ]


def font_candidates(font_path: Path | None, bold: bool, bold_font_path: Path | None = None) -> list[Path]:
    """Font files to try, most preferred first.

    ``font_path`` serves both weights unless ``bold_font_path`` is given, in
    which case bold text tries that file first.
    """
    candidates: list[Path] = []
    if bold and bold_font_path:
        candidates.append(bold_font_path)
    if font_path:
        candidates.append(font_path)
    candidates.extend(_system_font_candidates(bold))
    return candidates


@lru_cache(maxsize=64)
def load_font(
    font_path: Path | None,
    size: float,
    bold: bool = False,
    bold_font_path: Path | None = None,
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    # Fractional sizes keep glyph metrics in step with the canvas geometry.
    size = max(1.0, float(size))
    for candidate in font_candidates(font_path, bold, bold_font_path):
        if candidate.exists():
            try:
                return ImageFont.truetype(str(candidate), size=size)
            except OSError:
                continue
    return ImageFont.load_default(size=size)


def text_width(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont) -> float:
    return draw.textlength(text, font=font)


def wrap_tokens(
    tokens: Sequence[str],
    max_width: float,
    measure: Callable[[str], float],
    max_lines: int = MAX_TEXT_LINES,
) -> LayoutResult:
    """Greedily pack whole tokens into lines joined by ``" · "``.

    A token is never split: one that is wider than ``max_width`` on its own
    still gets a line to itself.  Every line is computed, then only the first
    ``max_lines`` are kept.
    """
    if not tokens:
        return LayoutResult()

    lines: list[list[str]] = []
    current: list[str] = []
    for token in tokens:
        candidate = TOKEN_SEPARATOR.join([*current, token])
        if measure(candidate) > max_width and current:
            lines.append(current)
            current = [token]
        else:
            current.append(token)
    lines.append(current)
    return LayoutResult(lines=lines[:max_lines])
