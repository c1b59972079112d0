from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont

from myframe import constants
from myframe.compose import line1_tokens, line2_tokens
from myframe.models import CanvasPlan, DisplayConfig, LayoutResult, PhotoExif
from myframe.render.typography import load_font, text_width, wrap_tokens

_ANCHORS = {"left": "la", "center": "ma", "right": "ra"}


def plan_canvas(
    image_width: int,
    image_height: int,
    config: DisplayConfig,
    lines_used_1: int,
    lines_used_2: int,
) -> CanvasPlan:
    scale = image_width / constants.REFERENCE_WIDTH
    thickness = config.thickness * scale
    font_size_1 = image_width / constants.FONT_DIVISOR
    font_size_2 = font_size_1 * constants.LINE2_FONT_RATIO
    line_spacing_1 = font_size_1 * constants.LINE_SPACING_RATIO
    line_spacing_2 = font_size_2 * constants.LINE_SPACING_RATIO
    top_margin = thickness * constants.TEXT_MARGIN_RATIO
    bottom_padding = thickness * constants.TEXT_MARGIN_RATIO

    text_height = lines_used_1 * line_spacing_1 + lines_used_2 * line_spacing_2
    return CanvasPlan(
        image_width=image_width,
        image_height=image_height,
        scale=scale,
        thickness=thickness,
        font_size_1=font_size_1,
        font_size_2=font_size_2,
        line_spacing_1=line_spacing_1,
        line_spacing_2=line_spacing_2,
        top_margin=top_margin,
        bottom_padding=bottom_padding,
        lines_used_1=lines_used_1,
        lines_used_2=lines_used_2,
        corner_radius=constants.CORNER_RADIUS * scale,
        canvas_width=image_width + thickness * 2,
        canvas_height=image_height + thickness + top_margin + text_height + bottom_padding,
    )


def _fonts(
    image_width: int, font_path: Path | None, bold_font_path: Path | None = None
) -> tuple[ImageFont.ImageFont, ImageFont.ImageFont]:
    base = image_width / constants.FONT_DIVISOR
    line1_font = load_font(font_path, base, bold=True, bold_font_path=bold_font_path)
    line2_font = load_font(font_path, base * constants.LINE2_FONT_RATIO, bold=False)
    return line1_font, line2_font


def layout_frame(
    image_size: tuple[int, int],
    exif: PhotoExif,
    config: DisplayConfig,
    font_path: Path | None = None,
    bold_font_path: Path | None = None,
) -> tuple[CanvasPlan, LayoutResult, LayoutResult]:
    """Wrap both metadata lines against the photo width and size the canvas."""
    width, height = image_size
    line1_font, line2_font = _fonts(width, font_path, bold_font_path)
    measure_draw = ImageDraw.Draw(Image.new("RGB", (1, 1)))

    layout1 = wrap_tokens(
        line1_tokens(exif, config),
        width,
        lambda text: text_width(measure_draw, text, line1_font),
    )
    layout2 = wrap_tokens(
        line2_tokens(exif, config),
        width,
        lambda text: text_width(measure_draw, text, line2_font),
    )
    plan = plan_canvas(width, height, config, layout1.count, layout2.count)
    return plan, layout1, layout2


def text_anchor_x(plan: CanvasPlan, alignment: str) -> float:
    inset = plan.thickness * constants.TEXT_INSET_RATIO
    if alignment == "left":
        return plan.thickness + inset
    if alignment == "right":
        return plan.canvas_size[0] - plan.thickness - inset
    return plan.thickness + plan.image_width / 2


def _rounded_mask(size: tuple[int, int], radius: float) -> Image.Image:
    mask = Image.new("L", size, 0)
    width, height = size
    ImageDraw.Draw(mask).rounded_rectangle([(0, 0), (width - 1, height - 1)], radius=radius, fill=255)
    return mask


def _draw_block(
    draw: ImageDraw.ImageDraw,
    layout: LayoutResult,
    *,
    x: float,
    y: float,
    spacing: float,
    font: ImageFont.ImageFont,
    fill: tuple[int, int, int, int],
    anchor: str,
) -> None:
    for index, line in enumerate(layout.texts):
        draw.text((x, y + index * spacing), line, font=font, fill=fill, anchor=anchor)


def render_frame(
    image: Image.Image,
    exif: PhotoExif,
    config: DisplayConfig,
    font_path: Path | None = None,
    bold_font_path: Path | None = None,
) -> Image.Image:
    """Compose the bordered photo with its metadata caption."""
    plan, layout1, layout2 = layout_frame(
        image.size, exif, config, font_path=font_path, bold_font_path=bold_font_path
    )
    background = ImageColor.getrgb(config.color)[:3]
    text_rgb = ImageColor.getrgb(config.text_color)[:3]

    canvas = Image.new("RGB", plan.canvas_size, color=background)
    offset = (int(plan.thickness), int(plan.thickness))
    photo = image.convert("RGB")
    if config.round_corners:
        canvas.paste(photo, offset, _rounded_mask(photo.size, plan.corner_radius))
    else:
        canvas.paste(photo, offset)

    if layout1.count == 0 and layout2.count == 0:
        return canvas

    line1_font, line2_font = _fonts(plan.image_width, font_path, bold_font_path)
    overlay = Image.new("RGBA", canvas.size, color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    x = text_anchor_x(plan, config.alignment)
    anchor = _ANCHORS.get(config.alignment, "ma")
    y = plan.text_top

    _draw_block(
        draw,
        layout1,
        x=x,
        y=y,
        spacing=plan.line_spacing_1,
        font=line1_font,
        fill=(*text_rgb, round(255 * constants.LINE1_OPACITY)),
        anchor=anchor,
    )
    y += layout1.count * plan.line_spacing_1
    _draw_block(
        draw,
        layout2,
        x=x,
        y=y,
        spacing=plan.line_spacing_2,
        font=line2_font,
        fill=(*text_rgb, round(255 * constants.LINE2_OPACITY)),
        anchor=anchor,
    )
    return Image.alpha_composite(canvas.convert("RGBA"), overlay).convert("RGB")


def encode_jpeg(image: Image.Image, quality: int = constants.JPEG_QUALITY) -> bytes:
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality, optimize=True, progressive=True)
    return buffer.getvalue()
