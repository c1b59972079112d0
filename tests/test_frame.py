import pytest
from PIL import Image, ImageFont

from myframe.models import DisplayConfig, PhotoExif
from myframe.render import frame
from myframe.render.frame import encode_jpeg, layout_frame, plan_canvas, render_frame, text_anchor_x


def _exif() -> PhotoExif:
    return PhotoExif(
        make="Sony",
        model="A7III",
        shutter_speed="1/250s",
        f_number="f/2.8",
        iso="ISO 100",
        date_time="2024:03:15 10:22:31",
    )


def test_plan_canvas_geometry() -> None:
    plan = plan_canvas(1000, 800, DisplayConfig(thickness=40), lines_used_1=1, lines_used_2=1)

    base = 1000 / 45
    assert plan.scale == 1.0
    assert plan.thickness == 40
    assert plan.font_size_1 == pytest.approx(base)
    assert plan.font_size_2 == pytest.approx(base * 0.75)
    assert plan.line_spacing_1 == pytest.approx(base * 1.25)
    assert plan.line_spacing_2 == pytest.approx(base * 0.75 * 1.25)
    assert plan.top_margin == pytest.approx(16)
    assert plan.bottom_padding == pytest.approx(16)
    assert plan.corner_radius == pytest.approx(24)
    assert plan.canvas_width == 1080
    expected_height = 800 + 40 + 16 + base * 1.25 + base * 0.75 * 1.25 + 16
    assert plan.canvas_height == pytest.approx(expected_height)
    assert plan.canvas_size == (1080, int(expected_height))
    assert plan.text_top == pytest.approx(856)


def test_plan_canvas_scales_with_image_width() -> None:
    plan = plan_canvas(4000, 3000, DisplayConfig(thickness=50), lines_used_1=0, lines_used_2=0)

    assert plan.thickness == 200
    assert plan.corner_radius == 96
    assert plan.canvas_width == 4400
    assert plan.canvas_height == pytest.approx(3000 + 200 + 80 + 80)


def test_canvas_height_grows_with_visible_lines() -> None:
    config = DisplayConfig()
    heights = [
        plan_canvas(1200, 900, config, l1, l2).canvas_height
        for l1, l2 in [(0, 0), (0, 1), (1, 1), (2, 1), (2, 2)]
    ]

    assert heights == sorted(heights)
    assert len(set(heights)) == len(heights)


def test_text_anchor_follows_alignment() -> None:
    plan = plan_canvas(1000, 800, DisplayConfig(thickness=40), 1, 1)

    assert text_anchor_x(plan, "center") == 540
    assert text_anchor_x(plan, "left") == pytest.approx(44)
    assert text_anchor_x(plan, "right") == pytest.approx(1080 - 44)


def test_render_frame_size_matches_layout() -> None:
    image = Image.new("RGB", (1000, 700), color="#336699")
    config = DisplayConfig()

    plan, layout1, layout2 = layout_frame(image.size, _exif(), config)
    rendered = render_frame(image, _exif(), config)

    assert layout1.count == 1
    assert layout2.count == 1
    assert rendered.size == plan.canvas_size
    assert rendered.getpixel((500, 400)) == (0x33, 0x66, 0x99)


def test_render_frame_draws_caption_in_text_color() -> None:
    image = Image.new("RGB", (1000, 700), color="#FFFFFF")
    config = DisplayConfig(color="#FFFFFF", text_color="#000000")

    plan, _, _ = layout_frame(image.size, _exif(), config)
    rendered = render_frame(image, _exif(), config)

    caption = rendered.crop((0, int(plan.text_top), rendered.width, rendered.height)).convert("L")
    darkest, _ = caption.getextrema()
    assert darkest < 128


def test_caption_lines_use_their_own_opacity() -> None:
    image = Image.new("RGB", (1000, 500), color="#FFFFFF")
    config = DisplayConfig(color="#FFFFFF", text_color="#000000")

    plan, layout1, layout2 = layout_frame(image.size, _exif(), config)
    rendered = render_frame(image, _exif(), config).convert("L")

    assert layout1.count == 1
    assert layout2.count == 1
    line2_top = plan.text_top + layout1.count * plan.line_spacing_1
    line1_band = rendered.crop((0, int(plan.text_top), rendered.width, int(line2_top)))
    line2_band = rendered.crop((0, int(line2_top), rendered.width, rendered.height))
    # black at 90% and 60% alpha over white
    assert abs(line1_band.getextrema()[0] - 25) <= 2
    assert abs(line2_band.getextrema()[0] - 102) <= 2


def test_fonts_load_at_the_planned_fractional_sizes(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[float, bool]] = []

    def _record(font_path, size, bold=False, bold_font_path=None):
        calls.append((size, bold))
        return ImageFont.load_default(size=size)

    monkeypatch.setattr(frame, "load_font", _record)
    plan, _, _ = layout_frame((1000, 700), _exif(), DisplayConfig())

    assert calls[0] == (pytest.approx(plan.font_size_1), True)
    assert calls[1] == (pytest.approx(plan.font_size_2), False)
    assert plan.font_size_1 != round(plan.font_size_1)


def test_hidden_metadata_leaves_only_the_border() -> None:
    image = Image.new("RGB", (500, 400), color="#FF0000")
    config = DisplayConfig(
        show_maker=False,
        show_model=False,
        show_lens=False,
        show_date=False,
        show_time=False,
        show_exposure=False,
        show_iso=False,
    )

    rendered = render_frame(image, _exif(), config)

    plan = plan_canvas(500, 400, config, 0, 0)
    assert rendered.size == plan.canvas_size


def test_round_corners_clip_the_photo() -> None:
    image = Image.new("RGB", (1000, 500), color="#FF0000")
    square = render_frame(image, PhotoExif(), DisplayConfig(thickness=40, color="#FFFFFF"))
    rounded = render_frame(image, PhotoExif(), DisplayConfig(thickness=40, color="#FFFFFF", round_corners=True))

    assert square.getpixel((40, 40)) == (255, 0, 0)
    assert rounded.getpixel((40, 40)) == (255, 255, 255)
    assert rounded.getpixel((540, 290)) == (255, 0, 0)


def test_encoding_is_reproducible() -> None:
    image = Image.new("RGB", (640, 480), color="#204060")
    config = DisplayConfig(round_corners=True, alignment="left")

    first = encode_jpeg(render_frame(image, _exif(), config))
    second = encode_jpeg(render_frame(image, _exif(), config))

    assert first == second
    assert first[:2] == b"\xff\xd8"
