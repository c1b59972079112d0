from __future__ import annotations

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".tif", ".tiff"}

DATE_FORMATS = ("YYYY.MM.DD", "MM.DD.YYYY", "DD.MM.YYYY")
DEFAULT_DATE_FORMAT = "YYYY.MM.DD"

ALIGNMENTS = {"left", "center", "right"}

TOKEN_SEPARATOR = " · "
MAX_TEXT_LINES = 2

THICKNESS_MIN = 10
THICKNESS_MAX = 100

# Geometry is expressed against a 1000px wide photo and scaled from there.
REFERENCE_WIDTH = 1000.0
FONT_DIVISOR = 45.0
LINE2_FONT_RATIO = 0.75
LINE_SPACING_RATIO = 1.25
TEXT_MARGIN_RATIO = 0.4
TEXT_INSET_RATIO = 0.1
CORNER_RADIUS = 24.0
LINE1_OPACITY = 0.9
LINE2_OPACITY = 0.6

JPEG_QUALITY = 95
OUTPUT_EXTENSION = "jpg"
DEFAULT_NAME_TEMPLATE = "MyFrame_{stem}.{ext}"

DISPLAY_FIELDS = (
    "maker",
    "model",
    "lens",
    "date",
    "time",
    "exposure",
    "iso",
    "location",
    "film_simulation",
)
