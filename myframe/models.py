from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from myframe.constants import DEFAULT_DATE_FORMAT, TOKEN_SEPARATOR


@dataclass(slots=True)
class MakerNoteEntry:
    tag: int
    type: int
    count: int
    key: str
    value: Any = None


@dataclass(slots=True)
class PhotoExif:
    make: str | None = None
    model: str | None = None
    lens: str | None = None
    f_number: str | None = None
    shutter_speed: str | None = None
    iso: str | None = None
    focal_length: str | None = None
    date_time: str | None = None
    location: str | None = None
    film_simulation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "make": self.make,
            "model": self.model,
            "lens": self.lens,
            "f_number": self.f_number,
            "shutter_speed": self.shutter_speed,
            "iso": self.iso,
            "focal_length": self.focal_length,
            "date_time": self.date_time,
            "location": self.location,
            "film_simulation": self.film_simulation,
        }


@dataclass(frozen=True, slots=True)
class DisplayConfig:
    show_maker: bool = True
    show_model: bool = True
    show_lens: bool = True
    show_date: bool = True
    date_format: str = DEFAULT_DATE_FORMAT
    show_time: bool = True
    show_exposure: bool = True
    show_iso: bool = True
    show_location: bool = False
    show_film_simulation: bool = False
    thickness: int = 40
    color: str = "#FFFFFF"
    text_color: str = "#000000"
    alignment: str = "center"
    round_corners: bool = False

    def replace(self, **changes: Any) -> "DisplayConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(slots=True)
class LayoutResult:
    lines: list[list[str]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.lines)

    @property
    def texts(self) -> list[str]:
        return [TOKEN_SEPARATOR.join(line) for line in self.lines]


@dataclass(slots=True)
class CanvasPlan:
    image_width: int
    image_height: int
    scale: float
    thickness: float
    font_size_1: float
    font_size_2: float
    line_spacing_1: float
    line_spacing_2: float
    top_margin: float
    bottom_padding: float
    lines_used_1: int
    lines_used_2: int
    corner_radius: float
    canvas_width: float
    canvas_height: float

    @property
    def text_top(self) -> float:
        return self.image_height + self.thickness + self.top_margin

    @property
    def canvas_size(self) -> tuple[int, int]:
        return int(self.canvas_width), int(self.canvas_height)
