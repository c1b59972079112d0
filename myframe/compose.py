from __future__ import annotations

from datetime import datetime

from myframe.constants import TOKEN_SEPARATOR
from myframe.models import DisplayConfig, PhotoExif


def _split_date_time(date_time: str | None) -> tuple[str, str]:
    if not date_time:
        return "", ""
    parts = date_time.strip().split(" ")
    date_part = parts[0]
    time_part = parts[1] if len(parts) > 1 else ""
    return date_part, time_part


def format_date(date_time: str | None, date_format: str) -> str | None:
    """Format the date portion of an EXIF timestamp.

    Dates that do not parse come back as the raw text with ``:`` turned
    into ``.``.
    """
    date_part, _ = _split_date_time(date_time)
    if not date_part:
        return None
    try:
        parsed = datetime.strptime(date_part.replace(":", "-"), "%Y-%m-%d")
    except ValueError:
        return date_part.replace(":", ".")

    yyyy = f"{parsed.year}"
    mm = f"{parsed.month:02d}"
    dd = f"{parsed.day:02d}"
    if date_format == "MM.DD.YYYY":
        return f"{mm}.{dd}.{yyyy}"
    if date_format == "DD.MM.YYYY":
        return f"{dd}.{mm}.{yyyy}"
    return f"{yyyy}.{mm}.{dd}"


def format_time(date_time: str | None) -> str | None:
    _, time_part = _split_date_time(date_time)
    return time_part[:5] or None


def line1_tokens(exif: PhotoExif, config: DisplayConfig) -> list[str]:
    parts: list[str] = []
    if config.show_maker and exif.make:
        parts.append(exif.make.upper())
    if config.show_model and exif.model:
        parts.append(exif.model.upper())
    if config.show_lens and exif.lens:
        parts.append(exif.lens.upper())
    return parts


def line2_tokens(exif: PhotoExif, config: DisplayConfig) -> list[str]:
    parts: list[str] = []
    if config.show_date:
        date_text = format_date(exif.date_time, config.date_format)
        if date_text:
            parts.append(date_text)
    if config.show_time:
        time_text = format_time(exif.date_time)
        if time_text:
            parts.append(time_text)
    if config.show_exposure:
        if exif.shutter_speed:
            parts.append(exif.shutter_speed)
        if exif.f_number:
            parts.append(exif.f_number)
    if config.show_iso and exif.iso:
        parts.append(exif.iso)
    if config.show_film_simulation and exif.film_simulation:
        parts.append(exif.film_simulation.upper())
    if config.show_location and exif.location:
        parts.append(exif.location)
    return parts


def format_line(tokens: list[str]) -> str:
    return TOKEN_SEPARATOR.join(tokens)
