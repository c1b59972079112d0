import struct
from fractions import Fraction

from PIL.TiffImagePlugin import IFDRational

from myframe.meta.normalize import format_lens, format_shutter, normalize_metadata


def _film_mode_makernote(code: int) -> bytes:
    entry = struct.pack("<HHIHH", 0x1401, 3, 1, code, 0)
    return b"FUJIFILM" + struct.pack("<I", 12) + struct.pack("<H", 1) + entry + b"\x00" * 4


def test_normalize_metadata_for_fujifilm_photo() -> None:
    raw = {
        "Make": "FUJIFILM",
        "Model": "X-T5",
        "LensSpecification": (Fraction(18), Fraction(55), Fraction(28, 10), Fraction(4)),
        "LensModel": "XF18-55mmF2.8-4 R LM OIS",
        "FNumber": Fraction(28, 10),
        "ExposureTime": Fraction(1, 250),
        "ISOSpeedRatings": 400,
        "FocalLength": 35.0,
        "DateTimeOriginal": "2024:03:15 10:22:31",
        "DateTime": "2024:03:16 08:00:00",
        "MakerNote": _film_mode_makernote(1536),
    }

    exif = normalize_metadata(raw)

    assert exif.make == "FUJIFILM"
    assert exif.model == "X-T5"
    assert exif.lens == "18-55mm f/2.8-4"
    assert exif.f_number == "f/2.8"
    assert exif.shutter_speed == "1/250s"
    assert exif.iso == "ISO 400"
    assert exif.focal_length == "35mm"
    assert exif.date_time == "2024:03:15 10:22:31"
    assert exif.film_simulation == "Classic Chrome"
    assert exif.location is None


def test_makernote_ignored_for_other_makers() -> None:
    exif = normalize_metadata({"Make": "SONY", "MakerNote": _film_mode_makernote(1536)})

    assert exif.film_simulation is None


def test_lens_falls_back_through_named_fields() -> None:
    assert normalize_metadata({"LensModel": "  FE 24-70mm F2.8 GM II "}).lens == "FE 24-70mm F2.8 GM II"
    assert normalize_metadata({"LensMake": "Sigma"}).lens == "Sigma"
    assert normalize_metadata({}).lens is None


def test_format_lens_variants() -> None:
    assert format_lens([35, 35, 1.4, 1.4]) == "35mm f/1.4"
    assert format_lens([24, 70, 2.8, 2.8]) == "24-70mm f/2.8"
    assert format_lens([50, 1.8]) == "50 1.8"
    assert format_lens("XF23mmF2 R WR") == "XF23mmF2 R WR"


def test_format_lens_drops_unknown_aperture() -> None:
    assert format_lens((Fraction(18), Fraction(55), IFDRational(0, 0), IFDRational(0, 0))) == "18-55mm"
    assert format_lens([23, 23, float("nan"), 2]) == "23mm"
    assert format_lens([IFDRational(0, 0), IFDRational(0, 0), 2.8, 4]) == "f/2.8-4"
    assert format_lens([float("nan")] * 4) is None


def test_format_shutter() -> None:
    assert format_shutter(0.004) == "1/250s"
    assert format_shutter(2.0) == "2s"
    assert format_shutter(1.5) == "2s"
    assert format_shutter("1/8000") == "1/8000s"
    assert format_shutter(0) is None
    assert format_shutter(None) is None


def test_location_and_date_fallback() -> None:
    exif = normalize_metadata(
        {
            "DateTime": "2023:12:01 18:45:00",
            "GPSLatitude": 37.56654,
            "GPSLongitude": 126.97797,
        }
    )

    assert exif.date_time == "2023:12:01 18:45:00"
    assert exif.location == "37.56654, 126.97797"
