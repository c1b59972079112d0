from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer

from myframe.compose import line1_tokens, line2_tokens
from myframe.config import display_config_from_dict, load_config, write_default_config
from myframe.constants import DISPLAY_FIELDS
from myframe.discover import discover_inputs
from myframe.export import export_batch
from myframe.meta.makernote import iter_makernote_entries
from myframe.meta.normalize import normalize_metadata
from myframe.meta.pillow_reader import extract_metadata

app = typer.Typer(add_completion=False, no_args_is_help=True, help="MyFrame photo border CLI.")
LOGGER = logging.getLogger("myframe")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_multi_values(values: list[str]) -> list[str]:
    items: list[str] = []
    for value in values:
        for item in str(value).split(","):
            token = item.strip().lower().replace("-", "_")
            if token:
                items.append(token)
    return items


def _apply_field_toggles(display: dict[str, Any], show: list[str], hide: list[str]) -> None:
    for enabled, names in ((True, _parse_multi_values(show)), (False, _parse_multi_values(hide))):
        for name in names:
            if name not in DISPLAY_FIELDS:
                raise ValueError(f"unknown field {name!r}, expected one of: {', '.join(DISPLAY_FIELDS)}")
            display[f"show_{name}"] = enabled


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return str(value)


@app.command()
def render(
    input_path: Path = typer.Argument(..., exists=True, resolve_path=True),
    out: Path | None = typer.Option(None, "--out", help="Output directory."),
    recursive: bool = typer.Option(False, "--recursive", help="Recursively scan input directories."),
    config_file: Path | None = typer.Option(None, "--config", exists=True, dir_okay=False, help="YAML config file."),
    thickness: int | None = typer.Option(None, "--thickness", min=10, max=100, help="Border thickness (10-100)."),
    color: str | None = typer.Option(None, "--color", help="Border color, e.g. #FFFFFF."),
    text_color: str | None = typer.Option(None, "--text-color", help="Caption color."),
    align: str | None = typer.Option(None, "--align", help="left|center|right"),
    date_format: str | None = typer.Option(None, "--date-format", help="YYYY.MM.DD|MM.DD.YYYY|DD.MM.YYYY"),
    round_corners: bool | None = typer.Option(None, "--round-corners/--square-corners"),
    show: list[str] = typer.Option([], "--show", help="Fields to show, comma separated."),
    hide: list[str] = typer.Option([], "--hide", help="Fields to hide, comma separated."),
    name_template: str | None = typer.Option(None, "--name", help='Output filename template, e.g. "MyFrame_{stem}.{ext}"'),
    jobs: int | None = typer.Option(None, "--jobs", min=1, help="Parallel export jobs."),
    skip_existing: bool | None = typer.Option(None, "--skip-existing/--no-skip-existing"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Add a metadata border to every photo and export it as JPEG."""
    _setup_logging(log_level)
    cfg = load_config(config_file)

    display = dict(cfg.get("display") or {})
    overrides = {
        "thickness": thickness,
        "color": color,
        "text_color": text_color,
        "alignment": align,
        "date_format": date_format,
        "round_corners": round_corners,
    }
    display.update({key: value for key, value in overrides.items() if value is not None})
    try:
        _apply_field_toggles(display, show, hide)
        display_config = display_config_from_dict(display)
    except ValueError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(1)

    out_dir = out
    if out_dir is None:
        out_dir = (input_path / "output") if input_path.is_dir() else (input_path.parent / "output")

    files = discover_inputs(input_path, recursive=recursive, exclude_dir=out_dir)
    if not files:
        typer.echo("No supported image files found.")
        raise typer.Exit(0)
    out_dir.mkdir(parents=True, exist_ok=True)

    font_path = cfg.get("font_path")
    bold_font_path = cfg.get("bold_font_path")
    results = export_batch(
        files,
        display_config,
        out_dir,
        jobs=int(jobs if jobs is not None else cfg.get("jobs", 1)),
        name_template=name_template or str(cfg.get("name_template")),
        skip_existing=bool(cfg.get("skip_existing", True)) if skip_existing is None else skip_existing,
        font_path=Path(font_path) if font_path else None,
        bold_font_path=Path(bold_font_path) if bold_font_path else None,
    )

    ok = sum(1 for r in results if r.status == "ok")
    skip = sum(1 for r in results if r.status == "skipped")
    failed = [r for r in results if r.status == "failed"]
    typer.echo(f"Done. success={ok} skipped={skip} failed={len(failed)}")
    if failed:
        typer.secho("Failures:", fg=typer.colors.RED)
        for r in failed:
            typer.secho(f"  {r.source}: {r.error}", fg=typer.colors.RED)
        raise typer.Exit(1)


@app.command("inspect")
def inspect_file(
    file: Path = typer.Argument(..., exists=True, resolve_path=True, dir_okay=False),
    config_file: Path | None = typer.Option(None, "--config", exists=True, dir_okay=False, help="YAML config file."),
    raw: bool = typer.Option(False, "--raw", help="Include raw metadata payload."),
    makernote: bool = typer.Option(False, "--makernote", help="Include decoded MakerNote entries."),
) -> None:
    """Print the metadata and caption lines that would be drawn for FILE."""
    raw_metadata = extract_metadata(file)
    try:
        display_config = display_config_from_dict(load_config(config_file).get("display"))
    except ValueError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(1)

    exif = normalize_metadata(raw_metadata)
    payload: dict[str, Any] = exif.to_dict()
    payload["line1"] = line1_tokens(exif, display_config)
    payload["line2"] = line2_tokens(exif, display_config)
    if raw:
        payload["raw_metadata"] = _json_safe(raw_metadata)
    if makernote:
        payload["makernote"] = [
            {"tag": f"0x{entry.tag:04x}", "type": entry.type, "count": entry.count, "key": entry.key, "value": _json_safe(entry.value)}
            for entry in iter_makernote_entries(raw_metadata.get("MakerNote"))
        ]
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config file."),
) -> None:
    path = write_default_config(force=force)
    typer.echo(f"Config initialized: {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
