from __future__ import annotations

from pathlib import Path
from typing import Iterable

from myframe.constants import SUPPORTED_EXTENSIONS


def _normalize_extensions(extensions: Iterable[str] | None) -> set[str]:
    if not extensions:
        return set(SUPPORTED_EXTENSIONS)
    normalized: set[str] = set()
    for ext in extensions:
        if not ext:
            continue
        ext = ext.lower()
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return normalized


def _is_within(path: Path, directory: Path | None) -> bool:
    if directory is None:
        return False
    try:
        path.resolve(strict=False).relative_to(directory.resolve(strict=False))
    except ValueError:
        return False
    return True


def discover_inputs(
    input_path: Path,
    recursive: bool = False,
    extensions: Iterable[str] | None = None,
    exclude_dir: Path | None = None,
) -> list[Path]:
    """List photos under ``input_path``, skipping anything inside ``exclude_dir``.

    ``exclude_dir`` keeps a previous export folder nested in the input tree
    from being framed a second time.
    """
    exts = _normalize_extensions(extensions)
    if input_path.is_file():
        return [input_path] if input_path.suffix.lower() in exts else []
    if not input_path.exists():
        return []
    candidates = input_path.rglob("*") if recursive else input_path.iterdir()
    files = [
        p
        for p in candidates
        if p.is_file()
        and p.suffix.lower() in exts
        and not p.name.startswith(".")
        and not _is_within(p, exclude_dir)
    ]
    return sorted(files)
