"""Per-photo export jobs.

Each job captures its source path and a frozen DisplayConfig when it is
created, so later config changes never leak into a running batch.  Jobs share
no state and may run sequentially or on a thread pool.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image

from myframe.constants import DEFAULT_NAME_TEMPLATE, OUTPUT_EXTENSION
from myframe.decoders.image_decoder import RasterBackendError, decode_image, decode_image_bytes
from myframe.meta.normalize import normalize_metadata
from myframe.meta.pillow_reader import extract_metadata, extract_metadata_from_bytes
from myframe.models import DisplayConfig
from myframe.naming import build_output_name
from myframe.render.frame import encode_jpeg, render_frame

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExportJob:
    source: Path
    config: DisplayConfig
    output_dir: Path
    name_template: str = DEFAULT_NAME_TEMPLATE
    skip_existing: bool = True
    font_path: Path | None = None
    bold_font_path: Path | None = None

    @property
    def output(self) -> Path:
        return self.output_dir / build_output_name(self.name_template, self.source, OUTPUT_EXTENSION)


@dataclass(slots=True)
class ExportResult:
    source: Path
    status: str          # ok | skipped | failed
    output: Path | None = None
    elapsed: float = 0.0
    error: str | None = None


def frame_image(
    image: Image.Image,
    raw_metadata: dict[str, Any],
    config: DisplayConfig,
    font_path: Path | None = None,
    bold_font_path: Path | None = None,
) -> Image.Image:
    return render_frame(
        image, normalize_metadata(raw_metadata), config, font_path=font_path, bold_font_path=bold_font_path
    )


def render_photo_bytes(
    data: bytes,
    config: DisplayConfig,
    font_path: Path | None = None,
    bold_font_path: Path | None = None,
) -> bytes:
    """Run the whole pipeline in memory: photo bytes in, framed JPEG bytes out."""
    image = decode_image_bytes(data)
    framed = frame_image(
        image, extract_metadata_from_bytes(data), config, font_path=font_path, bold_font_path=bold_font_path
    )
    try:
        return encode_jpeg(framed)
    except (OSError, ValueError) as exc:
        raise RasterBackendError(f"cannot encode image: {exc}") from exc


def run_job(job: ExportJob) -> ExportResult:
    t0 = time.perf_counter()
    try:
        output_file = job.output
        if job.skip_existing and output_file.exists():
            return ExportResult(source=job.source, status="skipped", output=output_file, elapsed=time.perf_counter() - t0)
        image = decode_image(job.source)
        framed = frame_image(
            image,
            extract_metadata(job.source),
            job.config,
            font_path=job.font_path,
            bold_font_path=job.bold_font_path,
        )
        try:
            payload = encode_jpeg(framed)
        except (OSError, ValueError) as exc:
            raise RasterBackendError(f"cannot encode {job.source.name}: {exc}") from exc
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_bytes(payload)
        return ExportResult(source=job.source, status="ok", output=output_file, elapsed=time.perf_counter() - t0)
    except Exception as exc:
        return ExportResult(source=job.source, status="failed", error=str(exc), elapsed=time.perf_counter() - t0)


def _log_result(result: ExportResult) -> None:
    if result.status == "ok":
        LOGGER.info("OK   %s -> %s  (%.2fs)", result.source.name, result.output.name if result.output else "-", result.elapsed)
    elif result.status == "skipped":
        LOGGER.info("SKIP %s (exists)", result.source.name)
    else:
        LOGGER.error("FAIL %s  %s", result.source.name, result.error)


def export_batch(
    paths: list[Path],
    config: DisplayConfig,
    output_dir: Path,
    *,
    jobs: int = 1,
    name_template: str = DEFAULT_NAME_TEMPLATE,
    skip_existing: bool = True,
    font_path: Path | None = None,
    bold_font_path: Path | None = None,
) -> list[ExportResult]:
    """Export every photo, returning one result per input in input order."""
    batch = [
        ExportJob(
            source=path,
            config=config,
            output_dir=output_dir,
            name_template=name_template,
            skip_existing=skip_existing,
            font_path=font_path,
            bold_font_path=bold_font_path,
        )
        for path in paths
    ]
    if jobs <= 1 or len(batch) <= 1:
        results = [run_job(job) for job in batch]
    else:
        with ThreadPoolExecutor(max_workers=min(jobs, len(batch))) as executor:
            results = list(executor.map(run_job, batch))
    for result in results:
        _log_result(result)
    return results
