import logging
import subprocess
from pathlib import Path

import httpx
import imageio_ffmpeg

from avatar_studio.config import settings
from avatar_studio.errors import PostProcessingError
from avatar_studio.scratch import remove_paths

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 1024 * 1024


def _ffmpeg_exe() -> str:
    if settings.ffmpeg_binary:
        return settings.ffmpeg_binary
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as exc:
        raise PostProcessingError(f"ffmpeg_not_found: {exc}") from exc


def crop_filter(margin_width: int, margin_height: int) -> str:
    # Fixed source-pixel margin from the right and bottom edges, whatever the resolution.
    return f"crop=iw-{margin_width}:ih-{margin_height}:0:0"


class WatermarkRemover:
    def __init__(
        self,
        margin_width: int | None = None,
        margin_height: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.margin_width = settings.watermark_crop_width if margin_width is None else margin_width
        self.margin_height = settings.watermark_crop_height if margin_height is None else margin_height
        self.transport = transport

    def download(self, url: str, dest: Path) -> Path:
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            with httpx.Client(timeout=settings.download_timeout_sec, transport=self.transport, follow_redirects=True) as client:
                with client.stream("GET", url) as r:
                    r.raise_for_status()
                    with dest.open("wb") as fh:
                        for chunk in r.iter_bytes(_CHUNK_BYTES):
                            fh.write(chunk)
        except httpx.HTTPStatusError as exc:
            raise PostProcessingError(f"download_http_{exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise PostProcessingError(f"download_failed: {exc}") from exc
        return dest

    def crop(self, src: Path, dest: Path) -> Path:
        cmd = [
            _ffmpeg_exe(),
            "-y",
            "-i", str(src),
            "-vf", crop_filter(self.margin_width, self.margin_height),
            "-c:a", "copy",
            str(dest),
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=settings.ffmpeg_timeout_sec)
        except subprocess.TimeoutExpired as exc:
            raise PostProcessingError("ffmpeg_timeout") from exc
        except OSError as exc:
            raise PostProcessingError(f"ffmpeg_not_runnable: {exc}") from exc

        if result.returncode != 0:
            raise PostProcessingError(f"ffmpeg_exit_{result.returncode}: {(result.stderr or '')[-500:]}")
        if not dest.exists():
            raise PostProcessingError("ffmpeg_produced_no_output")
        return dest

    def clean(self, raw_url: str, raw_path: Path, clean_path: Path) -> Path:
        try:
            self.download(raw_url, raw_path)
            self.crop(raw_path, clean_path)
        except Exception:
            remove_paths(clean_path)
            raise
        finally:
            remove_paths(raw_path)
        logger.info("watermark removed: %s", clean_path.name)
        return clean_path
