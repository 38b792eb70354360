import logging
import time
from pathlib import Path
from uuid import uuid4

from avatar_studio.config import settings

logger = logging.getLogger(__name__)


def scratch_root() -> Path:
    root = Path(settings.scratch_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


def new_scratch_paths(suffix: str = ".mp4") -> tuple[Path, Path]:
    """Unique (raw, clean) file paths for one job."""
    root = scratch_root()
    token = uuid4().hex
    return root / f"temp-{token}{suffix}", root / f"clean-{token}{suffix}"


def remove_paths(*paths: Path | str | None) -> None:
    for p in paths:
        if not p:
            continue
        try:
            Path(p).unlink(missing_ok=True)
        except OSError as exc:
            logger.error("could not remove scratch file %s: %s", p, exc)


def sweep_stale(max_age_hours: int | None = None, now: float | None = None) -> int:
    """Delete scratch files older than ``max_age_hours``. Returns how many were removed."""
    if max_age_hours is None:
        max_age_hours = settings.scratch_retention_hours
    root = Path(settings.scratch_dir)
    if not root.exists():
        return 0

    cutoff = (now if now is not None else time.time()) - max_age_hours * 3600
    removed = 0
    for p in root.iterdir():
        if not p.is_file() or p.stat().st_mtime >= cutoff:
            continue
        remove_paths(p)
        if not p.exists():
            removed += 1
    return removed
