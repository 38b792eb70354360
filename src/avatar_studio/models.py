from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class JobState(str, Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = {JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT}

ORIENTATION_DIMENSIONS = {
    "landscape": (1280, 720),
    "portrait": (720, 1280),
    "square": (1080, 1080),
}


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def as_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


CUSTOM_ORIENTATION = "custom"


def resolve_dimensions(orientation: str, custom: Dimensions | None = None) -> Dimensions:
    if custom is not None:
        return custom
    if orientation == CUSTOM_ORIENTATION:
        # no explicit size given, so fall back to the landscape frame
        orientation = "landscape"
    try:
        width, height = ORIENTATION_DIMENSIONS[orientation]
    except KeyError as exc:
        raise ValueError(f"Unsupported orientation without custom dimensions: {orientation}") from exc
    return Dimensions(width, height)


@dataclass
class GenerationJob:
    owner_id: str
    script: str
    avatar_id: str
    voice_id: str
    orientation: str
    dimensions: Dimensions
    template_id: str | None = None
    provider_job_id: str | None = None
    state: JobState | None = None
    history: list[JobState] = field(default_factory=list)
    raw_url: str | None = None
    public_url: str | None = None
    raw_path: Path | None = None
    clean_path: Path | None = None

    def transition(self, state: JobState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"job already terminal: {self.state.value}")
        if self.state != state:
            self.history.append(state)
        self.state = state

    def scratch_paths(self) -> list[Path]:
        return [p for p in (self.raw_path, self.clean_path) if p is not None]


@dataclass(frozen=True)
class GenerationResult:
    video_id: str
    public_url: str
    original_url: str
    dimensions: Dimensions
    credits_charged: int
