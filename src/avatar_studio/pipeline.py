import logging
import threading
import time

from avatar_studio.catbox import CatboxPublisher
from avatar_studio.config import settings
from avatar_studio.errors import GenerationError, InsufficientCredits
from avatar_studio.heygen import HeyGenClient
from avatar_studio.key_pool import CredentialPool
from avatar_studio.ledger import Ledger
from avatar_studio.models import Dimensions, GenerationJob, GenerationResult, JobState, resolve_dimensions
from avatar_studio.poller import Poller
from avatar_studio.scratch import new_scratch_paths, remove_paths
from avatar_studio.watermark import WatermarkRemover

logger = logging.getLogger(__name__)


class VideoPipeline:
    def __init__(
        self,
        pool: CredentialPool,
        client: HeyGenClient,
        poller: Poller,
        remover: WatermarkRemover,
        publisher: CatboxPublisher,
        ledger: Ledger,
        credits_per_video: int | None = None,
    ) -> None:
        self.pool = pool
        self.client = client
        self.poller = poller
        self.remover = remover
        self.publisher = publisher
        self.ledger = ledger
        self.credits_per_video = settings.credits_per_video if credits_per_video is None else credits_per_video

    def generate(
        self,
        owner_id: str,
        script: str,
        avatar_id: str,
        voice_id: str,
        orientation: str = "landscape",
        custom_dimensions: Dimensions | None = None,
        template_id: str | None = None,
    ) -> GenerationResult:
        dimensions = resolve_dimensions(orientation, custom_dimensions)

        preflight = self.ledger.preflight(owner_id, self.credits_per_video)
        if not preflight.ok:
            raise InsufficientCredits(preflight)

        job = GenerationJob(
            owner_id=owner_id,
            script=script,
            avatar_id=avatar_id,
            voice_id=voice_id,
            orientation=orientation,
            dimensions=dimensions,
            template_id=template_id,
        )
        started = time.time()
        try:
            return self._run(job)
        except GenerationError as exc:
            logger.warning(
                "generation for %s failed after %.1fs: %s %s", owner_id, time.time() - started, exc.code, exc
            )
            raise
        except Exception:
            logger.exception("generation for %s crashed", owner_id)
            raise
        finally:
            remove_paths(*job.scratch_paths())

    def _run(self, job: GenerationJob) -> GenerationResult:
        credential = self.pool.acquire()
        job.provider_job_id = self.client.submit(
            credential,
            script=job.script,
            avatar_id=job.avatar_id,
            voice_id=job.voice_id,
            dimensions=job.dimensions,
        )
        job.transition(JobState.SUBMITTED)

        raw_url = self.poller.await_terminal(job, credential)

        job.raw_path, job.clean_path = new_scratch_paths()
        self.remover.clean(raw_url, job.raw_path, job.clean_path)

        job.public_url = self.publisher.upload(job.clean_path)

        video = {
            "original_url": raw_url,
            "processed_url": job.public_url,
            "script": job.script,
            "avatar_id": job.avatar_id,
            "voice_id": job.voice_id,
            "orientation": job.orientation,
            "width": job.dimensions.width,
            "height": job.dimensions.height,
            "template_id": job.template_id,
            "provider_job_id": job.provider_job_id,
        }
        video_id = self.ledger.commit(job.owner_id, self.credits_per_video, video)
        logger.info("job %s for %s published as video %s", job.provider_job_id, job.owner_id, video_id)

        return GenerationResult(
            video_id=video_id,
            public_url=job.public_url,
            original_url=raw_url,
            dimensions=job.dimensions,
            credits_charged=self.credits_per_video,
        )


_pool: CredentialPool | None = None
_pool_lock = threading.Lock()


def shared_pool() -> CredentialPool:
    """The process-wide key pool, built from settings on first use."""
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = CredentialPool(settings.api_keys(), quota=settings.heygen_key_quota)
            logger.info("loaded %d provider keys", len(_pool))
        return _pool


def build_pipeline() -> VideoPipeline:
    client = HeyGenClient()
    return VideoPipeline(
        pool=shared_pool(),
        client=client,
        poller=Poller(client),
        remover=WatermarkRemover(),
        publisher=CatboxPublisher(),
        ledger=Ledger(),
    )
