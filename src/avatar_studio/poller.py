import logging
import time
from collections.abc import Callable

from avatar_studio.config import settings
from avatar_studio.errors import GenerationFailed, GenerationTimeout
from avatar_studio.heygen import HeyGenClient, StatusQueryError
from avatar_studio.key_pool import Credential
from avatar_studio.models import GenerationJob, JobState

logger = logging.getLogger(__name__)


class Poller:
    """Drives a submitted job to a terminal state.

    Every attempt sleeps one interval and then asks the provider for the job
    status. ``completed`` returns the asset URL, ``failed`` raises
    ``GenerationFailed`` and running out of attempts raises ``GenerationTimeout``.
    Query errors are logged and still consume an attempt.
    """

    def __init__(
        self,
        client: HeyGenClient,
        interval_sec: float | None = None,
        max_attempts: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.interval_sec = settings.poll_interval_sec if interval_sec is None else interval_sec
        self.max_attempts = settings.poll_max_attempts if max_attempts is None else max_attempts
        self.sleep = sleep

    def await_terminal(self, job: GenerationJob, credential: Credential) -> str:
        if job.provider_job_id is None:
            raise ValueError("job has not been submitted")

        attempts = 0
        while attempts < self.max_attempts:
            self.sleep(self.interval_sec)
            attempts += 1
            job.transition(JobState.PENDING)

            try:
                data = self.client.get_status(credential, job.provider_job_id)
            except StatusQueryError as exc:
                logger.warning("poll %d/%d for %s failed: %s", attempts, self.max_attempts, job.provider_job_id, exc)
                continue

            status = data.get("status")
            logger.debug("job %s status: %s", job.provider_job_id, status)

            if status == "completed":
                video_url = data.get("video_url")
                if not video_url:
                    job.transition(JobState.FAILED)
                    raise GenerationFailed("Provider reported completion without a video URL", data)
                job.transition(JobState.COMPLETED)
                job.raw_url = video_url
                logger.info("job %s completed after %d status checks", job.provider_job_id, attempts)
                return video_url

            if status == "failed":
                job.transition(JobState.FAILED)
                raise GenerationFailed("HeyGen video generation failed", data.get("error"))

        job.transition(JobState.TIMED_OUT)
        logger.warning("job %s abandoned after %d status checks", job.provider_job_id, attempts)
        raise GenerationTimeout(job.provider_job_id, attempts)
