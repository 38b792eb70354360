import logging
from pathlib import Path

import httpx

from avatar_studio.config import settings
from avatar_studio.errors import PublishError

logger = logging.getLogger(__name__)


class CatboxPublisher:
    """Anonymous uploads to a Catbox-compatible host. One attempt, no retries."""

    def __init__(self, url: str | None = None, transport: httpx.BaseTransport | None = None) -> None:
        self.url = url or settings.public_host_url
        self.transport = transport

    def upload(self, local_path: Path) -> str:
        local_path = Path(local_path)
        try:
            with httpx.Client(timeout=settings.publish_timeout_sec, transport=self.transport) as client:
                with local_path.open("rb") as fh:
                    r = client.post(
                        self.url,
                        data={"reqtype": "fileupload"},
                        files={"fileToUpload": (local_path.name, fh, "video/mp4")},
                        headers={"User-Agent": f"avatar-video-studio/{settings.app_version}"},
                    )
        except httpx.TimeoutException as exc:
            raise PublishError("publish_timeout") from exc
        except httpx.HTTPError as exc:
            raise PublishError(f"publish_failed: {exc}") from exc
        except OSError as exc:
            raise PublishError(f"publish_file_unreadable: {exc}") from exc

        if not r.is_success:
            raise PublishError(f"publish_http_{r.status_code}: {r.text[:200]}")

        public_url = r.text.strip()
        if not public_url.startswith(("http://", "https://")):
            raise PublishError(f"publish_unexpected_body: {public_url[:200]}")
        logger.info("published %s -> %s", local_path.name, public_url)
        return public_url
