import logging

import httpx

from avatar_studio.config import settings
from avatar_studio.errors import ProviderRequestError
from avatar_studio.key_pool import Credential
from avatar_studio.models import Dimensions

logger = logging.getLogger(__name__)


class StatusQueryError(RuntimeError):
    pass


class HeyGenClient:
    def __init__(self, base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> None:
        self.base_url = (base_url or settings.heygen_base_url).rstrip("/")
        self.transport = transport

    def _headers(self, credential: Credential) -> dict:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "x-api-key": credential.key,
        }

    def _client(self, timeout_sec: float) -> httpx.Client:
        return httpx.Client(timeout=timeout_sec, transport=self.transport)

    def submit(
        self,
        credential: Credential,
        script: str,
        avatar_id: str,
        voice_id: str,
        dimensions: Dimensions,
    ) -> str:
        body = {
            "caption": False,
            "dimension": dimensions.as_dict(),
            "video_inputs": [
                {
                    "character": {"type": "avatar", "avatar_id": avatar_id},
                    "voice": {"type": "text", "input_text": script, "voice_id": voice_id},
                }
            ],
        }
        try:
            with self._client(settings.heygen_submit_timeout_sec) as client:
                r = client.post(f"{self.base_url}/v2/video/generate", headers=self._headers(credential), json=body)
        except httpx.HTTPError as exc:
            raise ProviderRequestError(0, str(exc)) from exc

        if not r.is_success:
            raise ProviderRequestError(r.status_code, _body(r))

        try:
            video_id = r.json()["data"]["video_id"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ProviderRequestError(r.status_code, _body(r)) from exc
        logger.info("provider accepted job %s (%dx%d)", video_id, dimensions.width, dimensions.height)
        return str(video_id)

    def get_status(self, credential: Credential, provider_job_id: str) -> dict:
        """Return the provider's ``data`` object for a job: ``status``, ``video_url``, ``error``."""
        try:
            with self._client(settings.heygen_status_timeout_sec) as client:
                r = client.get(
                    f"{self.base_url}/v1/video_status.get",
                    params={"video_id": provider_job_id},
                    headers={"accept": "application/json", "x-api-key": credential.key},
                )
                r.raise_for_status()
                data = r.json()["data"]
        except httpx.HTTPStatusError as exc:
            raise StatusQueryError(f"http_{exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise StatusQueryError(str(exc)) from exc
        except (ValueError, KeyError, TypeError) as exc:
            raise StatusQueryError(f"invalid_status_body: {exc}") from exc

        if not isinstance(data, dict):
            raise StatusQueryError("status_data_not_object")
        return data


def _body(r: httpx.Response):
    try:
        return r.json()
    except ValueError:
        return r.text[:500]
