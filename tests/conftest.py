import json
import subprocess
from pathlib import Path

import httpx
import pytest

from avatar_studio import config
from avatar_studio import watermark
from avatar_studio.catbox import CatboxPublisher
from avatar_studio.db import init_db
from avatar_studio.heygen import HeyGenClient
from avatar_studio.key_pool import CredentialPool
from avatar_studio.ledger import Ledger
from avatar_studio.pipeline import VideoPipeline
from avatar_studio.poller import Poller

HEYGEN_BASE = "https://api.heygen.test"
RAW_VIDEO_URL = "https://files.heygen.test/raw/video.mp4"
PUBLIC_HOST = "https://catbox.test/user/api.php"
PUBLIC_VIDEO_URL = "https://files.catbox.test/abc123.mp4"


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    db_path = tmp_path / "studio.db"
    scratch_dir = tmp_path / "scratch"
    scratch_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setattr(config.settings, "database_path", str(db_path))
    monkeypatch.setattr(config.settings, "scratch_dir", str(scratch_dir))
    monkeypatch.setattr(config.settings, "admin_api_token", "test-admin-token")
    monkeypatch.setattr(config.settings, "credits_per_video", 20)
    monkeypatch.setattr(config.settings, "ffmpeg_binary", "ffmpeg")

    init_db()
    yield


class FakeProvider:
    """One MockTransport handler standing in for HeyGen, its CDN and the public host.

    ``statuses`` is consumed one entry per status query; the last entry repeats.
    ``"http_error"`` answers 500 and ``"network_error"`` raises a connect error.
    """

    def __init__(
        self,
        statuses=("completed",),
        submit_status: int = 200,
        download_status: int = 200,
        publish_status: int = 200,
        publish_body: str = PUBLIC_VIDEO_URL,
    ) -> None:
        self.statuses = list(statuses)
        self.submit_status = submit_status
        self.download_status = download_status
        self.publish_status = publish_status
        self.publish_body = publish_body
        self.submitted: list[dict] = []
        self.status_queries = 0
        self.uploads = 0
        self.api_keys: list[str] = []

    def _next_status(self) -> str:
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v2/video/generate":
            self.api_keys.append(request.headers["x-api-key"])
            self.submitted.append(json.loads(request.content))
            if self.submit_status != 200:
                return httpx.Response(self.submit_status, json={"error": {"message": "bad avatar"}})
            return httpx.Response(200, json={"error": None, "data": {"video_id": "vid-123"}})

        if request.url.path == "/v1/video_status.get":
            self.status_queries += 1
            status = self._next_status()
            if status == "network_error":
                raise httpx.ConnectError("connection reset", request=request)
            if status == "http_error":
                return httpx.Response(500, text="upstream down")
            data = {"id": request.url.params["video_id"], "status": status}
            if status == "completed":
                data["video_url"] = RAW_VIDEO_URL
            if status == "failed":
                data["error"] = {"code": 40119, "message": "avatar not found"}
            return httpx.Response(200, json={"code": 100, "data": data})

        if request.url.host == "files.heygen.test":
            if self.download_status != 200:
                return httpx.Response(self.download_status)
            return httpx.Response(200, content=b"\x00\x00\x00\x18ftypmp42" + b"x" * 4096)

        if request.url.host == "catbox.test":
            self.uploads += 1
            assert b"fileToUpload" in request.read()
            return httpx.Response(self.publish_status, text=self.publish_body)

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    """Replace the ffmpeg call with one that copies input to output."""
    calls: list[list[str]] = []
    state = {"returncode": 0}

    def _run(cmd, **kwargs):
        calls.append(cmd)
        if state["returncode"] == 0:
            src = Path(cmd[cmd.index("-i") + 1])
            Path(cmd[-1]).write_bytes(src.read_bytes())
        else:
            Path(cmd[-1]).write_bytes(b"partial")
        return subprocess.CompletedProcess(cmd, state["returncode"], stdout="", stderr="Invalid data found")

    monkeypatch.setattr(watermark.subprocess, "run", _run)
    return {"calls": calls, "state": state}


@pytest.fixture
def make_pipeline(fake_ffmpeg):
    def _make(provider: FakeProvider, keys=("key-a", "key-b"), quota: int = 10, max_attempts: int = 60):
        transport = provider.transport
        client = HeyGenClient(base_url=HEYGEN_BASE, transport=transport)
        sleeps: list[float] = []
        pipeline = VideoPipeline(
            pool=CredentialPool(list(keys), quota=quota),
            client=client,
            poller=Poller(client, interval_sec=5, max_attempts=max_attempts, sleep=sleeps.append),
            remover=watermark.WatermarkRemover(transport=transport),
            publisher=CatboxPublisher(url=PUBLIC_HOST, transport=transport),
            ledger=Ledger(),
        )
        pipeline.sleeps = sleeps
        return pipeline

    return _make


@pytest.fixture
def api_provider(make_pipeline, monkeypatch):
    """Route the API's generation endpoints through a fake provider."""
    from avatar_studio.api import main

    provider = FakeProvider()
    monkeypatch.setattr(main, "_pipeline", make_pipeline(provider))
    return provider


def scratch_files() -> list[Path]:
    return sorted(Path(config.settings.scratch_dir).iterdir())
