import os
from pathlib import Path

from fastapi.testclient import TestClient

from avatar_studio.api.main import app
from avatar_studio.config import settings
from avatar_studio.db import grant_credits, get_user


def main() -> int:
    if not settings.api_keys():
        print("[FAIL] HEYGEN_API_KEYS is empty. Put it into .env and retry.")
        return 2

    owner_id = os.getenv("SMOKE_OWNER_ID", "smoke-owner")
    grant_credits(owner_id, settings.credits_per_video, note="smoke test credits", external_ref="smoke-run")
    before = int(get_user(owner_id)["credits"])

    client = TestClient(app)
    response = client.post(
        "/v1/videos",
        json={
            "owner_id": owner_id,
            "script": os.getenv("SMOKE_SCRIPT", "Hello! This is a short smoke test for the avatar pipeline."),
            "avatar_id": os.getenv("SMOKE_AVATAR_ID", "Albert_public_3"),
            "orientation": os.getenv("SMOKE_ORIENTATION", "landscape"),
        },
    )
    if response.status_code != 200:
        print(f"[FAIL] generate: {response.status_code} {response.text}")
        after = int(get_user(owner_id)["credits"])
        print(f"[INFO] credits before={before} after={after} (must be equal)")
        return 1

    data = response.json()["data"]
    after = int(get_user(owner_id)["credits"])
    print(f"[OK] video={data['video_id']} url={data['video_url']} dimensions={data['dimensions']}")
    print(f"[INFO] credits before={before} after={after} charged={data['credits_charged']}")
    leftovers = [p.name for p in Path(settings.scratch_dir).glob("*.mp4")]
    if leftovers:
        print(f"[FAIL] scratch files left behind: {leftovers}")
        return 1
    print("[DONE] smoke generation passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
