import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from avatar_studio import catalog
from avatar_studio.config import settings
from avatar_studio.db import (
    count_videos_since,
    delete_video,
    get_user,
    get_video,
    get_video_stats,
    init_db,
    list_ledger,
    list_videos,
)
from avatar_studio.errors import GenerationError
from avatar_studio.ledger import Ledger
from avatar_studio.models import Dimensions
from avatar_studio.pipeline import VideoPipeline, build_pipeline, shared_pool
from avatar_studio.pricing import plans_payload
from avatar_studio.schemas import (
    AdminGrantRequest,
    CreditBalanceResponse,
    GenerateVideoRequest,
    GenerateVideoResponse,
    TemplateGenerateRequest,
    VideoResponse,
)

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Avatar Video Studio", version=settings.app_version)
init_db()

_pipeline: VideoPipeline | None = None


def get_pipeline() -> VideoPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline()
    return _pipeline


def envelope(data: dict, status: str = "ok", error: dict | None = None) -> dict:
    return {
        "status": status,
        "data": data,
        "meta": {"model_version": settings.app_version, "latency_ms": 0},
        "error": error,
    }


@app.exception_handler(GenerationError)
async def _generation_error(request: Request, exc: GenerationError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=envelope({}, status="error", error=exc.to_dict()))


def _require_admin(x_admin_token: Annotated[str | None, Header()] = None) -> None:
    if not settings.admin_api_token:
        raise HTTPException(status_code=500, detail="ADMIN_API_TOKEN is not configured")
    if x_admin_token != settings.admin_api_token:
        raise HTTPException(status_code=401, detail="Invalid admin token")


def _start_of_month() -> str:
    now = datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0).isoformat()


def _run_generation(
    owner_id: str,
    script: str,
    avatar_id: str,
    voice_id: str,
    orientation: str,
    custom_dimensions: Dimensions | None = None,
    template_id: str | None = None,
) -> dict:
    result = get_pipeline().generate(
        owner_id=owner_id,
        script=script,
        avatar_id=avatar_id,
        voice_id=voice_id,
        orientation=orientation,
        custom_dimensions=custom_dimensions,
        template_id=template_id,
    )
    return GenerateVideoResponse(
        video_id=result.video_id,
        video_url=result.public_url,
        original_url=result.original_url,
        dimensions=result.dimensions.as_dict(),
        credits_charged=result.credits_charged,
    ).model_dump()


@app.get("/health")
def health() -> dict:
    pool = shared_pool()
    return envelope({"service": "avatar-video-studio", "available_keys": len(pool), "key_usage": pool.usage()})


@app.get("/version")
def version() -> dict:
    return envelope({"service": "avatar-video-studio", "version": settings.app_version})


@app.post("/v1/videos")
def generate_video(payload: GenerateVideoRequest) -> dict:
    if not payload.orientation_is_resolvable():
        raise HTTPException(status_code=400, detail=f"Unsupported orientation: {payload.orientation}")

    custom = None
    if payload.custom_dimensions is not None:
        custom = Dimensions(payload.custom_dimensions.width, payload.custom_dimensions.height)

    data = _run_generation(
        owner_id=payload.owner_id,
        script=payload.script,
        avatar_id=payload.avatar_id,
        voice_id=payload.voice_id or settings.default_voice_id,
        orientation=payload.orientation,
        custom_dimensions=custom,
    )
    return envelope(data)


@app.get("/v1/videos/{video_id}")
def get_video_info(video_id: str) -> dict:
    video = get_video(video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return envelope(VideoResponse(**video).model_dump())


@app.get("/v1/videos/{video_id}/serve")
def serve_video(video_id: str) -> RedirectResponse:
    video = get_video(video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return RedirectResponse(url=video["processed_url"])


@app.delete("/v1/videos/{video_id}")
def delete_video_record(video_id: str, owner_id: str = Query(...)) -> dict:
    video = get_video(video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    if video["owner_id"] != owner_id:
        raise HTTPException(status_code=403, detail="You do not own this video")
    delete_video(video_id)
    return envelope({"video_id": video_id, "deleted": True})


@app.get("/v1/users/{owner_id}/videos")
def video_history(
    owner_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status: str | None = None,
) -> dict:
    videos = list_videos(owner_id, limit=limit, offset=offset, status=status)
    return envelope({"videos": [VideoResponse(**v).model_dump() for v in videos], "count": len(videos)})


@app.get("/v1/credits/{owner_id}")
def get_credits(owner_id: str) -> dict:
    user = get_user(owner_id)
    if not user:
        user = {"owner_id": owner_id, "credits": 0, "credits_used": 0, "videos_generated": 0}

    balance = CreditBalanceResponse(
        owner_id=owner_id,
        credits=int(user["credits"]),
        credits_used=int(user["credits_used"]),
        videos_generated=int(user["videos_generated"]),
    ).model_dump()
    return envelope(
        {
            "balance": balance,
            "videos_this_month": count_videos_since(owner_id, _start_of_month()),
            "credits_per_video": settings.credits_per_video,
            "recent_ledger": list_ledger(owner_id, limit=20),
        }
    )


@app.post("/v1/admin/credits/grant")
def admin_grant_credits(payload: AdminGrantRequest, x_admin_token: Annotated[str | None, Header()] = None) -> dict:
    _require_admin(x_admin_token=x_admin_token)
    try:
        Ledger().grant(payload.owner_id, payload.credits, note=payload.note, external_ref=payload.external_ref)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    user = get_user(payload.owner_id)
    return envelope({"owner_id": payload.owner_id, "credits": int(user["credits"] if user else 0)})


@app.get("/v1/admin/videos/stats")
def admin_video_stats(x_admin_token: Annotated[str | None, Header()] = None) -> dict:
    _require_admin(x_admin_token=x_admin_token)
    return envelope(get_video_stats())


@app.get("/v1/pricing/plans")
def pricing_plans() -> dict:
    return envelope(plans_payload())


@app.get("/v1/avatars")
def avatars() -> dict:
    return envelope({"avatars": catalog.POPULAR_AVATARS, "count": len(catalog.POPULAR_AVATARS)})


@app.get("/v1/voices")
def voices() -> dict:
    languages = sorted({v["language"] for v in catalog.POPULAR_VOICES})
    return envelope({"voices": catalog.POPULAR_VOICES, "count": len(catalog.POPULAR_VOICES), "languages": languages})


@app.get("/v1/templates")
def templates(category: str | None = None) -> dict:
    items = catalog.list_templates(category)
    return envelope({"templates": items, "count": len(items), "categories": catalog.TEMPLATE_CATEGORIES})


@app.get("/v1/templates/{template_id}")
def template_detail(template_id: str) -> dict:
    template = catalog.get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return envelope(template)


@app.post("/v1/templates/{template_id}/generate")
def generate_from_template(template_id: str, payload: TemplateGenerateRequest) -> dict:
    template = catalog.get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")

    data = _run_generation(
        owner_id=payload.owner_id,
        script=payload.script or template["sample_script"],
        avatar_id=payload.avatar_id or template["recommended_avatar"],
        voice_id=payload.voice_id or template["recommended_voice"],
        orientation=template["orientation"],
        template_id=template_id,
    )
    data["template"] = template["name"]
    return envelope(data)
