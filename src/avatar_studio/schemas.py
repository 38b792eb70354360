from pydantic import BaseModel, Field

from avatar_studio.models import CUSTOM_ORIENTATION, ORIENTATION_DIMENSIONS


class DimensionsModel(BaseModel):
    width: int = Field(gt=0, le=4096)
    height: int = Field(gt=0, le=4096)


class GenerateVideoRequest(BaseModel):
    owner_id: str = Field(min_length=1)
    script: str = Field(min_length=1)
    avatar_id: str = Field(min_length=1)
    voice_id: str | None = None
    orientation: str = "landscape"
    custom_dimensions: DimensionsModel | None = None

    def orientation_is_resolvable(self) -> bool:
        return (
            self.custom_dimensions is not None
            or self.orientation == CUSTOM_ORIENTATION
            or self.orientation in ORIENTATION_DIMENSIONS
        )


class TemplateGenerateRequest(BaseModel):
    owner_id: str = Field(min_length=1)
    script: str | None = None
    avatar_id: str | None = None
    voice_id: str | None = None


class GenerateVideoResponse(BaseModel):
    video_id: str
    video_url: str
    original_url: str
    dimensions: DimensionsModel
    credits_charged: int


class VideoResponse(BaseModel):
    video_id: str
    owner_id: str
    status: str
    original_url: str
    processed_url: str
    script: str
    avatar_id: str
    voice_id: str
    orientation: str
    width: int
    height: int
    template_id: str | None = None
    provider_job_id: str | None = None
    storage: str
    created_at: str


class CreditBalanceResponse(BaseModel):
    owner_id: str
    credits: int
    credits_used: int
    videos_generated: int


class AdminGrantRequest(BaseModel):
    owner_id: str
    credits: int
    note: str = "manual grant"
    external_ref: str | None = None
