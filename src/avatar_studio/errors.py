from typing import Any


class GenerationError(RuntimeError):
    code = "GENERATION_ERROR"
    retryable = False
    http_status = 500

    def details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "retryable": self.retryable,
            "details": self.details(),
        }


class InsufficientCredits(GenerationError):
    code = "INSUFFICIENT_CREDITS"
    http_status = 402

    def __init__(self, preflight) -> None:
        super().__init__(f"You need {preflight.required} credits to generate a video")
        self.preflight = preflight

    def details(self) -> dict[str, Any]:
        return {
            "current_credits": self.preflight.available,
            "credits_needed": self.preflight.required,
            "shortfall": self.preflight.shortfall,
            "upgrade_options": self.preflight.purchase_options,
        }


class ProviderUnavailable(GenerationError):
    code = "PROVIDER_UNAVAILABLE"
    retryable = True
    http_status = 503


class ProviderRequestError(GenerationError):
    code = "PROVIDER_REQUEST_ERROR"
    http_status = 502

    def __init__(self, status_code: int, body: Any) -> None:
        super().__init__(f"provider_http_{status_code}")
        self.status_code = status_code
        self.body = body
        # status 0 means the request never got a response
        self.retryable = status_code == 0 or status_code == 429 or status_code >= 500

    def details(self) -> dict[str, Any]:
        return {"provider_status": self.status_code, "provider_body": self.body}


class GenerationFailed(GenerationError):
    code = "GENERATION_FAILED"
    http_status = 502

    def __init__(self, message: str, provider_error: Any = None) -> None:
        super().__init__(message)
        self.provider_error = provider_error

    def details(self) -> dict[str, Any]:
        return {"provider_error": self.provider_error} if self.provider_error else {}


class GenerationTimeout(GenerationError):
    code = "GENERATION_TIMEOUT"
    retryable = True
    http_status = 504

    def __init__(self, provider_job_id: str, attempts: int) -> None:
        super().__init__(f"Video generation timeout after {attempts} status checks")
        self.provider_job_id = provider_job_id
        self.attempts = attempts

    def details(self) -> dict[str, Any]:
        return {"provider_job_id": self.provider_job_id, "attempts": self.attempts}


class PostProcessingError(GenerationError):
    code = "POST_PROCESSING_ERROR"


class PublishError(GenerationError):
    code = "PUBLISH_ERROR"
    retryable = True
    http_status = 502
