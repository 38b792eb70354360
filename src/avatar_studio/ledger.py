import logging
from dataclasses import dataclass, field

from avatar_studio import db
from avatar_studio.pricing import purchase_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreflightResult:
    ok: bool
    available: int
    required: int
    shortfall: int = 0
    purchase_options: dict = field(default_factory=dict)


class Ledger:
    """Credit checks and debits against the account record.

    ``preflight`` only reads the balance. The debit happens in ``commit`` once the
    video is published, so two concurrent runs for one account can both pass
    preflight; no credits are held in between.
    """

    def preflight(self, owner_id: str, required_credits: int) -> PreflightResult:
        user = db.get_user(owner_id)
        available = int(user["credits"]) if user else 0
        if available >= required_credits:
            return PreflightResult(ok=True, available=available, required=required_credits)
        return PreflightResult(
            ok=False,
            available=available,
            required=required_credits,
            shortfall=required_credits - available,
            purchase_options=purchase_options(),
        )

    def commit(self, owner_id: str, spent_credits: int, video: dict) -> str:
        """Store the finished video and debit the account together; neither happens alone."""
        video_id = db.record_video(owner_id, spent_credits, **video)
        logger.info("charged %s %d credits for video %s", owner_id, spent_credits, video_id)
        return video_id

    def grant(self, owner_id: str, credits: int, note: str, external_ref: str | None = None) -> None:
        db.grant_credits(owner_id, credits, note=note, external_ref=external_ref)
        logger.info("granted %s %d credits (%s)", owner_id, credits, note)
