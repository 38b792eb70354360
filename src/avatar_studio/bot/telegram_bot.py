import logging

import httpx
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes

from avatar_studio.config import settings
from avatar_studio.models import ORIENTATION_DIMENSIONS

logger = logging.getLogger(__name__)

# generate() polls the provider for up to five minutes, then downloads and uploads
GENERATE_TIMEOUT_SEC = 900

PRICING_TEXT = (
    "Pricing (credits):\n"
    "- 20 credits = 1 video (₹80)\n"
    "- Basic: 400 credits / month for ₹899\n"
    "- Pro: 2000 credits / month for ₹2999\n\n"
    "Use /buy to get payment instructions."
)

USAGE_TEXT = "Usage: /video <avatar_id> [landscape|portrait|square] | <script>"


def parse_video_args(text: str) -> tuple[str, str, str]:
    """Split ``<avatar_id> [orientation] | <script>`` into its parts."""
    head, sep, script = text.partition("|")
    script = script.strip()
    parts = head.split()
    if not sep or not script or not parts or len(parts) > 2:
        raise ValueError(USAGE_TEXT)

    avatar_id = parts[0]
    orientation = parts[1].lower() if len(parts) == 2 else "landscape"
    if orientation not in ORIENTATION_DIMENSIONS:
        raise ValueError(f"Orientation must be one of: {', '.join(ORIENTATION_DIMENSIONS)}")
    return avatar_id, orientation, script


def video_reply(status_code: int, body: dict) -> str:
    """Turn the API's answer to ``POST /v1/videos`` into a chat message."""
    error = body.get("error") or {}
    if error.get("code") == "INSUFFICIENT_CREDITS":
        details = error.get("details") or {}
        return (
            f"Insufficient credits: you have {details.get('current_credits', 0)}, "
            f"need {details.get('credits_needed', settings.credits_per_video)}. Use /buy and /balance"
        )
    if status_code >= 400:
        hint = " You can try again." if error.get("retryable") else ""
        return f"Video failed: {error.get('code', status_code)}.{hint}"
    return f"Your video is ready: {body['data']['video_url']}"


async def _get_balance(owner_id: str) -> dict:
    async with httpx.AsyncClient(timeout=30) as client:
        r = await client.get(f"{settings.api_base_url}/v1/credits/{owner_id}")
        r.raise_for_status()
        return r.json()["data"]["balance"]


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(
        "Welcome to Avatar Video Studio.\n"
        f"Each video costs {settings.credits_per_video} credits.\n\n"
        f"{USAGE_TEXT}\n"
        "Commands: /balance /pricing /buy /avatars"
    )


async def balance(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.effective_user:
        return
    bal = await _get_balance(str(update.effective_user.id))
    await update.message.reply_text(
        f"Credits: {bal['credits']}\nUsed: {bal['credits_used']}\nVideos generated: {bal['videos_generated']}"
    )


async def pricing(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(PRICING_TEXT)


async def buy(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.effective_user:
        return
    ref_code = f"CREDITS-{update.effective_user.id}-{update.message.message_id}"
    await update.message.reply_text(
        "Manual payment flow:\n"
        "1) Send payment to the configured admin channel\n"
        "2) Share this reference code with the admin\n"
        f"Reference: {ref_code}\n"
        "3) Credits will be granted manually"
    )


async def avatars(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    async with httpx.AsyncClient(timeout=30) as client:
        r = await client.get(f"{settings.api_base_url}/v1/avatars")
        r.raise_for_status()
    lines = [f"{a['id']} - {a['name']}" for a in r.json()["data"]["avatars"]]
    await update.message.reply_text("Avatars:\n" + "\n".join(lines))


async def video(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message or not update.effective_user:
        return

    try:
        avatar_id, orientation, script = parse_video_args(" ".join(context.args or []))
    except ValueError as exc:
        await update.message.reply_text(str(exc))
        return

    await update.message.reply_text("Generating your video, this usually takes 2-3 minutes...")

    payload = {
        "owner_id": str(update.effective_user.id),
        "script": script,
        "avatar_id": avatar_id,
        "orientation": orientation,
    }
    async with httpx.AsyncClient(timeout=GENERATE_TIMEOUT_SEC) as client:
        r = await client.post(f"{settings.api_base_url}/v1/videos", json=payload)

    try:
        body = r.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    await update.message.reply_text(video_reply(r.status_code, body))


def main() -> None:
    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = Application.builder().token(settings.telegram_bot_token).build()
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("balance", balance))
    app.add_handler(CommandHandler("pricing", pricing))
    app.add_handler(CommandHandler("buy", buy))
    app.add_handler(CommandHandler("avatars", avatars))
    app.add_handler(CommandHandler("video", video))
    logger.info("bot polling against %s", settings.api_base_url)
    app.run_polling()


if __name__ == "__main__":
    main()
