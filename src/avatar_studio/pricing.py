from avatar_studio.config import settings


def pricing_plans() -> dict:
    per_video = settings.credits_per_video
    return {
        "free": {
            "id": "free",
            "name": "Free Account",
            "price": 0,
            "currency": "INR",
            "features": {
                "credits_per_video": per_video,
                "scripts_per_month": "unlimited",
                "max_duration": "60s",
                "templates": True,
                "support": "community",
            },
            "description": "Pay as you go with credit packs",
        },
        "basic": {
            "id": "basic",
            "name": "Basic Plan",
            "price": 899,
            "currency": "INR",
            "billing": "monthly",
            "features": {
                "credits_per_month": 400,
                "credits_per_video": per_video,
                "max_videos": 400 // per_video,
                "scripts_per_month": "unlimited",
                "max_duration": "120s",
                "templates": True,
                "custom_avatars": False,
                "support": "email",
            },
            "description": f"400 credits monthly = {400 // per_video} videos",
            "popular": True,
        },
        "pro": {
            "id": "pro",
            "name": "Pro Plan",
            "price": 2999,
            "currency": "INR",
            "billing": "monthly",
            "features": {
                "credits_per_month": 2000,
                "credits_per_video": per_video,
                "max_videos": 2000 // per_video,
                "scripts_per_month": "unlimited",
                "max_duration": "300s",
                "templates": True,
                "custom_avatars": True,
                "bulk_generation": True,
                "support": "priority",
            },
            "description": f"2000 credits monthly = {2000 // per_video} videos",
            "badge": "BEST VALUE",
        },
    }


CREDIT_SETTINGS = {
    "min_credits": 20,
    "max_credits": 500,
    "price_per_credit": 4,
    "currency": "INR",
    "description": "Buy any amount between 20-500 credits (20 credits = ₹80 = 1 video)",
}


def credit_price(credits: int) -> int:
    if not CREDIT_SETTINGS["min_credits"] <= credits <= CREDIT_SETTINGS["max_credits"]:
        raise ValueError(
            f"credits must be between {CREDIT_SETTINGS['min_credits']} and {CREDIT_SETTINGS['max_credits']}"
        )
    return credits * CREDIT_SETTINGS["price_per_credit"]


def purchase_options() -> dict:
    basic = pricing_plans()["basic"]
    # smallest pack that pays for one video
    pack = max(CREDIT_SETTINGS["min_credits"], settings.credits_per_video)
    return {
        "buy_credits": {
            "price": credit_price(pack),
            "credits": pack,
            "message": f"Buy {pack} credits for ₹{credit_price(pack)} (1 video)",
        },
        "basic_plan": {
            "price": basic["price"],
            "credits": basic["features"]["credits_per_month"],
            "message": (
                f"Basic Plan: {basic['features']['credits_per_month']} credits for "
                f"₹{basic['price']} = {basic['features']['max_videos']} videos"
            ),
        },
    }


def plans_payload() -> dict:
    return {
        "subscription": pricing_plans(),
        "custom_credits": CREDIT_SETTINGS,
        "credit_system": {
            "credits_per_video": settings.credits_per_video,
            "min_purchase": CREDIT_SETTINGS["min_credits"],
            "max_purchase": CREDIT_SETTINGS["max_credits"],
            "price_per_credit": CREDIT_SETTINGS["price_per_credit"],
        },
    }
