POPULAR_AVATARS = [
    {"id": "Abigail_expressive_2024112501", "name": "Abigail - Expressive", "gender": "female", "style": "professional"},
    {"id": "Aditya_public_4", "name": "Aditya - Professional", "gender": "male", "style": "business"},
    {"id": "Adriana_BizTalk_Front_public", "name": "Adriana - Business", "gender": "female", "style": "corporate"},
    {"id": "Albert_public_3", "name": "Albert - Casual", "gender": "male", "style": "friendly"},
    {"id": "Abigail_standing_office_front", "name": "Abigail - Office", "gender": "female", "style": "office"},
    {"id": "Aditya_public_1", "name": "Aditya - Casual", "gender": "male", "style": "casual"},
    {"id": "Adriana_Business_Front_public", "name": "Adriana - Executive", "gender": "female", "style": "executive"},
    {"id": "Aiko_public", "name": "Aiko - Asian", "gender": "female", "style": "modern"},
    {"id": "Abigail_sitting_sofa_front", "name": "Abigail - Relaxed", "gender": "female", "style": "casual"},
    {"id": "Albert_public_2", "name": "Albert - Business", "gender": "male", "style": "professional"},
]

POPULAR_VOICES = [
    {"id": "1bd001e7e50f421d891986aad5158bc8", "name": "Emma - Professional", "language": "en", "gender": "female"},
    {"id": "Qz5fqQAsvzEUvsQ2ugLH", "name": "James - Corporate", "language": "en", "gender": "male"},
    {"id": "VoCODBvSDQUgLCiN46zd", "name": "Sarah - Friendly", "language": "en", "gender": "female"},
    {"id": "73c0b6a2e29d4d38aca41454bf58c955", "name": "David - Narrator", "language": "en", "gender": "male"},
    {"id": "a04d81d19afd436db611060682276331", "name": "Lisa - Energetic", "language": "en", "gender": "female"},
    {"id": "b2ddcef2b1594794aa7f3a436d8cf8f2", "name": "Michael - Calm", "language": "en", "gender": "male"},
    {"id": "e3e89b7996b94daebf8a1d6904a1bd11", "name": "Priya - Hindi", "language": "hi", "gender": "female"},
    {"id": "6d091fbb994c439eb9d249ba8b0e62da", "name": "Raj - Hindi", "language": "hi", "gender": "male"},
    {"id": "d2f4f24783d04e22ab49ee8fdc3715e0", "name": "Sofia - Spanish", "language": "es", "gender": "female"},
    {"id": "d92994ae0de34b2e8659b456a2f388b8", "name": "Pierre - French", "language": "fr", "gender": "male"},
    {"id": "f38a635bee7a4d1f9b0a654a31d050d2", "name": "Yuki - Japanese", "language": "ja", "gender": "female"},
    {"id": "cef3bc4e0a84424cafcde6f2cf466c97", "name": "Alex - Young", "language": "en", "gender": "male"},
]

TEMPLATES = [
    {
        "id": "business_presentation",
        "name": "Business Presentation",
        "category": "business",
        "recommended_avatar": "Adriana_BizTalk_Front_public",
        "recommended_voice": "1bd001e7e50f421d891986aad5158bc8",
        "sample_script": "Welcome to our quarterly business review. Today I'll be presenting our key achievements and future strategies.",
        "orientation": "landscape",
    },
    {
        "id": "social_media_post",
        "name": "Social Media Content",
        "category": "social",
        "recommended_avatar": "Abigail_expressive_2024112501",
        "recommended_voice": "a04d81d19afd436db611060682276331",
        "sample_script": "Hey everyone! Welcome back to my channel. Today I have something amazing to share with you!",
        "orientation": "portrait",
    },
    {
        "id": "educational_content",
        "name": "Educational Video",
        "category": "education",
        "recommended_avatar": "Albert_public_3",
        "recommended_voice": "73c0b6a2e29d4d38aca41454bf58c955",
        "sample_script": "In today's lesson, we'll explore the fundamental concepts that will help you understand this topic better.",
        "orientation": "landscape",
    },
    {
        "id": "product_demo",
        "name": "Product Demonstration",
        "category": "marketing",
        "recommended_avatar": "Aditya_public_4",
        "recommended_voice": "Qz5fqQAsvzEUvsQ2ugLH",
        "sample_script": "Let me show you how this amazing product can solve your everyday problems and make your life easier.",
        "orientation": "landscape",
    },
    {
        "id": "hindi_content",
        "name": "Hindi Content",
        "category": "regional",
        "recommended_avatar": "Aiko_public",
        "recommended_voice": "e3e89b7996b94daebf8a1d6904a1bd11",
        "sample_script": "Namaste! Aaj main aapke saath kuch bahut important baatein share karne wala hun.",
        "orientation": "portrait",
    },
    {
        "id": "testimonial",
        "name": "Customer Testimonial",
        "category": "marketing",
        "recommended_avatar": "Abigail_sitting_sofa_front",
        "recommended_voice": "VoCODBvSDQUgLCiN46zd",
        "sample_script": "I've been using this service for months now, and I can honestly say it has transformed my business.",
        "orientation": "square",
    },
    {
        "id": "news_update",
        "name": "News & Updates",
        "category": "news",
        "recommended_avatar": "Adriana_Business_Front_public",
        "recommended_voice": "b2ddcef2b1594794aa7f3a436d8cf8f2",
        "sample_script": "Good evening. Here are today's top stories and important updates you need to know about.",
        "orientation": "landscape",
    },
    {
        "id": "motivational",
        "name": "Motivational Content",
        "category": "lifestyle",
        "recommended_avatar": "Albert_public_2",
        "recommended_voice": "cef3bc4e0a84424cafcde6f2cf466c97",
        "sample_script": "Remember, every great achievement starts with a single step. Today is your day to take that step forward.",
        "orientation": "portrait",
    },
]

TEMPLATE_CATEGORIES = sorted({t["category"] for t in TEMPLATES})


def get_template(template_id: str) -> dict | None:
    return next((t for t in TEMPLATES if t["id"] == template_id), None)


def list_templates(category: str | None = None) -> list[dict]:
    if not category:
        return list(TEMPLATES)
    return [t for t in TEMPLATES if t["category"] == category]
