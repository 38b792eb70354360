from fastapi.testclient import TestClient

from avatar_studio.api.main import app

ADMIN = {"x-admin-token": "test-admin-token"}


def test_admin_grant_and_balance() -> None:
    c = TestClient(app)

    payload = {
        "owner_id": "12345",
        "credits": 100,
        "note": "manual upi",
        "external_ref": "CREDITS-12345-1",
    }
    r = c.post('/v1/admin/credits/grant', json=payload, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()['data'] == {"owner_id": "12345", "credits": 100}

    rb = c.get('/v1/credits/12345')
    assert rb.status_code == 200
    data = rb.json()['data']
    assert data['balance']['credits'] == 100
    assert data['balance']['credits_used'] == 0
    assert data['credits_per_video'] == 20
    assert data['videos_this_month'] == 0
    assert data['recent_ledger'][0]['external_ref'] == 'CREDITS-12345-1'


def test_unknown_owner_has_zero_balance() -> None:
    c = TestClient(app)
    r = c.get('/v1/credits/nobody')
    assert r.status_code == 200
    assert r.json()['data']['balance']['credits'] == 0
    assert r.json()['data']['recent_ledger'] == []


def test_admin_auth_required() -> None:
    c = TestClient(app)
    r = c.post('/v1/admin/credits/grant', json={"owner_id": "1", "credits": 10, "note": "x"})
    assert r.status_code == 401
    r = c.get('/v1/admin/videos/stats', headers={"x-admin-token": "wrong"})
    assert r.status_code == 401


def test_non_positive_grant_rejected() -> None:
    c = TestClient(app)
    r = c.post('/v1/admin/credits/grant', json={"owner_id": "1", "credits": 0}, headers=ADMIN)
    assert r.status_code == 400


def test_pricing_plans() -> None:
    c = TestClient(app)
    r = c.get('/v1/pricing/plans')
    assert r.status_code == 200
    data = r.json()['data']
    assert set(data['subscription']) == {"free", "basic", "pro"}
    assert data['credit_system']['credits_per_video'] == 20
    assert data['custom_credits']['price_per_credit'] == 4


def test_pricing_follows_credits_per_video_override(monkeypatch) -> None:
    from avatar_studio.config import settings

    monkeypatch.setattr(settings, "credits_per_video", 40)
    data = TestClient(app).get('/v1/pricing/plans').json()['data']

    assert data['credit_system']['credits_per_video'] == 40
    assert {p['features']['credits_per_video'] for p in data['subscription'].values()} == {40}
    assert data['subscription']['basic']['features']['max_videos'] == 10
    assert data['subscription']['basic']['description'] == "400 credits monthly = 10 videos"


def test_purchase_options_cover_one_video(monkeypatch) -> None:
    from avatar_studio.config import settings
    from avatar_studio.pricing import purchase_options

    monkeypatch.setattr(settings, "credits_per_video", 40)
    options = purchase_options()
    assert options['buy_credits'] == {"price": 160, "credits": 40, "message": "Buy 40 credits for ₹160 (1 video)"}
    assert options['basic_plan']['message'] == "Basic Plan: 400 credits for ₹899 = 10 videos"
