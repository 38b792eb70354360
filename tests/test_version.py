from fastapi.testclient import TestClient

from avatar_studio.api.main import app


def test_version() -> None:
    c = TestClient(app)
    r = c.get('/version')
    assert r.status_code == 200
    assert r.json()['data']['version'] == '0.1.0'
    assert r.json()['meta']['model_version'] == '0.1.0'
