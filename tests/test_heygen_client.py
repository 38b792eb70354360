import pytest

from avatar_studio.errors import ProviderRequestError
from avatar_studio.heygen import HeyGenClient, StatusQueryError
from avatar_studio.key_pool import Credential
from avatar_studio.models import Dimensions, resolve_dimensions
from conftest import HEYGEN_BASE, FakeProvider


@pytest.mark.parametrize(
    "orientation,expected",
    [("landscape", (1280, 720)), ("portrait", (720, 1280)), ("square", (1080, 1080))],
)
def test_orientation_table(orientation: str, expected: tuple[int, int]) -> None:
    assert resolve_dimensions(orientation) == Dimensions(*expected)


def test_custom_dimensions_used_verbatim() -> None:
    custom = Dimensions(999, 333)
    assert resolve_dimensions("portrait", custom) is custom
    assert resolve_dimensions("custom", custom) == Dimensions(999, 333)


def test_custom_orientation_without_size_is_landscape() -> None:
    assert resolve_dimensions("custom") == Dimensions(1280, 720)


def test_unknown_orientation_rejected() -> None:
    with pytest.raises(ValueError):
        resolve_dimensions("panorama")


def test_submit_sends_avatar_voice_script_and_key() -> None:
    provider = FakeProvider()
    client = HeyGenClient(base_url=HEYGEN_BASE, transport=provider.transport)

    job_id = client.submit(
        Credential(key="key-a", quota=10),
        script="Hello there",
        avatar_id="Albert_public_3",
        voice_id="voice-1",
        dimensions=Dimensions(720, 1280),
    )

    assert job_id == "vid-123"
    assert provider.api_keys == ["key-a"]
    body = provider.submitted[0]
    assert body["caption"] is False
    assert body["dimension"] == {"width": 720, "height": 1280}
    video_input = body["video_inputs"][0]
    assert video_input["character"] == {"type": "avatar", "avatar_id": "Albert_public_3"}
    assert video_input["voice"] == {"type": "text", "input_text": "Hello there", "voice_id": "voice-1"}


@pytest.mark.parametrize("status_code,retryable", [(400, False), (401, False), (429, True), (503, True)])
def test_submit_rejection_carries_provider_status_and_body(status_code: int, retryable: bool) -> None:
    provider = FakeProvider(submit_status=status_code)
    client = HeyGenClient(base_url=HEYGEN_BASE, transport=provider.transport)

    with pytest.raises(ProviderRequestError) as exc_info:
        client.submit(Credential("k", 10), "hi", "a", "v", Dimensions(1280, 720))

    err = exc_info.value
    assert err.status_code == status_code
    assert err.body == {"error": {"message": "bad avatar"}}
    assert err.retryable is retryable
    assert err.http_status == 502


def test_status_query_errors_are_wrapped() -> None:
    provider = FakeProvider(statuses=["http_error"])
    client = HeyGenClient(base_url=HEYGEN_BASE, transport=provider.transport)
    with pytest.raises(StatusQueryError):
        client.get_status(Credential("k", 10), "vid-123")

    provider = FakeProvider(statuses=["network_error"])
    client = HeyGenClient(base_url=HEYGEN_BASE, transport=provider.transport)
    with pytest.raises(StatusQueryError):
        client.get_status(Credential("k", 10), "vid-123")
