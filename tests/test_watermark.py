import pytest

from avatar_studio.errors import PostProcessingError
from avatar_studio.scratch import new_scratch_paths
from avatar_studio.watermark import WatermarkRemover, crop_filter
from conftest import RAW_VIDEO_URL, FakeProvider, scratch_files


def test_crop_filter_is_constant_margin() -> None:
    assert crop_filter(150, 80) == "crop=iw-150:ih-80:0:0"


def test_clean_crops_and_discards_raw(fake_ffmpeg) -> None:
    raw_path, clean_path = new_scratch_paths()
    remover = WatermarkRemover(transport=FakeProvider().transport)

    out = remover.clean(RAW_VIDEO_URL, raw_path, clean_path)

    assert out == clean_path
    assert clean_path.exists()
    assert not raw_path.exists()
    assert clean_path.read_bytes().startswith(b"\x00\x00\x00\x18ftyp")
    cmd = fake_ffmpeg["calls"][0]
    assert cmd[cmd.index("-vf") + 1] == "crop=iw-150:ih-80:0:0"


def test_margins_are_configurable(fake_ffmpeg) -> None:
    raw_path, clean_path = new_scratch_paths()
    WatermarkRemover(margin_width=10, margin_height=20, transport=FakeProvider().transport).clean(
        RAW_VIDEO_URL, raw_path, clean_path
    )
    cmd = fake_ffmpeg["calls"][0]
    assert cmd[cmd.index("-vf") + 1] == "crop=iw-10:ih-20:0:0"


def test_encode_failure_removes_raw_and_partial_output(fake_ffmpeg) -> None:
    fake_ffmpeg["state"]["returncode"] = 1
    raw_path, clean_path = new_scratch_paths()
    remover = WatermarkRemover(transport=FakeProvider().transport)

    with pytest.raises(PostProcessingError, match="ffmpeg_exit_1"):
        remover.clean(RAW_VIDEO_URL, raw_path, clean_path)

    assert scratch_files() == []


def test_download_failure_is_post_processing_error(fake_ffmpeg) -> None:
    raw_path, clean_path = new_scratch_paths()
    remover = WatermarkRemover(transport=FakeProvider(download_status=403).transport)

    with pytest.raises(PostProcessingError, match="download_http_403"):
        remover.clean(RAW_VIDEO_URL, raw_path, clean_path)

    assert fake_ffmpeg["calls"] == []
    assert scratch_files() == []
