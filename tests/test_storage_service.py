import pytest
from unittest.mock import MagicMock, patch

from app.core.throttle import NoDelay
from app.services.storage_service import fetch_image, file_name_from_url, rehost_image


class TestFileName:
    def test_last_path_segment(self):
        assert file_name_from_url("https://cdn.test/a/b/burger.png") == "burger.png"

    def test_query_string_is_dropped(self):
        assert file_name_from_url("https://cdn.test/img/pizza.png?w=400") == "pizza.png"

    def test_percent_escapes_are_decoded(self):
        assert file_name_from_url("https://cdn.test/img/veggie%20wrap.png") == "veggie wrap.png"

    def test_fallback_uses_timestamp(self):
        assert file_name_from_url("https://cdn.test/", now=1700000000.5) == "file-1700000000500.jpg"


@pytest.mark.asyncio
async def test_fetch_image_reads_bytes_and_mime_type():
    response = MagicMock()
    response.content = b"abc"
    response.headers = {"Content-Type": "image/png; charset=binary"}

    with patch("app.services.storage_service.requests.get", return_value=response) as mock_get:
        image = await fetch_image("https://cdn.test/x.png")

    mock_get.assert_called_once()
    response.raise_for_status.assert_called_once()
    assert image.content == b"abc"
    assert image.mime_type == "image/png"
    assert image.size == 3


@pytest.mark.asyncio
async def test_rehost_image_uploads_and_returns_view_url(backend, fetcher):
    throttle = NoDelay()

    url = await rehost_image(backend, "https://cdn.test/img/burger.png", throttle, fetcher)

    assert len(backend.files) == 1
    file_id, meta = next(iter(backend.files.items()))
    assert meta == {"name": "burger.png", "mime_type": "image/png", "size": len(b"\x89PNG fake")}
    assert url == backend.file_view_url(file_id)
    assert throttle.calls == 1


@pytest.mark.asyncio
async def test_rehost_image_propagates_fetch_failure(backend, fetcher, caplog):
    throttle = NoDelay()

    with pytest.raises(ConnectionError):
        await rehost_image(backend, "https://cdn.test/broken.png", throttle, fetcher)

    assert backend.files == {}
    assert throttle.calls == 0
    assert "Failed to upload image: https://cdn.test/broken.png" in caplog.text
