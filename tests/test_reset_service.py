import asyncio
import pytest
from unittest.mock import AsyncMock

from app.services.reset_service import clear_collection, clear_storage
from app.testing.testing_mocks import InMemoryBackend


@pytest.mark.asyncio
async def test_clear_collection_deletes_across_pages():
    backend = InMemoryBackend(page_size=3)
    for i in range(7):
        await backend.create_document("menu", {"name": f"item {i}"})

    assert await clear_collection(backend, "menu") is True
    assert backend.docs("menu") == {}


@pytest.mark.asyncio
async def test_clear_empty_collection_is_noop(backend):
    assert await clear_collection(backend, "categories") is True
    assert await clear_collection(backend, "categories") is True


@pytest.mark.asyncio
async def test_clear_collection_failure_is_logged_not_raised(caplog):
    backend = InMemoryBackend(fail_list={"categories"})

    assert await clear_collection(backend, "categories") is False
    assert "Failed to clear collection categories" in caplog.text


@pytest.mark.asyncio
async def test_clear_collection_failed_delete_is_contained(backend):
    await backend.create_document("menu", {"name": "a"})
    backend.delete_document = AsyncMock(side_effect=ConnectionError("rate limited"))

    assert await clear_collection(backend, "menu") is False


@pytest.mark.asyncio
async def test_clear_storage_deletes_all_files():
    backend = InMemoryBackend(page_size=2)
    for i in range(5):
        await backend.create_file(b"x", f"f{i}.png", "image/png")

    assert await clear_storage(backend) is True
    assert backend.files == {}


@pytest.mark.asyncio
async def test_clear_storage_failure_returns_false(caplog):
    backend = InMemoryBackend(fail_list={"storage"})

    assert await clear_storage(backend) is False
    assert "Failed to clear storage" in caplog.text


class ConcurrentDeleteBackend(InMemoryBackend):
    """Each delete waits until every delete of the page has started."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.in_flight = 0
        self.max_in_flight = 0
        self.all_started = asyncio.Event()

    async def delete_document(self, collection_id, document_id):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.in_flight == self.page_size:
            self.all_started.set()
        await asyncio.wait_for(self.all_started.wait(), timeout=1)
        self.in_flight -= 1
        await super().delete_document(collection_id, document_id)


@pytest.mark.asyncio
async def test_clear_collection_deletes_page_concurrently():
    backend = ConcurrentDeleteBackend(page_size=4)
    for i in range(4):
        await backend.create_document("customizations", {"name": f"c{i}"})

    assert await clear_collection(backend, "customizations") is True
    assert backend.max_in_flight == 4
    assert backend.docs("customizations") == {}


@pytest.mark.asyncio
async def test_clear_collection_stops_when_page_never_changes(backend, caplog):
    await backend.create_document("menu", {"name": "ghost"})
    backend.delete_document = AsyncMock()  # acknowledged but never removed

    assert await clear_collection(backend, "menu") is False
    assert backend.delete_document.await_count == 1
    assert "still lists 1 deleted entries" in caplog.text


@pytest.mark.asyncio
async def test_clear_storage_stops_when_page_never_changes(backend):
    await backend.create_file(b"x", "ghost.png", "image/png")
    backend.delete_file = AsyncMock()

    assert await clear_storage(backend) is False
    assert backend.delete_file.await_count == 1
