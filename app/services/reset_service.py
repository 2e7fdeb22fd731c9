import asyncio
import logging

log = logging.getLogger("seeder")


class StalePageError(RuntimeError):
    """The backend listed the same page again after every entry on it was deleted."""


def _check_progress(previous, ids, what: str) -> None:
    if previous is not None and ids == previous:
        raise StalePageError(f"{what} still lists {len(ids)} deleted entries; giving up.")


async def clear_collection(backend, collection_id: str) -> bool:
    """
    Deletes every document in a collection, one listed page at a time.
    Deletes within a page are issued concurrently. Failures are logged and
    reported through the return value, never raised.
    """
    deleted = 0
    previous = None
    try:
        while True:
            ids = await backend.list_document_ids(collection_id)
            if not ids:
                break
            _check_progress(previous, ids, f"Collection {collection_id}")
            await asyncio.gather(*(backend.delete_document(collection_id, doc_id) for doc_id in ids))
            deleted += len(ids)
            previous = ids
        log.info(f"Cleared collection: {collection_id} ({deleted} documents)")
        return True
    except Exception as e:
        log.error(f"Failed to clear collection {collection_id}: {e}")
        return False


async def clear_storage(backend) -> bool:
    """Deletes every file in the storage bucket. Same contract as clear_collection."""
    deleted = 0
    previous = None
    try:
        while True:
            ids = await backend.list_file_ids()
            if not ids:
                break
            _check_progress(previous, ids, "Storage bucket")
            await asyncio.gather(*(backend.delete_file(file_id) for file_id in ids))
            deleted += len(ids)
            previous = ids
        log.info(f"Cleared storage bucket ({deleted} files)")
        return True
    except Exception as e:
        log.error(f"Failed to clear storage: {e}")
        return False
