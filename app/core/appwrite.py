import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from appwrite.client import Client
from appwrite.id import ID
from appwrite.input_file import InputFile
from appwrite.query import Query
from appwrite.services.databases import Databases
from appwrite.services.storage import Storage

from app.core.config import (
    APPWRITE_API_KEY,
    APPWRITE_ENDPOINT,
    APPWRITE_PROJECT_ID,
    BUCKET_ID,
    DATABASE_ID,
    LIST_PAGE_SIZE,
)

log = logging.getLogger("seeder")


def create_client(
    endpoint: str = APPWRITE_ENDPOINT,
    project_id: str = APPWRITE_PROJECT_ID,
    api_key: str = APPWRITE_API_KEY,
) -> Client:
    """Builds an authenticated Appwrite client (server API key)."""
    if not project_id or not api_key:
        raise RuntimeError("APPWRITE_PROJECT_ID and APPWRITE_API_KEY must be set.")
    client = Client()
    client.set_endpoint(endpoint)
    client.set_project(project_id)
    client.set_key(api_key)
    return client


def build_view_url(endpoint: str, bucket_id: str, file_id: str, project_id: str) -> str:
    """Public view address of a stored file, as served by Appwrite."""
    return f"{endpoint.rstrip('/')}/storage/buckets/{bucket_id}/files/{file_id}/view?project={project_id}"


class AppwriteGateway:
    """
    Async facade over the (blocking) Appwrite SDK services.

    Every SDK call runs in a worker thread so callers can await it and fan out
    deletes with asyncio.gather. Documents and files are addressed with the
    configured database and bucket; new IDs come from `id_factory`.
    """

    def __init__(
        self,
        databases: Databases,
        storage: Storage,
        database_id: str = DATABASE_ID,
        bucket_id: str = BUCKET_ID,
        endpoint: str = APPWRITE_ENDPOINT,
        project_id: str = APPWRITE_PROJECT_ID,
        id_factory: Callable[[], str] = ID.unique,
        page_size: int = LIST_PAGE_SIZE,
    ):
        self.databases = databases
        self.storage = storage
        self.database_id = database_id
        self.bucket_id = bucket_id
        self.endpoint = endpoint
        self.project_id = project_id
        self.id_factory = id_factory
        self.page_size = page_size

    @classmethod
    def from_config(cls) -> "AppwriteGateway":
        client = create_client()
        return cls(Databases(client), Storage(client))

    # ----------- Documents -----------

    async def list_document_ids(self, collection_id: str) -> List[str]:
        """Returns the IDs of one page of documents in the collection."""
        result = await asyncio.to_thread(
            self.databases.list_documents,
            self.database_id,
            collection_id,
            [Query.limit(self.page_size)],
        )
        return [doc["$id"] for doc in result["documents"]]

    async def count_documents(self, collection_id: str) -> int:
        result = await asyncio.to_thread(
            self.databases.list_documents,
            self.database_id,
            collection_id,
            [Query.limit(1)],
        )
        return int(result["total"])

    async def delete_document(self, collection_id: str, document_id: str) -> None:
        await asyncio.to_thread(
            self.databases.delete_document, self.database_id, collection_id, document_id
        )

    async def create_document(self, collection_id: str, data: Dict[str, Any]) -> str:
        """Creates a document under a freshly generated ID and returns that ID."""
        doc = await asyncio.to_thread(
            self.databases.create_document,
            self.database_id,
            collection_id,
            self.id_factory(),
            data,
        )
        return doc["$id"]

    # ----------- Files -----------

    async def list_file_ids(self) -> List[str]:
        result = await asyncio.to_thread(
            self.storage.list_files, self.bucket_id, [Query.limit(self.page_size)]
        )
        return [f["$id"] for f in result["files"]]

    async def count_files(self) -> int:
        result = await asyncio.to_thread(self.storage.list_files, self.bucket_id, [Query.limit(1)])
        return int(result["total"])

    async def delete_file(self, file_id: str) -> None:
        await asyncio.to_thread(self.storage.delete_file, self.bucket_id, file_id)

    async def create_file(self, content: bytes, filename: str, mime_type: Optional[str] = None) -> str:
        """Uploads raw bytes as a new file and returns the generated file ID."""
        input_file = InputFile.from_bytes(content, filename=filename, mime_type=mime_type)
        created = await asyncio.to_thread(
            self.storage.create_file, self.bucket_id, self.id_factory(), input_file
        )
        return created["$id"]

    def file_view_url(self, file_id: str) -> str:
        return build_view_url(self.endpoint, self.bucket_id, file_id, self.project_id)
