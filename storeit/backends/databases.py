"""Document database API client."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import BackendError
from ..models import DocumentList, FileRecord
from ..queries import Query
from .base import BackendClient
from .storage import UNIQUE_ID

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], payload: Any, operation: str) -> ModelT:
    """Validate a response body, reporting malformed documents as BackendError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise BackendError(f"{operation} returned an invalid document: {e}") from e


class DocumentDatabase:
    """
    Document operations on one collection of file records.

    POST   /databases/{database_id}/collections/{collection_id}/documents
    GET    /databases/{database_id}/collections/{collection_id}/documents
    PATCH  /databases/{database_id}/collections/{collection_id}/documents/{id}
    DELETE /databases/{database_id}/collections/{collection_id}/documents/{id}
    """

    def __init__(self, client: BackendClient, database_id: str, collection_id: str):
        self._client = client
        self._path = f"/databases/{database_id}/collections/{collection_id}/documents"

    async def create_document(self, data: dict[str, Any]) -> FileRecord:
        """Create a document with a backend-assigned identifier."""
        response = await self._client.request(
            "POST",
            self._path,
            "Create document",
            json={"documentId": UNIQUE_ID, "data": data},
        )
        record = _parse(FileRecord, response.json(), "Create document")
        logger.info("Created document %s", record.id)
        return record

    async def update_document(
        self, document_id: str, data: dict[str, Any]
    ) -> FileRecord:
        """Update the given fields of a document, leaving others untouched."""
        response = await self._client.request(
            "PATCH",
            f"{self._path}/{document_id}",
            "Update document",
            json={"data": data},
        )
        logger.info("Updated document %s fields %s", document_id, sorted(data))
        return _parse(FileRecord, response.json(), "Update document")

    async def delete_document(self, document_id: str) -> None:
        """Delete a document."""
        await self._client.request(
            "DELETE",
            f"{self._path}/{document_id}",
            "Delete document",
        )
        logger.info("Deleted document %s", document_id)

    async def list_documents(self, queries: Sequence[Query] = ()) -> DocumentList:
        """
        List documents matching the queries.

        Each query is sent as a ``queries[]`` parameter in order.
        """
        response = await self._client.request(
            "GET",
            self._path,
            "List documents",
            params={"queries[]": [str(q) for q in queries]},
        )
        return _parse(DocumentList, response.json(), "List documents")
