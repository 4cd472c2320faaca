"""Object storage API client."""

from __future__ import annotations

import logging

from ..models import BucketFile
from .base import BackendClient

logger = logging.getLogger(__name__)

# Asks the backend to assign a fresh identifier
UNIQUE_ID = "unique()"


class ObjectStorage:
    """
    Blob operations on a single storage bucket.

    POST   /storage/buckets/{bucket_id}/files
    DELETE /storage/buckets/{bucket_id}/files/{file_id}
    """

    def __init__(self, client: BackendClient, bucket_id: str):
        self._client = client
        self._bucket_id = bucket_id

    @property
    def bucket_id(self) -> str:
        """Bucket holding the blobs."""
        return self._bucket_id

    async def create_file(
        self,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> BucketFile:
        """
        Upload bytes as a new blob.

        Args:
            content: File content
            filename: Name stored with the blob
            content_type: Optional MIME type

        Returns:
            BucketFile with the backend-assigned identifier
        """
        file_part = (
            (filename, content, content_type) if content_type else (filename, content)
        )
        response = await self._client.request(
            "POST",
            f"/storage/buckets/{self._bucket_id}/files",
            "Upload file",
            data={"fileId": UNIQUE_ID},
            files={"file": file_part},
        )
        bucket_file = BucketFile.model_validate(response.json())
        logger.info(
            "Stored blob %s (%d bytes)", bucket_file.id, bucket_file.size_original
        )
        return bucket_file

    async def delete_file(self, file_id: str) -> None:
        """Delete a blob."""
        await self._client.request(
            "DELETE",
            f"/storage/buckets/{self._bucket_id}/files/{file_id}",
            "Delete file",
        )
        logger.info("Deleted blob %s", file_id)

    def view_url(self, file_id: str) -> str:
        """URL serving the blob inline."""
        return self._file_url(file_id, "view")

    def download_url(self, file_id: str) -> str:
        """URL serving the blob as an attachment."""
        return self._file_url(file_id, "download")

    def _file_url(self, file_id: str, action: str) -> str:
        return (
            f"{self._client.endpoint}/storage/buckets/{self._bucket_id}"
            f"/files/{file_id}/{action}?project={self._client.project_id}"
        )
