"""File actions orchestrating object storage and the document database.

Each action is a single request/response unit of work. Backend handles are
injected so the actions can run against substitute backends.

Example:
    config = StoreItConfig()

    async with FileActions.from_config(config, session_secret) as actions:
        record = await actions.upload_file(
            content, "report.pdf", owner_id=user.id, account_id=user.account_id,
            path="/documents",
        )
        files = await actions.get_files(types=[FileType.DOCUMENT], limit=10)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

from pydantic import TypeAdapter

from .aggregation import calculate_storage_totals
from .backends import BackendClient, DocumentDatabase, ObjectStorage, SessionAccount
from .config import StoreItConfig
from .errors import AuthenticationError, BackendError, CompensationError
from .models import (
    CurrentUser,
    DeleteResult,
    DocumentList,
    FileRecord,
    FileType,
    NewFileRecord,
    StorageTotals,
    get_file_type,
)
from .queries import DEFAULT_SORT, build_file_queries, equal
from .types import Email

logger = logging.getLogger(__name__)

_EMAIL_LIST = TypeAdapter(list[Email])

# Signals that the page at a path must be re-rendered
Revalidate = Callable[[str], None]


def _no_revalidate(path: str) -> None:
    logger.debug("No revalidation hook configured, skipping %s", path)


@contextmanager
def _backend_errors(message: str) -> Iterator[None]:
    """Re-raise backend failures with an action-level message.

    The backend error is kept as ``__cause__``; its class and status code
    are preserved.
    """
    try:
        yield
    except CompensationError:
        raise
    except BackendError as e:
        raise type(e)(message, status_code=e.status_code) from e


class FileActions:
    """
    Server-side file actions for one request.

    Upload, list, rename, share, delete and storage usage. No action retries
    or suppresses a backend failure; the only local recovery is deleting
    the blob of an upload whose document could not be created.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        databases: DocumentDatabase,
        session: SessionAccount,
        revalidate: Revalidate | None = None,
        *,
        clients: Sequence[BackendClient] = (),
    ):
        """Create FileActions.

        Args:
            storage: Object storage for file blobs
            databases: Document database holding file records
            session: Resolver for the signed-in user
            revalidate: Called with the page path after each mutation
            clients: HTTP clients closed by ``close()``
        """
        self._storage = storage
        self._databases = databases
        self._session = session
        self._revalidate = revalidate or _no_revalidate
        self._clients = list(clients)

    @classmethod
    def from_config(
        cls,
        config: StoreItConfig,
        session_secret: str | None = None,
        revalidate: Revalidate | None = None,
    ) -> FileActions:
        """Create actions backed by the configured HTTP APIs.

        Args:
            config: Backend configuration
            session_secret: Session of the signed-in user, if any
            revalidate: Called with the page path after each mutation
        """
        admin = BackendClient.admin(config)
        clients = [admin]

        session_client = None
        if session_secret:
            session_client = BackendClient.for_session(config, session_secret)
            clients.append(session_client)

        return cls(
            storage=ObjectStorage(admin, config.bucket_id),
            databases=DocumentDatabase(
                admin, config.database_id, config.files_collection_id
            ),
            session=SessionAccount(
                session_client, admin, config.database_id, config.users_collection_id
            ),
            revalidate=revalidate,
            clients=clients,
        )

    async def close(self) -> None:
        """Close the HTTP clients."""
        for client in self._clients:
            await client.close()

    async def __aenter__(self) -> FileActions:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def upload_file(
        self,
        content: bytes,
        filename: str,
        owner_id: str,
        account_id: str,
        path: str,
    ) -> FileRecord:
        """
        Store a file and record its metadata.

        The blob is created first, then the document. If the document
        cannot be created the blob is deleted before the error is raised,
        so no blob is left without a record.

        Args:
            content: File content
            filename: Original file name
            owner_id: User document id of the owner
            account_id: Account id of the uploader
            path: Page path to revalidate

        Returns:
            The created FileRecord (not shared with anyone)

        Raises:
            BackendError: If the blob or the document cannot be created
            CompensationError: If the blob of a failed upload cannot be deleted
        """
        with _backend_errors("Failed to upload file"):
            bucket_file = await self._storage.create_file(content, filename)

        try:
            file_type, extension = get_file_type(bucket_file.name)
            new_file = NewFileRecord(
                type=file_type,
                name=bucket_file.name,
                url=self._storage.view_url(bucket_file.id),
                extension=extension,
                size=bucket_file.size_original,
                owner=owner_id,
                account_id=account_id,
                users=[],
                bucket_file_id=bucket_file.id,
            )
            record = await self._databases.create_document(new_file.to_document())
        except Exception as e:
            await self._delete_orphaned_blob(bucket_file.id, e)
            raise BackendError(
                "Failed to create file document",
                status_code=getattr(e, "status_code", None),
            ) from e

        logger.info(
            "Uploaded %s as %s (%s, %d bytes)",
            record.name,
            record.id,
            record.type.value,
            record.size,
        )
        self._revalidate(path)
        return record

    async def _delete_orphaned_blob(self, bucket_file_id: str, error: Exception) -> None:
        """Delete the blob of an upload whose document was not created."""
        logger.warning(
            "Document creation failed, deleting blob %s: %s", bucket_file_id, error
        )
        try:
            await self._storage.delete_file(bucket_file_id)
        except Exception as e:
            raise CompensationError(bucket_file_id, error, e) from e

    async def get_files(
        self,
        types: Sequence[FileType | str] = (),
        search_text: str = "",
        sort: str | None = DEFAULT_SORT,
        limit: int | None = None,
        *,
        current_user: CurrentUser | None = None,
    ) -> DocumentList:
        """
        List files visible to the current user.

        Args:
            types: File types to include (empty for all)
            search_text: Substring to match in file names
            sort: "<field>-<direction>" (default: newest first)
            limit: Maximum number of files
            current_user: Already resolved user; resolved from the
                session when omitted

        Returns:
            Matching documents exactly as the database returned them

        Raises:
            AuthenticationError: If no user is signed in
            BackendError: If the query fails
        """
        with _backend_errors("Failed to get files"):
            user = current_user or await self._require_user("User not found")
            queries = build_file_queries(user, types, search_text, sort, limit)
            return await self._databases.list_documents(queries)

    async def rename_file(
        self,
        file_id: str,
        name: str,
        extension: str,
        path: str,
    ) -> FileRecord:
        """
        Rename a file to "<name>.<extension>".

        Only the ``name`` field is updated. Access to the record is
        enforced by the database's document permissions.
        """
        new_name = f"{name}.{extension}"

        with _backend_errors("Failed to rename file"):
            record = await self._databases.update_document(file_id, {"name": new_name})

        self._revalidate(path)
        return record

    async def update_file_users(
        self,
        file_id: str,
        emails: Sequence[str],
        path: str,
    ) -> FileRecord:
        """
        Replace the list of emails a file is shared with.

        The new list overwrites the old one; pass an empty list to stop
        sharing.

        Raises:
            pydantic.ValidationError: If an entry is not an email address
                (nothing is written)
            BackendError: If the update fails
        """
        users = _EMAIL_LIST.validate_python(list(emails))

        with _backend_errors("Failed to update file users"):
            record = await self._databases.update_document(file_id, {"users": users})

        self._revalidate(path)
        return record

    async def delete_file(
        self,
        file_id: str,
        bucket_file_id: str,
        path: str,
    ) -> DeleteResult:
        """
        Delete a file record and then its blob.

        The blob is only deleted once the record is gone; if the record
        cannot be deleted nothing is changed.
        """
        with _backend_errors("Failed to delete file"):
            await self._databases.delete_document(file_id)
            await self._storage.delete_file(bucket_file_id)

        self._revalidate(path)
        return DeleteResult()

    async def get_total_space_used(
        self,
        *,
        current_user: CurrentUser | None = None,
    ) -> StorageTotals:
        """
        Compute storage usage over the files the current user owns.

        Files shared with the user do not count.

        Raises:
            AuthenticationError: If no user is signed in (before any query)
            BackendError: If the query fails
        """
        with _backend_errors("Error calculating total space used"):
            user = current_user or await self._require_user(
                "User is not authenticated."
            )
            files = await self._databases.list_documents([equal("owner", [user.id])])

        return calculate_storage_totals(files.documents)

    async def _require_user(self, message: str) -> CurrentUser:
        user = await self._session.get_current_user()
        if user is None:
            raise AuthenticationError(message)
        return user
