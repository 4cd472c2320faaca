"""StoreIt file actions.

Server-side actions for a file-storage application: upload files to object
storage, record their metadata in a document database, list, search, sort,
rename, share and delete them, and report per-type storage usage.

Example:
    from storeit import FileActions, FileType, StoreItConfig

    config = StoreItConfig()  # loads STOREIT_* environment variables

    async with FileActions.from_config(
        config, session_secret, revalidate=cache.invalidate
    ) as actions:
        files = await actions.get_files(
            types=[FileType.IMAGE], search_text="beach", sort="size-asc"
        )
        totals = await actions.get_total_space_used()
        print(totals.to_dict())
"""

from importlib.metadata import PackageNotFoundError, version

from .actions import FileActions, Revalidate
from .aggregation import calculate_storage_totals
from .config import StoreItConfig
from .errors import (
    AuthenticationError,
    BackendError,
    CompensationError,
    NotFoundError,
    StoreItError,
)
from .models import (
    TOTAL_STORAGE_BYTES,
    BucketFile,
    CurrentUser,
    DeleteResult,
    DocumentList,
    FileRecord,
    FileType,
    NewFileRecord,
    StorageTotals,
    TypeUsage,
    UsageSummaryItem,
    format_file_size,
    get_file_type,
)
from .queries import DEFAULT_SORT, Query, build_file_queries

try:
    __version__ = version("storeit")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "DEFAULT_SORT",
    "TOTAL_STORAGE_BYTES",
    # Errors
    "AuthenticationError",
    "BackendError",
    # Models
    "BucketFile",
    "CompensationError",
    "CurrentUser",
    "DeleteResult",
    "DocumentList",
    # Actions
    "FileActions",
    "FileRecord",
    "FileType",
    "NewFileRecord",
    "NotFoundError",
    "Query",
    "Revalidate",
    "StorageTotals",
    "StoreItConfig",
    "StoreItError",
    "TypeUsage",
    "UsageSummaryItem",
    # Version
    "__version__",
    # Helper functions
    "build_file_queries",
    "calculate_storage_totals",
    "format_file_size",
    "get_file_type",
]
