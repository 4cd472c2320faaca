"""Pydantic models for file records and storage usage.

Field names are snake_case in Python. Backend wire names (``$id``,
``bucketFileId``, ``latestDate``...) are kept as aliases so documents
returned by the database validate directly and serialize back unchanged.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .types import ByteSize, DocumentId, Email

# Fixed storage capacity shown against usage (2 GiB)
TOTAL_STORAGE_BYTES = 2 * 1024 * 1024 * 1024


# =============================================================================
# File Classification
# =============================================================================


class FileType(str, Enum):
    """Category a file is filed under, derived from its extension."""

    DOCUMENT = "document"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


FILE_EXTENSIONS: dict[FileType, frozenset[str]] = {
    FileType.DOCUMENT: frozenset(
        {
            "pdf", "doc", "docx", "txt", "xls", "xlsx", "csv", "rtf", "ods",
            "ppt", "odp", "md", "html", "htm", "epub", "pages", "fig", "psd",
            "ai", "indd", "xd", "sketch", "afdesign", "afphoto",
        }
    ),
    FileType.IMAGE: frozenset({"jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"}),
    FileType.VIDEO: frozenset({"mp4", "avi", "mov", "mkv", "webm"}),
    FileType.AUDIO: frozenset({"mp3", "wav", "ogg", "flac"}),
}


def get_file_type(filename: str) -> tuple[FileType, str]:
    """Classify a file by its extension.

    Args:
        filename: File name including extension (e.g., "report.PDF")

    Returns:
        Tuple of (file type, lowercase extension). Extension is empty
        when the name has no dot; unknown extensions classify as OTHER.
    """
    _, dot, extension = filename.rpartition(".")
    if not dot:
        return FileType.OTHER, ""

    extension = extension.lower()
    for file_type, extensions in FILE_EXTENSIONS.items():
        if extension in extensions:
            return file_type, extension
    return FileType.OTHER, extension


def format_file_size(size_bytes: int) -> str:
    """Format a byte count for display (e.g., '1.5 MB', '234 B')."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    if size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"


# =============================================================================
# Backend Records
# =============================================================================


class CurrentUser(BaseModel):
    """Authenticated user document resolved from the session."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: DocumentId = Field(alias="$id")
    email: Email
    account_id: str | None = Field(default=None, alias="accountId")
    full_name: str | None = Field(default=None, alias="fullName")


class BucketFile(BaseModel):
    """Blob metadata returned by object storage after an upload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: DocumentId = Field(alias="$id")
    name: str
    size_original: ByteSize = Field(alias="sizeOriginal")
    mime_type: str | None = Field(default=None, alias="mimeType")


class NewFileRecord(BaseModel):
    """File metadata written to the database when a file is uploaded."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: FileType
    name: str = Field(min_length=1)
    url: str
    extension: str
    size: ByteSize
    owner: str = Field(min_length=1)
    account_id: str = Field(alias="accountId")
    users: list[Email] = Field(default_factory=list)
    bucket_file_id: DocumentId = Field(alias="bucketFileId")

    @field_validator("owner", mode="before")
    @classmethod
    def _owner_id(cls, value: Any) -> Any:
        """Reduce an expanded owner relationship to its document id."""
        if isinstance(value, dict):
            return value.get("$id")
        return value

    def to_document(self) -> dict[str, Any]:
        """Convert to the document payload sent to the database."""
        return self.model_dump(mode="json", by_alias=True)


class FileRecord(NewFileRecord):
    """File metadata document as stored in the database."""

    id: DocumentId = Field(alias="$id")
    created_at: datetime = Field(alias="$createdAt")
    updated_at: datetime = Field(alias="$updatedAt")

    # Stored as written; sharing input is validated before the write
    users: list[str] = Field(default_factory=list)


class DocumentList(BaseModel):
    """Page of file records returned by a list query."""

    total: int = Field(ge=0)
    documents: list[FileRecord] = Field(default_factory=list)


class DeleteResult(BaseModel):
    """Status marker returned by a successful delete."""

    status: Literal["success"] = "success"


# =============================================================================
# Storage Usage
# =============================================================================


class TypeUsage(BaseModel):
    """Bytes used and latest modification for one file type."""

    model_config = ConfigDict(populate_by_name=True)

    size: ByteSize = 0
    latest_date: datetime | None = Field(default=None, alias="latestDate")

    @field_serializer("latest_date")
    def _serialize_latest_date(self, value: datetime | None) -> str:
        # Backend timestamp format; unset dates serialize as an empty string
        return value.isoformat(timespec="milliseconds") if value is not None else ""


def _empty_usage() -> dict[FileType, TypeUsage]:
    return {file_type: TypeUsage() for file_type in FileType}


class UsageSummaryItem(BaseModel):
    """Dashboard card grouping one or more file types."""

    title: str
    size: ByteSize
    latest_date: datetime | None
    url: str


class StorageTotals(BaseModel):
    """Per-type storage usage against the fixed capacity.

    Built fresh for each request by the storage aggregator.
    """

    by_type: dict[FileType, TypeUsage] = Field(default_factory=_empty_usage)
    used: ByteSize = 0
    all: ByteSize = TOTAL_STORAGE_BYTES

    def usage_for(self, file_type: FileType) -> TypeUsage:
        """Get the usage bucket for a file type."""
        return self.by_type[file_type]

    @property
    def percentage_used(self) -> float:
        """Used bytes as a percentage of capacity (2 decimal places)."""
        if self.all == 0:
            return 0.0
        return round(self.used / self.all * 100, 2)

    def usage_summary(self) -> list[UsageSummaryItem]:
        """Group usage into the dashboard categories.

        Video and audio are reported together as "Media"; the latest
        date of that group is the later of the two.
        """
        video = self.usage_for(FileType.VIDEO)
        audio = self.usage_for(FileType.AUDIO)
        media_dates = [d for d in (video.latest_date, audio.latest_date) if d]

        return [
            UsageSummaryItem(
                title="Documents",
                size=self.usage_for(FileType.DOCUMENT).size,
                latest_date=self.usage_for(FileType.DOCUMENT).latest_date,
                url="/documents",
            ),
            UsageSummaryItem(
                title="Images",
                size=self.usage_for(FileType.IMAGE).size,
                latest_date=self.usage_for(FileType.IMAGE).latest_date,
                url="/images",
            ),
            UsageSummaryItem(
                title="Media",
                size=video.size + audio.size,
                latest_date=max(media_dates) if media_dates else None,
                url="/media",
            ),
            UsageSummaryItem(
                title="Others",
                size=self.usage_for(FileType.OTHER).size,
                latest_date=self.usage_for(FileType.OTHER).latest_date,
                url="/others",
            ),
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the flat response shape.

        Example:
            {"image": {"size": 1000, "latestDate": "..."}, ...,
             "used": 1000, "all": 2147483648}
        """
        result: dict[str, Any] = {
            file_type.value: usage.model_dump(mode="json", by_alias=True)
            for file_type, usage in self.by_type.items()
        }
        result["used"] = self.used
        result["all"] = self.all
        return result
