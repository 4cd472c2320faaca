"""Backend configuration.

Loaded from environment variables prefixed with STOREIT_.
"""

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreItConfig(BaseSettings):
    """
    Connection settings for the object storage and document database.

    Uses Pydantic BaseSettings for automatic environment variable loading.
    Environment variables are prefixed with STOREIT_.

    Required environment variables:
        STOREIT_ENDPOINT: Backend API base URL (e.g., "https://cloud.appwrite.io/v1")
        STOREIT_PROJECT_ID: Backend project identifier
        STOREIT_API_KEY: Server API key used by admin clients
        STOREIT_DATABASE_ID: Database holding the collections
        STOREIT_FILES_COLLECTION_ID: Collection of file records
        STOREIT_USERS_COLLECTION_ID: Collection of user documents
        STOREIT_BUCKET_ID: Object storage bucket for file blobs

    Optional environment variables:
        STOREIT_TIMEOUT: Request timeout in seconds (default: 30)
    """

    model_config = SettingsConfigDict(
        env_prefix="STOREIT_",
        extra="ignore",
    )

    # Backend API base URL - required, validated as URL
    endpoint: HttpUrl

    project_id: str = Field(min_length=1)

    # Server API key - required, non-empty
    api_key: str = Field(min_length=1)

    database_id: str = Field(min_length=1)
    files_collection_id: str = Field(min_length=1)
    users_collection_id: str = Field(min_length=1)
    bucket_id: str = Field(min_length=1)

    # Request timeout (seconds)
    timeout: float = Field(default=30.0, gt=0)

    @property
    def endpoint_url(self) -> str:
        """Endpoint as a string without trailing slash."""
        return str(self.endpoint).rstrip("/")
