"""Shared HTTP plumbing for backend API clients."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import StoreItConfig
from ..errors import BackendError, NotFoundError

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Async HTTP client for the backend REST API.

    Wraps an ``httpx.AsyncClient`` configured with the project header and
    either the server API key (admin clients) or a user session secret
    (session clients). Status and transport failures are raised as
    BackendError with the failing operation in the message.
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        *,
        api_key: str | None = None,
        session: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Create a backend client.

        Args:
            endpoint: API base URL (e.g., "https://cloud.appwrite.io/v1")
            project_id: Project identifier sent with every request
            api_key: Server API key for admin access
            session: Session secret for acting as the signed-in user
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport (used in tests)
        """
        self._endpoint = endpoint.rstrip("/")
        self._project_id = project_id

        headers = {"X-Appwrite-Project": project_id}
        if api_key:
            headers["X-Appwrite-Key"] = api_key
        if session:
            headers["X-Appwrite-Session"] = session

        self._http = httpx.AsyncClient(
            base_url=self._endpoint,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def admin(cls, config: StoreItConfig) -> BackendClient:
        """Create a client authenticated with the server API key."""
        return cls(
            config.endpoint_url,
            config.project_id,
            api_key=config.api_key,
            timeout=config.timeout,
        )

    @classmethod
    def for_session(cls, config: StoreItConfig, session: str) -> BackendClient:
        """Create a client acting as the user owning the session."""
        return cls(
            config.endpoint_url,
            config.project_id,
            session=session,
            timeout=config.timeout,
        )

    @property
    def endpoint(self) -> str:
        """API base URL without trailing slash."""
        return self._endpoint

    @property
    def project_id(self) -> str:
        """Project identifier."""
        return self._project_id

    async def request(
        self,
        method: str,
        path: str,
        operation: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise BackendError on failure.

        Args:
            method: HTTP method
            path: Path relative to the endpoint
            operation: Human-readable operation name used in error messages
            **kwargs: Passed through to ``httpx.AsyncClient.request``

        Returns:
            Successful response

        Raises:
            NotFoundError: If the backend answers 404
            BackendError: For any other status or transport failure
        """
        try:
            response = await self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"{operation} failed: {status} - {e.response.text}"
            if status == 404:
                raise NotFoundError(message, status_code=status) from e
            raise BackendError(message, status_code=status) from e
        except httpx.RequestError as e:
            raise BackendError(f"Request failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    async def close(self) -> None:
        """Close HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> BackendClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
