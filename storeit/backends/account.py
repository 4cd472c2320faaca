"""Session account lookup."""

from __future__ import annotations

import logging

from ..errors import BackendError
from ..models import CurrentUser
from ..queries import equal, limit
from .base import BackendClient

logger = logging.getLogger(__name__)


class SessionAccount:
    """
    Resolves the signed-in user behind a session.

    GET /account returns the authenticated account; the user document is
    the entry of the users collection whose ``accountId`` matches it.
    """

    def __init__(
        self,
        session_client: BackendClient | None,
        admin_client: BackendClient,
        database_id: str,
        users_collection_id: str,
    ):
        self._session_client = session_client
        self._admin_client = admin_client
        self._users_path = (
            f"/databases/{database_id}/collections/{users_collection_id}/documents"
        )

    async def get_current_user(self) -> CurrentUser | None:
        """
        Get the user document for the session.

        Returns:
            CurrentUser, or None when there is no session, the session
            has expired, or it has no matching user document

        Raises:
            BackendError: If the backend fails for another reason
        """
        if self._session_client is None:
            return None

        try:
            response = await self._session_client.request(
                "GET", "/account", "Get account"
            )
        except BackendError as e:
            if e.status_code == 401:
                logger.debug("No active session")
                return None
            raise

        account_id = response.json()["$id"]
        queries = [equal("accountId", [account_id]), limit(1)]
        response = await self._admin_client.request(
            "GET",
            self._users_path,
            "List users",
            params={"queries[]": [str(q) for q in queries]},
        )

        documents = response.json().get("documents", [])
        if not documents:
            logger.warning("No user document for account %s", account_id)
            return None
        return CurrentUser.model_validate(documents[0])
