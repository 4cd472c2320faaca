"""Tests for session user resolution."""

import json
import re

import pytest
import pytest_asyncio
from pytest_httpx import HTTPXMock

from storeit import BackendError
from storeit.backends import BackendClient, SessionAccount

ENDPOINT = "http://backend.test/v1"
ACCOUNT_URL = f"{ENDPOINT}/account"
USERS_URL = re.compile(
    re.escape(f"{ENDPOINT}/databases/db/collections/users/documents") + r"(\?.*)?$"
)


@pytest_asyncio.fixture
async def clients():
    session_client = BackendClient(ENDPOINT, "proj", session="secret")
    admin_client = BackendClient(ENDPOINT, "proj", api_key="key")
    yield session_client, admin_client
    await session_client.close()
    await admin_client.close()


@pytest.fixture
def account(clients) -> SessionAccount:
    session_client, admin_client = clients
    return SessionAccount(session_client, admin_client, "db", "users")


class TestGetCurrentUser:
    """Test SessionAccount.get_current_user."""

    @pytest.mark.asyncio
    async def test_resolves_user_document(
        self, httpx_mock: HTTPXMock, account: SessionAccount
    ):
        httpx_mock.add_response(
            method="GET", url=ACCOUNT_URL, json={"$id": "acct_1", "email": "a@b.c"}
        )
        httpx_mock.add_response(
            method="GET",
            url=USERS_URL,
            json={
                "total": 1,
                "documents": [
                    {
                        "$id": "user_1",
                        "email": "alice@example.com",
                        "accountId": "acct_1",
                        "fullName": "Alice",
                    }
                ],
            },
        )

        user = await account.get_current_user()

        assert user is not None
        assert user.id == "user_1"
        assert user.email == "alice@example.com"
        assert user.account_id == "acct_1"

        account_request, users_request = httpx_mock.get_requests()
        assert account_request.headers["X-Appwrite-Session"] == "secret"
        assert users_request.headers["X-Appwrite-Key"] == "key"
        sent = [json.loads(q) for q in users_request.url.params.get_list("queries[]")]
        assert sent == [
            {"method": "equal", "attribute": "accountId", "values": ["acct_1"]},
            {"method": "limit", "values": [1]},
        ]

    @pytest.mark.asyncio
    async def test_no_session(self, httpx_mock: HTTPXMock, clients):
        _, admin_client = clients
        account = SessionAccount(None, admin_client, "db", "users")

        assert await account.get_current_user() is None
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_expired_session(
        self, httpx_mock: HTTPXMock, account: SessionAccount
    ):
        httpx_mock.add_response(method="GET", url=ACCOUNT_URL, status_code=401)

        assert await account.get_current_user() is None

    @pytest.mark.asyncio
    async def test_missing_user_document(
        self, httpx_mock: HTTPXMock, account: SessionAccount
    ):
        httpx_mock.add_response(method="GET", url=ACCOUNT_URL, json={"$id": "acct_1"})
        httpx_mock.add_response(
            method="GET", url=USERS_URL, json={"total": 0, "documents": []}
        )

        assert await account.get_current_user() is None

    @pytest.mark.asyncio
    async def test_account_server_error_propagates(
        self, httpx_mock: HTTPXMock, account: SessionAccount
    ):
        httpx_mock.add_response(method="GET", url=ACCOUNT_URL, status_code=500)

        with pytest.raises(BackendError) as exc_info:
            await account.get_current_user()

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_users_lookup_failure_propagates(
        self, httpx_mock: HTTPXMock, account: SessionAccount
    ):
        httpx_mock.add_response(method="GET", url=ACCOUNT_URL, json={"$id": "acct_1"})
        httpx_mock.add_response(method="GET", url=USERS_URL, status_code=503)

        with pytest.raises(BackendError, match="List users failed: 503"):
            await account.get_current_user()
