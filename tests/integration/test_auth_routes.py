"""Integration tests for authentication endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from tests.utils import auth_headers


@pytest.fixture
def registration() -> dict:
    return {
        "email": "demo@example.com",
        "password": "Demo123!",
        "firstName": "Demo",
        "lastName": "User",
    }


class TestRegisterEndpoint:
    """Tests for POST /api/auth/register."""

    @pytest.mark.asyncio
    async def test_register_success(self, async_client: AsyncClient, registration: dict) -> None:
        response = await async_client.post("/api/auth/register", json=registration)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "demo@example.com"
        assert data["user"]["firstName"] == "Demo"
        assert data["user"]["lastName"] == "User"
        assert data["user"]["role"] == "user"
        assert data["user"]["isActive"] is True
        assert data["token"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email_any_case(
        self, async_client: AsyncClient, registration: dict
    ) -> None:
        await async_client.post("/api/auth/register", json=registration)

        response = await async_client.post(
            "/api/auth/register", json={**registration, "email": "DEMO@example.com"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_register_invalid_email(
        self, async_client: AsyncClient, registration: dict
    ) -> None:
        response = await async_client.post(
            "/api/auth/register", json={**registration, "email": "not-an-email"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error"] == "Validation failed"
        assert any(detail["field"] == "email" for detail in data["details"])

    @pytest.mark.asyncio
    async def test_register_weak_password(
        self, async_client: AsyncClient, registration: dict
    ) -> None:
        response = await async_client.post(
            "/api/auth/register", json={**registration, "password": "password123"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert [detail["field"] for detail in response.json()["details"]] == ["password"]

    @pytest.mark.asyncio
    async def test_register_short_password(
        self, async_client: AsyncClient, registration: dict
    ) -> None:
        response = await async_client.post(
            "/api/auth/register", json={**registration, "password": "Ab1"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_register_cannot_choose_role(
        self, async_client: AsyncClient, registration: dict
    ) -> None:
        response = await async_client.post(
            "/api/auth/register", json={**registration, "role": "admin"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["role"] == "user"


class TestLoginEndpoint:
    """Tests for POST /api/auth/login."""

    @pytest.mark.asyncio
    async def test_login_success(self, async_client: AsyncClient, registration: dict) -> None:
        await async_client.post("/api/auth/register", json=registration)

        response = await async_client.post(
            "/api/auth/login",
            json={"email": registration["email"], "password": registration["password"]},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["lastLogin"] is not None
        assert data["token"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(
        self, async_client: AsyncClient, registration: dict
    ) -> None:
        await async_client.post("/api/auth/register", json=registration)

        response = await async_client.post(
            "/api/auth/login", json={"email": registration["email"], "password": "Wrong123!"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "Demo123!"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_login_missing_password(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/auth/login", json={"email": "demo@example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_me_returns_profile(
        self, async_client: AsyncClient, user_headers: dict[str, str]
    ) -> None:
        response = await async_client.get("/api/auth/me", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == "user@example.com"

    @pytest.mark.asyncio
    async def test_me_without_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/auth/me", headers=auth_headers("not-a-token"))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_logout(self, async_client: AsyncClient, user_headers: dict[str, str]) -> None:
        response = await async_client.post("/api/auth/logout", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True


class TestAccountActivation:
    @pytest.mark.asyncio
    async def test_deactivated_user_token_stops_working(
        self,
        async_client: AsyncClient,
        admin_headers: dict[str, str],
        user_account: dict,
        user_headers: dict[str, str],
    ) -> None:
        user_id = user_account["user"]["id"]
        assert (await async_client.get("/api/errors", headers=user_headers)).status_code == 200

        response = await async_client.patch(
            f"/api/users/{user_id}/active", json={"isActive": False}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["isActive"] is False

        rejected = await async_client.get("/api/errors", headers=user_headers)
        assert rejected.status_code == status.HTTP_403_FORBIDDEN

        await async_client.patch(
            f"/api/users/{user_id}/active", json={"isActive": True}, headers=admin_headers
        )
        assert (await async_client.get("/api/errors", headers=user_headers)).status_code == 200

    @pytest.mark.asyncio
    async def test_only_admin_can_change_activation(
        self, async_client: AsyncClient, admin_account: dict, user_headers: dict[str, str]
    ) -> None:
        response = await async_client.patch(
            f"/api/users/{admin_account['user']['id']}/active",
            json={"isActive": False},
            headers=user_headers,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_unknown_user(
        self, async_client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await async_client.patch(
            "/api/users/missing/active", json={"isActive": False}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
