"""Integration tests for the authentication endpoints."""

import pytest
from httpx import AsyncClient

PREFIX = "/api/v1/auth"
STRONG_PASSWORD = "Str0ng!Pass"


def registration(**overrides) -> dict:
    body = {
        "username": "alice_01",
        "email": "alice@example.com",
        "password": STRONG_PASSWORD,
        "confirm_password": STRONG_PASSWORD,
        "name": "Alice Nguyen",
        "phone": "0912345678",
        "national_id": "012345678901",
    }
    body.update(overrides)
    return body


async def register_verified(client: AsyncClient, notifier, **overrides) -> dict:
    response = await client.post(f"{PREFIX}/register", json=registration(**overrides))
    assert response.status_code == 201
    token = notifier.last("verification").payload
    verified = await client.get(f"{PREFIX}/verify-email", params={"token": token})
    assert verified.status_code == 200
    return response.json()["account"]


async def login(client: AsyncClient, username="alice_01", password=STRONG_PASSWORD):
    return await client.post(f"{PREFIX}/login", json={"username": username, "password": password})


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_unverified_account(self, client: AsyncClient, notifier):
        response = await client.post(f"{PREFIX}/register", json=registration())

        assert response.status_code == 201
        body = response.json()
        assert "verify" in body["message"]
        assert body["account"]["username"] == "alice_01"
        assert body["account"]["email_verified"] is False
        assert "password" not in body["account"]
        assert "password_hash" not in body["account"]
        assert notifier.last("verification").recipient == "alice@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_username_is_conflict(self, client: AsyncClient):
        await client.post(f"{PREFIX}/register", json=registration())

        response = await client.post(
            f"{PREFIX}/register",
            json=registration(email="other@example.com", national_id="999999999999"),
        )

        assert response.status_code == 409
        assert response.json()["field"] == "username"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, client: AsyncClient):
        await client.post(f"{PREFIX}/register", json=registration())

        response = await client.post(
            f"{PREFIX}/register",
            json=registration(username="bob_02", national_id="999999999999"),
        )

        assert response.status_code == 409
        assert response.json()["field"] == "email"

    @pytest.mark.asyncio
    async def test_weak_password_and_mismatch_reported_together(self, client: AsyncClient):
        response = await client.post(
            f"{PREFIX}/register",
            json=registration(password="weak", confirm_password="other"),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation error"
        fields = {detail["field"] for detail in body["details"]}
        assert fields == {"password", "confirm_password"}

    @pytest.mark.asyncio
    async def test_malformed_email_rejected(self, client: AsyncClient):
        response = await client.post(f"{PREFIX}/register", json=registration(email="not-an-email"))

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "email"

    @pytest.mark.asyncio
    async def test_registration_survives_mail_outage(self, client: AsyncClient, notifier):
        notifier.fail = True

        response = await client.post(f"{PREFIX}/register", json=registration())

        assert response.status_code == 201


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_requires_verified_email(self, client: AsyncClient):
        await client.post(f"{PREFIX}/register", json=registration())

        response = await login(client)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_login_after_verification(self, client: AsyncClient, notifier):
        account = await register_verified(client, notifier)

        response = await login(client)

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 24 * 3600
        assert body["account"]["id"] == account["id"]
        assert body["account"]["email_verified"] is True

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_alike(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)

        wrong_password = await login(client, password="Wr0ng!Pass")
        unknown_user = await login(client, username="nobody")

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_revokes_token(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)
        token = (await login(client)).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 200

        response = await client.post(f"{PREFIX}/logout", headers=headers)
        assert response.status_code == 200

        after = await client.get("/api/v1/users/me", headers=headers)
        assert after.status_code == 401
        assert after.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_logout_revokes_padded_encoding(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)
        token = (await login(client)).json()["token"]

        await client.post(f"{PREFIX}/logout", headers={"Authorization": f"Bearer {token}"})

        padded = await client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {token}="}
        )
        assert padded.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_twice_is_accepted(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)
        token = (await login(client)).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        await client.post(f"{PREFIX}/logout", headers=headers)
        response = await client.post(f"{PREFIX}/logout", headers=headers)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_logout_with_forged_token(self, client: AsyncClient):
        response = await client.post(
            f"{PREFIX}/logout", headers={"Authorization": "Bearer not.a.token"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_without_header(self, client: AsyncClient):
        response = await client.post(f"{PREFIX}/logout")

        assert response.status_code == 401


class TestEmailVerification:
    @pytest.mark.asyncio
    async def test_unknown_token(self, client: AsyncClient):
        response = await client.get(f"{PREFIX}/verify-email", params={"token": "bogus"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, client: AsyncClient, notifier):
        await client.post(f"{PREFIX}/register", json=registration())
        token = notifier.last("verification").payload

        first = await client.get(f"{PREFIX}/verify-email", params={"token": token})
        second = await client.get(f"{PREFIX}/verify-email", params={"token": token})

        assert first.status_code == 200
        assert second.status_code == 400

    @pytest.mark.asyncio
    async def test_resend_issues_new_token(self, client: AsyncClient, notifier):
        await client.post(f"{PREFIX}/register", json=registration())

        response = await client.post(
            f"{PREFIX}/resend-verification", json={"email": "alice@example.com"}
        )

        assert response.status_code == 200
        assert len([e for e in notifier.sent if e.kind == "verification"]) == 2
        token = notifier.last("verification").payload
        verified = await client.get(f"{PREFIX}/verify-email", params={"token": token})
        assert verified.status_code == 200

    @pytest.mark.asyncio
    async def test_resend_for_unknown_email_looks_the_same(self, client: AsyncClient, notifier):
        response = await client.post(
            f"{PREFIX}/resend-verification", json={"email": "ghost@example.com"}
        )

        assert response.status_code == 200
        assert notifier.sent == []


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_unknown_email_gets_generic_reply(self, client: AsyncClient, notifier):
        response = await client.post(
            f"{PREFIX}/forgot-password", json={"email": "ghost@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == (
            "If your email is registered, you will receive a password reset link"
        )
        assert notifier.sent == []

    @pytest.mark.asyncio
    async def test_reset_flow(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)

        forgot = await client.post(
            f"{PREFIX}/forgot-password", json={"email": "alice@example.com"}
        )
        assert forgot.status_code == 200
        link = notifier.last("password_reset").payload
        assert "/reset-password?token=" in link
        token = link.split("token=", 1)[1]

        new_password = "N3w!Password"
        reset = await client.post(
            f"{PREFIX}/reset-password",
            json={"token": token, "new_password": new_password, "confirm_password": new_password},
        )
        assert reset.status_code == 200

        assert (await login(client)).status_code == 401
        assert (await login(client, password=new_password)).status_code == 200

        reused = await client.post(
            f"{PREFIX}/reset-password", json={"token": token, "new_password": "An0ther!Pass"}
        )
        assert reused.status_code == 400

    @pytest.mark.asyncio
    async def test_second_request_invalidates_first_link(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)
        await client.post(f"{PREFIX}/forgot-password", json={"email": "alice@example.com"})
        first = notifier.last("password_reset").payload.split("token=", 1)[1]
        await client.post(f"{PREFIX}/forgot-password", json={"email": "alice@example.com"})

        response = await client.post(
            f"{PREFIX}/reset-password", json={"token": first, "new_password": "N3w!Password"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_weak_new_password_rejected(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)
        await client.post(f"{PREFIX}/forgot-password", json={"email": "alice@example.com"})
        token = notifier.last("password_reset").payload.split("token=", 1)[1]

        response = await client.post(
            f"{PREFIX}/reset-password", json={"token": token, "new_password": "short"}
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "new_password"

    @pytest.mark.asyncio
    async def test_mail_outage_is_reported(self, client: AsyncClient, notifier):
        await register_verified(client, notifier)
        notifier.fail = True

        response = await client.post(
            f"{PREFIX}/forgot-password", json={"email": "alice@example.com"}
        )

        assert response.status_code == 500
        assert response.json()["message"] == "An unexpected error occurred"
