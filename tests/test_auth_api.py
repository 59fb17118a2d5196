"""API tests for /auth (register, login, logout), the bearer-token dependency and /user/me."""

import unittest

import jwt

from app.core.config import get_settings
from app.models import User
from app.services.sessions import SessionRegistry
from support import (
    API,
    TestingSessionLocal,
    auth_header,
    grant_role,
    login,
    new_client,
    random_email,
    register,
    reset_database,
)

TOKEN_PATTERN = r"^[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*$"
REQUIRED_MESSAGE = "name, email, and password are required"


class TestRegister(unittest.TestCase):
    """POST /auth creates a diner and returns {user, token}."""

    @classmethod
    def setUpClass(cls) -> None:
        reset_database()
        cls.client = new_client()

    def test_register_success(self) -> None:
        body = {"name": "test user", "email": random_email(), "password": "password123"}
        res = self.client.post(f"{API}/auth", json=body)
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertRegex(data["token"], TOKEN_PATTERN)
        self.assertEqual(data["user"]["name"], "test user")
        self.assertEqual(data["user"]["email"], body["email"])
        self.assertEqual(data["user"]["roles"], [{"role": "diner"}])
        self.assertIn("id", data["user"])
        self.assertNotIn("password", data["user"])
        self.assertNotIn("passwordHash", data["user"])

    def test_missing_name(self) -> None:
        res = self.client.post(
            f"{API}/auth", json={"email": "test@test.com", "password": "password123"}
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], REQUIRED_MESSAGE)

    def test_missing_email(self) -> None:
        res = self.client.post(
            f"{API}/auth", json={"name": "Test User", "password": "password123"}
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], REQUIRED_MESSAGE)

    def test_missing_password(self) -> None:
        res = self.client.post(
            f"{API}/auth", json={"name": "Test User", "email": "test@test.com"}
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], REQUIRED_MESSAGE)

    def test_all_fields_missing(self) -> None:
        res = self.client.post(f"{API}/auth", json={})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], REQUIRED_MESSAGE)

    def test_empty_strings(self) -> None:
        res = self.client.post(
            f"{API}/auth", json={"name": "", "email": "", "password": ""}
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], REQUIRED_MESSAGE)

    def test_duplicate_email_rejected(self) -> None:
        email = random_email()
        register(self.client, email=email)
        res = self.client.post(
            f"{API}/auth", json={"name": "again", "email": email, "password": "b"}
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "email already registered")

    def test_password_is_not_stored_in_plaintext(self) -> None:
        registered = register(self.client, password="plaintext-secret")
        db = TestingSessionLocal()
        try:
            user = db.get(User, registered["user"]["id"])
            self.assertNotEqual(user.password_hash, "plaintext-secret")
        finally:
            db.close()


class TestLogin(unittest.TestCase):
    """PUT /auth issues a fresh token carrying the stored identity."""

    @classmethod
    def setUpClass(cls) -> None:
        reset_database()
        cls.client = new_client()
        cls.registered = register(cls.client, name="pizza diner", password="a")
        cls.user = cls.registered["user"]

    def test_login_success(self) -> None:
        data = login(self.client, self.user["email"], "a")
        self.assertRegex(data["token"], TOKEN_PATTERN)
        self.assertEqual(data["user"]["name"], "pizza diner")
        self.assertEqual(data["user"]["email"], self.user["email"])
        self.assertEqual(data["user"]["roles"], [{"role": "diner"}])
        self.assertNotIn("password", data["user"])

    def test_token_claims_match_stored_user(self) -> None:
        token = login(self.client, self.user["email"], "a")["token"]
        settings = get_settings()
        decoded = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
        )
        self.assertEqual(decoded["id"], self.user["id"])
        self.assertEqual(decoded["name"], "pizza diner")
        self.assertEqual(decoded["email"], self.user["email"])
        self.assertEqual(decoded["roles"], [{"role": "diner"}])

    def test_each_login_issues_a_new_token(self) -> None:
        first = login(self.client, self.user["email"], "a")["token"]
        second = login(self.client, self.user["email"], "a")["token"]
        self.assertNotEqual(first, second)

    def test_wrong_password(self) -> None:
        res = self.client.put(
            f"{API}/auth", json={"email": self.user["email"], "password": "wrongpassword"}
        )
        self.assertGreaterEqual(res.status_code, 400)
        self.assertEqual(res.status_code, 401)

    def test_unknown_email(self) -> None:
        res = self.client.put(
            f"{API}/auth", json={"email": "nonexistent@test.com", "password": "password"}
        )
        self.assertGreaterEqual(res.status_code, 400)

    def test_roles_snapshot_taken_at_login(self) -> None:
        registered = register(self.client)
        old_token = registered["token"]
        grant_role(registered["user"]["id"], "admin")

        res = self.client.get(f"{API}/user/me", headers=auth_header(old_token))
        self.assertEqual(res.json()["roles"], [{"role": "diner"}])

        new = login(self.client, registered["user"]["email"], registered["password"])
        self.assertEqual(new["user"]["roles"], [{"role": "diner"}, {"role": "admin"}])


class TestLogout(unittest.TestCase):
    """DELETE /auth revokes the presented token."""

    @classmethod
    def setUpClass(cls) -> None:
        reset_database()
        cls.client = new_client()
        cls.registered = register(cls.client)
        cls.email = cls.registered["user"]["email"]
        cls.password = cls.registered["password"]

    def _fresh_token(self) -> str:
        return login(self.client, self.email, self.password)["token"]

    def test_logout_success(self) -> None:
        res = self.client.delete(f"{API}/auth", headers=auth_header(self._fresh_token()))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["message"], "logout successful")

    def test_no_token(self) -> None:
        res = self.client.delete(f"{API}/auth")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["message"], "unauthorized")

    def test_invalid_token(self) -> None:
        res = self.client.delete(f"{API}/auth", headers=auth_header("invalidtoken123"))
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["message"], "unauthorized")

    def test_malformed_authorization_header(self) -> None:
        res = self.client.delete(f"{API}/auth", headers={"Authorization": "InvalidFormat"})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["message"], "unauthorized")

    def test_token_removed_from_registry(self) -> None:
        token = self._fresh_token()
        jti = jwt.decode(token, options={"verify_signature": False})["jti"]
        self.assertTrue(self._is_active(jti))
        self.client.delete(f"{API}/auth", headers=auth_header(token))
        self.assertFalse(self._is_active(jti))

    def _is_active(self, jti: str) -> bool:
        db = TestingSessionLocal()
        try:
            return SessionRegistry(db).is_active(jti)
        finally:
            db.close()

    def test_retry_after_logout_is_unauthorized(self) -> None:
        token = self._fresh_token()
        self.client.delete(f"{API}/auth", headers=auth_header(token))
        for _ in range(2):
            retry = self.client.delete(f"{API}/auth", headers=auth_header(token))
            self.assertEqual(retry.status_code, 401)
            self.assertEqual(retry.json()["message"], "unauthorized")

    def test_logout_leaves_other_tokens_valid(self) -> None:
        kept = self._fresh_token()
        revoked = self._fresh_token()
        self.client.delete(f"{API}/auth", headers=auth_header(revoked))
        res = self.client.get(f"{API}/user/me", headers=auth_header(kept))
        self.assertEqual(res.status_code, 200)


class TestCurrentUser(unittest.TestCase):
    """GET /user/me returns the token's identity; protected routes need a valid token."""

    @classmethod
    def setUpClass(cls) -> None:
        reset_database()
        cls.client = new_client()
        cls.registered = register(cls.client, name="me user")

    def test_me(self) -> None:
        res = self.client.get(
            f"{API}/user/me", headers=auth_header(self.registered["token"])
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["id"], self.registered["user"]["id"])
        self.assertEqual(res.json()["name"], "me user")
        self.assertEqual(res.json()["roles"], [{"role": "diner"}])

    def test_me_without_token(self) -> None:
        res = self.client.get(f"{API}/user/me")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.headers.get("www-authenticate"), "Bearer")

    def test_bearer_without_token_value(self) -> None:
        res = self.client.get(f"{API}/user/me", headers={"Authorization": "Bearer"})
        self.assertEqual(res.status_code, 401)


if __name__ == "__main__":
    unittest.main()
