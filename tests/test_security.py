"""Unit tests for app.core.security: password hashing and JWT issue/verify."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core import security
from app.core.config import get_settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    new_token_id,
    verify_password,
)

security.BCRYPT_ROUNDS = 4


class TestPasswordHashing(unittest.TestCase):
    """hash_password stores a salted one-way hash; verify_password checks it."""

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("password123")
        self.assertNotEqual(hashed, "password123")
        self.assertTrue(hashed.startswith("$2"))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("same"), hash_password("same"))

    def test_verify_correct_password(self) -> None:
        hashed = hash_password("password123")
        self.assertTrue(verify_password("password123", hashed))

    def test_verify_wrong_password(self) -> None:
        hashed = hash_password("password123")
        self.assertFalse(verify_password("wrongpassword", hashed))

    def test_verify_against_garbage_hash(self) -> None:
        self.assertFalse(verify_password("password123", "not-a-bcrypt-hash"))


class TestAccessToken(unittest.TestCase):
    """create_access_token embeds the identity snapshot; decode_access_token verifies it."""

    def _claims(self) -> dict:
        return {
            "id": 7,
            "name": "pizza diner",
            "email": "d@jwt.com",
            "roles": [{"role": "diner"}],
        }

    def test_token_has_three_segments(self) -> None:
        token = create_access_token(self._claims(), new_token_id())
        self.assertRegex(token, r"^[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*$")

    def test_round_trip_claims(self) -> None:
        jti = new_token_id()
        payload = decode_access_token(create_access_token(self._claims(), jti))
        self.assertEqual(payload["id"], 7)
        self.assertEqual(payload["name"], "pizza diner")
        self.assertEqual(payload["email"], "d@jwt.com")
        self.assertEqual(payload["roles"], [{"role": "diner"}])
        self.assertEqual(payload["jti"], jti)
        self.assertIn("exp", payload)

    def test_token_ids_are_unique(self) -> None:
        self.assertNotEqual(new_token_id(), new_token_id())

    def test_tampered_token_rejected(self) -> None:
        token = create_access_token(self._claims(), new_token_id())
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{'A' * len(signature)}"
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(tampered)

    def test_token_signed_with_other_secret_rejected(self) -> None:
        settings = get_settings()
        forged = jwt.encode(
            {**self._claims(), "jti": "x", "exp": datetime.now(UTC) + timedelta(hours=1)},
            "some-other-secret",
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(forged)

    def test_expired_token_rejected(self) -> None:
        settings = get_settings()
        expired = jwt.encode(
            {**self._claims(), "jti": "x", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(expired)

    def test_token_without_jti_rejected(self) -> None:
        settings = get_settings()
        token = jwt.encode(
            {**self._claims(), "exp": datetime.now(UTC) + timedelta(hours=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token)


if __name__ == "__main__":
    unittest.main()
