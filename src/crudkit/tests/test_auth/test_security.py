import pytest
from jose import jwt

from crudkit.auth.security import create_access_token, decode_access_token, hash_password, verify_password
from crudkit.exceptions import UnauthorizedError


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("correct horse battery")

        assert hashed.startswith("$2b$")
        assert verify_password("correct horse battery", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_long_passwords_do_not_fail(self):
        long_password = "ä" * 100  # 200 bytes in utf-8

        assert verify_password(long_password, hash_password(long_password)) is True

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")

    def test_unknown_hash_format_never_verifies(self):
        assert verify_password("anything", "plaintext") is False


class TestAccessTokens:

    def test_round_trip_claims(self, test_settings):
        token = create_access_token(test_settings, subject="66f0c0ffee0000000000abcd", extra_claims={"role": "admin"})

        claims = decode_access_token(test_settings, token)

        assert claims["sub"] == "66f0c0ffee0000000000abcd"
        assert claims["role"] == "admin"
        assert claims["exp"] > claims["iat"]

    def test_expired_token(self, test_settings):
        expired_settings = test_settings.model_copy(update={"JWT_EXPIRE_MINUTES": -1})
        token = create_access_token(expired_settings, subject="u1")

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(test_settings, token)

        assert exc_info.value.status_code == 403

    def test_wrong_secret(self, test_settings):
        token = jwt.encode({"sub": "u1"}, "another-secret", algorithm=test_settings.JWT_ALGORITHM)

        with pytest.raises(UnauthorizedError):
            decode_access_token(test_settings, token)

    def test_missing_subject(self, test_settings):
        token = jwt.encode({"role": "x"}, test_settings.JWT_SECRET_KEY, algorithm=test_settings.JWT_ALGORITHM)

        with pytest.raises(UnauthorizedError):
            decode_access_token(test_settings, token)
