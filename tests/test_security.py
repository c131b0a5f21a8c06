"""
Testes de hash de senha (bcrypt), tokens JWT e do cofre Fernet.
"""
import pytest
from cryptography.fernet import Fernet

from utils.security import JWTHandler, TokenError, hash_password, verify_password
from utils.vault import (
    ENV_MASTER_KEY,
    MasterKeyNotFoundError,
    VaultCorruptedError,
    VaultError,
    VaultManager,
)


class TestPasswordHashing:

    def test_verify_matching_password(self):
        hashed = hash_password("correct horse", rounds=4)
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)

    def test_reject_wrong_password(self):
        hashed = hash_password("correct horse", rounds=4)
        assert not verify_password("battery staple", hashed)

    def test_malformed_hash_is_rejected(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestJWTHandler:

    def test_token_carries_subject(self):
        handler = JWTHandler("secret")
        claims = handler.decode_token(handler.generate_token("operator"))
        assert claims["sub"] == "operator"
        assert claims["exp"] > claims["iat"]

    def test_expired_token(self):
        handler = JWTHandler("secret", expires_in_seconds=-10)
        with pytest.raises(TokenError, match="Token expired"):
            handler.decode_token(handler.generate_token("operator"))

    def test_token_signed_with_other_secret(self):
        token = JWTHandler("secret-a").generate_token("operator")
        with pytest.raises(TokenError, match="Invalid token"):
            JWTHandler("secret-b").decode_token(token)

    def test_garbage_token(self):
        with pytest.raises(TokenError, match="Invalid token"):
            JWTHandler("secret").decode_token("not.a.jwt")

    def test_empty_secret_is_refused(self):
        with pytest.raises(ValueError):
            JWTHandler("")


class TestVaultManager:

    def test_token_does_not_expose_plaintext(self):
        vault = VaultManager()
        token = vault.encrypt_attributes({"username": "admin", "password": "s3cret-pw"})
        assert "s3cret-pw" not in token
        assert vault.decrypt_attributes(token)["password"] == "s3cret-pw"

    def test_wrong_key(self):
        token = VaultManager().encrypt_attributes({"password": "x"})
        other = VaultManager(Fernet.generate_key().decode("utf-8"))
        with pytest.raises(VaultCorruptedError):
            other.decrypt_attributes(token)

    def test_non_object_payload(self, master_key):
        fernet = Fernet(master_key.encode("utf-8"))
        token = fernet.encrypt(b"[1, 2, 3]").decode("ascii")
        with pytest.raises(VaultCorruptedError):
            VaultManager().decrypt_attributes(token)

    def test_missing_master_key(self, monkeypatch):
        monkeypatch.delenv(ENV_MASTER_KEY)
        with pytest.raises(MasterKeyNotFoundError):
            VaultManager()

    def test_invalid_master_key(self):
        with pytest.raises(VaultError):
            VaultManager("short-key")

    def test_unserializable_attributes(self):
        with pytest.raises(VaultError):
            VaultManager().encrypt_attributes({"when": object()})
