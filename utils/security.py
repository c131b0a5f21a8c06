"""
utils/security.py
Hash de senhas (bcrypt) e emissão/validação de tokens JWT (PyJWT).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

BCRYPT_ROUNDS = 12


class TokenError(Exception):
    """Token JWT ausente, inválido ou expirado."""


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Gera o hash bcrypt de ``password``."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Confere ``password`` contra um hash bcrypt."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class JWTHandler:
    """Emite e valida tokens de acesso assinados (HS256 por padrão)."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in_seconds: int = 3600,
    ) -> None:
        if not secret_key:
            raise ValueError("JWT secret key is missing or empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_in = expires_in_seconds

    def generate_token(self, username: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": username,
            "iat": now,
            "exp": now + timedelta(seconds=self._expires_in),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Valida assinatura e expiração.

        Raises:
            TokenError: Token expirado ou inválido.
        """
        try:
            return jwt.decode(
                token, self._secret_key, algorithms=[self._algorithm]
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenError("Invalid token") from exc
