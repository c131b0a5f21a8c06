"""
core/repositories/users_repository.py
Acesso à tabela ``users``. Senhas chegam aqui já em hash bcrypt.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from core.db import execute, query_one


def create_user(*, username: str, password_hash: str) -> int | None:
    """Insere o usuário; retorna o id ou None se o username já existir."""
    try:
        cursor = execute(
            "INSERT INTO users (username, password) VALUES (?, ?)",
            (username, password_hash),
        )
    except sqlite3.IntegrityError:
        return None
    return cursor.lastrowid


def get_user_by_username(username: str) -> dict[str, Any] | None:
    row = query_one(
        "SELECT id, username, password, created_at FROM users WHERE username = ?",
        (username,),
    )
    return dict(row) if row else None
