"""
core/db.py
Utilitário de acesso ao banco de dados SQLite.

Funções compartilhadas por todos os repositórios do sistema.
O caminho padrão vem de ``core.constants.DB_PATH`` e pode ser
trocado na inicialização da aplicação com ``set_db_path()``.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from core.constants import DB_PATH

_db_path: Path = DB_PATH


def set_db_path(path: str | Path) -> None:
    """Define o arquivo SQLite usado pelos repositórios."""
    global _db_path
    _db_path = Path(path)


def get_db_path() -> Path:
    return _db_path


def get_connection() -> sqlite3.Connection:
    """Retorna uma conexão SQLite com ``row_factory`` por nome de coluna."""
    _db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(_db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def query_rows(
    sql: str,
    params: tuple[Any, ...] = (),
) -> list[sqlite3.Row]:
    """Executa uma query SELECT e retorna todas as linhas."""
    conn = get_connection()
    try:
        return conn.execute(sql, params).fetchall()
    finally:
        conn.close()


def query_one(
    sql: str,
    params: tuple[Any, ...] = (),
) -> sqlite3.Row | None:
    """Executa uma query SELECT e retorna a primeira linha (ou None)."""
    conn = get_connection()
    try:
        return conn.execute(sql, params).fetchone()
    finally:
        conn.close()


def execute(
    sql: str,
    params: tuple[Any, ...] = (),
) -> sqlite3.Cursor:
    """Executa INSERT/UPDATE/DELETE com commit e retorna o cursor."""
    conn = get_connection()
    try:
        with conn:
            return conn.execute(sql, params)
    finally:
        conn.close()


# ── Esquema ───────────────────────────────────────────────────────────────────

def ensure_schema() -> None:
    """
    Cria as tabelas do serviço caso não existam.

    Sem sistema de migração formal: ``CREATE TABLE IF NOT EXISTS``.
    """
    conn = get_connection()
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS users (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                username    TEXT    NOT NULL UNIQUE,
                password    TEXT    NOT NULL,
                created_at  TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            -- attributes: token Fernet do JSON de atributos (nunca em claro)
            CREATE TABLE IF NOT EXISTS credentials (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                name        TEXT    NOT NULL,
                type        TEXT    NOT NULL,
                attributes  TEXT    NOT NULL,
                created_at  TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at  TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            -- result: última resposta do pipeline (saída do worker ou erro)
            CREATE TABLE IF NOT EXISTS discoveries (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                name            TEXT    NOT NULL,
                ip              TEXT    NOT NULL,
                port            INTEGER NOT NULL DEFAULT 22,
                credential_ids  TEXT    NOT NULL DEFAULT '[]',
                status          TEXT    NOT NULL DEFAULT 'pending',
                result          TEXT,
                created_at      TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at      TEXT    NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.commit()
    finally:
        conn.close()
