"""
core/repositories/credentials_repository.py
Acesso à tabela ``credentials``.

Os atributos (username, password, ...) são criptografados com o
VaultManager antes do INSERT/UPDATE e só são revelados em claro para
montar o payload do worker de probe.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from typing import Any

from core.constants import MASKED_VALUE, SECRET_ATTRIBUTE_KEYS
from core.db import execute, query_one, query_rows
from utils.vault import VaultManager

_COLUMNS = "id, name, type, attributes, created_at, updated_at"


def mask_attributes(attributes: dict[str, Any]) -> dict[str, Any]:
    """Substitui valores sensíveis por ``********``."""
    return {
        key: MASKED_VALUE if key.lower() in SECRET_ATTRIBUTE_KEYS else value
        for key, value in attributes.items()
    }


def _row_to_dict(
    row: sqlite3.Row, vault: VaultManager, reveal: bool
) -> dict[str, Any]:
    attributes = vault.decrypt_attributes(row["attributes"])
    return {
        "id": row["id"],
        "name": row["name"],
        "type": row["type"],
        "attributes": attributes if reveal else mask_attributes(attributes),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


def create_credential(
    *,
    name: str,
    type: str,
    attributes: dict[str, Any],
    vault: VaultManager | None = None,
) -> int:
    vault = vault or VaultManager()
    cursor = execute(
        "INSERT INTO credentials (name, type, attributes) VALUES (?, ?, ?)",
        (name, type, vault.encrypt_attributes(attributes)),
    )
    return cursor.lastrowid


def get_credential(
    credential_id: int,
    *,
    vault: VaultManager | None = None,
    reveal: bool = False,
) -> dict[str, Any] | None:
    row = query_one(
        f"SELECT {_COLUMNS} FROM credentials WHERE id = ?",
        (credential_id,),
    )
    if row is None:
        return None
    return _row_to_dict(row, vault or VaultManager(), reveal)


def list_credentials(
    *, vault: VaultManager | None = None
) -> list[dict[str, Any]]:
    vault = vault or VaultManager()
    rows = query_rows(f"SELECT {_COLUMNS} FROM credentials ORDER BY id")
    return [_row_to_dict(row, vault, reveal=False) for row in rows]


def update_credential(
    credential_id: int,
    *,
    name: str | None = None,
    type: str | None = None,
    attributes: dict[str, Any] | None = None,
    vault: VaultManager | None = None,
) -> bool:
    """Atualização parcial; retorna False se a credencial não existir."""
    fields: dict[str, Any] = {}
    if name is not None:
        fields["name"] = name
    if type is not None:
        fields["type"] = type
    if attributes is not None:
        fields["attributes"] = (vault or VaultManager()).encrypt_attributes(
            attributes
        )

    if not fields:
        row = query_one(
            "SELECT 1 FROM credentials WHERE id = ?", (credential_id,)
        )
        return row is not None

    set_clause = ", ".join(f"{column} = ?" for column in fields)
    cursor = execute(
        f"UPDATE credentials SET {set_clause}, updated_at = CURRENT_TIMESTAMP "
        "WHERE id = ?",
        (*fields.values(), credential_id),
    )
    return cursor.rowcount > 0


def delete_credential(credential_id: int) -> bool:
    cursor = execute("DELETE FROM credentials WHERE id = ?", (credential_id,))
    return cursor.rowcount > 0


def missing_credential_ids(credential_ids: Iterable[int]) -> list[int]:
    """Ids (na ordem recebida) que não existem na tabela."""
    wanted = list(credential_ids)
    if not wanted:
        return []
    placeholders = ", ".join("?" for _ in wanted)
    rows = query_rows(
        f"SELECT id FROM credentials WHERE id IN ({placeholders})",
        tuple(wanted),
    )
    found = {row["id"] for row in rows}
    return [cid for cid in wanted if cid not in found]


def resolve_credentials(
    credential_ids: Iterable[int],
    *,
    vault: VaultManager | None = None,
) -> list[dict[str, Any]]:
    """
    Monta a lista de credenciais em claro para o worker de probe.

    Cada item é ``{"id", "name", "type", **atributos}``; ids
    inexistentes são ignorados e a ordem recebida é preservada.
    """
    vault = vault or VaultManager()
    resolved: list[dict[str, Any]] = []
    for credential_id in credential_ids:
        credential = get_credential(credential_id, vault=vault, reveal=True)
        if credential is None:
            continue
        resolved.append(
            {
                "id": credential["id"],
                "name": credential["name"],
                "type": credential["type"],
                **credential["attributes"],
            }
        )
    return resolved
