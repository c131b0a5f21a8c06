"""
core/repositories/discoveries_repository.py
Acesso à tabela ``discoveries``.

Apenas a resposta final do pipeline é persistida (status + result);
estados intermediários nunca chegam ao banco.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any

from core.constants import DISCOVERY_STATUS_PENDING
from core.db import execute, query_one, query_rows

_COLUMNS = (
    "id, name, ip, port, credential_ids, status, result, "
    "created_at, updated_at"
)


def _row_to_dict(row: sqlite3.Row) -> dict[str, Any]:
    data = dict(row)
    data["credential_ids"] = json.loads(data["credential_ids"] or "[]")
    return data


def create_discovery(
    *,
    name: str,
    ip: str,
    port: int,
    credential_ids: list[int],
) -> int:
    cursor = execute(
        """
        INSERT INTO discoveries (name, ip, port, credential_ids, status)
        VALUES (?, ?, ?, ?, ?)
        """,
        (name, ip, port, json.dumps(credential_ids), DISCOVERY_STATUS_PENDING),
    )
    return cursor.lastrowid


def get_discovery(discovery_id: int) -> dict[str, Any] | None:
    row = query_one(
        f"SELECT {_COLUMNS} FROM discoveries WHERE id = ?",
        (discovery_id,),
    )
    return _row_to_dict(row) if row else None


def list_discoveries() -> list[dict[str, Any]]:
    rows = query_rows(f"SELECT {_COLUMNS} FROM discoveries ORDER BY id")
    return [_row_to_dict(row) for row in rows]


def update_discovery(
    discovery_id: int,
    *,
    name: str | None = None,
    ip: str | None = None,
    port: int | None = None,
    credential_ids: list[int] | None = None,
) -> bool:
    """Atualização parcial; retorna False se a discovery não existir."""
    fields: dict[str, Any] = {}
    if name is not None:
        fields["name"] = name
    if ip is not None:
        fields["ip"] = ip
    if port is not None:
        fields["port"] = port
    if credential_ids is not None:
        fields["credential_ids"] = json.dumps(credential_ids)

    if not fields:
        return get_discovery(discovery_id) is not None

    set_clause = ", ".join(f"{column} = ?" for column in fields)
    cursor = execute(
        f"UPDATE discoveries SET {set_clause}, updated_at = CURRENT_TIMESTAMP "
        "WHERE id = ?",
        (*fields.values(), discovery_id),
    )
    return cursor.rowcount > 0


def save_discovery_result(
    discovery_id: int, *, status: str, result: str | None
) -> bool:
    cursor = execute(
        """
        UPDATE discoveries
        SET status = ?, result = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
        """,
        (status, result, discovery_id),
    )
    return cursor.rowcount > 0


def delete_discovery(discovery_id: int) -> bool:
    cursor = execute("DELETE FROM discoveries WHERE id = ?", (discovery_id,))
    return cursor.rowcount > 0
