"""
api/http_utils.py
Utilitários HTTP exclusivos da camada web Flask.

Todas as respostas seguem o envelope
``{"status": "success"|"error", "message": str, "data"?: any}``.
"""

from __future__ import annotations

from typing import Any

from flask import Request, jsonify
from pydantic import ValidationError


def api_success(
    data: Any = None,
    message: str = "OK",
    code: int = 200,
):
    body: dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), code


def api_error(message: str, code: int = 400):
    return jsonify({"status": "error", "message": message}), code


def json_body(request: Request) -> dict[str, Any]:
    """Corpo JSON como dict; corpo ausente ou inválido vira ``{}``."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def validation_message(exc: ValidationError) -> str:
    """Primeira mensagem de validação do pydantic, legível pelo cliente."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    message = first["msg"]
    # "Value error, Unsupported credential type: X" → "Unsupported credential type: X"
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if not field:
        return message
    return f"{field}: {message}"
