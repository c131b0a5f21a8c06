"""
api/blueprints/discoveries.py
Blueprint de discoveries persistidas e execução do pipeline.

Endpoints (todos exigem JWT):
    POST   /discoveries/          — cria discovery
    GET    /discoveries/          — lista
    GET    /discoveries/<id>      — detalhe
    PUT    /discoveries/<id>      — atualização parcial
    DELETE /discoveries/<id>      — remove
    POST   /discoveries/<id>/run  — executa e grava status/result
    POST   /discoveries/run       — execução ad-hoc (envelope bruto)

A execução passa pelo canal ``discovery``: o blueprint publica o request
no MessageBus e aguarda a resposta do pool de workers.
"""

from __future__ import annotations

from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from flask import Blueprint, current_app, request
from pydantic import ValidationError

from api.blueprints.auth import jwt_required
from api.http_utils import (
    api_error,
    api_success,
    json_body,
    validation_message,
)
from core.constants import (
    DISCOVERY_ADDRESS,
    DISCOVERY_REPLY_TIMEOUT_MESSAGE,
    DISCOVERY_STATUS_ERROR,
    DISCOVERY_STATUS_SUCCESS,
)
from core.repositories.credentials_repository import (
    missing_credential_ids,
    resolve_credentials,
)
from core.repositories.discoveries_repository import (
    create_discovery,
    delete_discovery,
    get_discovery,
    list_discoveries,
    save_discovery_result,
    update_discovery,
)
from core.schemas import (
    DiscoveryContext,
    DiscoveryCreate,
    DiscoveryRequest,
    DiscoveryUpdate,
)
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

discoveries_bp = Blueprint("discoveries", __name__)


# ── Helpers ──────────────────────────────────────────


def _missing_credentials_error(credential_ids: list[int]):
    missing = missing_credential_ids(credential_ids)
    if missing:
        return api_error(f"Credential ID {missing[0]} does not exist.", 400)
    return None


def _dispatch(body: Any) -> dict[str, Any]:
    """Publica no canal ``discovery`` e aguarda a resposta (com limite)."""
    bus = current_app.extensions["discovery_bus"]
    timeout = current_app.config["DISCOVERY_REPLY_TIMEOUT"]
    future = bus.request(DISCOVERY_ADDRESS, body)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        # Request ainda na fila não chega a rodar; em execução, termina sozinho
        future.cancel()
        logger.error(
            "Sem resposta do canal '%s' em %.0fs.", DISCOVERY_ADDRESS, timeout,
        )
        return {
            "status": "error",
            "message": DISCOVERY_REPLY_TIMEOUT_MESSAGE,
        }


def _reply_response(reply: dict[str, Any]):
    code = 200 if reply.get("status") == "success" else 422
    return reply, code


# ── CRUD ─────────────────────────────────────────────


@discoveries_bp.post("/")
@jwt_required
def create():
    try:
        payload = DiscoveryCreate.model_validate(json_body(request))
    except ValidationError as exc:
        return api_error(validation_message(exc), 400)

    error = _missing_credentials_error(payload.credential_ids)
    if error is not None:
        return error

    discovery_id = create_discovery(
        name=payload.name,
        ip=payload.ip,
        port=payload.port,
        credential_ids=payload.credential_ids,
    )
    logger.info(
        "Discovery '%s' criada (id=%d, alvo=%s:%d).",
        payload.name, discovery_id, payload.ip, payload.port,
    )
    return api_success(
        {"id": discovery_id}, "Discovery created successfully", 201
    )


@discoveries_bp.get("/")
@jwt_required
def list_all():
    return api_success(list_discoveries(), "Discoveries retrieved")


@discoveries_bp.get("/<int:discovery_id>")
@jwt_required
def detail(discovery_id: int):
    discovery = get_discovery(discovery_id)
    if discovery is None:
        return api_error("Discovery not found", 404)
    return api_success(discovery, "Discovery retrieved")


@discoveries_bp.put("/<int:discovery_id>")
@jwt_required
def update(discovery_id: int):
    try:
        payload = DiscoveryUpdate.model_validate(json_body(request))
    except ValidationError as exc:
        return api_error(validation_message(exc), 400)

    if payload.credential_ids is not None:
        error = _missing_credentials_error(payload.credential_ids)
        if error is not None:
            return error

    updated = update_discovery(
        discovery_id,
        name=payload.name,
        ip=payload.ip,
        port=payload.port,
        credential_ids=payload.credential_ids,
    )
    if not updated:
        return api_error("Discovery not found", 404)
    return api_success(
        {"id": discovery_id}, "Discovery updated successfully"
    )


@discoveries_bp.delete("/<int:discovery_id>")
@jwt_required
def delete(discovery_id: int):
    if not delete_discovery(discovery_id):
        return api_error("Discovery not found", 404)
    return api_success(
        {"id": discovery_id}, "Discovery deleted successfully"
    )


# ── Execução ─────────────────────────────────────────


@discoveries_bp.post("/<int:discovery_id>/run")
@jwt_required
def run(discovery_id: int):
    discovery = get_discovery(discovery_id)
    if discovery is None:
        return api_error("Discovery not found", 404)

    credentials = resolve_credentials(discovery["credential_ids"])
    discovery_request = DiscoveryRequest(
        contexts=[
            DiscoveryContext(
                ip=discovery["ip"],
                port=discovery["port"],
                credentials=credentials,
            )
        ]
    )
    logger.info(
        "Executando discovery id=%d (%s:%d, %d credencial(is)).",
        discovery_id, discovery["ip"], discovery["port"], len(credentials),
    )

    reply = _dispatch(discovery_request.model_dump(by_alias=True))

    ok = reply.get("status") == "success"
    save_discovery_result(
        discovery_id,
        status=DISCOVERY_STATUS_SUCCESS if ok else DISCOVERY_STATUS_ERROR,
        result=reply.get("result") if ok else reply.get("message"),
    )
    return _reply_response(reply)


@discoveries_bp.post("/run")
@jwt_required
def run_adhoc():
    # Envelope repassado sem alteração: a validação é do consumidor do canal
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    return _reply_response(_dispatch(body))
