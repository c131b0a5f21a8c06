"""
api/blueprints/credentials.py
Blueprint de credenciais de acesso aos dispositivos.

Endpoints (todos exigem JWT):
    POST   /credentials/       — cria credencial (tipo SSH)
    GET    /credentials/       — lista (segredos mascarados)
    GET    /credentials/<id>   — detalhe (segredos mascarados)
    PUT    /credentials/<id>   — atualização parcial
    DELETE /credentials/<id>   — remove
"""

from __future__ import annotations

from flask import Blueprint, request
from pydantic import ValidationError

from api.blueprints.auth import jwt_required
from api.http_utils import (
    api_error,
    api_success,
    json_body,
    validation_message,
)
from core.repositories.credentials_repository import (
    create_credential,
    delete_credential,
    get_credential,
    list_credentials,
    update_credential,
)
from core.schemas import CredentialCreate, CredentialUpdate
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

credentials_bp = Blueprint("credentials", __name__)


@credentials_bp.post("/")
@jwt_required
def create():
    try:
        payload = CredentialCreate.model_validate(json_body(request))
    except ValidationError as exc:
        return api_error(validation_message(exc), 400)

    credential_id = create_credential(
        name=payload.name,
        type=payload.type,
        attributes=payload.attributes,
    )
    logger.info(
        "Credencial '%s' criada (id=%d, tipo=%s).",
        payload.name, credential_id, payload.type,
    )
    return api_success(
        {"id": credential_id}, "Credential created successfully", 201
    )


@credentials_bp.get("/")
@jwt_required
def list_all():
    return api_success(list_credentials(), "Credentials retrieved")


@credentials_bp.get("/<int:credential_id>")
@jwt_required
def detail(credential_id: int):
    credential = get_credential(credential_id)
    if credential is None:
        return api_error("Credential not found", 404)
    return api_success(credential, "Credential retrieved")


@credentials_bp.put("/<int:credential_id>")
@jwt_required
def update(credential_id: int):
    try:
        payload = CredentialUpdate.model_validate(json_body(request))
    except ValidationError as exc:
        return api_error(validation_message(exc), 400)

    updated = update_credential(
        credential_id,
        name=payload.name,
        type=payload.type,
        attributes=payload.attributes,
    )
    if not updated:
        return api_error("Credential not found", 404)
    return api_success(
        {"id": credential_id}, "Credential updated successfully"
    )


@credentials_bp.delete("/<int:credential_id>")
@jwt_required
def delete(credential_id: int):
    if not delete_credential(credential_id):
        return api_error("Credential not found", 404)
    logger.info("Credencial id=%d removida.", credential_id)
    return api_success(
        {"id": credential_id}, "Credential deleted successfully"
    )
