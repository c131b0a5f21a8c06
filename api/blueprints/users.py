"""
api/blueprints/users.py
Blueprint de cadastro e login de usuários.

Endpoints:
    POST /users/register — cria usuário (senha em hash bcrypt)
    POST /users/login    — valida senha e emite token JWT
"""

from __future__ import annotations

from flask import Blueprint, current_app, request

from api.http_utils import api_error, api_success, json_body
from core.repositories.users_repository import (
    create_user,
    get_user_by_username,
)
from core.schemas import UserCredentials
from internalloggin.logger import setup_logger
from utils.security import hash_password, verify_password

logger = setup_logger(__name__)

users_bp = Blueprint("users", __name__)


def _read_credentials() -> UserCredentials:
    body = json_body(request)
    return UserCredentials(
        username=str(body.get("username") or ""),
        password=str(body.get("password") or ""),
    )


# ── Rotas ────────────────────────────────────────────


@users_bp.post("/register")
def register():
    creds = _read_credentials()
    if not creds.username or not creds.password:
        return api_error("Username and password are required", 400)

    user_id = create_user(
        username=creds.username,
        password_hash=hash_password(creds.password),
    )
    if user_id is None:
        return api_error("Username already exists", 409)

    logger.info("Usuário '%s' registrado (id=%d).", creds.username, user_id)
    return api_success(
        {"id": user_id, "username": creds.username},
        "User registered successfully",
        201,
    )


@users_bp.post("/login")
def login():
    creds = _read_credentials()
    if not creds.username or not creds.password:
        return api_error("Username and password are required", 400)

    user = get_user_by_username(creds.username)
    if user is None or not verify_password(creds.password, user["password"]):
        logger.warning("Login recusado para '%s'.", creds.username)
        return api_error("Invalid username or password", 401)

    token = current_app.extensions["jwt_handler"].generate_token(
        user["username"]
    )
    return api_success(
        {"id": user["id"], "username": user["username"], "token": token},
        "Login successful",
    )
