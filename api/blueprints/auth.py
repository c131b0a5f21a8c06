"""
api/blueprints/auth.py
Blueprint de autenticação por token JWT (Bearer).

- Expõe o decorator `jwt_required` para proteger rotas.
- Rota /auth/verify permite testar o token sem efeitos
  colaterais.
"""

from functools import wraps

from flask import Blueprint, current_app, g, request

from api.http_utils import api_error, api_success
from utils.security import TokenError

auth_bp = Blueprint("auth", __name__)

_BEARER_PREFIX = "Bearer "


def jwt_required(f):
    """Decorator: exige `Authorization: Bearer <token>` válido."""

    @wraps(f)
    def decorated(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        if not header.startswith(_BEARER_PREFIX):
            return api_error("Missing or invalid token", 401)

        token = header[len(_BEARER_PREFIX):].strip()
        handler = current_app.extensions["jwt_handler"]
        try:
            claims = handler.decode_token(token)
        except TokenError as exc:
            return api_error(str(exc), 401)

        g.current_user = claims.get("sub")
        return f(*args, **kwargs)

    return decorated


# ── Rotas ─────────────────────────────────────────────


@auth_bp.get("/verify")
@jwt_required
def verify():
    """Verifica se o token fornecido é válido."""
    return api_success(
        {"username": g.current_user}, "Token is valid"
    )
