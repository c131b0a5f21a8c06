"""
api/__init__.py
App Factory do serviço de discovery (Flask).

Uso:
    from api import create_app
    app = create_app()

Na criação:
    1. Carrega a classe de configuração e, se houver, o JSON de
       ``DISCOVERY_CONFIG_FILE`` por cima.
    2. Garante o esquema SQLite.
    3. Sobe o MessageBus e registra o DiscoveryEngine no canal ``discovery``.
"""

import json
import shlex

from flask import Flask

from api.blueprints.auth import auth_bp
from api.blueprints.credentials import credentials_bp
from api.blueprints.discoveries import discoveries_bp
from api.blueprints.health import health_bp
from api.blueprints.users import users_bp
from api.config import DevelopmentConfig
from api.http_utils import api_error
from core import db
from core.bus import MessageBus
from core.services.discovery_service import DiscoveryEngine
from internalloggin.logger import setup_logger
from utils.security import JWTHandler
from utils.vault import MasterKeyNotFoundError, VaultError

logger = setup_logger(__name__)


def create_app(config_class=DevelopmentConfig) -> Flask:
    """Cria e configura a instância Flask."""

    app = Flask(__name__)
    app.config.from_object(config_class)

    config_file = app.config.get("DISCOVERY_CONFIG_FILE")
    if config_file:
        app.config.from_file(config_file, load=json.load)
        logger.info("Configuração carregada de %s", config_file)

    # ── Banco de dados ────────────────────────────────
    db.set_db_path(app.config["DATABASE_PATH"])
    db.ensure_schema()

    # ── Canal de discovery ────────────────────────────
    worker_command = shlex.split(
        app.config.get("DISCOVERY_WORKER_COMMAND") or ""
    )
    engine = DiscoveryEngine(
        worker_command=worker_command or None,
        worker_cwd=app.config.get("DISCOVERY_WORKER_DIR") or None,
        fping_bin=app.config["FPING_BIN"],
    )
    bus = MessageBus(max_workers=app.config["DISCOVERY_WORKERS"])
    engine.register(bus)

    app.extensions["discovery_bus"] = bus
    app.extensions["discovery_engine"] = engine
    app.extensions["jwt_handler"] = JWTHandler(
        app.config["JWT_SECRET"],
        algorithm=app.config["JWT_ALGORITHM"],
        expires_in_seconds=app.config["JWT_EXPIRATION_SECONDS"],
    )

    # ── Blueprints ────────────────────────────────────
    app.register_blueprint(
        auth_bp, url_prefix="/auth"
    )
    app.register_blueprint(
        health_bp, url_prefix="/health"
    )
    app.register_blueprint(
        users_bp, url_prefix="/users"
    )
    app.register_blueprint(
        credentials_bp, url_prefix="/credentials"
    )
    app.register_blueprint(
        discoveries_bp, url_prefix="/discoveries"
    )

    # ── Erros do cofre ────────────────────────────────
    @app.errorhandler(MasterKeyNotFoundError)
    def vault_unavailable(exc):
        return api_error("Credential vault is not configured", 503)

    @app.errorhandler(VaultError)
    def vault_failure(exc):
        return api_error(str(exc), 500)

    logger.info(
        "Aplicação iniciada (db=%s, workers=%d).",
        db.get_db_path(), app.config["DISCOVERY_WORKERS"],
    )
    return app
