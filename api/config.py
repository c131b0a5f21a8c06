"""
api/config.py
Classes de configuração Flask por ambiente.

Valores lidos do ambiente na importação; um arquivo JSON opcional
(``DISCOVERY_CONFIG_FILE``) é mesclado por cima em ``create_app``.
"""

import os

from core.constants import (
    DB_PATH,
    DEFAULT_DISCOVERY_WORKERS,
    FPING_BIN,
    PROCESS_TIMEOUT_SECONDS,
    PROJECT_ROOT,
)


class BaseConfig:
    SECRET_KEY: str = os.getenv(
        "FLASK_SECRET_KEY", "dev-secret-change-in-prod"
    )

    DATABASE_PATH: str = os.getenv(
        "DISCOVERY_DB_PATH", str(DB_PATH)
    )

    JWT_SECRET: str = os.getenv(
        "JWT_SECRET", "dev-jwt-secret-change-in-prod"
    )
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRATION_SECONDS: int = int(
        os.getenv("JWT_EXPIRATION_SECONDS", "3600")
    )

    # ── Pipeline de discovery ─────────────────────────
    DISCOVERY_WORKERS: int = int(
        os.getenv("DISCOVERY_WORKERS", str(DEFAULT_DISCOVERY_WORKERS))
    )
    # Vazio → worker Python padrão (drivers.probe_worker)
    DISCOVERY_WORKER_COMMAND: str = os.getenv(
        "DISCOVERY_WORKER_COMMAND", ""
    )
    DISCOVERY_WORKER_DIR: str = os.getenv(
        "DISCOVERY_WORKER_DIR", str(PROJECT_ROOT)
    )
    # Limite de espera pela resposta do canal (fping + porta + worker)
    DISCOVERY_REPLY_TIMEOUT: float = float(
        os.getenv(
            "DISCOVERY_REPLY_TIMEOUT",
            str(PROCESS_TIMEOUT_SECONDS + 45),
        )
    )
    FPING_BIN: str = os.getenv("FPING_BIN", FPING_BIN)

    DISCOVERY_CONFIG_FILE: str = os.getenv(
        "DISCOVERY_CONFIG_FILE", ""
    )


class DevelopmentConfig(BaseConfig):
    DEBUG: bool = True
    TESTING: bool = False


class ProductionConfig(BaseConfig):
    DEBUG: bool = False
    TESTING: bool = False


class TestingConfig(BaseConfig):
    TESTING: bool = True
    JWT_SECRET: str = "testing-jwt-secret"
    DISCOVERY_WORKERS: int = 2
    DISCOVERY_CONFIG_FILE: str = ""
