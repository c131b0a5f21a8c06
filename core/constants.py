"""
core/constants.py
Constantes de domínio do serviço de discovery.

Single source of truth para caminhos de banco de dados,
nome do canal de mensagens, timeouts do pipeline e
tipos de credencial aceitos.
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── Raiz do projeto (cwd padrão do worker de probe) ──────────
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

# ── Caminho do banco de dados SQLite ─────────────────────────
DB_PATH: Path = PROJECT_ROOT / "inventory" / "discovery_data.db"

# ── Canal de mensagens e contrato de requisição ──────────────
DISCOVERY_ADDRESS: str = "discovery"
DISCOVERY_REQUEST_TYPE: str = "Discovery"

# ── Timeouts do pipeline ─────────────────────────────────────
FPING_TIMEOUT_SECONDS: float = 30
PORT_SCAN_TIMEOUT_MS: int = 2000
PROCESS_TIMEOUT_SECONDS: float = 60

# ── Ferramentas externas ─────────────────────────────────────
FPING_BIN: str = "fping"
FPING_ARGS: tuple[str, ...] = ("-q", "-a", "-r", "1")

# Worker padrão: probe SSH em Python, executado fora do processo
DEFAULT_WORKER_COMMAND: tuple[str, ...] = (
    sys.executable,
    "-m",
    "drivers.probe_worker",
)

# ── Pool de execução bloqueante ──────────────────────────────
DEFAULT_DISCOVERY_WORKERS: int = 8

# ── Credenciais ──────────────────────────────────────────────
SUPPORTED_CREDENTIAL_TYPES: tuple[str, ...] = ("SSH",)

# Atributos mascarados nas respostas da API
SECRET_ATTRIBUTE_KEYS: frozenset[str] = frozenset(
    {"password", "secret", "token", "private_key"}
)
MASKED_VALUE: str = "********"

# ── Status persistido de uma discovery ──────────────────────
DISCOVERY_STATUS_PENDING: str = "pending"
DISCOVERY_STATUS_SUCCESS: str = "success"
DISCOVERY_STATUS_ERROR: str = "error"

# Envelope devolvido quando o canal não responde dentro do limite
DISCOVERY_REPLY_TIMEOUT_MESSAGE: str = "Discovery reply timed out"
