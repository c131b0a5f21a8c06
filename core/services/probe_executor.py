"""
core/services/probe_executor.py
Execução do worker de probe fora do processo.

O worker recebe, como último argumento, um DiscoveryRequest JSON
restrito ao alvo confirmado e devolve o resultado pelo stdout.
O comando é configurável (ex: ``go run main.go``); o padrão é o
worker SSH em Python (``python -m drivers.probe_worker``).
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from core.constants import (
    DEFAULT_WORKER_COMMAND,
    PROCESS_TIMEOUT_SECONDS,
    PROJECT_ROOT,
)
from core.schemas import DiscoveryContext, DiscoveryReply, DiscoveryRequest
from core.services.errors import (
    ToolNotFoundError,
    WorkerExitError,
    WorkerTimeoutError,
)
from core.services.process_runner import run_bounded
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)


def build_worker_payload(
    ip: str, port: int, credentials: list[Any]
) -> str:
    """Serializa o request estreitado ao alvo confirmado."""
    request = DiscoveryRequest(
        contexts=[
            DiscoveryContext(
                ip=ip, port=port, credentials=credentials
            )
        ]
    )
    return request.to_json()


def run_probe_worker(
    ip: str,
    port: int,
    credentials: list[Any],
    command: Sequence[str] = DEFAULT_WORKER_COMMAND,
    timeout: float = PROCESS_TIMEOUT_SECONDS,
    cwd: str | Path | None = PROJECT_ROOT,
) -> DiscoveryReply:
    """
    Executa o worker e embrulha o stdout em um envelope de sucesso.

    Raises:
        WorkerTimeoutError: Worker excedeu ``timeout``.
        WorkerExitError: Worker terminou com código != 0.
        ToolNotFoundError: Executável do worker não encontrado.
    """
    payload = build_worker_payload(ip, port, credentials)
    full_command = [*command, payload]

    # SEGURANÇA: o payload contém credenciais, loga apenas o executável.
    logger.info(
        "Iniciando worker '%s' para %s:%d (%d credencial(is)).",
        command[0], ip, port, len(credentials),
    )

    try:
        result = run_bounded(full_command, timeout=timeout, cwd=cwd)
    except subprocess.TimeoutExpired as exc:
        raise WorkerTimeoutError() from exc
    except FileNotFoundError as exc:
        raise ToolNotFoundError(command[0]) from exc

    if result.returncode != 0:
        logger.warning(
            "Worker terminou com código %d para %s:%d.",
            result.returncode, ip, port,
        )
        raise WorkerExitError(result.returncode)

    output = "".join(f"{line}\n" for line in result.lines())
    return DiscoveryReply.success(output)
