"""
core/services/reachability_service.py
Testes de conectividade: varredura ICMP (fping) e handshake TCP.

Agnóstico à interface: usado pelo motor de discovery e pelo CLI.
"""

from __future__ import annotations

import shutil
import socket
import subprocess
from collections.abc import Sequence

from core.constants import (
    FPING_ARGS,
    FPING_BIN,
    FPING_TIMEOUT_SECONDS,
    PORT_SCAN_TIMEOUT_MS,
)
from core.services.errors import LivenessTimeoutError, ToolNotFoundError
from core.services.process_runner import run_bounded
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)


def sweep_alive_hosts(
    targets: Sequence[str],
    timeout: float = FPING_TIMEOUT_SECONDS,
    fping_bin: str = FPING_BIN,
) -> list[str]:
    """
    Retorna os alvos que responderam ao ICMP, na ordem emitida pelo fping.

    O código de saída do fping é ignorado: ele é não-zero sempre que
    algum host não responde.

    Raises:
        LivenessTimeoutError: fping excedeu ``timeout``.
        ToolNotFoundError: binário do fping não encontrado.
    """
    if not targets:
        return []

    fping_path = shutil.which(fping_bin)
    if not fping_path:
        raise ToolNotFoundError(fping_bin)

    command = [fping_path, *FPING_ARGS, *targets]
    logger.debug("Varredura ICMP em %d alvo(s).", len(targets))

    try:
        result = run_bounded(command, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise LivenessTimeoutError() from exc

    alive: list[str] = []
    for line in result.lines():
        ip = line.strip()
        if ip:
            alive.append(ip)

    logger.info(
        "Varredura ICMP concluída: %d de %d alvo(s) ativos.",
        len(alive), len(targets),
    )
    return alive


def is_port_open(
    host: str,
    port: int,
    timeout_ms: int = PORT_SCAN_TIMEOUT_MS,
) -> bool:
    """True se o handshake TCP em ``host:port`` completar no prazo."""
    try:
        with socket.create_connection(
            (host, port), timeout=timeout_ms / 1000
        ):
            return True
    except (OSError, OverflowError, ValueError) as exc:
        logger.debug(
            "Porta %s fechada em %s: %s", port, host, exc,
        )
        return False
