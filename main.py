"""
main.py
────────
Discovery pela linha de comando, sem a camada HTTP.

Fluxo:
    1. Monta um DiscoveryRequest com --ip, --port e as credenciais
       (--credentials JSON ou --credentials-file).
    2. Publica no canal ``discovery`` de um MessageBus local com o
       DiscoveryEngine registrado.
    3. Imprime o envelope de resposta em JSON.

Uso:
    python main.py --ip 192.168.1.1-20 --port 22 \\
        --credentials '[{"username": "admin", "password": "..."}]'

Saída: 0 em sucesso, 1 em erro.
"""

from __future__ import annotations

import argparse
import json
import shlex
import sys
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Any, Optional, Sequence

from core.bus import MessageBus
from core.constants import (
    DISCOVERY_ADDRESS,
    DISCOVERY_REPLY_TIMEOUT_MESSAGE,
    FPING_BIN,
)
from core.schemas import DiscoveryContext, DiscoveryRequest
from core.services.discovery_service import DiscoveryEngine
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)


def _load_credentials(args: argparse.Namespace) -> list[Any]:
    if args.credentials_file:
        raw = Path(args.credentials_file).read_text(encoding="utf-8")
    else:
        raw = args.credentials
    credentials = json.loads(raw)
    if not isinstance(credentials, list):
        raise ValueError("credentials must be a JSON array")
    return credentials


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netdiscovery",
        description="Executa uma discovery (fping → porta TCP → worker de probe).",
    )
    parser.add_argument("--ip", required=True, help="IP único ou faixa A.B.C.X-Y.")
    parser.add_argument("--port", required=True, type=int, help="Porta TCP do serviço.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--credentials", default="[]",
        help="Lista JSON de credenciais repassada ao worker.",
    )
    source.add_argument(
        "--credentials-file", default=None,
        help="Arquivo com a lista JSON de credenciais.",
    )
    parser.add_argument(
        "--worker-command", default=None,
        help="Comando do worker (padrão: python -m drivers.probe_worker).",
    )
    parser.add_argument("--fping-bin", default=FPING_BIN, help="Binário do fping.")
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Limite de espera pela resposta, em segundos.",
    )
    return parser


def run_discovery(
    request: DiscoveryRequest,
    *,
    worker_command: Optional[Sequence[str]] = None,
    fping_bin: str = FPING_BIN,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    """
    Publica um request no canal local e devolve o envelope de resposta.

    Estourado ``timeout``, devolve o envelope de erro sem aguardar o pool:
    o stage em andamento segue limitado pelos próprios timeouts.
    """
    engine = DiscoveryEngine(worker_command=worker_command, fping_bin=fping_bin)
    bus = MessageBus(max_workers=1)
    try:
        engine.register(bus)
        future = bus.request(DISCOVERY_ADDRESS, request.model_dump(by_alias=True))
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.error("Sem resposta do canal '%s' em %ss.", DISCOVERY_ADDRESS, timeout)
            return {"status": "error", "message": DISCOVERY_REPLY_TIMEOUT_MESSAGE}
    finally:
        bus.close(wait=False, cancel_pending=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        credentials = _load_credentials(args)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError é subclasse de ValueError
        logger.error("Credenciais inválidas: %s", exc)
        print(json.dumps({"status": "error", "message": str(exc)}))
        return 1

    request = DiscoveryRequest(
        contexts=[
            DiscoveryContext(ip=args.ip, port=args.port, credentials=credentials)
        ]
    )
    logger.info(
        "Discovery via CLI: %s:%d (%d credencial(is)).",
        args.ip, args.port, len(credentials),
    )

    reply = run_discovery(
        request,
        worker_command=shlex.split(args.worker_command) if args.worker_command else None,
        fping_bin=args.fping_bin,
        timeout=args.timeout,
    )
    print(json.dumps(reply, ensure_ascii=False, indent=2))
    return 0 if reply.get("status") == "success" else 1


if __name__ == "__main__":
    sys.exit(main())
