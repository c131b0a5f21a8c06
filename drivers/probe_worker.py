"""
drivers/probe_worker.py
───────────────────────
Worker de probe executado pelo pipeline de discovery em processo separado:

    python -m drivers.probe_worker '<json do DiscoveryRequest>'

O JSON chega sempre como ÚLTIMO argumento. O worker tenta cada credencial
do primeiro contexto via SSH, para no primeiro sucesso e imprime um único
documento JSON no stdout.

Códigos de saída:
    0 → alguma credencial autenticou (status "success")
    1 → todas as credenciais falharam (status "failed")
    2 → entrada inválida
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from logging.handlers import RotatingFileHandler
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from core.schemas import DiscoveryContext, DiscoveryRequest
from drivers.ssh_driver import SSHProbeDriver
from internalloggin.logger import LOG_DIR

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ALL_FAILED = 1
EXIT_BAD_INPUT = 2


def _emit(document: dict[str, Any]) -> None:
    print(json.dumps(document, ensure_ascii=False), flush=True)


def _flatten_credential(credential: Any) -> dict[str, Any]:
    """Aceita ``{username, password, ...}`` ou o formato da API com ``attributes``."""
    if not isinstance(credential, Mapping):
        raise ValueError("credential is not an object")
    flat = dict(credential)
    attributes = flat.pop("attributes", None)
    if isinstance(attributes, Mapping):
        flat.update(attributes)
    if not flat.get("username"):
        raise ValueError("credential has no username")
    return flat


def probe_context(context: DiscoveryContext) -> tuple[int, dict[str, Any]]:
    """Tenta as credenciais em ordem. Retorna (exit_code, documento)."""
    errors: list[str] = []

    for index, credential in enumerate(context.credentials):
        label = index
        try:
            flat = _flatten_credential(credential)
            label = flat.get("id", index)
            driver = SSHProbeDriver(
                host=context.ip,
                username=str(flat["username"]),
                password=str(flat.get("password", "")),
                port=context.port,
                device_type=flat.get("device_type"),
                secret=str(flat.get("secret", "")),
            )
            with driver:
                identity = driver.identify()
        except (ConnectionError, RuntimeError, ValueError) as exc:
            errors.append(f"credential {label}: {exc}")
            continue

        return EXIT_SUCCESS, {
            "status": "success",
            "credential_id": label,
            **identity,
        }

    return EXIT_ALL_FAILED, {
        "status": "failed",
        "ip": context.ip,
        "port": context.port,
        "attempts": len(context.credentials),
        "errors": errors,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        _emit({"status": "error", "message": "Missing JSON argument"})
        return EXIT_BAD_INPUT

    try:
        request = DiscoveryRequest.model_validate_json(args[-1])
    except ValidationError as exc:
        _emit({"status": "error", "message": f"Invalid request: {exc.error_count()} error(s)"})
        return EXIT_BAD_INPUT

    if not request.contexts:
        _emit({"status": "error", "message": "No discovery contexts provided"})
        return EXIT_BAD_INPUT

    exit_code, document = probe_context(request.contexts[0])
    _emit(document)
    return exit_code


def configure_logging() -> None:
    """
    Envia o diagnóstico do worker (drivers, Netmiko, Paramiko, warnings)
    apenas para arquivo. stdout e stderr chegam juntos ao processo pai
    como resultado e devem conter só o documento JSON.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    file_handler = RotatingFileHandler(
        filename=LOG_DIR / "probe_worker.log",
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=13,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)
    root.setLevel(logging.INFO)
    logging.captureWarnings(True)


def run() -> int:
    """Entrypoint do processo worker."""
    configure_logging()
    return main()


if __name__ == "__main__":
    sys.exit(run())
