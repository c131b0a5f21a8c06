"""
core/services/discovery_service.py
Motor de discovery: despacha requests do canal ``discovery`` pelo pipeline

    Expansão → Varredura ICMP → Porta TCP → Worker de probe

Agnóstico à interface: usado pela API web e pelo CLI (main.py).

Design Decisions
────────────────
1. Pipeline linear:
   Estados New → Expanded → Swept → Confirmed → Probed → Done. A primeira
   falha leva a Failed(kind) e encerra o pipeline. Não há retry.

2. Um envelope por request:
   ``handle()`` nunca lança exceção. Falhas de estágio (DiscoveryError)
   e erros inesperados viram ``{"status": "error", "message": ...}``.

3. Apenas o primeiro contexto:
   Contextos adicionais são ignorados; apenas o primeiro alvo ativo
   da varredura é sondado.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.bus import MessageBus
from core.constants import (
    DEFAULT_WORKER_COMMAND,
    DISCOVERY_ADDRESS,
    DISCOVERY_REQUEST_TYPE,
    FPING_BIN,
    FPING_TIMEOUT_SECONDS,
    PORT_SCAN_TIMEOUT_MS,
    PROCESS_TIMEOUT_SECONDS,
    PROJECT_ROOT,
)
from core.schemas import DiscoveryContext, DiscoveryReply, DiscoveryRequest
from core.services.errors import (
    DiscoveryError,
    InvalidIpOrRangeError,
    InvalidRequestTypeError,
    MissingFieldsError,
    NoActiveTargetsError,
    NoContextsError,
    PortClosedError,
)
from core.services.probe_executor import run_probe_worker
from core.services.reachability_service import is_port_open, sweep_alive_hosts
from core.services.target_expander import expand_targets
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

_REQUIRED_CONTEXT_FIELDS = ("ip", "port", "credentials")


class PipelineState(str, Enum):
    NEW = "New"
    EXPANDED = "Expanded"
    SWEPT = "Swept"
    CONFIRMED = "Confirmed"
    PROBED = "Probed"
    FAILED = "Failed"
    DONE = "Done"


def parse_discovery_context(
    request: Mapping[str, Any] | DiscoveryRequest,
) -> DiscoveryContext:
    """
    Valida o envelope e extrai o primeiro contexto.

    A ordem das verificações define qual erro é reportado:
    tipo do request → contextos → campos obrigatórios.
    """
    if isinstance(request, DiscoveryRequest):
        request = request.model_dump(by_alias=True)

    if not isinstance(request, Mapping):
        raise InvalidRequestTypeError()

    if request.get("requestType") != DISCOVERY_REQUEST_TYPE:
        raise InvalidRequestTypeError()

    contexts = request.get("contexts")
    if not contexts or not isinstance(contexts, Sequence) or isinstance(
        contexts, (str, bytes)
    ):
        raise NoContextsError()

    context = contexts[0]
    if not isinstance(context, Mapping) or any(
        context.get(field) is None for field in _REQUIRED_CONTEXT_FIELDS
    ):
        raise MissingFieldsError()

    try:
        return DiscoveryContext.model_validate(context)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise DiscoveryError(
            f"Invalid field '{field}': {first['msg']}"
        ) from exc


class DiscoveryEngine:
    """
    Executa o pipeline de discovery para um request por vez.

    A instância não guarda estado entre requests; o mesmo engine pode
    ser chamado concorrentemente por várias threads do pool.
    """

    def __init__(
        self,
        *,
        worker_command: Sequence[str] | None = None,
        worker_cwd: str | Path | None = PROJECT_ROOT,
        fping_bin: str = FPING_BIN,
        fping_timeout: float = FPING_TIMEOUT_SECONDS,
        port_timeout_ms: int = PORT_SCAN_TIMEOUT_MS,
        worker_timeout: float = PROCESS_TIMEOUT_SECONDS,
    ) -> None:
        self.worker_command = tuple(worker_command or DEFAULT_WORKER_COMMAND)
        self.worker_cwd = worker_cwd
        self.fping_bin = fping_bin
        self.fping_timeout = fping_timeout
        self.port_timeout_ms = port_timeout_ms
        self.worker_timeout = worker_timeout

    def register(
        self, bus: MessageBus, address: str = DISCOVERY_ADDRESS
    ) -> None:
        """Assina o endereço ``discovery`` no canal."""
        bus.consumer(address, self.handle)

    # ── API Pública ───────────────────────────────────────────────────────────

    def handle(
        self, request: Mapping[str, Any] | DiscoveryRequest
    ) -> dict[str, Any]:
        """Consumidor do canal: sempre devolve exatamente um envelope."""
        try:
            reply = self.run(request)
        except DiscoveryError as exc:
            logger.warning(
                "Discovery falhou [%s]: %s", exc.kind.value, exc,
            )
            reply = DiscoveryReply.failure(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Erro inesperado durante discovery: %s", exc)
            reply = DiscoveryReply.failure(str(exc))
        return reply.to_dict()

    def run(
        self, request: Mapping[str, Any] | DiscoveryRequest
    ) -> DiscoveryReply:
        """
        Executa o pipeline completo.

        Raises:
            DiscoveryError: Primeira falha de estágio encontrada.
        """
        state = PipelineState.NEW
        try:
            context = parse_discovery_context(request)

            targets = expand_targets(context.ip)
            if not targets:
                raise InvalidIpOrRangeError()
            state = self._advance(state, PipelineState.EXPANDED)

            alive = sweep_alive_hosts(
                targets,
                timeout=self.fping_timeout,
                fping_bin=self.fping_bin,
            )
            if not alive:
                raise NoActiveTargetsError()
            state = self._advance(state, PipelineState.SWEPT)

            target = alive[0]
            if not is_port_open(
                target, context.port, timeout_ms=self.port_timeout_ms
            ):
                raise PortClosedError(target, context.port)
            state = self._advance(state, PipelineState.CONFIRMED)

            reply = run_probe_worker(
                target,
                context.port,
                context.credentials,
                command=self.worker_command,
                timeout=self.worker_timeout,
                cwd=self.worker_cwd,
            )
            state = self._advance(state, PipelineState.PROBED)
        except Exception:
            self._advance(state, PipelineState.FAILED)
            raise

        self._advance(state, PipelineState.DONE)
        return reply

    @staticmethod
    def _advance(
        current: PipelineState, nxt: PipelineState
    ) -> PipelineState:
        logger.debug("Pipeline: %s → %s", current.value, nxt.value)
        return nxt
