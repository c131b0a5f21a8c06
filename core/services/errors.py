"""
core/services/errors.py
Taxonomia de erros do pipeline de discovery.

Cada falha de estágio é uma subclasse de DiscoveryError com um
``kind`` estável; a mensagem (``str(exc)``) é o contrato público
devolvido no envelope de erro.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classificação das falhas do pipeline."""

    INVALID_REQUEST_TYPE = "InvalidRequestType"
    NO_CONTEXTS = "NoContexts"
    MISSING_FIELDS = "MissingFields"
    INVALID_IP_OR_RANGE = "InvalidIpOrRange"
    NO_ACTIVE_TARGETS = "NoActiveTargets"
    LIVENESS_TIMEOUT = "LivenessTimeout"
    PORT_CLOSED = "PortClosed"
    WORKER_TIMEOUT = "WorkerTimeout"
    WORKER_EXIT = "WorkerExit"
    UNEXPECTED = "Unexpected"


class DiscoveryError(RuntimeError):
    """Erro de execução/validação do fluxo de discovery."""

    kind: ErrorKind = ErrorKind.UNEXPECTED


class InvalidRequestTypeError(DiscoveryError):
    kind = ErrorKind.INVALID_REQUEST_TYPE

    def __init__(self) -> None:
        super().__init__("Invalid request type")


class NoContextsError(DiscoveryError):
    kind = ErrorKind.NO_CONTEXTS

    def __init__(self) -> None:
        super().__init__("No discovery contexts provided")


class MissingFieldsError(DiscoveryError):
    kind = ErrorKind.MISSING_FIELDS

    def __init__(self) -> None:
        super().__init__("Missing required fields")


class InvalidIpOrRangeError(DiscoveryError):
    kind = ErrorKind.INVALID_IP_OR_RANGE

    def __init__(self) -> None:
        super().__init__("Invalid IP or range")


class NoActiveTargetsError(DiscoveryError):
    kind = ErrorKind.NO_ACTIVE_TARGETS

    def __init__(self) -> None:
        super().__init__("No active IPs found")


class LivenessTimeoutError(DiscoveryError):
    kind = ErrorKind.LIVENESS_TIMEOUT

    def __init__(self) -> None:
        super().__init__("fping timed out")


class PortClosedError(DiscoveryError):
    """Porta não respondeu ao handshake TCP no alvo escolhido."""

    kind = ErrorKind.PORT_CLOSED

    def __init__(self, ip: str, port: int) -> None:
        self.ip = ip
        self.port = port
        super().__init__(f"Port {port} is not open on IP: {ip}")


class WorkerTimeoutError(DiscoveryError):
    kind = ErrorKind.WORKER_TIMEOUT

    def __init__(self) -> None:
        super().__init__("Go process timed out")


class WorkerExitError(DiscoveryError):
    """Worker de probe terminou com código diferente de zero."""

    kind = ErrorKind.WORKER_EXIT

    def __init__(self, exit_code: int) -> None:
        self.exit_code = exit_code
        super().__init__(
            f"Go process failed with exit code: {exit_code}"
        )


class ToolNotFoundError(DiscoveryError):
    """Binário externo (fping, worker) ausente no ambiente."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"Command '{tool}' not found")
