"""
core/bus.py
Canal de mensagens em processo, com execução em pool de threads.

Cada endereço tem um único consumidor. ``request()`` nunca executa o
handler na thread do chamador: o trabalho vai para o pool e o chamador
recebe um ``Future`` com a resposta. Cada request ocupa um slot do
pool durante toda a sua execução.

Uso::

    bus = MessageBus(max_workers=8)
    bus.consumer("discovery", engine.handle)
    reply = bus.request("discovery", payload).result(timeout=120)
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from core.constants import DEFAULT_DISCOVERY_WORKERS
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

Handler = Callable[[Any], Any]


class NoConsumerError(LookupError):
    """Nenhum consumidor registrado no endereço."""


class MessageBus:
    """Canal endereçado request/reply sobre um ThreadPoolExecutor."""

    def __init__(
        self, max_workers: int = DEFAULT_DISCOVERY_WORKERS
    ) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="discovery-worker",
        )
        self._consumers: dict[str, Handler] = {}
        self._closed = False

    def consumer(self, address: str, handler: Handler) -> None:
        """Registra ``handler`` como consumidor de ``address``."""
        if address in self._consumers:
            raise ValueError(
                f"Endereço '{address}' já possui consumidor."
            )
        self._consumers[address] = handler
        logger.info("Consumidor registrado no endereço '%s'.", address)

    def request(self, address: str, body: Any) -> Future:
        """
        Entrega ``body`` ao consumidor de ``address`` no pool.

        Raises:
            NoConsumerError: Endereço sem consumidor.
            RuntimeError: Canal já encerrado.
        """
        if self._closed:
            raise RuntimeError("MessageBus encerrado.")
        handler = self._consumers.get(address)
        if handler is None:
            raise NoConsumerError(
                f"Nenhum consumidor para o endereço '{address}'."
            )
        return self._executor.submit(handler, body)

    def close(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """
        Encerra o pool.

        Args:
            wait:           Aguarda os requests em andamento.
            cancel_pending: Descarta requests ainda na fila.
        """
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=cancel_pending)
        logger.info("MessageBus encerrado.")

    def __enter__(self) -> "MessageBus":
        return self

    def __exit__(self, *exc_info: object) -> bool:
        self.close()
        return False
