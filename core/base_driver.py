"""
core/base_driver.py
────────────────────
Define o contrato abstrato que todos os drivers de probe devem seguir.

Design Decisions
────────────────
1. ABC (Abstract Base Class):
   `abc.ABC` + `@abstractmethod` impede instanciar `NetworkDeviceDriver`
   diretamente, forçando a implementação de `connect`, `identify` e
   `disconnect`.

2. Context Manager na classe BASE:
   O ciclo de vida (abrir → identificar → fechar) é o mesmo para todos os
   protocolos: `connect()` ao entrar, `disconnect()` ao sair.

   Uso idiomático:
       with SSHProbeDriver(host="10.0.0.5", username="admin", password="...") as driver:
           identity = driver.identify()
   # `disconnect()` é garantido mesmo em caso de exceção.

3. Logging nomeado pela classe concreta:
   Usa `logging.getLogger` puro (sem handlers próprios): o driver roda
   dentro do worker, cujo stdout é o canal de resultado.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, Optional, Type


class NetworkDeviceDriver(ABC):
    """
    Contrato abstrato para drivers de probe de dispositivos de rede.

    Subclasses devem implementar:
        - connect()     → estabelece sessão com o dispositivo
        - identify()    → retorna dados de identificação do dispositivo
        - disconnect()  → encerra a sessão de forma limpa (idempotente)
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int = 22,
        timeout: int = 10,
    ) -> None:
        """
        Args:
            host:     Endereço IP do dispositivo alvo.
            username: Usuário para autenticação.
            password: Senha de autenticação. Nunca logar.
            port:     Porta do serviço. Padrão: 22.
            timeout:  Timeout de conexão em segundos. Padrão: 10.
        """
        self.host: str = host
        self.username: str = username
        self.password: str = password
        self.port: int = port
        self.timeout: int = timeout
        self.connected: bool = False

        # Logger nomeado com a classe concreta, ex: "drivers.ssh_driver.SSHProbeDriver"
        self._logger: logging.Logger = logging.getLogger(
            self.__class__.__module__ + "." + self.__class__.__name__
        )

    # ─── Métodos Abstratos (contrato obrigatório) ─────────────────────────────

    @abstractmethod
    def connect(self) -> None:
        """
        Estabelece a sessão com o dispositivo.

        Raises:
            ConnectionError: Se a conexão não puder ser estabelecida.
        """

    @abstractmethod
    def identify(self) -> dict[str, Any]:
        """
        Coleta dados de identificação do dispositivo conectado.

        Raises:
            RuntimeError: Se chamado sem conexão ativa.
        """

    @abstractmethod
    def disconnect(self) -> None:
        """Encerra a sessão. Chamadas repetidas não devem lançar exceção."""

    # ─── Context Manager ──────────────────────────────────────────────────────

    def __enter__(self) -> "NetworkDeviceDriver":
        self._logger.info("Conectando a %s:%d ...", self.host, self.port)
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> bool:
        self._logger.info("Desconectando de %s ...", self.host)
        try:
            self.disconnect()
        except Exception as exc:  # noqa: BLE001
            # Loga o erro de desconexão sem mascarar a exceção original
            self._logger.warning(
                "Falha ao desconectar de %s: %s", self.host, exc
            )
        return False

    # ─── Helper de Estado ─────────────────────────────────────────────────────

    def _assert_connected(self) -> None:
        if not self.connected:
            raise RuntimeError(
                f"Nenhuma conexão ativa com {self.host}. "
                "Chame connect() antes de identify()."
            )

    def __repr__(self) -> str:
        status = "conectado" if self.connected else "desconectado"
        return (
            f"<{self.__class__.__name__} "
            f"host={self.host!r} port={self.port} [{status}]>"
        )
