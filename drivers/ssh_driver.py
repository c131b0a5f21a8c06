"""
drivers/ssh_driver.py
─────────────────────
Driver de probe SSH genérico, usado pelo worker de discovery.

Funcionamento:
    1. Se ``device_type`` não for informado, detecta com ``SSHDetect``
       (device_type="autodetect"). Sem palpite, usa "generic".
    2. Abre sessão SSH via Netmiko (``ConnectHandler``).
    3. ``identify()`` lê o prompt do dispositivo e devolve device_type + prompt.

Design Decisions:
    - NetmikoTimeoutException / NetmikoAuthenticationException são relançadas
      como ConnectionError para isolar o caller dos detalhes do Netmiko.
    - Mensagens de erro passam por ``_sanitize_error`` antes de serem logadas.
"""

from __future__ import annotations

from typing import Any

from netmiko import ConnectHandler, SSHDetect
from netmiko.exceptions import (
    NetmikoAuthenticationException,
    NetmikoTimeoutException,
)

from core.base_driver import NetworkDeviceDriver

FALLBACK_DEVICE_TYPE = "generic"


class SSHProbeDriver(NetworkDeviceDriver):
    """Abre uma sessão SSH e identifica o dispositivo pelo prompt."""

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int = 22,
        timeout: int = 10,
        device_type: str | None = None,
        secret: str = "",
    ) -> None:
        super().__init__(host, username, password, port, timeout)
        self.device_type = device_type
        self.secret = secret
        self._net_connect: Any = None

    def _device_params(self, device_type: str) -> dict[str, Any]:
        return {
            "device_type": device_type,
            "host": self.host,
            "username": self.username,
            "password": self.password,
            "port": self.port,
            "timeout": self.timeout,
            "secret": self.secret,
        }

    def _detect_device_type(self) -> str:
        """Autodetecção Netmiko; cai para ``generic`` quando não há palpite."""
        guesser = SSHDetect(**self._device_params("autodetect"))
        try:
            best_match = guesser.autodetect()
        finally:
            guesser.connection.disconnect()
        self._logger.debug(
            "Autodetecção em %s: %s", self.host, best_match or "sem palpite",
        )
        return best_match or FALLBACK_DEVICE_TYPE

    def connect(self) -> None:
        """
        Abre a sessão SSH. Seta self.connected = True em caso de sucesso.

        Raises:
            ConnectionError: Timeout, credenciais recusadas ou erro inesperado.
        """
        try:
            if not self.device_type:
                self.device_type = self._detect_device_type()
            self._net_connect = ConnectHandler(
                **self._device_params(self.device_type)
            )
            self.connected = True
            self._logger.info(
                "Sessão SSH estabelecida com %s (%s).", self.host, self.device_type
            )
        except NetmikoTimeoutException as exc:
            self._logger.error("Timeout ao conectar em %s:%d", self.host, self.port)
            raise ConnectionError(
                f"Timeout connecting to {self.host}:{self.port}."
            ) from exc
        except NetmikoAuthenticationException as exc:
            # Apenas host e username: a mensagem do Netmiko pode conter a senha
            self._logger.error(
                "Falha de autenticação em %s para o usuário '%s'.",
                self.host, self.username,
            )
            raise ConnectionError(
                f"Authentication failed for {self.username}@{self.host}."
            ) from exc
        except Exception as exc:
            message = _sanitize_error(str(exc), self.password)
            self._logger.error(
                "Erro inesperado ao conectar em %s:%d: %s: %s",
                self.host, self.port, type(exc).__name__, message,
            )
            raise ConnectionError(
                f"Error connecting to {self.host}:{self.port}: {message}"
            ) from exc

    def identify(self) -> dict[str, Any]:
        """
        Lê o prompt do dispositivo.

        Raises:
            RuntimeError: Sem conexão ativa.
            ConnectionError: Falha de leitura (ex: ReadTimeout do Netmiko).
        """
        self._assert_connected()
        try:
            prompt = self._net_connect.find_prompt()
        except Exception as exc:
            message = _sanitize_error(str(exc), self.password)
            self._logger.error(
                "Falha ao ler o prompt de %s:%d: %s: %s",
                self.host, self.port, type(exc).__name__, message,
            )
            raise ConnectionError(
                f"Error reading prompt from {self.host}:{self.port}: {message}"
            ) from exc
        return {
            "ip": self.host,
            "port": self.port,
            "device_type": self.device_type,
            "prompt": prompt.strip(),
        }

    def disconnect(self) -> None:
        """Encerra a sessão SSH. Idempotente."""
        if self._net_connect is not None:
            try:
                self._net_connect.disconnect()
                self._logger.info("Sessão SSH com %s encerrada.", self.host)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "Erro ao desconectar de %s: %s", self.host, exc
                )
            finally:
                self._net_connect = None
        self.connected = False


# ─── Helpers de Segurança ─────────────────────────────────────────────────────

def _sanitize_error(message: str, password: str) -> str:
    """Substitui a senha por ``'***'`` caso apareça na mensagem de erro."""
    if password and password in message:
        return message.replace(password, "***")
    return message
