"""
utils/vault.py
──────────────
Cofre de atributos de credenciais do serviço de discovery.

Responsabilidades:
    - Criptografar/descriptografar os atributos de cada credencial
      (username, password, ...) usando Fernet (AES-128-CBC com HMAC-SHA256).
    - Ler a Master Key **exclusivamente** da variável de ambiente
      ``DISCOVERY_MASTER_KEY``, nunca de arquivo.

Design Decisions
────────────────
1. Criptografia em Repouso (At Rest):
   A coluna ``credentials.attributes`` guarda apenas o token Fernet.
   Uma cópia do arquivo SQLite sem a Master Key não expõe senhas.

2. Separação de Privilégios:
   A Master Key vive no ambiente de execução. Gere com::

       python -m utils.vault_setup generate-key

3. Prevenção de Data Leakage:
   A classe nunca loga conteúdo de credenciais. Apenas tamanhos e
   tipos de operação são registrados.

4. Resiliência:
   Token corrompido (``InvalidToken``), chave incorreta e variável de
   ambiente ausente geram exceções descritivas.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from cryptography.fernet import Fernet, InvalidToken

from internalloggin.logger import setup_logger

logger = setup_logger("VaultManager")

# Nome da variável de ambiente que contém a Master Key
ENV_MASTER_KEY = "DISCOVERY_MASTER_KEY"

_KEY_HINT = (
    "Gere uma nova chave com: python -m utils.vault_setup generate-key"
)


class VaultError(Exception):
    """Exceção base para erros do cofre de credenciais."""


class MasterKeyNotFoundError(VaultError):
    """Variável de ambiente DISCOVERY_MASTER_KEY não está configurada."""


class VaultCorruptedError(VaultError):
    """Token corrompido ou Master Key incorreta."""


class VaultManager:
    """
    Criptografa e descriptografa atributos de credenciais.

    Uso típico::

        vault = VaultManager()
        token = vault.encrypt_attributes({"username": "admin", "password": "s3cret"})
        attrs = vault.decrypt_attributes(token)
    """

    def __init__(self, master_key: Optional[str] = None) -> None:
        """
        Args:
            master_key: Chave Fernet explícita. Default: ``DISCOVERY_MASTER_KEY``.

        Raises:
            MasterKeyNotFoundError: Se nenhuma chave estiver disponível.
            VaultError: Se a chave não for uma chave Fernet válida.
        """
        self._fernet = self._load_fernet(master_key)

    # ── API Pública ───────────────────────────────────────────────────────────

    def encrypt_attributes(self, attributes: dict[str, Any]) -> str:
        """
        Serializa os atributos para JSON e retorna o token Fernet (str).

        Raises:
            VaultError: Atributos não serializáveis em JSON.
        """
        try:
            plaintext = json.dumps(attributes, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            logger.error("Falha ao serializar atributos para o cofre: %s", exc)
            raise VaultError(f"Atributos inválidos para criptografia: {exc}") from exc

        token = self._fernet.encrypt(plaintext).decode("ascii")
        logger.debug("Atributos criptografados (%d bytes).", len(token))
        return token

    def decrypt_attributes(self, token: str) -> dict[str, Any]:
        """
        Descriptografa um token Fernet e retorna os atributos.

        Raises:
            VaultCorruptedError: Token inválido, chave errada ou JSON corrompido.
        """
        try:
            decrypted = self._fernet.decrypt(token.encode("ascii"))
        except (InvalidToken, UnicodeEncodeError) as exc:
            logger.critical(
                "Falha ao descriptografar atributos! "
                "A Master Key pode estar incorreta ou o registro está corrompido."
            )
            raise VaultCorruptedError(
                "Impossível descriptografar a credencial. Verifique se a "
                f"variável '{ENV_MASTER_KEY}' contém a chave correta."
            ) from exc

        try:
            payload = json.loads(decrypted.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.critical("Credencial descriptografada mas JSON inválido: %s", exc)
            raise VaultCorruptedError(
                "A credencial foi descriptografada, mas o conteúdo JSON "
                "interno está corrompido."
            ) from exc

        if not isinstance(payload, dict):
            raise VaultCorruptedError("Atributos da credencial não são um objeto JSON.")
        return payload

    # ── Internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _load_fernet(master_key: Optional[str]) -> Fernet:
        key = master_key or os.environ.get(ENV_MASTER_KEY)

        if not key:
            logger.critical(
                "Variável de ambiente '%s' não está configurada! "
                "O cofre de credenciais não pode operar sem a Master Key.",
                ENV_MASTER_KEY,
            )
            raise MasterKeyNotFoundError(
                f"Variável de ambiente '{ENV_MASTER_KEY}' não está definida. "
                + _KEY_HINT
            )

        try:
            fernet = Fernet(key.encode("utf-8"))
        except ValueError as exc:
            logger.critical("Master Key inválida em '%s': %s", ENV_MASTER_KEY, exc)
            raise VaultError(
                f"A Master Key em '{ENV_MASTER_KEY}' não é uma chave Fernet válida. "
                + _KEY_HINT
            ) from exc

        return fernet


def generate_master_key() -> str:
    """Gera uma nova Master Key Fernet (url-safe base64)."""
    return Fernet.generate_key().decode("utf-8")
