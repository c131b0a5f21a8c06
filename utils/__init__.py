"""
utils/
Utilitários transversais ao projeto.

Módulos:
- vault.py        : Criptografia dos atributos de credenciais (Fernet).
- vault_setup.py  : CLI para gerar Master Key e cadastrar credenciais.
- security.py     : Hash de senhas (bcrypt) e tokens JWT.
"""

from .security import JWTHandler, TokenError, hash_password, verify_password
from .vault import (
    MasterKeyNotFoundError,
    VaultCorruptedError,
    VaultError,
    VaultManager,
)

__all__ = [
    "JWTHandler",
    "MasterKeyNotFoundError",
    "TokenError",
    "VaultCorruptedError",
    "VaultError",
    "VaultManager",
    "hash_password",
    "verify_password",
]
