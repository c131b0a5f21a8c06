"""
core/repositories/
Camada de acesso a dados (DAL) do serviço de discovery.

Repositórios compartilhados pela camada web (api/) e pelos
utilitários de linha de comando.
"""

from core.repositories.credentials_repository import (
    create_credential,
    delete_credential,
    get_credential,
    list_credentials,
    mask_attributes,
    missing_credential_ids,
    resolve_credentials,
    update_credential,
)
from core.repositories.discoveries_repository import (
    create_discovery,
    delete_discovery,
    get_discovery,
    list_discoveries,
    save_discovery_result,
    update_discovery,
)
from core.repositories.users_repository import (
    create_user,
    get_user_by_username,
)

__all__ = [
    # credentials
    "create_credential",
    "delete_credential",
    "get_credential",
    "list_credentials",
    "mask_attributes",
    "missing_credential_ids",
    "resolve_credentials",
    "update_credential",
    # discoveries
    "create_discovery",
    "delete_discovery",
    "get_discovery",
    "list_discoveries",
    "save_discovery_result",
    "update_discovery",
    # users
    "create_user",
    "get_user_by_username",
]
