"""
core/
Núcleo do serviço de discovery.

Contém:
- schemas.py      : Modelos Pydantic do contrato request/reply e da API.
- bus.py          : Canal de mensagens em processo (pool de threads).
- base_driver.py  : Contrato abstrato dos drivers de dispositivo.
- db.py           : Acesso SQLite compartilhado pelos repositórios.
- services/       : Pipeline de discovery.
"""

from .bus import MessageBus, NoConsumerError
from .schemas import DiscoveryContext, DiscoveryReply, DiscoveryRequest

__all__ = [
    "DiscoveryContext",
    "DiscoveryReply",
    "DiscoveryRequest",
    "MessageBus",
    "NoConsumerError",
]
