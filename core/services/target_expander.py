"""
core/services/target_expander.py
Expansão da entrada de IP em uma lista concreta de alvos.

Formas aceitas:
    - IP único:  ``A.B.C.D`` (cada octeto entre 0 e 255)
    - Faixa:     ``A.B.C.X-Y`` no último octeto (0 <= X <= Y <= 255)

Qualquer outra forma resulta em lista vazia.
"""

from __future__ import annotations

import re

_SINGLE_IP_RE = re.compile(r"(\d{1,3}\.){3}\d{1,3}", re.ASCII)
_IP_RANGE_RE = re.compile(r"(\d+\.\d+\.\d+\.)(\d+)-(\d+)", re.ASCII)

_OCTET_MAX = 255


def is_valid_ip(ip: str) -> bool:
    """True se ``ip`` for um IPv4 dotted-quad com octetos 0..255."""
    if not _SINGLE_IP_RE.fullmatch(ip):
        return False
    return all(0 <= int(part) <= _OCTET_MAX for part in ip.split("."))


def expand_targets(ip_input: str) -> list[str]:
    """
    Converte ``ip_input`` em uma TargetList ordenada.

    Os três primeiros octetos de uma faixa são copiados literalmente,
    sem revalidação (``999.999.999.1-3`` é aceito).

    Returns:
        Lista de endereços; vazia quando a entrada é inválida.
    """
    match = _IP_RANGE_RE.fullmatch(ip_input)
    if match:
        base_ip = match.group(1)
        start = int(match.group(2))
        end = int(match.group(3))
        if 0 <= start <= end <= _OCTET_MAX:
            return [f"{base_ip}{i}" for i in range(start, end + 1)]
        return []

    if is_valid_ip(ip_input):
        return [ip_input]

    return []
