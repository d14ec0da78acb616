"""
Aritmética CIDR: bloque sucesor, contención y solapamiento.
"""

import ipaddress

from arc.core.errors import ConfigError


def _network(cidr: str):
    try:
        return ipaddress.ip_network(cidr, strict=False)
    except ValueError as e:
        raise ConfigError(f"Invalid cidr block {cidr!r}: {e}") from e


def next_cidr_block(cidr: str) -> str:
    """
    Devuelve el bloque del mismo tamaño que sigue inmediatamente a `cidr`.

    Raises:
        ConfigError: si el CIDR es inválido o el sucesor desborda el espacio de direcciones
    """
    net = _network(cidr)
    start = int(net.network_address) + net.num_addresses
    if start + net.num_addresses - 1 > 2 ** net.max_prefixlen - 1:
        raise ConfigError(f"Cidr block {cidr} has no successor")
    address = type(net.network_address)(start)
    return f"{address}/{net.prefixlen}"


def contains(parent: str, child: str) -> bool:
    """True si `child` está completamente dentro de `parent`."""
    p = _network(parent)
    c = _network(child)
    return c.version == p.version and c.subnet_of(p)


def overlaps(a: str, b: str) -> bool:
    x = _network(a)
    y = _network(b)
    return x.version == y.version and x.overlaps(y)
