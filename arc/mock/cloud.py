"""
Nube en memoria del vendor "mock".

Guarda el estado de cada familia de recursos en tablas indexadas por clave
lógica (nombre de instancia, (instancia, dispositivo), ...). El estado vive lo
que dura el proceso; reset() lo vacía (tests).
"""

import ipaddress
import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, DefaultDict, Dict, Hashable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


@dataclass
class Record:
    id: str
    state: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    tags: Dict[str, str] = field(default_factory=dict)


class Cloud:
    """Tablas de registros y un diario de llamadas de escritura."""

    def __init__(self):
        self.tables: DefaultDict[str, Dict[Hashable, Record]] = defaultdict(dict)
        self.calls: List[Tuple] = []
        self._ids = itertools.count(1)
        self._used_ips: Set[str] = set()
        self._public = itertools.count(1)

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids):08x}"

    def private_ip(self, cidr: str) -> str:
        """Primera dirección de host libre dentro de `cidr`."""
        for host in ipaddress.ip_network(cidr, strict=False).hosts():
            address = str(host)
            if address not in self._used_ips:
                self._used_ips.add(address)
                return address
        raise ValueError(f"No free address in {cidr}")

    def public_ip(self) -> str:
        n = next(self._public)
        return f"34.33.{n // 250}.{n % 250 + 1}"

    def release_ip(self, address: str) -> None:
        self._used_ips.discard(address)

    def record(self, *call) -> None:
        logger.debug("mock %s", " ".join(str(c) for c in call))
        self.calls.append(call)

    def get(self, table: str, key: Hashable) -> Optional[Record]:
        return self.tables[table].get(key)

    def put(self, table: str, key: Hashable, record: Record) -> Record:
        self.tables[table][key] = record
        return record

    def remove(self, table: str, key: Hashable) -> Optional[Record]:
        return self.tables[table].pop(key, None)

    def keys(self, table: str) -> List[Hashable]:
        return list(self.tables[table])

    def writes(self) -> List[Tuple]:
        """Llamadas que modificaron estado (excluye load)."""
        return [c for c in self.calls if c[0] != "load"]


cloud = Cloud()


def reset() -> None:
    cloud.__init__()
    logger.debug("mock cloud reset")
