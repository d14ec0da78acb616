"""
Petición del router: identidad (datacenter, usuario, hora), ruta, verbo y flags.
"""

from typing import Iterable, List, Optional

from arc.route.command import Command


class Path:
    """Pila de componentes de ruta; Top() es el primero."""

    def __init__(self, parts: Optional[Iterable[str]] = None):
        self._parts: List[str] = list(parts or [])

    def top(self) -> str:
        return self._parts[0] if self._parts else ""

    def pop(self) -> "Path":
        if self._parts:
            self._parts.pop(0)
        return self

    def push(self, part: str) -> "Path":
        self._parts.insert(0, part)
        return self

    def append(self, part: str) -> "Path":
        self._parts.append(part)
        return self

    def get(self) -> List[str]:
        return list(self._parts)

    def __len__(self) -> int:
        return len(self._parts)


class Flags:
    """Lista ordenada de flags sin duplicados."""

    def __init__(self, flags: Optional[Iterable[str]] = None):
        self._flags: List[str] = []
        self.set(flags or [])

    def clone(self) -> "Flags":
        return Flags(self._flags)

    def has(self, flag: str) -> bool:
        return flag in self._flags

    def set(self, flags: Iterable[str]) -> None:
        self._flags = []
        for flag in flags:
            self.append(flag)

    def get(self) -> List[str]:
        return list(self._flags)

    def append(self, flag: str) -> "Flags":
        if flag not in self._flags:
            self._flags.append(flag)
        return self

    def remove(self, flag: str) -> "Flags":
        self._flags = [f for f in self._flags if f != flag]
        return self

    def empty(self) -> bool:
        return not self._flags

    def __iter__(self):
        return iter(list(self._flags))

    def __len__(self) -> int:
        return len(self._flags)


class Request:
    """
    Petición que viaja por el árbol. pop() modifica la ruta in situ; clone()
    crea una petición nueva con la misma identidad, ruta vacía y copia de flags.
    """

    def __init__(self, datacenter: str, user_id: str, time: str):
        self.datacenter = datacenter
        self.user_id = user_id
        self.time = time
        self.path = Path()
        self.command = Command.NONE
        self.flags = Flags()

    def clone(self, command: Command) -> "Request":
        req = Request(self.datacenter, self.user_id, self.time)
        req.command = command
        req.flags = self.flags.clone()
        return req

    def parse(self, params: Iterable[str]) -> "Request":
        """
        Consume tokens como ruta hasta el primer alias de verbo; el resto son flags.
        Los tokens vacíos se ignoran.
        """
        params = list(params)
        for i, token in enumerate(params):
            if not token:
                continue
            cmd = Command.lookup(token)
            if cmd is Command.NONE:
                self.path.append(token)
                continue
            self.command = cmd
            self.flags.set(t for t in params[i + 1:] if t)
            break
        return self

    def top(self) -> str:
        return self.path.top()

    def pop(self) -> "Request":
        self.path.pop()
        return self

    def flag(self, name: str) -> bool:
        return self.flags.has(name)

    def test_flag(self) -> bool:
        return self.flags.has("test")

    def __str__(self) -> str:
        return f"{self.path.get()} {self.command} {self.flags.get()}"
