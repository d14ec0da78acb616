"""
Verbos y respuestas del router.
"""

from enum import Enum
from typing import Dict, Tuple


class Command(Enum):
    """
    Verbo de una petición. El valor es la tupla de alias; el primero es el
    nombre canónico.
    """
    NONE = ("",)
    LOAD = ("load",)
    HELP = ("help",)
    CONFIG = ("config",)
    INFO = ("info", "show", "list")
    CREATE = ("create",)
    PROVISION = ("provision", "refresh", "update")
    START = ("start",)
    STOP = ("stop",)
    RESTART = ("restart", "reboot")
    REPLACE = ("replace", "upgrade")
    DESTROY = ("destroy", "delete", "nuke")
    AUDIT = ("audit",)

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self.value

    def __str__(self) -> str:
        return self.value[0]

    @classmethod
    def lookup(cls, token: str) -> "Command":
        """Devuelve el comando para un alias, o NONE si no es un verbo."""
        return _ALIASES.get(token, cls.NONE)


_ALIASES: Dict[str, Command] = {alias: cmd for cmd in Command for alias in cmd.aliases}


class Response(str, Enum):
    """Resultado de Route(). CONTINUE es interno: "sin decisión, seguir"."""
    OK = "ok"
    FAIL = "fail"
    UNAUTHORIZED = "unauthorized"
    CONTINUE = "continue"
