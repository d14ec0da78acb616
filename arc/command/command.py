"""
Registros de comando: una secuencia tipada que el runner ejecuta sobre una
única conexión por instancia.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

ARC_LIB = "/usr/lib/arc"


class CommandType(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"    # copy + sudo del script copiado
    COPY = "copy"
    SUDO = "sudo"
    MESSAGE = "message"  # dest: Error, Warn, Info, Detail o Raw


@dataclass
class Command:
    type: CommandType
    desc: str = ""
    src: str = ""
    dest: str = ""
    args: List[str] = field(default_factory=list)

    def arc_src(self) -> bool:
        """True si src es un script de arc (se prefija con $ROOT localmente)."""
        return self.src.startswith(ARC_LIB)

    def line(self) -> str:
        return " ".join([self.src] + list(self.args))


def local(desc: str, src: str, *args: str) -> Command:
    return Command(CommandType.LOCAL, desc=desc, src=src, args=list(args))


def remote(desc: str, src: str, *args: str, dest: str = "") -> Command:
    return Command(CommandType.REMOTE, desc=desc, src=src, dest=dest, args=list(args))


def copy(desc: str, src: str, dest: str = "") -> Command:
    return Command(CommandType.COPY, desc=desc, src=src, dest=dest)


def sudo(desc: str, src: str, *args: str) -> Command:
    return Command(CommandType.SUDO, desc=desc, src=src, args=list(args))


def message(desc: str, dest: str = "") -> Command:
    return Command(CommandType.MESSAGE, desc=desc, dest=dest)
