"""
Tablas de ayuda de los routers.
"""

from dataclasses import dataclass
from typing import List

from rich.table import Table

from arc.core.msg import console

HEADER = (
    "\narc is a tool for managing datacenter resources.\n\n"
    "Usage:\n\n"
    "  arc [datacenter]{request} [command]\n\n"
    "The datacenter configuration files are found in /etc/arc/[datacenter].yaml.\n"
)


@dataclass
class Command:
    """Entrada de la tabla de ayuda."""
    name: str
    desc: str


def print_help(request: str, commands: List[Command]) -> None:
    """
    Imprime la cabecera de uso y la tabla de comandos.

    Args:
        request: Ruta del recurso (ej: "cluster web"); vacío para la raíz
        commands: Comandos disponibles en esa ruta
    """
    if request:
        request = " " + request
    console.print(HEADER.format(request=request), highlight=False, markup=False)

    table = Table(title="The commands are", show_header=True, header_style="bold cyan", box=None)
    table.add_column("Command", style="cyan", no_wrap=True, min_width=18)
    table.add_column("Description", style="green")
    for cmd in commands:
        table.add_row(cmd.name, cmd.desc)
    console.print(table)
