"""
Salida de consola para el usuario (Rich).

Tres niveles: info/heading (secciones), detail (progreso por paso) y
warn/error. quiet() silencia info/detail temporalmente.
"""

import logging
import os
import re
import time
from typing import Callable, List

from rich.console import Console
from rich.markup import escape

TAB = "  "

console = Console(highlight=False, no_color=os.environ.get("color") == "no")
_log = logging.getLogger(__name__)

_quiet = False
_indent = ""
_last_errors: List[str] = []


def quiet(q: bool) -> None:
    global _quiet
    _quiet = q


def get_quiet() -> bool:
    return _quiet


def indent() -> str:
    return _indent


def indent_inc() -> None:
    global _indent
    _indent += TAB


def indent_dec() -> None:
    global _indent
    if len(_indent) >= len(TAB):
        _indent = _indent[: -len(TAB)]


def error(text: str) -> None:
    _log.error("%s%s", _indent, text)
    console.print(f"\n{_indent}[red]Error:[/red] {escape(text)}")
    _last_errors.append(f"\n> `Error:` {_squeeze(text)}\n\n")


def warn(text: str) -> None:
    _log.warning("%s%s%s", _indent, TAB, text)
    console.print(f"\n{_indent}[magenta]{TAB}Warning:[/magenta] {escape(text)}")


def heading(text: str) -> None:
    _log.debug("%s%s", _indent, text)
    if not _quiet:
        console.print(f"\n{_indent}[yellow]{escape(text)}[/yellow]")


def info(text: str) -> None:
    _log.debug("%s%s", _indent, text)
    if not _quiet:
        console.print(f"\n{_indent}[green]{escape(text)}[/green]")


def detail(text: str) -> None:
    _log.debug("%s%s%s", TAB, _indent, text)
    if not _quiet:
        console.print(f"{TAB}{_indent}{escape(text)}")


def raw(text: str) -> None:
    if not _quiet:
        console.print(escape(text), end="")


def last_errors() -> List[str]:
    return list(_last_errors)


def clear_errors() -> None:
    _last_errors.clear()


def _squeeze(text: str) -> str:
    """Colapsa espacios, elimina tabs y recorta a 1000 caracteres."""
    s = re.sub(r" {2,}", " ", text.replace("\t", "")).replace("\n", "\n> \n")
    if len(s) > 1000:
        s = s[:999] + "..."
    return s


def wait(title: str, err: str, duration: int, test: Callable[[], bool], load: Callable[[], bool]) -> bool:
    """
    Sondea cada segundo hasta `duration` segundos.

    Args:
        title: Texto mostrado a partir del segundo sondeo
        err: Error a mostrar si se agota el tiempo (vacío para no mostrar)
        duration: Segundos máximos de espera
        test: Condición de éxito
        load: Recarga del estado; si falla se aborta la espera

    Returns:
        True si test() se cumplió dentro del plazo
    """
    if duration < 0:
        return False
    for count in range(duration):
        if test():
            if count > 2:
                raw("\n")
            return True
        if count == 2:
            detail(title)
            raw(TAB)
        if count > 1:
            raw("." if (count - 2) % 120 < 60 else "\b \b")
        time.sleep(1)
        if not load():
            if count > 1:
                raw("\n")
            return False
    raw("\n")
    if err:
        error(err)
    return False
