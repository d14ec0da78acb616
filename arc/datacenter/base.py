"""
Utilidades compartidas por los routers del árbol de recursos.
"""

import functools
import logging
from typing import Callable, List, Tuple

from arc.core import msg
from arc.core.errors import ArcError, AuthorizationError
from arc.core.help import Command as HelpCommand
from arc.core.help import print_help
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


def guarded(route: Callable[..., Response]) -> Callable[..., Response]:
    """
    Frontera de errores de un router: ningún ArcError sale de route().

    AuthorizationError -> UNAUTHORIZED; cualquier otro ArcError -> FAIL.
    """
    @functools.wraps(route)
    def wrapper(self, req: Request) -> Response:
        try:
            return route(self, req)
        except AuthorizationError as e:
            msg.error(str(e))
            return Response.UNAUTHORIZED
        except ArcError as e:
            logger.debug("%s failed: %s", type(self).__name__, e)
            msg.error(str(e))
            return Response.FAIL
    return wrapper


def test_skip(req: Request) -> bool:
    """True (y aviso) si la petición lleva el flag test."""
    if req.test_flag():
        msg.detail("Test. Skipping...")
        return True
    return False


def commands(*rows: Tuple[object, str]) -> List[HelpCommand]:
    """Filas de ayuda; el nombre puede ser un Command o un texto libre."""
    return [HelpCommand(str(name), desc) for name, desc in rows]


def show_help(path: str, rows: List[HelpCommand]) -> None:
    print_help(path, rows)


def unknown_command(kind: str, req: Request) -> Response:
    msg.error(f"Unknown {kind} command {str(req.command)!r}.")
    return Response.FAIL


def trailer(name: str = "") -> List[HelpCommand]:
    """Filas config / info / help comunes a todas las tablas."""
    suffix = f" {name}" if name else ""
    return commands(
        (Command.CONFIG, f"show the{suffix} configuration"),
        (Command.INFO, f"show information about allocated{suffix} resources"),
        (Command.HELP, "show this help"),
    )
