"""
CLI de arc.

    arc <datacenter> [path...] <command> [flags...]
    arc version
    arc help

Solo compone: carga el entorno, el log y la configuración, registra los
vendors y delega en arc.datacenter.Arc.
"""

import logging
import sys
from typing import List, Optional

import typer
from rich.console import Console

from arc import __version__, mock
from arc.config import loader
from arc.core import aaa, env, log, msg
from arc.core.errors import ArcError
from arc.datacenter import Arc, root_help

APPNAME = "arc"

logger = logging.getLogger(__name__)

app = typer.Typer(
    name=APPNAME,
    help="arc is a tool for managing datacenter resources.",
    add_completion=False,
)

console = Console()


def register_providers() -> None:
    mock.register()


def execute(datacenter: str, params: List[str]) -> int:
    """
    Construye el árbol del datacenter y ejecuta la petición.

    Returns:
        Código de salida del proceso
    """
    env.init(APPNAME, __version__)
    log.init(APPNAME)
    try:
        cfg = loader.load(datacenter)
        users = loader.load_users()
        aaa.init(users)
        register_providers()

        aaa.pre_accounting([APPNAME, datacenter] + params)
        result = Arc(cfg, users).run(params)
        aaa.post_accounting(result)
        if result == 0:
            aaa.post_audit()
        return result
    except ArcError as e:
        msg.error(str(e))
        aaa.post_accounting(1)
        return 1
    except Exception as e:
        logger.exception("Unexpected error")
        msg.error(str(e))
        return 1
    finally:
        log.fini()


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    datacenter: Optional[str] = typer.Argument(None, help="Datacenter (etc/arc/<datacenter>.yaml)"),
    params: Optional[List[str]] = typer.Argument(None, help="Path, command and flags"),
):
    """arc is a tool for managing datacenter resources."""
    if datacenter == "version":
        console.print(f"{APPNAME} {__version__}", highlight=False)
        return
    if datacenter in (None, "help"):
        root_help()
        return
    if not params:
        root_help()
        raise typer.Exit(code=1)
    raise typer.Exit(code=execute(datacenter, list(params)))


def main():
    app(args=sys.argv[1:], prog_name=APPNAME)
