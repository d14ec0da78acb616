"""
Logging de arc: un FileHandler en $ARC/<app>.log compartido por todos los
loggers del árbol "arc".
"""

import logging
import os
from pathlib import Path
from typing import Optional

from arc.core import env

VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

FORMAT = "%(levelname)-7s| %(asctime)s %(message)s"

logger = logging.getLogger("arc")
_handler: Optional[logging.Handler] = None


def init(appname: str) -> None:
    """Abre el archivo de log de la ejecución. Llamadas repetidas no hacen nada."""
    global _handler
    if _handler is not None:
        return

    path = Path(env.lookup(appname.upper()) or ".") / f"{appname}.log"
    _handler = logging.FileHandler(path, mode="w")
    os.chmod(path, 0o644)
    _handler.setFormatter(logging.Formatter(FORMAT))

    level = VERBOSE
    if os.environ.get("verbose") == "no":
        level = logging.DEBUG
    if os.environ.get("debug") == "no":
        level = logging.INFO
    logger.setLevel(level)
    logger.addHandler(_handler)
    logger.info("%s %s", appname, env.lookup("VERSION"))


def fini() -> None:
    global _handler
    if _handler is None:
        return
    logger.removeHandler(_handler)
    _handler.close()
    _handler = None


def verbose(message: str, *args) -> None:
    """Salida capturada de comandos (nivel VERBOSE)."""
    logger.log(VERBOSE, message, *args)


def route(req, target: str) -> None:
    """Traza un salto del router."""
    logger.debug("Route to %s: %s", target, req)
