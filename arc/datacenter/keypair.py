"""
Keypair del usuario, tomado del ssh-agent en ejecución.

Se elige la clave cuyo comentario termina en el nombre de la clave privada
configurada: id_rsa, o $SSH_USER cuando difiere de $USER.
"""

import logging
import os
import subprocess
from typing import Callable, List, Tuple

from arc.config import models
from arc.core import aaa, env, log, msg
from arc.core.errors import ConfigError
from arc.datacenter.base import commands, guarded, show_help, test_skip, unknown_command
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)

# (format, key material, comment)
AgentKey = Tuple[str, str, str]


def agent_keys() -> List[AgentKey]:
    """Claves públicas del ssh-agent (ssh-add -L)."""
    if not os.environ.get("SSH_AUTH_SOCK"):
        raise ConfigError("SSH_AUTH_SOCK is not set. Is ssh-agent running?")
    try:
        result = subprocess.run(["ssh-add", "-L"], stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                                text=True, check=False)
    except OSError as e:
        raise ConfigError(f"Cannot query ssh-agent: {e}") from e
    if result.returncode != 0:
        raise ConfigError(f"Cannot list ssh-agent keys: {result.stdout.strip()}")

    keys = []
    for line in result.stdout.splitlines():
        parts = line.strip().split(None, 2)
        if len(parts) < 2:
            continue
        keys.append((parts[0], line.strip(), parts[2] if len(parts) > 2 else ""))
    return keys


# Reemplazable en tests
key_source: Callable[[], List[AgentKey]] = agent_keys


def select_key() -> models.KeyPair:
    username = env.lookup("SSH_USER")
    filename = "id_rsa" if username == env.lookup("USER") else username

    for fmt, material, comment in key_source():
        if os.path.basename(comment) == filename:
            return models.KeyPair(
                name=username,
                local_name=filename,
                format=fmt,
                comment=comment,
                key_material=material,
            )
    raise ConfigError(f"Cannot find {filename}. Is it available from ssh-agent?")


class KeyPair:
    def __init__(self, prov):
        logger.debug("Initializing KeyPair")
        self.cfg = select_key()
        self.provider = prov.new_keypair(self.cfg)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def fingerprint(self) -> str:
        return self.provider.fingerprint

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Keypair {self.name!r}")
        if req.top():
            self.help()
            return Response.FAIL

        aaa.authorized(req, "keypair", self.name)
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            self.provider.load()
            return Response.OK
        if req.command in (Command.CREATE, Command.DESTROY):
            return self.provider.route(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("KeyPair")
                msg.indent_inc()
                msg.detail(f"{'name':<20}\t{self.name}")
                self.provider.route(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("keypair", req)

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create the keypair"),
            (Command.DESTROY, "destroy the keypair"),
            (Command.CONFIG, "show the configuration for the keypair"),
            (Command.INFO, "show information about the keypair"),
            (Command.HELP, "show this help"),
        )
        show_help("keypair", rows)
