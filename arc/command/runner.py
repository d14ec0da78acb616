"""
Ejecución de lotes de comandos.

Un lote abre una sola conexión con la instancia destino y ejecuta los
registros en orden; el primer fallo detiene el lote. Los mensajes (MESSAGE)
se muestran aunque el lote corra en modo silencioso.
"""

import logging
import os
import subprocess
from typing import Callable, List, Optional, Tuple

from arc.command import ssh
from arc.command.command import Command, CommandType
from arc.core import env, log, msg
from arc.core.errors import RemoteExecError

logger = logging.getLogger(__name__)

LocalExec = Callable[[List[str]], Tuple[int, str]]


def _subprocess_local(argv: List[str]) -> Tuple[int, str]:
    try:
        result = subprocess.run(argv, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, check=False)
    except OSError as e:
        return 127, str(e)
    return result.returncode, result.stdout


class Runner:
    """
    Args:
        connect: Fábrica de clientes (instance, as_root) -> cliente con
            copy/run/sudo/close. Por defecto ssh.connect.
        local: Ejecutor de comandos locales argv -> (status, salida)
    """

    def __init__(self, connect: Optional[Callable] = None, local: Optional[LocalExec] = None):
        self.connect = connect or ssh.connect
        self.local = local or _subprocess_local

    # --- API de lotes ---

    def execute(self, commands: List[Command], instance=None, as_root: bool = False) -> None:
        """
        Ejecuta el lote.

        Raises:
            RemoteExecError: con la salida combinada del comando que falló
        """
        client = None
        if instance is not None:
            client = self.connect(instance, as_root)
        try:
            for cmd in commands:
                self._dispatch(cmd, instance, client)
        finally:
            if client is not None:
                client.close()

    def run(self, commands: List[Command], instance=None, as_root: bool = False, quiet: bool = False) -> bool:
        """Como execute() pero informa del error y devuelve False."""
        previous = msg.get_quiet()
        if quiet:
            msg.quiet(True)
        try:
            self.execute(commands, instance, as_root)
        except RemoteExecError as e:
            msg.error(f"{e}\n{e.output}" if e.output else str(e))
            return False
        finally:
            msg.quiet(previous)
        return True

    def run_quiet(self, commands: List[Command], instance=None) -> bool:
        return self.run(commands, instance, quiet=True)

    def run_quiet_as_root(self, commands: List[Command], instance=None) -> bool:
        return self.run(commands, instance, as_root=True, quiet=True)

    # --- Comandos sueltos ---

    def run_remote(self, cmd: Command, instance) -> bool:
        return self.run([cmd], instance)

    def run_remote_with_output(self, cmd: Command, instance) -> None:
        """Comando remoto suelto; lanza RemoteExecError en fallo."""
        self.execute([cmd], instance)

    # --- Despacho ---

    def _dispatch(self, cmd: Command, instance, client) -> None:
        if cmd.type is CommandType.LOCAL:
            self._local(cmd)
            return
        if cmd.type is CommandType.MESSAGE:
            self._message(cmd)
            return
        if instance is None or client is None:
            raise RemoteExecError(f"The instance must be defined for a {cmd.type.value} command")
        if cmd.type is CommandType.REMOTE:
            msg.info(f"Remote command: {cmd.desc} on {instance.name}")
            self._copy(cmd, client)
            target = Command(CommandType.SUDO, src=cmd.dest or cmd.src, args=cmd.args)
            self._sudo(target, client)
        elif cmd.type is CommandType.SUDO:
            msg.info(f"Sudo command: {cmd.desc} on {instance.name}")
            self._sudo(cmd, client)
        elif cmd.type is CommandType.COPY:
            msg.info(f"Copy command: {cmd.desc} to {instance.name}")
            self._copy(cmd, client)
        else:
            raise RemoteExecError(f"Unknown command type {cmd.type}")

    def _message(self, cmd: Command) -> None:
        quiet = msg.get_quiet()
        msg.quiet(False)
        try:
            {
                "Error": msg.error,
                "Warn": msg.warn,
                "Info": msg.info,
                "Raw": msg.raw,
            }.get(cmd.dest, msg.detail)(cmd.desc)
        finally:
            msg.quiet(quiet)

    def _local(self, cmd: Command) -> None:
        msg.info(f"Local command: {cmd.desc}")
        path = (env.lookup("ROOT") + cmd.src) if cmd.arc_src() else cmd.src
        msg.detail(f"Running command '{path} {' '.join(cmd.args)}'")
        status, output = self.local([path] + list(cmd.args))
        log.verbose("%s", output)
        if status != 0:
            raise RemoteExecError(f"Local command '{cmd.desc}' failed with exit status {status}", output)

    def _sudo(self, cmd: Command, client) -> None:
        output = client.sudo(cmd.line())
        log.verbose("%s", output)

    def _copy(self, cmd: Command, client) -> None:
        dest = cmd.dest or cmd.src
        directory = os.path.dirname(cmd.dest)
        if directory not in ("", ".", "/tmp"):
            quiet = msg.get_quiet()
            msg.quiet(True)
            try:
                client.sudo(f"/bin/mkdir -p {directory}")
            finally:
                msg.quiet(quiet)
        src = (env.lookup("ROOT") + cmd.src) if cmd.arc_src() else cmd.src
        output = client.copy(src, dest)
        log.verbose("%s", output)
