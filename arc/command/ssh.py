"""
Cliente SSH sobre los binarios del sistema (ssh/scp vía subprocess).

Una conexión maestra (ControlMaster) se comparte por todos los comandos de un
lote; close() la cierra. Si la instancia no es un bastión, el salto se hace
con ProxyJump a través del primer bastión en ejecución.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from arc.core import env, msg
from arc.core.log import VERBOSE
from arc.core.errors import RemoteExecError

logger = logging.getLogger(__name__)

ATTEMPTS = 600

SSH_OPTIONS = [
    "-o", "StrictHostKeyChecking=no",
    "-o", "UserKnownHostsFile=/dev/null",
    "-o", "BatchMode=yes",
    "-o", "ConnectTimeout=10",
    "-o", "LogLevel=ERROR",
]


class SshClient:
    """
    Conexión a una instancia.

    Args:
        user: Usuario remoto
        host: IP o hostname de destino
        jump: "usuario@host" del bastión (opcional)
    """

    def __init__(self, user: str, host: str, jump: Optional[str] = None):
        self.user = user
        self.host = host
        self.jump = jump
        control_dir = Path(env.lookup("ARC") or "/tmp")
        self.control_path = str(control_dir / f"ssh-{user}@{host}")

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"

    def _options(self) -> List[str]:
        options = list(SSH_OPTIONS) + [
            "-o", "ControlMaster=auto",
            "-o", f"ControlPath={self.control_path}",
            "-o", "ControlPersist=60",
        ]
        if self.jump:
            options += ["-o", f"ProxyJump={self.jump}"]
        return options

    def _exec(self, argv: List[str], what: str) -> str:
        try:
            result = subprocess.run(argv, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, check=False)
        except OSError as e:
            raise RemoteExecError(f"{what}: {e}") from e
        if result.returncode != 0:
            raise RemoteExecError(f"{what} failed with exit status {result.returncode}", result.stdout)
        return result.stdout

    def connect(self) -> bool:
        """Intenta abrir la conexión maestra; True si el host responde."""
        try:
            self._exec(["ssh"] + self._options() + [self.target, "true"], f"Connect {self.target}")
        except RemoteExecError as e:
            logger.log(VERBOSE, "%s %s", e, e.output)
            return False
        return True

    def run(self, cmd: str) -> str:
        msg.detail(f"Running command '{cmd}'")
        return self._exec(["ssh"] + self._options() + [self.target, cmd], f"Command '{cmd}'")

    def sudo(self, cmd: str) -> str:
        msg.detail(f"Running sudo command '{cmd}'")
        return self._exec(["ssh", "-tt"] + self._options() + [self.target, f"sudo {cmd}"], f"Command '{cmd}'")

    def copy(self, src: str, dest: str) -> str:
        msg.detail(f"Copying file '{Path(src).name}' to '{dest}'")
        return self._exec(["scp", "-q"] + self._options() + [src, f"{self.target}:{dest}"], f"Copy {src}")

    def close(self) -> None:
        subprocess.run(
            ["ssh", "-O", "exit", "-o", f"ControlPath={self.control_path}", self.target],
            stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, check=False,
        )


def find_bastion(instance):
    """Primer bastión en estado running, o None."""
    pod = instance.pod.cluster.compute.find_pod("bastion")
    if pod is None:
        return None
    for bastion in pod.instances:
        if bastion.state == "running":
            return bastion
    return None


def connect(instance, as_root: bool = False) -> SshClient:
    """
    Abre la conexión a `instance`, reintentando una vez por segundo.

    Raises:
        RemoteExecError: si no hay bastión disponible o se agotan los intentos
    """
    bastion = None
    if instance.pod.servertype != "bastion":
        bastion = find_bastion(instance)
        if bastion is None:
            raise RemoteExecError("Cannot find a running bastion server")

    ssh_user = env.lookup("SSH_USER")
    user = instance.root_user if as_root else ssh_user
    if bastion is not None:
        logger.info("Creating ssh connection to %s - %s, via %s - %s",
                    instance.name, instance.private_ip_address, bastion.name, bastion.public_ip_address)
        client = SshClient(user, instance.private_ip_address, f"{ssh_user}@{bastion.public_ip_address}")
    else:
        logger.info("Creating ssh connection to %s - %s", instance.name, instance.public_ip_address)
        client = SshClient(user, instance.public_ip_address)

    for count in range(ATTEMPTS):
        if client.connect():
            if count > 0:
                msg.raw("\n")
            return client
        if count == 0:
            msg.detail(f"Waiting for ssh to connect to {instance.name}")
            msg.raw(msg.TAB)
        msg.raw("." if count % 120 < 60 else "\b \b")
        time.sleep(1)
    msg.raw("\n")
    raise RemoteExecError(f"Failed to connect to {instance.name}")
