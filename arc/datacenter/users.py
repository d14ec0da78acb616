"""
Lote de comandos que da de alta grupos, equipos y usuarios en una instancia.
"""

import logging
import os
from pathlib import Path
from typing import List

from arc.command import Command, copy, message, sudo
from arc.config.users import Directory, User
from arc.core import env
from arc.core.errors import ConfigError

logger = logging.getLogger(__name__)

USERS_DIR = "/usr/lib/arc/users/"
SCRIPTS = ["setup_group", "setup_user", "add_user_to_groups", "setup_ssh", "setup_sudo"]


def user_commands(teams: List[str], directory: Directory) -> List[Command]:
    """
    Construye el lote completo: scripts, grupos y los usuarios de cada equipo.

    Raises:
        ConfigError: si un equipo no está definido
    """
    commands = _copy_scripts()
    commands += _setup_groups(directory)
    for name in teams:
        team = directory.team(name)
        if team is None:
            raise ConfigError(f"Unknown Team {name}")
        commands.append(message(f"Creating team: {name}", "Info"))
        for user in team.users:
            if user.remove:
                commands += _remove_user(user)
            else:
                commands += _add_user(user, team.sudo)
    return commands


def _copy_scripts() -> List[Command]:
    commands = [message("Installing user scripts", "Info")]
    for script in SCRIPTS:
        commands.append(copy(script, USERS_DIR + script))
        commands.append(message(f"Script installed: {script}"))
    return commands


def _setup_groups(directory: Directory) -> List[Command]:
    commands = [message("Creating groups", "Info")]
    for group in directory.groups:
        if group.remove:
            cmd = sudo(f'remove group "{group.name}"', USERS_DIR + "setup_group", group.name, str(group.gid), "remove")
        else:
            cmd = sudo(f'setup group "{group.name}"', USERS_DIR + "setup_group", group.name, str(group.gid))
        commands.append(cmd)
        commands.append(message(f"Created group: {group.name}"))
    return commands


def write_auth_file(user: User) -> str:
    """Escribe $ARC/authorized_keys.<user> (0600) con una clave por línea."""
    path = Path(env.lookup("ARC") or ".") / f"authorized_keys.{user.name}"
    path.write_text("".join(f"{key}\n" for key in user.ssh_keys))
    os.chmod(path, 0o600)
    return str(path)


def _add_user(user: User, with_sudo: bool) -> List[Command]:
    auth_file = write_auth_file(user)
    commands = [
        sudo(f'create user "{user.name}" account', USERS_DIR + "setup_user", user.name, str(user.uid)),
        sudo(f'add user "{user.name}" to groups', USERS_DIR + "add_user_to_groups", user.name, *user.groups),
        copy("authorized_keys", auth_file, f"/tmp/authorized_keys.{user.name}"),
        sudo(f'setup user "{user.name}" ssh', USERS_DIR + "setup_ssh", user.name),
    ]
    if with_sudo:
        commands.append(sudo(f'add sudo access for user "{user.name}"', USERS_DIR + "setup_sudo", user.name))
    commands.append(message(f"Created user: {user.name}"))
    return commands


def _remove_user(user: User) -> List[Command]:
    return [
        sudo(f'remove user "{user.name}"', USERS_DIR + "setup_user", user.name, "remove"),
        sudo(f'remove sudo access for user "{user.name}"', USERS_DIR + "setup_sudo", user.name, "remove"),
        message(f"Removed user: {user.name}"),
    ]
