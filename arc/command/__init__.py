"""
Comandos locales y remotos: registros, runner por lotes y cliente SSH.
"""

from arc.command.command import Command, CommandType, copy, local, message, remote, sudo
from arc.command.runner import Runner

__all__ = ["Command", "CommandType", "Runner", "copy", "local", "message", "remote", "sudo"]
