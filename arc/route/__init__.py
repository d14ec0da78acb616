"""
Router: verbos, respuestas y peticiones.
"""

from arc.route.command import Command, Response
from arc.route.request import Flags, Path, Request

__all__ = ["Command", "Response", "Flags", "Path", "Request"]
