"""
Configuración: modelos pydantic, carga YAML y directorio de usuarios.
"""

from arc.config import models
from arc.config.loader import load, load_users, parse
from arc.config.users import Directory

__all__ = ["models", "load", "load_users", "parse", "Directory"]
