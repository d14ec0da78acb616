"""
Core: piezas transversales (errores, entorno, logging, consola, ayuda, aaa).

ENFORCEMENT (arquitectura limpia):
- Este paquete NO debe importar: arc.datacenter, arc.mock, arc.cli ni arc.config.
- Permitido: stdlib, rich, python-dotenv, arc.core.*.
- El árbol de recursos y la CLI importan desde core; nunca al revés.
"""

from arc.core.errors import (
    ArcError,
    AuthorizationError,
    ConfigError,
    InternalError,
    ProviderError,
    RemoteExecError,
    ResolutionError,
    ValidationError,
)

__all__ = [
    "ArcError",
    "AuthorizationError",
    "ConfigError",
    "InternalError",
    "ProviderError",
    "RemoteExecError",
    "ResolutionError",
    "ValidationError",
]
