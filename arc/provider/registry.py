"""
Registros de providers por vendor.

Cada vendor se registra explícitamente desde la composición raíz
(arc.mock.register(), etc.); los subárboles piden la implementación concreta
según el campo provider.vendor de su configuración.
"""

import logging
from typing import Any, Callable, Dict, List

from arc.core.errors import ConfigError

logger = logging.getLogger(__name__)


class Registry:
    """Mapa vendor -> constructor para una familia de providers."""

    def __init__(self, family: str):
        self.family = family
        self._ctors: Dict[str, Callable[[Any], Any]] = {}

    def register(self, vendor: str, ctor: Callable[[Any], Any]) -> None:
        logger.debug("Registering %s provider %r", self.family, vendor)
        self._ctors[vendor] = ctor

    def vendors(self) -> List[str]:
        return sorted(self._ctors)

    def new(self, cfg: Any) -> Any:
        """
        Construye el provider para `cfg` (un modelo con atributo provider).

        Raises:
            ConfigError: si falta el elemento provider o el vendor no está registrado
        """
        provider = getattr(cfg, "provider", None)
        if provider is None:
            raise ConfigError(f"The provider element is missing from the {self.family} configuration")
        ctor = self._ctors.get(provider.vendor)
        if ctor is None:
            raise ConfigError(f"Unknown vendor {provider.vendor!r}")
        logger.info("Initializing %s %s provider", provider.vendor, self.family)
        return ctor(cfg)


datacenters = Registry("datacenter")
dns = Registry("dns")
database_services = Registry("database_service")
container_services = Registry("container_service")
