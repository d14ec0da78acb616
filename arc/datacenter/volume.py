"""
Recursos auxiliares de una instancia: volúmenes, IP elástica y rol.

No tienen ruta propia; la instancia los maneja directamente.
"""

import logging
from typing import Dict, Iterator, List, Optional

from arc.config import models
from arc.core import msg
from arc.core.errors import ConfigError

logger = logging.getLogger(__name__)


class Volume:
    def __init__(self, instance, prov, cfg: models.Volume):
        logger.debug("Initializing Volume %r", cfg.device)
        self.cfg = cfg
        self.provider = prov.new_volume(instance, cfg)

    @property
    def device(self) -> str:
        return self.cfg.device

    @property
    def mount_point(self) -> str:
        return self.cfg.mount_point

    @property
    def boot(self) -> bool:
        return self.cfg.boot

    @property
    def preserve(self) -> bool:
        return self.cfg.preserve

    @property
    def id(self) -> str:
        return self.provider.id

    @property
    def state(self) -> str:
        return self.provider.state

    def load(self) -> None:
        self.provider.load()

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    def attached(self) -> bool:
        return self.provider.attached()

    def detached(self) -> bool:
        return self.provider.detached()

    def attach(self) -> None:
        msg.detail(f"Volume Attach: {self.device}, {self.mount_point}")
        self.provider.attach()

    def detach(self) -> None:
        msg.detail(f"Volume Detach: {self.device}, {self.mount_point}")
        self.provider.detach()

    def destroy(self) -> None:
        msg.detail(f"Volume Destroy: {self.device}, {self.mount_point}")
        self.provider.destroy()

    def reset(self) -> None:
        self.provider.reset()

    def set_tags(self, tags: Dict[str, str]) -> None:
        self.provider.set_tags(tags)

    def audit(self, name: str) -> None:
        self.provider.audit(name)

    def info(self) -> None:
        msg.info(f"Volume: {'/' if self.boot else self.mount_point}")
        msg.indent_inc()
        self.cfg.print()
        self.provider.info()
        msg.indent_dec()


class Volumes:
    """Volúmenes de una instancia indexados por dispositivo (único)."""

    def __init__(self, instance, prov, cfgs: List[models.Volume]):
        self._volumes: Dict[str, Volume] = {}
        for conf in cfgs:
            if conf.device in self._volumes:
                raise ConfigError(f"Volume device {conf.device!r} must be unique but is used multiple times")
            self._volumes[conf.device] = Volume(instance, prov, conf)

    def find(self, device: str) -> Optional[Volume]:
        return self._volumes.get(device)

    def __iter__(self) -> Iterator[Volume]:
        return iter(list(self._volumes.values()))

    def __len__(self) -> int:
        return len(self._volumes)

    def audit(self, name: str) -> None:
        for volume in self:
            volume.audit(name)

    def info(self) -> None:
        msg.indent_inc()
        msg.info("Volumes")
        msg.indent_inc()
        for volume in self:
            volume.info()
        msg.indent_dec()
        msg.indent_dec()


class ElasticIP:
    """IP elástica: asignación y asociación son estados independientes."""

    def __init__(self, instance, prov):
        logger.debug("Initializing ElasticIP for %r", instance.name)
        self.provider = prov.new_elastic_ip(instance)

    @property
    def id(self) -> str:
        return self.provider.id

    @property
    def ip_address(self) -> str:
        return self.provider.ip_address

    def load(self) -> None:
        self.provider.load()

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    def attached(self) -> bool:
        return self.provider.attached()

    def detached(self) -> bool:
        return self.provider.detached()

    def create(self) -> None:
        self.provider.create()

    def destroy(self) -> None:
        self.provider.destroy()

    def attach(self) -> None:
        self.provider.attach()

    def detach(self) -> None:
        self.provider.detach()


class Role:
    def __init__(self, instance, prov, name: str):
        logger.debug("Initializing Role %r", name)
        self.name = name
        self.provider = prov.new_role(name, instance)

    @property
    def id(self) -> str:
        return self.provider.id

    def load(self) -> None:
        self.provider.load()

    def attach(self) -> None:
        if not self.name:
            return
        msg.info(f"Role Attach: {self.name}")
        self.provider.attach()

    def detach(self) -> None:
        if not self.name:
            return
        msg.info(f"Role Detach: {self.name}")
        self.provider.detach()

    def update(self) -> None:
        self.provider.update()
