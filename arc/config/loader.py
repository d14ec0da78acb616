"""
Carga de documentos YAML de configuración ($ROOT/etc/arc).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pydantic
import yaml

from arc.config.models import Arc
from arc.config.users import Directory, UsersDocument
from arc.core import env
from arc.core.errors import ConfigError, ValidationError

logger = logging.getLogger(__name__)

EXTENSIONS = (".yaml", ".yml", ".json")


def config_dir(root: Optional[str] = None) -> Path:
    """Directorio de configuración: $ROOT/etc/arc."""
    return Path(root if root is not None else (env.lookup("ROOT") or "/")) / "etc" / "arc"


def _find(directory: Path, name: str) -> Optional[Path]:
    for ext in EXTENSIONS:
        path = directory / f"{name}{ext}"
        if path.exists():
            return path
    return None


def _read(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: the document must be a mapping")
    return data


def parse(data: Dict[str, Any], source: str = "") -> Arc:
    """Valida un documento ya leído."""
    try:
        return Arc.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"{source or 'configuration'}: {e}") from e


def load(datacenter: str, root: Optional[str] = None) -> Arc:
    """
    Carga el documento de un datacenter.

    Args:
        datacenter: Nombre del datacenter (nombre del archivo sin extensión)
        root: Prefijo alternativo a $ROOT

    Raises:
        ConfigError: si no existe el archivo o no es YAML válido
        ValidationError: si el documento no pasa la validación
    """
    directory = config_dir(root)
    path = _find(directory, datacenter)
    if path is None:
        raise ConfigError(f"Cannot find the configuration for datacenter {datacenter!r} in {directory}")
    logger.info("Loading configuration %s", path)
    return parse(_read(path), str(path))


def load_users(root: Optional[str] = None) -> Directory:
    """Carga users.yaml; si no existe devuelve un directorio vacío."""
    path = _find(config_dir(root), "users")
    if path is None:
        logger.info("No users document found, using an empty directory")
        return Directory()
    try:
        doc = UsersDocument.model_validate(_read(path))
    except pydantic.ValidationError as e:
        raise ValidationError(f"{path}: {e}") from e
    return Directory(doc)
