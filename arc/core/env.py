"""
Entorno del proceso: ROOT, ARC, USER, SSH_USER y VERSION.

init() prepara el directorio de ejecución ($ARC) y carga el .env del proyecto;
lookup() consulta primero los valores registrados y luego os.environ.
"""

import getpass
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

KEEP_RUNS = 20

_env: Dict[str, str] = {}


def init(appname: str, version: str) -> None:
    """
    Inicializa el entorno de la aplicación.

    Args:
        appname: Nombre de la aplicación (arc)
        version: Versión que se muestra en el banner
    """
    key = appname.upper()
    root = os.environ.get("ROOT") or os.environ.get(f"{key}_ROOT", "")

    env_file = Path(root or ".") / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    base = Path(os.environ.get(key, ""))
    if not os.environ.get(key) or not base.is_dir():
        base = Path.home() / f".{appname}"
    base.mkdir(parents=True, exist_ok=True)

    run_dir = base / datetime.now().strftime("%Y-%m-%d_%H%M%S.%f")[:-3]
    run_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(run_dir, 0o755)

    latest = base / "latest"
    if latest.is_symlink() or latest.exists():
        latest.unlink()
    latest.symlink_to(run_dir)
    _cleanup(base)

    # Los scripts locales leen $ARC del entorno heredado
    os.environ[key] = str(run_dir)

    user = getpass.getuser()
    _env.update({
        key: str(run_dir),
        "ROOT": root,
        "VERSION": version,
        "USER": user,
        "SSH_USER": os.environ.get("SSH_USER") or user,
    })


def _cleanup(base: Path) -> None:
    """Conserva solo los KEEP_RUNS directorios de ejecución más recientes."""
    runs = sorted(
        (d for d in base.iterdir() if d.is_dir() and not d.is_symlink() and d.name[:1].isdigit()),
        reverse=True,
    )
    for old in runs[KEEP_RUNS:]:
        shutil.rmtree(old, ignore_errors=True)


def lookup(key: str) -> str:
    if key in _env:
        return _env[key]
    if key == "SSH_USER":
        return os.environ.get("SSH_USER") or os.environ.get("USER", "")
    return os.environ.get(key, "")


def set(key: str, value: str) -> None:
    _env[key] = value


def reset() -> None:
    """Olvida los valores registrados (útil en tests)."""
    _env.clear()
