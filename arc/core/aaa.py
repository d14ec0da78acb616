"""
Autorización, accounting y buffers de auditoría.

La política de autorización la instala la composición raíz con init(); el core
no conoce el formato del directorio de usuarios.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Protocol

from arc.core import env, msg
from arc.core.errors import ArcError, AuthorizationError

logger = logging.getLogger(__name__)


class Policy(Protocol):
    """Protocolo: decide si un usuario puede operar en un datacenter."""
    def allowed(self, datacenter: str, user: str) -> bool:
        ...


_policy: Optional[Policy] = None
_accounting: List[str] = []


def init(policy: Optional[Policy]) -> None:
    global _policy
    _policy = policy
    _accounting.clear()
    _audits.clear()


def authorized(req, scope: str, name: str) -> None:
    """
    Verifica que el usuario de la petición pueda operar sobre `scope` `name`.

    Raises:
        AuthorizationError: si la política lo deniega
    """
    if _policy is None:
        return
    user = req.user_id
    if not _policy.allowed(req.datacenter, user):
        raise AuthorizationError(
            f"User {user!r} is not authorized to {req.command} {scope} {name!r} in {req.datacenter}"
        )


# --- Accounting ---

def _username() -> str:
    user = env.lookup("USER")
    ssh_user = env.lookup("SSH_USER")
    if ssh_user and ssh_user != user:
        user += f"({ssh_user})"
    return user


def pre_accounting(args: List[str]) -> None:
    version = env.lookup("VERSION").split(" ")[0]
    _accounting.append(f"**{_username()} | {version} | {' '.join(args)}**")


def accounting(text: str) -> None:
    logger.info("Accounting: %s", text)
    _accounting.append(text)


def accounting_buffer() -> List[str]:
    return list(_accounting)


def post_accounting(result: int) -> None:
    """Vuelca el buffer de accounting al log; en fallo adjunta los errores."""
    report = "\n> ".join(_accounting)
    if result != 0:
        errors = msg.last_errors()
        report += "\n" + ("Too many errors, see log file" if len(errors) >= 5 else "\n".join(errors))
        report += "\n\n**Failure**"
    else:
        report += "\n\n**Success**"
    logger.info("%s", report[:7200])


# --- Audit ---

class AuditKind(str, Enum):
    """Categoría de una diferencia de auditoría"""
    DEPLOYED = "deployed"
    CONFIGURED = "configured"
    MISMATCHED = "mismatched"


_TITLES = {
    AuditKind.DEPLOYED: "Rogue {name}s",
    AuditKind.CONFIGURED: "Configured but not created",
    AuditKind.MISMATCHED: "Mismatches",
}


class Audit:
    """Buffer de una sesión de auditoría (p. ej. "Instance", "Dns Record")."""

    def __init__(self, name: str, deployed: bool = True, configured: bool = True, mismatched: bool = True):
        self.name = name
        self.enabled = {
            AuditKind.DEPLOYED: deployed,
            AuditKind.CONFIGURED: configured,
            AuditKind.MISMATCHED: mismatched,
        }
        self.buffers: Dict[AuditKind, List[str]] = {kind: [] for kind in AuditKind}

    def audit(self, kind: AuditKind, text: str) -> None:
        logger.debug("%s Audit of %s", self.name, text)
        self.buffers[kind].append(text)

    def clean(self) -> bool:
        return not any(self.buffers.values())

    def report(self) -> None:
        msg.info(f"{self.name} Audit")
        msg.indent_inc()
        for kind in AuditKind:
            if not self.enabled[kind]:
                continue
            msg.heading(_TITLES[kind].format(name=self.name))
            entries = self.buffers[kind]
            if not entries:
                msg.detail("No Differences Found")
            for entry in entries:
                msg.detail(entry)
        msg.indent_dec()


_audits: Dict[str, Audit] = {}


def new_audit(name: str, deployed: bool = True, configured: bool = True, mismatched: bool = True) -> Audit:
    if not name:
        raise ArcError("No name given for the Audit")
    audit = Audit(name, deployed, configured, mismatched)
    _audits[name] = audit
    return audit


def get_audit(name: str) -> Optional[Audit]:
    return _audits.get(name)


def post_audit() -> None:
    """Imprime los buffers de todas las auditorías de la ejecución."""
    for audit in _audits.values():
        audit.report()
