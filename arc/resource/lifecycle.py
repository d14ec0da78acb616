"""
Driver genérico del ciclo de vida (create, destroy, provision, start, stop,
restart, replace).

Cada verbo ejecuta pre_<verbo>, <verbo> y post_<verbo> sobre el objeto más
derivado; las subclases solo sobrescriben los hooks que necesitan.
"""

from typing import Dict, Tuple

from arc.core import aaa, msg
from arc.route import Command, Request, Response

# verbo -> (sustantivo, participio)
VERBS: Dict[Command, Tuple[str, str]] = {
    Command.CREATE: ("Creation", "Created"),
    Command.DESTROY: ("Destruction", "Destroyed"),
    Command.PROVISION: ("Provision", "Provisioned"),
    Command.START: ("Start", "Started"),
    Command.STOP: ("Stop", "Stopped"),
    Command.RESTART: ("Restart", "Restarted"),
    Command.REPLACE: ("Replace", "Replaced"),
}

REVERSE = (Command.DESTROY, Command.STOP)


class Lifecycle:
    """
    Mixin del envelope común:

        info "<Kind> <Sustantivo>: <name>"
        si el estado lo indica: detail de salto y OK
        pre / verbo / post (se detiene en el primer no-OK)
        detail "<Kind> <Participio>: <name>" y accounting

    Las clases que lo usan deben exponer `name`, `created()`, `destroyed()` y,
    si el verbo por defecto se usa, `route_in_order` / `route_reverse_order`.
    """

    kind = "Resource"
    # Flag que limita la operación al propio recurso (p. ej. "clusteronly")
    scope_flag = ""

    def lifecycle(self, req: Request) -> Response:
        noun, past = VERBS[req.command]
        msg.info(f"{self.kind} {noun}: {self.name}")

        skip = self.skip_message(req)
        if skip:
            msg.detail(skip)
            return Response.OK

        verb = str(req.command)
        for hook in (f"pre_{verb}", verb, f"post_{verb}"):
            resp = getattr(self, hook)(req)
            if resp != Response.OK:
                return resp

        msg.detail(self.done_message(past))
        aaa.accounting(f"{self.kind} {past.lower()}: {self.name}")
        return Response.OK

    def skip_message(self, req: Request) -> str:
        """Mensaje de salto según el estado; vacío para continuar."""
        if req.command is Command.CREATE:
            if self.created() and not self.scoped(req):
                return f"{self.kind} exists, skipping..."
            return ""
        if self.destroyed():
            return f"{self.kind} does not exist, skipping..."
        return ""

    def done_message(self, past: str) -> str:
        return f"{self.kind} {past}: {self.name}"

    def scoped(self, req: Request) -> bool:
        return bool(self.scope_flag) and req.flag(self.scope_flag)

    def route_children(self, req: Request) -> Response:
        """Verbo por defecto: delega en los hijos salvo con el flag de ámbito."""
        if self.scoped(req):
            return Response.OK
        if req.command in REVERSE:
            return self.route_reverse_order(req)
        return self.route_in_order(req)

    def _ok(self, req: Request) -> Response:
        return Response.OK

    def _children(self, req: Request) -> Response:
        return self.route_children(req)

    pre_create = post_create = _ok
    pre_destroy = post_destroy = _ok
    pre_provision = post_provision = _ok
    pre_start = post_start = _ok
    pre_stop = post_stop = _ok
    pre_restart = post_restart = _ok
    pre_replace = post_replace = _ok

    create = destroy = provision = start = stop = restart = replace = _children
