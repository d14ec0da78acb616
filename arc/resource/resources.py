"""
Contrato de recurso y colección ordenada de recursos.
"""

from typing import Iterator, List, Protocol

from arc.route import Request, Response


class Resource(Protocol):
    """Contrato mínimo de cualquier nodo del árbol."""

    def route(self, req: Request) -> Response:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...


class Resources:
    """
    Composite ordenado. El orden de inserción se fija al construir y no depende
    del estado: route_reverse_order() visita exactamente el inverso de
    route_in_order().
    """

    def __init__(self):
        self._children: List[Resource] = []

    def append(self, child: Resource) -> None:
        self._children.append(child)

    def get(self) -> List[Resource]:
        return list(self._children)

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._children))

    def __len__(self) -> int:
        return len(self._children)

    def route_in_order(self, req: Request) -> Response:
        for child in list(self._children):
            resp = child.route(req)
            if resp != Response.OK:
                return resp
        return Response.OK

    def route_reverse_order(self, req: Request) -> Response:
        for child in reversed(list(self._children)):
            resp = child.route(req)
            if resp != Response.OK:
                return resp
        return Response.OK

    def created(self) -> bool:
        """True si hay hijos y todos están creados."""
        if not self._children:
            return False
        return all(child.created() for child in self._children)

    def destroyed(self) -> bool:
        return all(child.destroyed() for child in self._children)
