"""
Contratos del árbol de recursos: Resource, Resources, el driver de ciclo de
vida y las interfaces de provider.
"""

from arc.resource.lifecycle import Lifecycle, VERBS
from arc.resource.resources import Resource, Resources

__all__ = ["Lifecycle", "VERBS", "Resource", "Resources"]
