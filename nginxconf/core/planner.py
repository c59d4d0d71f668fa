"""
Planificación: decide qué operación aplicar sin ejecutarla.

Lógica pura: entrada = spec deseado + estado actual; salida = acción.
La ejecución la hace el controller del provider.
"""

from enum import Enum
from typing import List, Optional

from nginxconf.core.models import DesiredSpec, ResourceState
from nginxconf.core.runtime.state import StateDiff, detect_drift


class Action(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    NOOP = "noop"


def plan(spec: DesiredSpec, state: Optional[ResourceState]) -> Action:
    """
    Acción necesaria para llevar `state` a `spec`.

    El estado se identifica por `path`, así que cambiar `path` declara otro
    recurso (sin estado: CREATE); el .conf anterior se elimina con destroy.
    Un `content` distinto se aplica con Update; los campos estructurados no
    generan acción.
    """
    if state is None:
        return Action.CREATE
    diffs = detect_drift(spec, state)
    if any(d.field == "content" for d in diffs):
        return Action.UPDATE
    return Action.NOOP


def plan_from_diffs(diffs: List[StateDiff]) -> List[str]:
    """
    Convierte una lista de StateDiff en acciones legibles (para mostrar en CLI).
    No ejecuta nada.
    """
    actions: List[str] = []
    for d in diffs:
        if d.field == "path" and d.actual == "missing":
            actions.append(f"Crear {d.resource_id}")
        elif d.field == "content":
            actions.append(f"Actualizar {d.resource_id}.content ({_size(d.actual)} → {_size(d.desired)})")
        elif d.desired != d.actual:
            actions.append(f"Actualizar {d.resource_id}.{d.field}: {d.actual} → {d.desired}")
    return actions


def _size(value) -> str:
    return f"{len(value or '')} bytes"
