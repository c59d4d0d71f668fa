"""
Estado del recurso: drift y clasificación.

Lógica pura; el contenido real lo obtiene el controller con Read.
"""

from enum import Enum
from typing import Any, List, Optional

from nginxconf.core.models import DesiredSpec, ResourceState


class ResourceStatus(str, Enum):
    """Estados de la máquina de reconciliación"""
    ABSENT = "absent"
    CREATED = "created"
    SYNCED = "synced"
    DRIFTED = "drifted"
    UPDATED = "updated"


class StateDiff:
    """Diferencia entre estado deseado y real."""
    def __init__(
        self,
        resource_id: str,
        field: str,
        desired: Any,
        actual: Any,
        severity: str = "warning"
    ):
        self.resource_id = resource_id
        self.field = field
        self.desired = desired
        self.actual = actual
        self.severity = severity  # "error", "warning", "info"

    def __repr__(self) -> str:
        return f"StateDiff({self.resource_id!r}, {self.field!r}, severity={self.severity!r})"


def detect_drift(spec: DesiredSpec, state: Optional[ResourceState]) -> List[StateDiff]:
    """
    Detecta drift entre el spec y el último Read del mismo path.

    Solo se compara `content`: server_name, listen_port y root se usan
    únicamente en Create y no se reconcilian después.
    """
    if state is None:
        return [StateDiff(spec.path, "path", "exists", "missing", "error")]

    diffs: List[StateDiff] = []
    if spec.content is not None and spec.content != state.content:
        diffs.append(StateDiff(state.id, "content", spec.content, state.content, "warning"))
    return diffs


def classify(spec: DesiredSpec, state: Optional[ResourceState]) -> ResourceStatus:
    """Ubica el recurso en la máquina de estados (ABSENT, SYNCED o DRIFTED)."""
    if state is None:
        return ResourceStatus.ABSENT
    if detect_drift(spec, state):
        return ResourceStatus.DRIFTED
    return ResourceStatus.SYNCED
