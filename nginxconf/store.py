"""
Persistencia del estado de los recursos (state.yaml)

Lo usa la CLI como engine mínimo; el controller no escribe estado.
"""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from nginxconf.core.errors import ConfigError
from nginxconf.core.models import ResourceState
from nginxconf.core.runtime.resolver import state_root


STATE_FILE = "state.yaml"
STATE_VERSION = 1


class StateStore:
    """Estado por id (== path remoto) en un único archivo YAML"""

    def __init__(self, root: Optional[Path] = None):
        self.root = root or state_root()
        self.file = self.root / STATE_FILE
        self._resources: Optional[Dict[str, ResourceState]] = None

    def _load(self) -> Dict[str, ResourceState]:
        if self._resources is not None:
            return self._resources

        self._resources = {}
        if not self.file.exists():
            return self._resources

        try:
            with open(self.file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"No se pudo leer el estado {self.file}: {e}") from e

        for resource_id, raw in (data.get("resources") or {}).items():
            try:
                self._resources[resource_id] = ResourceState(**raw)
            except ValidationError as e:
                raise ConfigError(f"Estado corrupto para {resource_id}: {e}") from e
        return self._resources

    def _save(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        data = {
            "version": STATE_VERSION,
            "resources": {
                resource_id: state.model_dump()
                for resource_id, state in sorted(self._load().items())
            },
        }
        tmp = self.file.with_suffix(".yaml.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        tmp.replace(self.file)

    def get(self, resource_id: str) -> Optional[ResourceState]:
        return self._load().get(resource_id)

    def put(self, state: ResourceState) -> None:
        self._load()[state.id] = state
        self._save()

    def remove(self, resource_id: str) -> bool:
        resources = self._load()
        if resource_id not in resources:
            return False
        del resources[resource_id]
        self._save()
        return True

    def all(self) -> List[ResourceState]:
        return [state for _, state in sorted(self._load().items())]
