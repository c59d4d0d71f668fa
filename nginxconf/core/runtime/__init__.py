"""
Runtime: resolución de rutas de estado y detección de drift.
"""

from nginxconf.core.runtime.resolver import state_root, config_path
from nginxconf.core.runtime.state import StateDiff, ResourceStatus, detect_drift, classify

__all__ = ["state_root", "config_path", "StateDiff", "ResourceStatus", "detect_drift", "classify"]
