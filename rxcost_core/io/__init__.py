from rxcost_core.io.prescriptions import load_prescriptions  # noqa: F401
from rxcost_core.io.config import (  # noqa: F401
    load_alert_policy,
    load_projection_config,
)
from rxcost_core.io.store import JsonFileStore, memory_stores  # noqa: F401

__all__ = ["load_prescriptions", "load_projection_config", "load_alert_policy", "JsonFileStore", "memory_stores"]
