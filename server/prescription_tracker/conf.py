from __future__ import annotations

from typing import Tuple

from django.conf import settings

from rxcost_core.domain.models import AlertPolicy, ProjectionConfig
from rxcost_core.io import config as config_io


def load_settings() -> Tuple[ProjectionConfig, AlertPolicy]:
    """Projection config and alert policy from RXCOST_CONFIG, or the defaults."""
    path = getattr(settings, "RXCOST_CONFIG", "")
    if not path:
        return ProjectionConfig(), AlertPolicy()
    return config_io.load_projection_config(path), config_io.load_alert_policy(path)
