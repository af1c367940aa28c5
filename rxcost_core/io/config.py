from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from rxcost_core.domain.models import AlertPolicy, ProjectionConfig


def load_projection_config(path: str | Path) -> ProjectionConfig:
    data = _read_json(path)
    return projection_config_from_dict(data.get("projection", data))


def load_alert_policy(path: str | Path) -> AlertPolicy:
    data = _read_json(path)
    return alert_policy_from_dict(data.get("alerts", data))


def projection_config_from_dict(data: Dict[str, Any]) -> ProjectionConfig:
    return ProjectionConfig(
        growth_spread=float(data.get("growth_spread", 0.1)),
        seasonal_amplitude=float(data.get("seasonal_amplitude", 0.05)),
        seed=data.get("seed"),
    )


def alert_policy_from_dict(data: Dict[str, Any]) -> AlertPolicy:
    return AlertPolicy(
        high_cost_threshold=float(data.get("high_cost_threshold", 500.0)),
        affordability_limit=float(data.get("affordability_limit", 300.0)),
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
