from rxcost_core.services.alerts import high_cost_alert, is_affordability_risk  # noqa: F401
from rxcost_core.services.dashboard import build_dashboard  # noqa: F401
from rxcost_core.services.payments import make_payment, summarize_payments  # noqa: F401
from rxcost_core.services.pipeline import record_prescription  # noqa: F401
from rxcost_core.services.projection import project  # noqa: F401
from rxcost_core.services.stores import Stores  # noqa: F401

__all__ = [
    "project",
    "high_cost_alert",
    "is_affordability_risk",
    "record_prescription",
    "make_payment",
    "summarize_payments",
    "build_dashboard",
    "Stores",
]
