from __future__ import annotations

from typing import Optional

from rxcost_core.domain.models import MONTH_NAMES, AlertPolicy, DashboardSummary, MonthlyCostPoint
from rxcost_core.services import alerts as alert_service
from rxcost_core.services.stores import Stores, UserId

RECENT_ALERTS = 5
CHART_MONTHS = 6


def build_dashboard(user_id: UserId, stores: Stores, policy: Optional[AlertPolicy] = None) -> DashboardSummary:
    projection = stores.predictions.latest(user_id)
    if projection is not None:
        trend = list(projection.monthly_breakdown)
        emi_breakdown = trend[:CHART_MONTHS]
        risk = alert_service.is_affordability_risk(projection.monthly_installment, policy)
    else:
        # empty chart placeholder
        trend = [MonthlyCostPoint(month=m, amount=0.0) for m in MONTH_NAMES[:CHART_MONTHS]]
        emi_breakdown = []
        risk = False

    return DashboardSummary(
        total_monthly_cost=float(stores.prescriptions.total_monthly_cost(user_id)),
        projection=projection,
        recent_alerts=stores.alerts.recent(user_id, RECENT_ALERTS),
        affordability_risk=risk,
        trend=trend,
        emi_breakdown=emi_breakdown,
        active_alerts=stores.alerts.unread_count(user_id),
    )
