from __future__ import annotations

from typing import Optional

from rxcost_core.domain.models import (
    ALERT_HIGH_COST,
    ALERT_UPCOMING_PAYMENT,
    AlertPolicy,
    AlertRecord,
    Prescription,
)


def _format_cost(cost: float) -> str:
    return f"{cost:.0f}" if float(cost).is_integer() else f"{cost:.2f}"


def high_cost_alert(prescription: Prescription, policy: Optional[AlertPolicy] = None) -> Optional[AlertRecord]:
    """One high_cost alert when the monthly cost is strictly above the threshold."""
    policy = policy or AlertPolicy()
    if prescription.monthly_cost <= policy.high_cost_threshold:
        return None
    return AlertRecord(
        alert_type=ALERT_HIGH_COST,
        message=(
            f"High cost prescription added: {prescription.medicine_name} - "
            f"${_format_cost(prescription.monthly_cost)}/month"
        ),
    )


def payment_alert(amount: float) -> AlertRecord:
    return AlertRecord(
        alert_type=ALERT_UPCOMING_PAYMENT,
        message=f"Payment of ${amount:.2f} processed successfully",
    )


def is_affordability_risk(monthly_installment: float, policy: Optional[AlertPolicy] = None) -> bool:
    policy = policy or AlertPolicy()
    return monthly_installment > policy.affordability_limit
