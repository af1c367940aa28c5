from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from rxcost_core.domain.errors import InvalidInput
from rxcost_core.domain.models import (
    DISEASE_TYPES,
    FREQUENCIES,
    AlertPolicy,
    Prescription,
    PrescriptionOutcome,
    ProjectionConfig,
)
from rxcost_core.services import alerts as alert_service
from rxcost_core.services import projection as projection_service
from rxcost_core.services.stores import Stores, UserId

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("medicine_name", "dosage", "frequency", "disease_type")
MAX_MONTHLY_COST = 99_999_999.99


def _match_choice(value: str, choices, field: str) -> str:
    for choice in choices:
        if value.strip().lower() == choice.lower():
            return choice
    raise InvalidInput(f"Prescription {field} must be one of: {', '.join(choices)}")


def validate_prescription(prescription: Prescription) -> Prescription:
    """
    Checks required fields and the fixed frequency/disease lists, and rounds the cost to cents
    so the alert check sees the same value the store keeps.
    """
    for field in REQUIRED_FIELDS:
        if not str(getattr(prescription, field) or "").strip():
            raise InvalidInput(f"Prescription {field} is required")
    cost = round(projection_service.validate_cost(prescription.monthly_cost), 2)
    if cost > MAX_MONTHLY_COST:
        raise InvalidInput(f"Monthly cost must be at most {MAX_MONTHLY_COST:,.2f}, got {cost!r}")
    return dataclasses.replace(
        prescription,
        medicine_name=prescription.medicine_name.strip(),
        dosage=prescription.dosage.strip(),
        frequency=_match_choice(prescription.frequency, FREQUENCIES, "frequency"),
        monthly_cost=cost,
        disease_type=_match_choice(prescription.disease_type, DISEASE_TYPES, "disease_type"),
    )


def record_prescription(
    user_id: UserId,
    prescription: Prescription,
    stores: Stores,
    config: Optional[ProjectionConfig] = None,
    policy: Optional[AlertPolicy] = None,
) -> PrescriptionOutcome:
    """
    Runs the add-prescription flow end to end:
    insert -> high-cost alert -> re-aggregate the user's monthly cost -> project -> persist prediction.
    Store failures propagate to the caller.
    """
    prescription = validate_prescription(prescription)
    stores.prescriptions.insert(user_id, prescription)
    logger.info("Stored prescription %s for user %s", prescription.medicine_name, user_id)

    alert = alert_service.high_cost_alert(prescription, policy)
    if alert is not None:
        alert = stores.alerts.insert(user_id, alert)
        logger.info("High cost alert raised for user %s: %s", user_id, alert.message)

    total = stores.prescriptions.total_monthly_cost(user_id)
    result = projection_service.project(total, config)
    stores.predictions.insert(user_id, result)
    logger.debug(
        "Projected annual cost %.2f (installment %.2f) from monthly total %.2f",
        result.annual_cost,
        result.monthly_installment,
        total,
    )

    return PrescriptionOutcome(prescription=prescription, alert=alert, projection=result)
