from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from rxcost_core.domain.errors import NoInstallmentDue
from rxcost_core.domain.models import (
    PAYMENT_COMPLETED,
    PAYMENT_PENDING,
    PAYMENT_TYPE_EMI,
    PaymentRecord,
    PaymentSummary,
)
from rxcost_core.services import alerts as alert_service
from rxcost_core.services.stores import Stores, UserId

logger = logging.getLogger(__name__)


def make_payment(
    user_id: UserId,
    stores: Stores,
    payment_type: str = PAYMENT_TYPE_EMI,
    now: Optional[dt.datetime] = None,
) -> PaymentRecord:
    """
    Simulates paying the latest projected installment and records a confirmation alert.
    """
    latest = stores.predictions.latest(user_id)
    if latest is None or latest.monthly_installment <= 0:
        raise NoInstallmentDue(f"No installment due for user {user_id}")

    payment = PaymentRecord(
        amount=round(latest.monthly_installment, 2),
        payment_date=now or dt.datetime.now(dt.timezone.utc),
        status=PAYMENT_COMPLETED,
        payment_type=payment_type,
    )
    stores.payments.insert(user_id, payment)
    stores.alerts.insert(user_id, alert_service.payment_alert(payment.amount))
    logger.info("Recorded %s payment of %.2f for user %s", payment_type, payment.amount, user_id)
    return payment


def summarize_payments(user_id: UserId, stores: Stores) -> PaymentSummary:
    payments = stores.payments.list(user_id)
    latest = stores.predictions.latest(user_id)
    return PaymentSummary(
        monthly_installment=latest.monthly_installment if latest else 0.0,
        total_paid=sum(float(p.amount) for p in payments if p.status == PAYMENT_COMPLETED),
        pending_count=sum(1 for p in payments if p.status == PAYMENT_PENDING),
        payments=payments,
    )
