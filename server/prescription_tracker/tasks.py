from __future__ import annotations

import logging

from celery import shared_task
from django.db import DatabaseError, transaction

from rxcost_core.domain.errors import NoInstallmentDue
from rxcost_core.domain.models import PAYMENT_TYPE_AUTOPAY
from rxcost_core.services import payments as payment_service

from .models import AutoPaySetting
from .stores import orm_stores

logger = logging.getLogger(__name__)


@shared_task
def process_autopay() -> int:
    """Pays the latest installment for every user with auto-pay on. Returns the number of payments made."""
    stores = orm_stores()
    paid = 0
    user_ids = AutoPaySetting.objects.filter(enabled=True).values_list("user_id", flat=True)
    for user_id in user_ids:
        try:
            with transaction.atomic():
                payment_service.make_payment(user_id, stores, payment_type=PAYMENT_TYPE_AUTOPAY)
        except NoInstallmentDue:
            logger.info("Auto-pay skipped for user %s: nothing due", user_id)
            continue
        except DatabaseError:
            logger.exception("Auto-pay failed for user %s", user_id)
            continue
        paid += 1
    return paid
