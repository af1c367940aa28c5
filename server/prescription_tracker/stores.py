from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from django.db.models import Sum

from rxcost_core.domain.models import AlertRecord, PaymentRecord, Prescription, ProjectionResult
from rxcost_core.services.stores import Stores

from . import models

CENTS = Decimal("0.01")


def _money(value: float) -> Decimal:
    return Decimal(str(value)).quantize(CENTS)


class OrmPrescriptionStore:
    def insert(self, user_id: int, prescription: Prescription) -> None:
        models.Prescription.objects.create(
            user_id=user_id,
            medicine_name=prescription.medicine_name,
            dosage=prescription.dosage,
            frequency=prescription.frequency,
            monthly_cost=_money(prescription.monthly_cost),
            disease_type=prescription.disease_type,
        )

    def total_monthly_cost(self, user_id: int) -> float:
        total = models.Prescription.objects.filter(user_id=user_id).aggregate(total=Sum("monthly_cost"))["total"]
        return float(total or 0)

    def list(self, user_id: int) -> List[Prescription]:
        return [
            Prescription(
                medicine_name=row.medicine_name,
                dosage=row.dosage,
                frequency=row.frequency,
                monthly_cost=float(row.monthly_cost),
                disease_type=row.disease_type,
            )
            for row in models.Prescription.objects.filter(user_id=user_id)
        ]


class OrmAlertStore:
    def insert(self, user_id: int, alert: AlertRecord) -> AlertRecord:
        row = models.Alert.objects.create(
            user_id=user_id,
            alert_type=alert.alert_type,
            message=alert.message,
            is_read=alert.is_read,
        )
        return AlertRecord(alert_type=row.alert_type, message=row.message, is_read=row.is_read, created_at=row.created_at)

    def unread_count(self, user_id: int) -> int:
        return models.Alert.objects.filter(user_id=user_id, is_read=False).count()

    def recent(self, user_id: int, limit: int = 5) -> List[AlertRecord]:
        return [
            AlertRecord(alert_type=a.alert_type, message=a.message, is_read=a.is_read, created_at=a.created_at)
            for a in models.Alert.objects.filter(user_id=user_id)[:limit]
        ]


class OrmPredictionStore:
    def insert(self, user_id: int, projection: ProjectionResult) -> None:
        models.CostPrediction.objects.create(
            user_id=user_id,
            annual_cost=projection.annual_cost,
            monthly_emi=projection.monthly_installment,
            prediction_data=projection.prediction_data(),
        )

    def latest(self, user_id: int) -> Optional[ProjectionResult]:
        row = models.CostPrediction.objects.filter(user_id=user_id).first()
        if row is None:
            return None
        return ProjectionResult.from_prediction(row.annual_cost, row.monthly_emi, row.prediction_data or {})


class OrmPaymentStore:
    def insert(self, user_id: int, payment: PaymentRecord) -> None:
        models.Payment.objects.create(
            user_id=user_id,
            amount=_money(payment.amount),
            payment_date=payment.payment_date,
            status=payment.status,
            payment_type=payment.payment_type,
        )

    def list(self, user_id: int) -> List[PaymentRecord]:
        return [
            PaymentRecord(
                amount=float(p.amount),
                payment_date=p.payment_date,
                status=p.status,
                payment_type=p.payment_type,
            )
            for p in models.Payment.objects.filter(user_id=user_id)
        ]


def orm_stores() -> Stores:
    return Stores(
        prescriptions=OrmPrescriptionStore(),
        alerts=OrmAlertStore(),
        predictions=OrmPredictionStore(),
        payments=OrmPaymentStore(),
    )
