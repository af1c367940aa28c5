from __future__ import annotations

import dataclasses
from typing import Hashable, List, Optional, Protocol

from rxcost_core.domain.models import AlertRecord, PaymentRecord, Prescription, ProjectionResult

UserId = Hashable


class PrescriptionStore(Protocol):
    def insert(self, user_id: UserId, prescription: Prescription) -> None: ...

    def total_monthly_cost(self, user_id: UserId) -> float: ...

    def list(self, user_id: UserId) -> List[Prescription]: ...


class AlertStore(Protocol):
    def insert(self, user_id: UserId, alert: AlertRecord) -> AlertRecord:
        """Saves the alert and returns it as stored, with its creation time."""
        ...

    def recent(self, user_id: UserId, limit: int = 5) -> List[AlertRecord]: ...

    def unread_count(self, user_id: UserId) -> int: ...


class PredictionStore(Protocol):
    def insert(self, user_id: UserId, projection: ProjectionResult) -> None: ...

    def latest(self, user_id: UserId) -> Optional[ProjectionResult]: ...


class PaymentStore(Protocol):
    def insert(self, user_id: UserId, payment: PaymentRecord) -> None: ...

    def list(self, user_id: UserId) -> List[PaymentRecord]:
        """Payments for the user, newest first."""
        ...


@dataclasses.dataclass
class Stores:
    prescriptions: PrescriptionStore
    alerts: AlertStore
    predictions: PredictionStore
    payments: PaymentStore
