from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from rxcost_core.domain.models import AlertRecord, PaymentRecord, Prescription, ProjectionResult
from rxcost_core.services.stores import Stores, UserId

logger = logging.getLogger(__name__)

TABLES = ("prescriptions", "alerts", "predictions", "payments")


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TableState:
    """
    Per-user rows kept as plain dicts so the whole state dumps straight to JSON.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, on_change: Optional[Callable[[], None]] = None):
        self.data: Dict[str, Any] = data if data is not None else {"users": {}}
        self.data.setdefault("users", {})
        self._on_change = on_change

    def rows(self, table: str, user_id: UserId) -> List[Dict[str, Any]]:
        user = self.data["users"].setdefault(str(user_id), {})
        return user.setdefault(table, [])

    def append(self, table: str, user_id: UserId, row: Dict[str, Any]) -> None:
        self.rows(table, user_id).append(row)
        if self._on_change is not None:
            self._on_change()


class MemoryPrescriptionStore:
    def __init__(self, state: TableState):
        self.state = state

    def insert(self, user_id: UserId, prescription: Prescription) -> None:
        self.state.append("prescriptions", user_id, dataclasses.asdict(prescription))

    def total_monthly_cost(self, user_id: UserId) -> float:
        return sum(float(r["monthly_cost"]) for r in self.state.rows("prescriptions", user_id))

    def list(self, user_id: UserId) -> List[Prescription]:
        return [Prescription(**r) for r in self.state.rows("prescriptions", user_id)]


class MemoryAlertStore:
    def __init__(self, state: TableState):
        self.state = state

    def insert(self, user_id: UserId, alert: AlertRecord) -> AlertRecord:
        saved = dataclasses.replace(alert, created_at=alert.created_at or _now())
        self.state.append(
            "alerts",
            user_id,
            {
                "alert_type": saved.alert_type,
                "message": saved.message,
                "is_read": saved.is_read,
                "created_at": saved.created_at.isoformat(),
            },
        )
        return saved

    def unread_count(self, user_id: UserId) -> int:
        return sum(1 for r in self.state.rows("alerts", user_id) if not r.get("is_read", False))

    def recent(self, user_id: UserId, limit: int = 5) -> List[AlertRecord]:
        rows = self.state.rows("alerts", user_id)[::-1][:limit]
        return [
            AlertRecord(
                alert_type=r["alert_type"],
                message=r["message"],
                is_read=bool(r.get("is_read", False)),
                created_at=dt.datetime.fromisoformat(r["created_at"]),
            )
            for r in rows
        ]


class MemoryPredictionStore:
    def __init__(self, state: TableState):
        self.state = state

    def insert(self, user_id: UserId, projection: ProjectionResult) -> None:
        self.state.append(
            "predictions",
            user_id,
            {
                "annual_cost": projection.annual_cost,
                "monthly_emi": projection.monthly_installment,
                "prediction_data": projection.prediction_data(),
                "created_at": _now().isoformat(),
            },
        )

    def latest(self, user_id: UserId) -> Optional[ProjectionResult]:
        rows = self.state.rows("predictions", user_id)
        if not rows:
            return None
        r = rows[-1]
        return ProjectionResult.from_prediction(r["annual_cost"], r["monthly_emi"], r["prediction_data"])


class MemoryPaymentStore:
    def __init__(self, state: TableState):
        self.state = state

    def insert(self, user_id: UserId, payment: PaymentRecord) -> None:
        self.state.append(
            "payments",
            user_id,
            {
                "amount": payment.amount,
                "payment_date": payment.payment_date.isoformat(),
                "status": payment.status,
                "payment_type": payment.payment_type,
            },
        )

    def list(self, user_id: UserId) -> List[PaymentRecord]:
        return [
            PaymentRecord(
                amount=float(r["amount"]),
                payment_date=dt.datetime.fromisoformat(r["payment_date"]),
                status=r["status"],
                payment_type=r["payment_type"],
            )
            for r in self.state.rows("payments", user_id)[::-1]
        ]


def memory_stores(state: Optional[TableState] = None) -> Stores:
    state = state or TableState()
    return Stores(
        prescriptions=MemoryPrescriptionStore(state),
        alerts=MemoryAlertStore(state),
        predictions=MemoryPredictionStore(state),
        payments=MemoryPaymentStore(state),
    )


class JsonFileStore:
    """
    Stores backed by a single JSON file, rewritten after every insert.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.state = TableState(self._load(), on_change=self.save)
        self.stores = memory_stores(self.state)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"users": {}}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Store file {self.path} is not valid JSON: {exc}") from exc

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.state.data, indent=2), encoding="utf-8")
        logger.debug("Saved store to %s", self.path)
