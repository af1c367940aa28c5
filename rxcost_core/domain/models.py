from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Dict, List, Optional, Tuple

from rxcost_core.domain.errors import InvalidInput


MONTH_NAMES: Tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

FREQUENCIES: Tuple[str, ...] = (
    "Once daily",
    "Twice daily",
    "Three times daily",
    "As needed",
    "Weekly",
    "Monthly",
)

DISEASE_TYPES: Tuple[str, ...] = (
    "Diabetes",
    "Hypertension",
    "Heart Disease",
    "Asthma",
    "Arthritis",
    "Mental Health",
    "Other",
)

ALERT_HIGH_COST = "high_cost"
ALERT_UPCOMING_PAYMENT = "upcoming_payment"

PAYMENT_COMPLETED = "completed"
PAYMENT_PENDING = "pending"
PAYMENT_FAILED = "failed"

PAYMENT_TYPE_EMI = "emi"
PAYMENT_TYPE_AUTOPAY = "autopay"

EMERGENCY_FUND_SHARE = 0.2


@dataclasses.dataclass(frozen=True)
class ProjectionConfig:
    growth_spread: float = 0.1
    seasonal_amplitude: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self):
        # both factors must stay positive so non-negative costs stay non-negative
        if not 0 <= self.growth_spread < 2:
            raise InvalidInput(f"growth_spread must be in [0, 2), got {self.growth_spread!r}")
        if not 0 <= self.seasonal_amplitude < 1:
            raise InvalidInput(f"seasonal_amplitude must be in [0, 1), got {self.seasonal_amplitude!r}")


@dataclasses.dataclass(frozen=True)
class AlertPolicy:
    high_cost_threshold: float = 500.0
    affordability_limit: float = 300.0


@dataclasses.dataclass(frozen=True)
class Prescription:
    medicine_name: str
    dosage: str
    frequency: str
    monthly_cost: float
    disease_type: str


@dataclasses.dataclass(frozen=True)
class MonthlyCostPoint:
    month: str
    amount: float

    def to_dict(self) -> Dict[str, object]:
        return {"month": self.month, "amount": self.amount}


@dataclasses.dataclass(frozen=True)
class ProjectionResult:
    annual_cost: float
    monthly_installment: float
    monthly_breakdown: Tuple[MonthlyCostPoint, ...]

    @property
    def emergency_fund(self) -> float:
        """Suggested reserve for unplanned medical spend."""
        return self.annual_cost * EMERGENCY_FUND_SHARE

    def to_timeseries(self) -> List[Tuple[str, float]]:
        return [(p.month, p.amount) for p in self.monthly_breakdown]

    def prediction_data(self) -> Dict[str, List[Dict[str, object]]]:
        """Breakdown in the shape the prediction store keeps as JSON."""
        return {"monthly_breakdown": [p.to_dict() for p in self.monthly_breakdown]}

    @classmethod
    def from_prediction(
        cls, annual_cost: float, monthly_emi: float, prediction_data: Dict[str, object]
    ) -> "ProjectionResult":
        items = prediction_data.get("monthly_breakdown") or []
        breakdown = tuple(
            MonthlyCostPoint(month=str(item["month"]), amount=float(item["amount"]))
            for item in items
        )
        return cls(
            annual_cost=float(annual_cost),
            monthly_installment=float(monthly_emi),
            monthly_breakdown=breakdown,
        )


@dataclasses.dataclass(frozen=True)
class AlertRecord:
    alert_type: str
    message: str
    is_read: bool = False
    created_at: Optional[dt.datetime] = None


@dataclasses.dataclass(frozen=True)
class PaymentRecord:
    amount: float
    payment_date: dt.datetime
    status: str = PAYMENT_COMPLETED
    payment_type: str = PAYMENT_TYPE_EMI


@dataclasses.dataclass
class PrescriptionOutcome:
    prescription: Prescription
    alert: Optional[AlertRecord]
    projection: ProjectionResult


@dataclasses.dataclass
class PaymentSummary:
    monthly_installment: float
    total_paid: float
    pending_count: int
    payments: List[PaymentRecord]


@dataclasses.dataclass
class DashboardSummary:
    total_monthly_cost: float
    projection: Optional[ProjectionResult]
    recent_alerts: List[AlertRecord]
    affordability_risk: bool
    trend: List[MonthlyCostPoint]
    emi_breakdown: List[MonthlyCostPoint]
    active_alerts: int = 0

    @property
    def annual_cost(self) -> float:
        return self.projection.annual_cost if self.projection else 0.0

    @property
    def monthly_installment(self) -> float:
        return self.projection.monthly_installment if self.projection else 0.0

    @property
    def emergency_fund(self) -> float:
        return self.projection.emergency_fund if self.projection else 0.0
