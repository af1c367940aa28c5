from rxcost_core.domain.errors import InvalidInput, NoInstallmentDue  # noqa: F401
from rxcost_core.domain.models import (  # noqa: F401
    MONTH_NAMES,
    AlertPolicy,
    AlertRecord,
    DashboardSummary,
    MonthlyCostPoint,
    PaymentRecord,
    PaymentSummary,
    Prescription,
    PrescriptionOutcome,
    ProjectionConfig,
    ProjectionResult,
)

__all__ = [
    "MONTH_NAMES",
    "AlertPolicy",
    "AlertRecord",
    "DashboardSummary",
    "InvalidInput",
    "MonthlyCostPoint",
    "NoInstallmentDue",
    "PaymentRecord",
    "PaymentSummary",
    "Prescription",
    "PrescriptionOutcome",
    "ProjectionConfig",
    "ProjectionResult",
]
