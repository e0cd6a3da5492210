"""Domain models for financial and calendar reports."""

from dataclasses import dataclass
from datetime import date

from photoflow.domain.models import PaymentStatus


@dataclass(frozen=True)
class RevenueRow:
    """Per-project financial line."""

    project_id: str
    client_name: str
    date: date
    income: float
    expenses: float
    profit: float
    payment_status: PaymentStatus


@dataclass(frozen=True)
class RevenueSummary:
    """Totals across all of an owner's projects."""

    total_income: float
    total_expenses: float
    net_profit: float
    rows: list[RevenueRow]

    @property
    def project_count(self) -> int:
        return len(self.rows)
