from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from leadreports.services.outcomes import COMPLETED_OUTCOMES, OutcomeCategory, classify_status
from leadreports.services.records import LeadRecord


@dataclass(frozen=True)
class ReportSummary:
    total_db: int
    completed: int
    contract_completed: int
    conversion_rate: str


def conversion_rate(completed: int, total: int) -> str:
    if not total:
        return "0"
    # Ties round up, matching how the dashboard formats percentages.
    rate = Decimal(completed * 100) / Decimal(total)
    return str(rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def summarize(leads: Iterable[LeadRecord]) -> ReportSummary:
    # Computed from the lead rows, not the buckets, so the two can be compared.
    total = completed = contract_completed = 0
    for lead in leads:
        total += 1
        outcome = classify_status(lead.status)
        completed += outcome in COMPLETED_OUTCOMES
        contract_completed += outcome == OutcomeCategory.contract_completed
    return ReportSummary(
        total_db=total,
        completed=completed,
        contract_completed=contract_completed,
        conversion_rate=conversion_rate(completed, total),
    )
