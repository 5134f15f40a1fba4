"""Bucket accumulators, zero-filled date series and the monthly collapse."""

from collections.abc import Iterable
from dataclasses import dataclass, fields
from datetime import datetime, timezone

from leadreports.models.lead import DeviceType
from leadreports.services.outcomes import OutcomeCategory
from leadreports.services.ranges import ReportRange
from leadreports.services.records import LeadRecord

OUTCOME_FIELDS: dict[OutcomeCategory, str] = {
    OutcomeCategory.pending: "pending",
    OutcomeCategory.rejected: "rejected",
    OutcomeCategory.in_progress: "in_progress",
    OutcomeCategory.completed: "completed",
    OutcomeCategory.contract_completed: "contract_completed",
    OutcomeCategory.needs_followup: "needs_followup",
    OutcomeCategory.other: "other",
}

DEVICE_FIELDS: dict[str, str] = {
    DeviceType.pc.value: "pc_count",
    DeviceType.mobile.value: "mobile_count",
    DeviceType.tablet.value: "tablet_count",
}


@dataclass
class Bucket:
    key: str
    total: int = 0
    pending: int = 0
    rejected: int = 0
    in_progress: int = 0
    completed: int = 0
    contract_completed: int = 0
    needs_followup: int = 0
    other: int = 0
    payment_amount: float = 0.0
    payment_count: int = 0
    # Informational only; never used to decide whether a lead is counted.
    pc_count: int = 0
    mobile_count: int = 0
    tablet_count: int = 0
    unknown_device_count: int = 0

    def count(self, outcome: OutcomeCategory) -> int:
        return getattr(self, OUTCOME_FIELDS[outcome])

    def outcome_sum(self) -> int:
        return sum(self.count(outcome) for outcome in OutcomeCategory)

    def add_lead(self, outcome: OutcomeCategory, device_type: DeviceType | str | None = None) -> None:
        self.total += 1
        name = OUTCOME_FIELDS[outcome]
        setattr(self, name, getattr(self, name) + 1)
        device_field = DEVICE_FIELDS.get(_device_value(device_type), "unknown_device_count")
        setattr(self, device_field, getattr(self, device_field) + 1)

    def add_payment(self, amount: float) -> None:
        self.payment_amount += amount
        self.payment_count += 1

    def absorb(self, other: "Bucket") -> None:
        """Add every counter of ``other`` into this bucket (keys are not compared)."""
        for f in fields(self):
            if f.name != "key":
                setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))


def _device_value(device_type: DeviceType | str | None) -> str:
    if device_type is None:
        return DeviceType.unknown.value
    if isinstance(device_type, DeviceType):
        return device_type.value
    return str(device_type).lower()


def date_key(moment: datetime) -> str:
    # Stored timestamps are naive UTC; aware ones are normalized to UTC first.
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def month_key(day_key: str) -> str:
    return day_key[:7]


def initial_date_keys(window: ReportRange, leads: Iterable[LeadRecord]) -> list[str]:
    """Date keys every series of a report is pre-populated with.

    Bounded windows get every calendar day of the month whether or not a lead
    falls on it. All-time reports only get the dates actually observed.
    """
    if window.bounded:
        return [day.isoformat() for day in window.days()]
    return sorted({date_key(lead.created_at) for lead in leads})


def zero_series(keys: Iterable[str]) -> dict[str, Bucket]:
    return {key: Bucket(key=key) for key in keys}


def collapse_monthly(series: Iterable[Bucket]) -> list[Bucket]:
    months: dict[str, Bucket] = {}
    for bucket in series:
        key = month_key(bucket.key)
        target = months.get(key)
        if target is None:
            target = months[key] = Bucket(key=key)
        target.absorb(bucket)
    return [months[key] for key in sorted(months)]
