"""Single-pass fold of leads and payments into date, department and staff buckets.

Every lead lands in exactly three places: the top-level date bucket, its
department's nested date bucket and its staff member's nested date bucket
(the per-dimension totals move in lockstep with the nested buckets). Payments
follow their parent lead into the same three places.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from leadreports.services.buckets import Bucket, collapse_monthly, date_key, zero_series
from leadreports.services.outcomes import classify_status
from leadreports.services.records import LeadRecord, PaymentRecord
from leadreports.services.staff import StaffDirectory

logger = logging.getLogger(__name__)


@dataclass
class DimensionBucket:
    key: str
    label: str
    department: str
    totals: Bucket
    series: dict[str, Bucket] = field(default_factory=dict)


@dataclass
class DimensionRollup:
    key: str
    label: str
    department: str
    totals: Bucket
    series: list[Bucket]


@dataclass
class Rollups:
    date_series: list[Bucket]
    department_series: list[DimensionRollup]
    staff_series: list[DimensionRollup]
    skipped_payments: int = 0


@dataclass
class _Placement:
    day: Bucket
    department: DimensionBucket
    staff: DimensionBucket
    key: str


class DimensionalAggregator:
    def __init__(self, directory: StaffDirectory, date_keys: Iterable[str]):
        self.directory = directory
        self.date_keys = list(date_keys)
        self.dates = zero_series(self.date_keys)
        self.departments: dict[str, DimensionBucket] = {}
        self.staff: dict[str, DimensionBucket] = {}
        self.skipped_payments = 0
        self._placements: dict[int, _Placement] = {}

    def _dimension(self, table: dict[str, DimensionBucket], key: str, label: str, department: str) -> DimensionBucket:
        bucket = table.get(key)
        if bucket is None:
            # Created on first use, but always with the full date key set so
            # every dimension renders the same rows as the top-level table.
            bucket = DimensionBucket(
                key=key,
                label=label,
                department=department,
                totals=Bucket(key=key),
                series=zero_series(self.date_keys),
            )
            table[key] = bucket
        return bucket

    def add_lead(self, lead: LeadRecord) -> None:
        key = date_key(lead.created_at)
        day = self.dates.get(key)
        if day is None:
            raise ValueError(f"lead {lead.id} is dated {key}, outside the report's date range")

        ref = self.directory.resolve(lead.assignee_id)
        outcome = classify_status(lead.status)
        department = self._dimension(self.departments, ref.department, ref.department, ref.department)
        staff = self._dimension(self.staff, ref.staff_key, ref.display_name, ref.department)

        day.add_lead(outcome, lead.device_type)
        for dimension in (department, staff):
            dimension.totals.add_lead(outcome, lead.device_type)
            dimension.series[key].add_lead(outcome, lead.device_type)

        self._placements[lead.id] = _Placement(day=day, department=department, staff=staff, key=key)

    def add_payment(self, payment: PaymentRecord) -> bool:
        placement = self._placements.get(payment.lead_id)
        if placement is None:
            # Lead is outside this report's window or filters.
            self.skipped_payments += 1
            logger.debug("Skipping payment for lead %s not in the report", payment.lead_id)
            return False

        placement.day.add_payment(payment.amount)
        for dimension in (placement.department, placement.staff):
            dimension.totals.add_payment(payment.amount)
            dimension.series[placement.key].add_payment(payment.amount)
        return True

    def fold(self, leads: Iterable[LeadRecord], payments: Iterable[PaymentRecord]) -> "DimensionalAggregator":
        for lead in leads:
            self.add_lead(lead)
        for payment in payments:
            self.add_payment(payment)
        return self

    def rollups(self, monthly: bool = False) -> Rollups:
        def finish(series: dict[str, Bucket]) -> list[Bucket]:
            ordered = [series[key] for key in sorted(series)]
            return collapse_monthly(ordered) if monthly else ordered

        def rank(table: dict[str, DimensionBucket]) -> list[DimensionRollup]:
            ranked = sorted(table.values(), key=lambda d: (-d.totals.total, d.key))
            return [
                DimensionRollup(key=d.key, label=d.label, department=d.department, totals=d.totals, series=finish(d.series))
                for d in ranked
            ]

        return Rollups(
            date_series=finish(self.dates),
            department_series=rank(self.departments),
            staff_series=rank(self.staff),
            skipped_payments=self.skipped_payments,
        )
