"""Input rows for the reporting engine and the record store that supplies them.

The engine only ever sees the frozen dataclasses defined here. ``RecordFetcher``
is the seam to the store; ``SqlRecordFetcher`` is the implementation backed by
the service's own SQLAlchemy models.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadreports.core.config import get_settings
from leadreports.core.errors import RecordFetchError
from leadreports.models.lead import DeviceType, Lead
from leadreports.models.payment import LeadPayment
from leadreports.models.user import User
from leadreports.services.ranges import ReportRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeadRecord:
    id: int
    created_at: datetime
    status: str | None = None
    assignee_id: int | None = None
    device_type: DeviceType | None = DeviceType.unknown


@dataclass(frozen=True)
class PaymentRecord:
    lead_id: int
    amount: float


@dataclass(frozen=True)
class StaffMember:
    id: int
    display_name: str
    department: str | None = None


@dataclass(frozen=True)
class ReportFilters:
    department: str | None = None
    assignee_id: int | None = None


class RecordFetcher(Protocol):
    def fetch_leads(self, company_id: int, window: ReportRange, filters: ReportFilters) -> list[LeadRecord]: ...

    def fetch_payments(self, company_id: int, window: ReportRange) -> list[PaymentRecord]: ...

    def fetch_roster(self, company_id: int) -> list[StaffMember]: ...


class SqlRecordFetcher:
    def __init__(self, db: Session):
        self.db = db

    def fetch_leads(self, company_id: int, window: ReportRange, filters: ReportFilters) -> list[LeadRecord]:
        query = self.db.query(Lead).filter(Lead.company_id == company_id)
        if window.bounded:
            query = query.filter(Lead.created_at >= window.start, Lead.created_at < window.end)
        if filters.assignee_id is not None:
            query = query.filter(Lead.assigned_to == filters.assignee_id)
        if filters.department:
            query = query.outerjoin(User, Lead.assigned_to == User.id)
            if filters.department == get_settings().UNASSIGNED_LABEL:
                # Blank departments resolve to the unassigned label in StaffDirectory too.
                query = query.filter(
                    or_(Lead.assigned_to.is_(None), User.department.is_(None), User.department == "")
                )
            else:
                query = query.filter(User.department == filters.department)

        try:
            rows = query.order_by(Lead.created_at.asc()).all()
        except SQLAlchemyError as exc:
            logger.exception("Lead query failed for company %s", company_id)
            raise RecordFetchError("leads", company_id) from exc

        return [
            LeadRecord(
                id=row.id,
                created_at=row.created_at,
                status=row.status,
                assignee_id=row.assigned_to,
                device_type=row.device_type,
            )
            for row in rows
        ]

    def fetch_payments(self, company_id: int, window: ReportRange) -> list[PaymentRecord]:
        # Payments are dated by their lead, so the window applies to Lead.created_at.
        query = (
            self.db.query(LeadPayment.lead_id, LeadPayment.amount)
            .join(Lead, LeadPayment.lead_id == Lead.id)
            .filter(LeadPayment.company_id == company_id)
        )
        if window.bounded:
            query = query.filter(Lead.created_at >= window.start, Lead.created_at < window.end)

        try:
            rows = query.all()
        except SQLAlchemyError as exc:
            logger.exception("Payment query failed for company %s", company_id)
            raise RecordFetchError("payments", company_id) from exc

        return [PaymentRecord(lead_id=lead_id, amount=float(amount or 0)) for lead_id, amount in rows]

    def fetch_roster(self, company_id: int) -> list[StaffMember]:
        try:
            rows = self.db.query(User).filter(User.company_id == company_id).order_by(User.full_name.asc()).all()
        except SQLAlchemyError as exc:
            logger.exception("Roster query failed for company %s", company_id)
            raise RecordFetchError("roster", company_id) from exc

        return [StaffMember(id=row.id, display_name=row.full_name, department=row.department) for row in rows]
