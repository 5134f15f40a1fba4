"""Pytest configuration shared across the suite."""

import os
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leadreports.core.database import Base
from leadreports.models import DeviceType, Lead, LeadPayment, User
from leadreports.services.records import LeadRecord, PaymentRecord, ReportFilters, StaffMember


class StaticFetcher:
    """In-memory record store that applies the window the way the database does."""

    def __init__(self, leads=(), payments=(), roster=()):
        self.leads = list(leads)
        self.payments = list(payments)
        self.roster = list(roster)
        self.calls: list[tuple] = []

    def _in_window(self, lead, window):
        return window.all_time or window.start <= lead.created_at < window.end

    def fetch_leads(self, company_id, window, filters: ReportFilters):
        self.calls.append(("leads", company_id, window, filters))
        rows = [lead for lead in self.leads if self._in_window(lead, window)]
        if filters.assignee_id is not None:
            rows = [lead for lead in rows if lead.assignee_id == filters.assignee_id]
        return rows

    def fetch_payments(self, company_id, window):
        self.calls.append(("payments", company_id, window))
        by_id = {lead.id: lead for lead in self.leads}
        return [p for p in self.payments if p.lead_id in by_id and self._in_window(by_id[p.lead_id], window)]

    def fetch_roster(self, company_id):
        self.calls.append(("roster", company_id))
        return list(self.roster)


@pytest.fixture
def roster():
    return [
        StaffMember(id=1, display_name="Alice", department="Sales"),
        StaffMember(id=2, display_name="Bob", department="Sales"),
        StaffMember(id=3, display_name="Chloe", department="Support"),
        StaffMember(id=4, display_name="Dan", department=None),
    ]


@pytest.fixture
def june_leads():
    return [
        LeadRecord(id=1, created_at=datetime(2024, 6, 1, 9), status="new", assignee_id=1, device_type=DeviceType.pc),
        LeadRecord(id=2, created_at=datetime(2024, 6, 1, 10), status="converted", assignee_id=2, device_type=DeviceType.mobile),
        LeadRecord(id=3, created_at=datetime(2024, 6, 1, 11), status="contract_completed", assignee_id=None),
    ]


@pytest.fixture
def june_payments():
    return [PaymentRecord(lead_id=3, amount=50000)]


@pytest.fixture
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    db_session.add_all(
        [
            User(id=1, company_id=1, full_name="Alice", department="Sales"),
            User(id=2, company_id=1, full_name="Bob", department="Sales"),
            User(id=3, company_id=1, full_name="Chloe", department="Support"),
            User(id=9, company_id=2, full_name="Other Co", department="Sales"),
        ]
    )
    db_session.add_all(
        [
            Lead(id=1, company_id=1, full_name="L1", status="new", assigned_to=1, device_type=DeviceType.pc, created_at=datetime(2024, 6, 1, 9)),
            Lead(id=2, company_id=1, full_name="L2", status="converted", assigned_to=2, device_type=DeviceType.mobile, created_at=datetime(2024, 6, 1, 10)),
            Lead(id=3, company_id=1, full_name="L3", status="contract_completed", assigned_to=None, created_at=datetime(2024, 6, 1, 11)),
            Lead(id=4, company_id=1, full_name="L4", status="contacted", assigned_to=3, created_at=datetime(2024, 6, 18, 15)),
            Lead(id=5, company_id=1, full_name="L5", status="rejected", assigned_to=1, created_at=datetime(2024, 5, 31, 23, 59)),
            Lead(id=6, company_id=2, full_name="L6", status="new", assigned_to=9, created_at=datetime(2024, 6, 2, 8)),
        ]
    )
    db_session.add_all(
        [
            LeadPayment(id=1, company_id=1, lead_id=3, amount=50000),
            LeadPayment(id=2, company_id=1, lead_id=5, amount=1200),
            LeadPayment(id=3, company_id=2, lead_id=6, amount=700),
        ]
    )
    db_session.commit()
    return db_session


@pytest.fixture
def make_fetcher():
    return StaticFetcher
