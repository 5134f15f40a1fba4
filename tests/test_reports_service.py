from datetime import datetime

import pytest

from leadreports.core.errors import RecordFetchError
from leadreports.services.ranges import resolve_range
from leadreports.services.records import LeadRecord, PaymentRecord, ReportFilters
from leadreports.services.reports import build_report, report_pdf, report_response, results_csv, results_filename

NOW = datetime(2024, 6, 20, 9, 30)


def test_build_report_matches_summary(make_fetcher, june_leads, june_payments, roster):
    fetcher = make_fetcher(june_leads, june_payments, roster)
    report = build_report(fetcher, 1, 2024, 6, now=NOW)

    assert report.is_current_month
    assert report.window.days_in_month == 30
    assert len(report.rollups.date_series) == 30
    assert sum(b.total for b in report.rollups.date_series) == report.summary.total_db == 3
    assert report.departments == ["Sales", "Support"]
    assert [kind for kind, *_ in fetcher.calls] == ["leads", "payments", "roster"]


def test_filtered_report_skips_payments_of_other_leads(make_fetcher, june_leads, june_payments, roster):
    fetcher = make_fetcher(june_leads, june_payments, roster)
    report = build_report(fetcher, 1, 2024, 6, now=NOW, filters=ReportFilters(assignee_id=1))

    assert report.summary.total_db == 1
    assert sum(b.payment_amount for b in report.rollups.date_series) == 0
    assert report.rollups.skipped_payments == 1


def test_leads_outside_month_are_dropped_from_both_paths(make_fetcher, roster):
    class LeakyFetcher(make_fetcher):
        def fetch_leads(self, company_id, window, filters):
            return list(self.leads)

    leads = [
        LeadRecord(id=1, created_at=datetime(2024, 6, 5), status="new"),
        LeadRecord(id=2, created_at=datetime(2024, 7, 1), status="new"),
    ]
    report = build_report(LeakyFetcher(leads, [], roster), 1, 2024, 6, now=NOW)
    assert report.summary.total_db == 1
    assert sum(b.total for b in report.rollups.date_series) == 1


def test_all_time_report_is_monthly(make_fetcher, roster):
    leads = [
        LeadRecord(id=1, created_at=datetime(2024, 1, 15, 9), status="converted", assignee_id=1),
        LeadRecord(id=2, created_at=datetime(2024, 3, 2, 9), status="new"),
    ]
    payments = [PaymentRecord(lead_id=1, amount=250)]
    report = build_report(make_fetcher(leads, payments, roster), 1, 2024, 6, now=NOW, all_time=True)

    assert not report.is_current_month
    assert [b.key for b in report.rollups.date_series] == ["2024-01", "2024-03"]
    assert report.rollups.date_series[0].payment_amount == 250


def test_fetch_failure_propagates(make_fetcher, roster):
    class BrokenFetcher(make_fetcher):
        def fetch_payments(self, company_id, window):
            raise RecordFetchError("payments", company_id)

    with pytest.raises(RecordFetchError):
        build_report(BrokenFetcher([], [], roster), 1, 2024, 6, now=NOW)


def test_results_csv_layout(make_fetcher, june_leads, june_payments, roster):
    report = build_report(make_fetcher(june_leads, june_payments, roster), 1, 2024, 6, now=NOW)
    text = results_csv(report.rollups.date_series)

    assert text.startswith("\ufeff")
    lines = text.lstrip("\ufeff").splitlines()
    assert lines[0] == (
        "date,total,pending,rejected,inProgress,completed,contractCompleted,needsFollowup,other,paymentAmount,paymentCount"
    )
    assert lines[1] == "2024-06-01,3,1,0,0,1,1,0,0,50000,1"
    assert lines[2] == "2024-06-02,0,0,0,0,0,0,0,0,0,0"
    assert len(lines) == 31


def test_results_filename():
    assert results_filename(resolve_range(2024, 6)) == "results_2024-06.csv"
    assert results_filename(resolve_range(2024, 6, all_time=True)) == "results_all.csv"


def test_report_pdf_renders(make_fetcher, june_leads, june_payments, roster):
    report = build_report(make_fetcher(june_leads, june_payments, roster), 1, 2024, 6, now=NOW)
    pdf = report_pdf(report)
    assert pdf.startswith(b"%PDF")


def test_report_response_navigation(make_fetcher, june_leads, roster):
    report = build_report(make_fetcher(june_leads, [], roster), 1, 2024, 5, now=NOW)
    response = report_response(report, NOW, recent_count=3)

    assert response.selected_month == 5 and not response.is_current_month
    assert response.previous_month.month == 4
    assert response.next_month.month == 6
    assert [(m.year, m.month) for m in response.month_options] == [(2024, 6), (2024, 5), (2024, 4)]
    assert response.days_in_month == 31
    assert response.summary.total_db == 0
