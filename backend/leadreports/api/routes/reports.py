from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from leadreports.core.config import get_settings
from leadreports.core.deps import get_now, get_record_fetcher
from leadreports.core.errors import InvalidReportPeriod
from leadreports.schemas.report import ReportResponse
from leadreports.services.ranges import default_selection, is_future_month
from leadreports.services.records import RecordFetcher, ReportFilters
from leadreports.services.reports import Report, build_report, report_pdf, report_response, results_csv, results_filename

router = APIRouter(prefix="/companies/{company_id}/reports", tags=["reports"])


def get_report(
    company_id: int,
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    all_time: bool = Query(default=False),
    department: str | None = Query(default=None, max_length=80),
    assigned_to: int | None = Query(default=None),
    fetcher: RecordFetcher = Depends(get_record_fetcher),
    now: datetime = Depends(get_now),
) -> Report:
    default_year, default_month = default_selection(now)
    year = year or default_year
    month = month or default_month
    if not all_time and is_future_month(year, month, now):
        raise InvalidReportPeriod(f"{year:04d}-{month:02d} is in the future")

    return build_report(
        fetcher,
        company_id,
        year,
        month,
        now=now,
        all_time=all_time,
        filters=ReportFilters(department=department or None, assignee_id=assigned_to),
        unassigned_label=get_settings().UNASSIGNED_LABEL,
    )


@router.get("", response_model=ReportResponse)
def read_report(report: Report = Depends(get_report), now: datetime = Depends(get_now)):
    return report_response(report, now, recent_count=get_settings().REPORT_RECENT_MONTHS)


@router.get("/results.csv")
def export_results_csv(report: Report = Depends(get_report)):
    return Response(
        content=results_csv(report.rollups.date_series).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={results_filename(report.window)}"},
    )


@router.get("/summary.pdf")
def export_summary_pdf(report: Report = Depends(get_report)):
    return Response(
        content=report_pdf(report),
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=summary.pdf"},
    )
