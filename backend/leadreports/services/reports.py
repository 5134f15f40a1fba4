import csv
import logging
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO, StringIO

from reportlab.lib.pagesizes import landscape, letter
from reportlab.pdfgen import canvas

from leadreports.schemas.report import BucketOut, DimensionOut, MonthRef, ReportResponse, StaffOption, SummaryOut
from leadreports.services.aggregation import DimensionalAggregator, Rollups
from leadreports.services.buckets import Bucket, date_key, initial_date_keys
from leadreports.services.ranges import ReportRange, is_current_month, recent_months, resolve_range, shift_month
from leadreports.services.records import RecordFetcher, ReportFilters, StaffMember
from leadreports.services.staff import UNASSIGNED, StaffDirectory
from leadreports.services.summary import ReportSummary, summarize

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "date",
    "total",
    "pending",
    "rejected",
    "inProgress",
    "completed",
    "contractCompleted",
    "needsFollowup",
    "other",
    "paymentAmount",
    "paymentCount",
]


@dataclass
class Report:
    company_id: int
    window: ReportRange
    filters: ReportFilters
    rollups: Rollups
    summary: ReportSummary
    departments: list[str]
    staff: list[StaffMember]
    is_current_month: bool


def build_report(
    fetcher: RecordFetcher,
    company_id: int,
    year: int,
    month: int,
    *,
    now: datetime,
    all_time: bool = False,
    filters: ReportFilters | None = None,
    unassigned_label: str = UNASSIGNED,
) -> Report:
    filters = filters or ReportFilters()
    window = resolve_range(year, month, all_time=all_time)

    # Independent reads; all three must succeed before anything is aggregated.
    leads = fetcher.fetch_leads(company_id, window, filters)
    payments = fetcher.fetch_payments(company_id, window)
    roster = fetcher.fetch_roster(company_id)

    if window.bounded:
        keys = set(initial_date_keys(window, []))
        in_window = [lead for lead in leads if date_key(lead.created_at) in keys]
        if len(in_window) != len(leads):
            logger.warning(
                "Record store returned %d leads outside %04d-%02d for company %s",
                len(leads) - len(in_window),
                year,
                month,
                company_id,
            )
        leads = in_window

    directory = StaffDirectory(roster, unassigned_label=unassigned_label)
    aggregator = DimensionalAggregator(directory, initial_date_keys(window, leads))
    rollups = aggregator.fold(leads, payments).rollups(monthly=window.all_time)
    summary = summarize(leads)

    logger.info(
        "Report company=%s period=%s leads=%d payments=%d skipped_payments=%d",
        company_id,
        "all" if window.all_time else f"{year:04d}-{month:02d}",
        len(leads),
        len(payments),
        rollups.skipped_payments,
    )

    return Report(
        company_id=company_id,
        window=window,
        filters=filters,
        rollups=rollups,
        summary=summary,
        departments=directory.departments(),
        staff=directory.members(filters.department),
        is_current_month=not window.all_time and is_current_month(year, month, now),
    )


def _amount(value: float) -> int | float:
    return int(value) if float(value).is_integer() else round(value, 2)


def _row(bucket: Bucket) -> list:
    return [
        bucket.key,
        bucket.total,
        bucket.pending,
        bucket.rejected,
        bucket.in_progress,
        bucket.completed,
        bucket.contract_completed,
        bucket.needs_followup,
        bucket.other,
        _amount(bucket.payment_amount),
        bucket.payment_count,
    ]


def results_csv(series: list[Bucket]) -> str:
    out = StringIO()
    # BOM so spreadsheet apps pick UTF-8 when the file is opened directly.
    out.write("\ufeff")
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for bucket in series:
        writer.writerow(_row(bucket))
    return out.getvalue()


def results_filename(window: ReportRange) -> str:
    if window.all_time:
        return "results_all.csv"
    return f"results_{window.year:04d}-{window.month:02d}.csv"


def report_pdf(report: Report, title: str = "Lead Results Report") -> bytes:
    buffer = BytesIO()
    page_size = landscape(letter)
    p = canvas.Canvas(buffer, pagesize=page_size)
    top = page_size[1] - 40
    y = top
    p.setFont("Helvetica-Bold", 16)
    p.drawString(40, y, title)
    y -= 24
    p.setFont("Helvetica", 10)

    period = "All time" if report.window.all_time else f"{report.window.year:04d}-{report.window.month:02d}"
    lines = [
        f"Period: {period}",
        f"Total Leads: {report.summary.total_db}",
        f"Completed: {report.summary.completed} (contract completed: {report.summary.contract_completed})",
        f"Conversion Rate: {report.summary.conversion_rate}%",
    ]
    if report.filters.department:
        lines.append(f"Department: {report.filters.department}")
    for line in lines:
        p.drawString(40, y, line)
        y -= 16

    y -= 8
    columns = [40 + i * 66 for i in range(len(CSV_COLUMNS))]

    def header(y: float) -> float:
        p.setFont("Helvetica-Bold", 8)
        for x, name in zip(columns, CSV_COLUMNS):
            p.drawString(x, y, name)
        p.setFont("Helvetica", 8)
        return y - 14

    y = header(y)
    for bucket in report.rollups.date_series:
        if y < 40:
            p.showPage()
            y = header(top)
        for x, value in zip(columns, _row(bucket)):
            p.drawString(x, y, str(value))
        y -= 12

    p.showPage()
    p.save()
    buffer.seek(0)
    return buffer.read()


def _month_ref(value: tuple[int, int] | None) -> MonthRef | None:
    if value is None:
        return None
    return MonthRef(year=value[0], month=value[1])


def report_response(report: Report, now: datetime, recent_count: int = 12) -> ReportResponse:
    window = report.window
    rollups = report.rollups
    return ReportResponse(
        company_id=report.company_id,
        selected_year=window.year,
        selected_month=window.month,
        is_all_time=window.all_time,
        days_in_month=window.days_in_month,
        is_current_month=report.is_current_month,
        previous_month=_month_ref(shift_month(window.year, window.month, -1, now)),
        next_month=_month_ref(shift_month(window.year, window.month, 1, now)),
        month_options=[_month_ref(m) for m in recent_months(now, recent_count)],
        department=report.filters.department,
        assigned_to=report.filters.assignee_id,
        summary=SummaryOut.model_validate(report.summary),
        date_series=[BucketOut.model_validate(b) for b in rollups.date_series],
        department_series=[DimensionOut.model_validate(d) for d in rollups.department_series],
        staff_series=[DimensionOut.model_validate(d) for d in rollups.staff_series],
        skipped_payments=rollups.skipped_payments,
        departments=report.departments,
        staff=[StaffOption.model_validate(m) for m in report.staff],
    )
