from pydantic import BaseModel


class BucketOut(BaseModel):
    key: str
    total: int
    pending: int
    rejected: int
    in_progress: int
    completed: int
    contract_completed: int
    needs_followup: int
    other: int
    payment_amount: float
    payment_count: int
    pc_count: int
    mobile_count: int
    tablet_count: int
    unknown_device_count: int

    class Config:
        from_attributes = True


class DimensionOut(BaseModel):
    key: str
    label: str
    department: str
    totals: BucketOut
    # Same keys as the top-level date series, zeros included.
    series: list[BucketOut]

    class Config:
        from_attributes = True


class SummaryOut(BaseModel):
    total_db: int
    completed: int
    contract_completed: int
    conversion_rate: str

    class Config:
        from_attributes = True


class MonthRef(BaseModel):
    year: int
    month: int


class StaffOption(BaseModel):
    id: int
    display_name: str
    department: str | None

    class Config:
        from_attributes = True


class ReportResponse(BaseModel):
    company_id: int
    selected_year: int
    selected_month: int
    is_all_time: bool
    days_in_month: int
    is_current_month: bool
    previous_month: MonthRef | None
    next_month: MonthRef | None
    month_options: list[MonthRef]

    department: str | None = None
    assigned_to: int | None = None

    summary: SummaryOut
    date_series: list[BucketOut]
    department_series: list[DimensionOut]
    staff_series: list[DimensionOut]
    skipped_payments: int = 0

    departments: list[str]
    staff: list[StaffOption]
