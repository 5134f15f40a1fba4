class ReportError(Exception):
    """Base class for failures while producing a report."""


class RecordFetchError(ReportError):
    """The record store could not supply leads, payments or the roster.

    Raised instead of returning partial data; a report built from an
    incomplete fetch would understate counts.
    """

    def __init__(self, source: str, company_id: int):
        super().__init__(f"failed to fetch {source} for company {company_id}")
        self.source = source
        self.company_id = company_id


class InvalidReportPeriod(ReportError):
    """The requested month cannot be reported (e.g. it lies in the future)."""
