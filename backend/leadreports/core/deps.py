from datetime import datetime

from fastapi import Depends
from sqlalchemy.orm import Session

from leadreports.core.database import get_db
from leadreports.services.records import RecordFetcher, SqlRecordFetcher


def get_now() -> datetime:
    # Reference instant for "current month" decisions; overridden in tests.
    return datetime.utcnow()


def get_record_fetcher(db: Session = Depends(get_db)) -> RecordFetcher:
    return SqlRecordFetcher(db)
