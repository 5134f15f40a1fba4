import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leadreports.api.api import api_router
from leadreports.core.config import get_settings
from leadreports.core.database import Base, engine
from leadreports.core.errors import InvalidReportPeriod, RecordFetchError
from leadreports.core.logging import configure_logging
from leadreports.core.middleware import RequestIDMiddleware
from leadreports.models import lead, payment, user  # noqa: F401

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    docs_url="/docs" if settings.ENABLE_API_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_API_DOCS else None,
    openapi_url="/openapi.json" if settings.ENABLE_API_DOCS else None,
)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "x-request-id"],
)


@app.on_event("startup")
def on_startup() -> None:
    Base.metadata.create_all(bind=engine)


@app.exception_handler(RecordFetchError)
async def record_fetch_error_handler(request: Request, exc: RecordFetchError):
    # No partial report: a failed read fails the whole request.
    logger.error("Report aborted: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Report data is temporarily unavailable"})


@app.exception_handler(InvalidReportPeriod)
async def invalid_period_handler(request: Request, exc: InvalidReportPeriod):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get(settings.API_V1_STR, include_in_schema=False)
def api_v1_root():
    return {
        "base": settings.API_V1_STR,
        "endpoints": [
            "/companies/{company_id}/reports",
            "/companies/{company_id}/reports/results.csv",
            "/companies/{company_id}/reports/summary.pdf",
        ],
    }


app.include_router(api_router, prefix=settings.API_V1_STR)
