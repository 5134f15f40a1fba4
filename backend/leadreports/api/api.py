from fastapi import APIRouter

from leadreports.api.routes import reports

api_router = APIRouter()
api_router.include_router(reports.router)
