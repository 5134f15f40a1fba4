from leadreports.api.routes import reports

__all__ = [
    "reports",
]
