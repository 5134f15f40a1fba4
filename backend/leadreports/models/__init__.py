from leadreports.models.user import User
from leadreports.models.lead import DeviceType, Lead
from leadreports.models.payment import LeadPayment

__all__ = [
    "User",
    "Lead",
    "DeviceType",
    "LeadPayment",
]
