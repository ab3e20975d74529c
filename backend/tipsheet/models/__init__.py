from .enums import EarningsLabel, ReportTarget
from .venue import Venue
from .review import Review
from .report import Report
from .admin_user import AdminUser

__all__ = [
    "EarningsLabel",
    "ReportTarget",
    "Venue",
    "Review",
    "Report",
    "AdminUser",
]
