import enum


class EarningsLabel(str, enum.Enum):
    PRE_TAX = "pre-tax"
    POST_TAX = "post-tax"


class ReportTarget(str, enum.Enum):
    VENUE = "venue"
    REVIEW = "review"
