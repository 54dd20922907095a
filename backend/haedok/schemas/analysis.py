from enum import StrEnum

from pydantic import BaseModel

from haedok.schemas.subscription import Subscription, SubscriptionCategory, UsageMetricType, UsageObservation


class ROIGrade(StrEnum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class RecommendAction(StrEnum):
    KEEP = "keep"
    REVIEW = "review"
    DOWNGRADE = "downgrade"
    SHARE = "share"
    CANCEL = "cancel"


GRADE_LABELS: dict[ROIGrade, str] = {
    ROIGrade.A: "훌륭한 가성비",
    ROIGrade.B: "괜찮음",
    ROIGrade.C: "비효율적",
    ROIGrade.D: "해지 추천",
    ROIGrade.F: "미사용",
}


class ROIAnalysis(BaseModel):
    subscription_id: str
    subscription_name: str
    icon: str = ""
    category: SubscriptionCategory
    category_label: str = ""
    monthly_price: float
    metric_type: UsageMetricType
    usage_value: float
    usage_label: str
    cost_efficiency: float
    cost_efficiency_label: str
    grade: ROIGrade
    grade_label: str = ""
    recommendation: RecommendAction
    recommendation_reason: str
    potential_savings: float


class AnalysisRequest(BaseModel):
    subscriptions: list[Subscription]
    usage: list[UsageObservation] = []


class SavingsReportRequest(BaseModel):
    subscriptions: list[Subscription]
    roi_analyses: list[ROIAnalysis] = []


class PersonalizedROIRequest(BaseModel):
    calculator_name: str
    inputs: dict[str, float] = {}
    subscription_price: float
