"""Usage grading and recommendation.

``usage_value`` is read according to the metric type:

* time: weekly usage in minutes
* count: monthly number of uses
* frequency: days per week (0-7)
"""
import logging
import math
from typing import assert_never

from haedok.schemas.analysis import GRADE_LABELS, RecommendAction, ROIAnalysis, ROIGrade
from haedok.schemas.catalog import Catalog
from haedok.schemas.subscription import CATEGORY_LABELS, Subscription, UsageMetricType, UsageObservation
from haedok.services.money import format_krw, round_won

logger = logging.getLogger(__name__)

WEEKS_PER_MONTH = 4.33

# Upper bounds (exclusive) for A, B and C; anything above is D
TIME_THRESHOLDS = (600, 1800, 4200)  # won per hour
COUNT_THRESHOLDS = (500, 1500, 3000)  # won per use

DOWNGRADE_SAVINGS_RATIO = 0.3
SHARE_SAVINGS_RATIO = 0.5

METRIC_UNITS: dict[UsageMetricType, str] = {
    UsageMetricType.TIME: "시간",
    UsageMetricType.COUNT: "회",
    UsageMetricType.FREQUENCY: "일",
}


def _grade_by_cost(cost: float, thresholds: tuple[float, float, float]) -> ROIGrade:
    if not math.isfinite(cost):
        return ROIGrade.F
    a, b, c = thresholds
    if cost < a:
        return ROIGrade.A
    if cost < b:
        return ROIGrade.B
    if cost < c:
        return ROIGrade.C
    return ROIGrade.D


def grade_by_time(cost_per_hour: float) -> ROIGrade:
    return _grade_by_cost(cost_per_hour, TIME_THRESHOLDS)


def grade_by_count(cost_per_use: float) -> ROIGrade:
    return _grade_by_cost(cost_per_use, COUNT_THRESHOLDS)


def grade_by_frequency(days_per_week: float) -> ROIGrade:
    if days_per_week <= 0:
        return ROIGrade.F
    if days_per_week >= 5:
        return ROIGrade.A
    if days_per_week >= 3:
        return ROIGrade.B
    if days_per_week >= 1:
        return ROIGrade.C
    return ROIGrade.D


def calculate_grade_and_efficiency(
    metric_type: UsageMetricType, monthly_price: float, usage_value: float
) -> tuple[ROIGrade, float]:
    """Return the grade and the cost per hour / use / day for one subscription."""
    if not math.isfinite(usage_value) or usage_value <= 0:
        return ROIGrade.F, 0.0

    match metric_type:
        case UsageMetricType.TIME:
            monthly_hours = usage_value * WEEKS_PER_MONTH / 60
            cost_per_hour = monthly_price / monthly_hours
            grade = grade_by_time(cost_per_hour)
            efficiency = cost_per_hour
        case UsageMetricType.COUNT:
            cost_per_use = monthly_price / usage_value
            grade = grade_by_count(cost_per_use)
            efficiency = cost_per_use
        case UsageMetricType.FREQUENCY:
            cost_per_day = monthly_price / (usage_value * WEEKS_PER_MONTH)
            grade = grade_by_frequency(usage_value)
            efficiency = cost_per_day
        case _:
            assert_never(metric_type)

    if not math.isfinite(efficiency):
        return ROIGrade.F, 0.0
    return grade, efficiency


def format_usage_label(metric_type: UsageMetricType, value: float) -> str:
    match metric_type:
        case UsageMetricType.TIME:
            hours = value / 60
            if hours < 1:
                return f"{int(round_won(value))}분/주"
            return f"{hours:.1f}시간/주"
        case UsageMetricType.COUNT:
            return f"{int(round_won(value))}회/월"
        case UsageMetricType.FREQUENCY:
            return f"{value:.1f}일/주"
        case _:
            assert_never(metric_type)


def format_cost_label(metric_type: UsageMetricType, cost: float) -> str:
    if not math.isfinite(cost) or cost <= 0:
        return "-"
    return f"{format_krw(cost)}/{METRIC_UNITS[metric_type]}"


def get_recommendation(
    grade: ROIGrade,
    subscription: Subscription,
    metric_type: UsageMetricType,
    sharing_available: bool,
) -> tuple[RecommendAction, str]:
    name = subscription.name
    can_share = sharing_available and not subscription.is_shared

    match grade:
        case ROIGrade.A:
            return RecommendAction.KEEP, f"{name}은(는) 충분히 활용하고 있어요. 유지하세요!"
        case ROIGrade.B:
            if can_share:
                return RecommendAction.SHARE, f"{name}을(를) 공유하면 더 저렴하게 이용할 수 있어요."
            if metric_type == UsageMetricType.COUNT:
                return (
                    RecommendAction.KEEP,
                    f"{name}을(를) 적당히 이용 중이에요. 더 자주 이용하면 가성비가 올라가요.",
                )
            return RecommendAction.KEEP, f"{name}은(는) 적당히 활용 중이에요. 조금 더 사용하면 좋겠어요."
        case ROIGrade.C:
            if can_share:
                return RecommendAction.SHARE, f"{name}의 이용량이 적어요. 공유로 비용을 줄여보세요."
            if metric_type == UsageMetricType.COUNT:
                return (
                    RecommendAction.REVIEW,
                    f"{name} 이용 횟수 대비 비용이 높아요. 멤버십 없이 건당 결제가 나을 수 있어요.",
                )
            return RecommendAction.DOWNGRADE, f"{name} 사용량 대비 비용이 높아요. 낮은 요금제를 검토해보세요."
        case ROIGrade.D:
            if metric_type == UsageMetricType.COUNT:
                return (
                    RecommendAction.CANCEL,
                    f"{name}을(를) 거의 이용하지 않고 있어요. "
                    f"건당 결제로 전환하면 월 {format_krw(subscription.monthly_price)}을 아낄 수 있어요.",
                )
            return RecommendAction.CANCEL, f"{name}을(를) 거의 사용하지 않고 있어요. 해지를 추천해요."
        case ROIGrade.F:
            return (
                RecommendAction.CANCEL,
                f"{name}을(를) 전혀 사용하지 않고 있어요. "
                f"해지하면 월 {format_krw(subscription.monthly_price)}을 절약할 수 있어요.",
            )
        case _:
            assert_never(grade)


def estimate_potential_savings(action: RecommendAction, monthly_price: float) -> float:
    match action:
        case RecommendAction.CANCEL:
            return monthly_price
        case RecommendAction.DOWNGRADE:
            return round_won(monthly_price * DOWNGRADE_SAVINGS_RATIO)
        case RecommendAction.SHARE:
            return round_won(monthly_price * SHARE_SAVINGS_RATIO)
        case RecommendAction.KEEP | RecommendAction.REVIEW:
            return 0.0
        case _:
            assert_never(action)


def calculate_roi_analysis(
    subscription: Subscription,
    usage_value: float,
    sharing_available: bool,
    metric_type: UsageMetricType | None = None,
) -> ROIAnalysis:
    metric = metric_type or subscription.metric_type
    grade, efficiency = calculate_grade_and_efficiency(metric, subscription.monthly_price, usage_value)
    action, reason = get_recommendation(grade, subscription, metric, sharing_available)

    return ROIAnalysis(
        subscription_id=subscription.id,
        subscription_name=subscription.name,
        icon=subscription.icon,
        category=subscription.category,
        category_label=CATEGORY_LABELS[subscription.category],
        monthly_price=subscription.monthly_price,
        metric_type=metric,
        usage_value=usage_value,
        usage_label=format_usage_label(metric, usage_value),
        cost_efficiency=efficiency,
        cost_efficiency_label=format_cost_label(metric, efficiency),
        grade=grade,
        grade_label=GRADE_LABELS[grade],
        recommendation=action,
        recommendation_reason=reason,
        potential_savings=min(
            estimate_potential_savings(action, subscription.monthly_price),
            subscription.monthly_price,
        ),
    )


def is_sharing_available(subscription: Subscription, catalog: Catalog) -> bool:
    preset = catalog.find_preset(subscription.name)
    return preset is not None and preset.family_plan is not None and not subscription.is_shared


def analyze_usage(
    subscriptions: list[Subscription],
    observations: list[UsageObservation],
    catalog: Catalog,
) -> list[ROIAnalysis]:
    """Grade every active subscription that has a usage observation.

    When a subscription has several observations the last one wins.
    """
    if not observations:
        return []

    latest: dict[str, UsageObservation] = {}
    for obs in observations:
        latest[obs.subscription_id] = obs

    analyses = []
    for sub in subscriptions:
        if not sub.is_active:
            continue
        obs = latest.get(sub.id)
        if obs is None:
            continue
        analyses.append(
            calculate_roi_analysis(
                sub,
                obs.usage_value,
                is_sharing_available(sub, catalog),
                metric_type=obs.metric_type,
            )
        )
    logger.debug("Graded %d of %d subscriptions", len(analyses), len(subscriptions))
    return analyses
