"""Tests for usage grading and recommendations."""

import math

import pytest

from haedok.schemas.analysis import RecommendAction, ROIGrade
from haedok.schemas.subscription import Subscription, UsageMetricType, UsageObservation
from haedok.services.roi import (
    analyze_usage,
    calculate_grade_and_efficiency,
    calculate_roi_analysis,
    format_cost_label,
    format_usage_label,
    get_recommendation,
    grade_by_time,
    is_sharing_available,
)


# ---------------------------------------------------------------------------
# Grader
# ---------------------------------------------------------------------------


class TestGrader:
    @pytest.mark.parametrize(
        ("weekly_minutes", "expected"),
        [(600, ROIGrade.A), (120, ROIGrade.B), (60, ROIGrade.C), (10, ROIGrade.D)],
    )
    def test_time_grades(self, weekly_minutes: float, expected: ROIGrade) -> None:
        grade, _ = calculate_grade_and_efficiency(UsageMetricType.TIME, 10000, weekly_minutes)
        assert grade == expected

    def test_time_efficiency_is_cost_per_hour(self) -> None:
        _, efficiency = calculate_grade_and_efficiency(UsageMetricType.TIME, 10000, 60)
        assert efficiency == pytest.approx(10000 / 4.33)

    @pytest.mark.parametrize(
        ("uses", "expected"),
        [(30, ROIGrade.A), (10, ROIGrade.B), (5, ROIGrade.C), (3, ROIGrade.D)],
    )
    def test_count_grades(self, uses: float, expected: ROIGrade) -> None:
        grade, efficiency = calculate_grade_and_efficiency(UsageMetricType.COUNT, 9900, uses)
        assert grade == expected
        assert efficiency == pytest.approx(9900 / uses)

    @pytest.mark.parametrize(
        ("days", "expected"),
        [(7, ROIGrade.A), (5, ROIGrade.A), (3, ROIGrade.B), (1, ROIGrade.C), (0.5, ROIGrade.D)],
    )
    def test_frequency_grade_follows_days_not_cost(self, days: float, expected: ROIGrade) -> None:
        grade, efficiency = calculate_grade_and_efficiency(UsageMetricType.FREQUENCY, 50000, days)
        assert grade == expected
        assert efficiency == pytest.approx(50000 / (days * 4.33))

    @pytest.mark.parametrize("metric", list(UsageMetricType))
    @pytest.mark.parametrize("usage", [0, -3])
    def test_no_usage_is_f_without_division(self, metric: UsageMetricType, usage: float) -> None:
        assert calculate_grade_and_efficiency(metric, 10000, usage) == (ROIGrade.F, 0.0)

    def test_non_finite_usage_degrades_to_f(self) -> None:
        assert calculate_grade_and_efficiency(UsageMetricType.TIME, 10000, math.inf)[0] == ROIGrade.F
        assert calculate_grade_and_efficiency(UsageMetricType.COUNT, 10000, math.nan)[0] == ROIGrade.F

    def test_time_grade_is_monotonic_in_cost(self) -> None:
        order = "ABCDF"
        costs = [0, 100, 599, 600, 1000, 1799, 1800, 4199, 4200, 10000, 1e9]
        ranks = [order.index(grade_by_time(c)) for c in costs]
        assert ranks == sorted(ranks)


class TestLabels:
    def test_usage_labels(self) -> None:
        assert format_usage_label(UsageMetricType.TIME, 30) == "30분/주"
        assert format_usage_label(UsageMetricType.TIME, 90) == "1.5시간/주"
        assert format_usage_label(UsageMetricType.COUNT, 4) == "4회/월"
        assert format_usage_label(UsageMetricType.FREQUENCY, 3) == "3.0일/주"

    def test_cost_labels(self) -> None:
        assert format_cost_label(UsageMetricType.COUNT, 2500.4) == "2,500원/회"
        assert format_cost_label(UsageMetricType.TIME, 0) == "-"
        assert format_cost_label(UsageMetricType.TIME, math.inf) == "-"


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TestRecommendation:
    @pytest.fixture
    def sub(self, make_sub) -> Subscription:
        return make_sub("테스트", 10000)

    def test_a_keeps(self, sub: Subscription) -> None:
        action, _ = get_recommendation(ROIGrade.A, sub, UsageMetricType.TIME, True)
        assert action == RecommendAction.KEEP

    def test_b_shares_when_family_plan_exists(self, sub: Subscription) -> None:
        action, _ = get_recommendation(ROIGrade.B, sub, UsageMetricType.TIME, True)
        assert action == RecommendAction.SHARE

    def test_b_count_reason_differs(self, sub: Subscription) -> None:
        time_action, time_reason = get_recommendation(ROIGrade.B, sub, UsageMetricType.TIME, False)
        count_action, count_reason = get_recommendation(ROIGrade.B, sub, UsageMetricType.COUNT, False)
        assert time_action == count_action == RecommendAction.KEEP
        assert time_reason != count_reason

    def test_c_reviews_count_and_downgrades_otherwise(self, sub: Subscription) -> None:
        assert get_recommendation(ROIGrade.C, sub, UsageMetricType.COUNT, False)[0] == RecommendAction.REVIEW
        assert get_recommendation(ROIGrade.C, sub, UsageMetricType.TIME, False)[0] == RecommendAction.DOWNGRADE

    def test_already_shared_is_not_told_to_share(self, make_sub) -> None:
        shared = make_sub("테스트", 10000, is_shared=True, shared_count=4)
        assert get_recommendation(ROIGrade.C, shared, UsageMetricType.TIME, True)[0] == RecommendAction.DOWNGRADE

    def test_d_count_mentions_per_use_payment(self, sub: Subscription) -> None:
        action, reason = get_recommendation(ROIGrade.D, sub, UsageMetricType.COUNT, False)
        assert action == RecommendAction.CANCEL
        assert "건당 결제" in reason

    def test_f_cancels(self, sub: Subscription) -> None:
        action, reason = get_recommendation(ROIGrade.F, sub, UsageMetricType.FREQUENCY, True)
        assert action == RecommendAction.CANCEL
        assert "10,000원" in reason


class TestROIAnalysis:
    def test_unused_video_subscription_is_cancelled(self, make_sub) -> None:
        analysis = calculate_roi_analysis(make_sub("넷플릭스", 17000), 0, False)
        assert analysis.grade == ROIGrade.F
        assert analysis.recommendation == RecommendAction.CANCEL
        assert analysis.potential_savings == 17000
        assert analysis.cost_efficiency == 0
        assert analysis.grade_label == "미사용"
        assert analysis.category_label == "OTT"

    def test_rarely_used_shopping_membership(self, make_sub) -> None:
        analysis = calculate_roi_analysis(make_sub("쿠팡 와우 멤버십", 13500, category="shopping"), 1, False)
        assert analysis.metric_type == UsageMetricType.COUNT
        assert analysis.cost_efficiency == 13500
        assert analysis.grade == ROIGrade.D
        assert analysis.recommendation == RecommendAction.CANCEL
        assert "건당 결제" in analysis.recommendation_reason

    def test_potential_savings_per_action(self, make_sub) -> None:
        sub = make_sub("테스트", 10000)
        assert calculate_roi_analysis(sub, 60, False).potential_savings == 3000  # downgrade
        assert calculate_roi_analysis(sub, 60, True).potential_savings == 5000  # share
        assert calculate_roi_analysis(sub, 600, True).potential_savings == 0  # keep

    def test_explicit_metric_overrides_category(self, make_sub) -> None:
        analysis = calculate_roi_analysis(make_sub("테스트", 10000), 5, False, metric_type=UsageMetricType.FREQUENCY)
        assert analysis.metric_type == UsageMetricType.FREQUENCY
        assert analysis.grade == ROIGrade.A


class TestAnalyzeUsage:
    def test_no_observations_no_grading(self, portfolio, catalog) -> None:
        assert analyze_usage(portfolio, [], catalog) == []

    def test_skips_inactive_and_unobserved(self, portfolio, portfolio_usage, catalog) -> None:
        analyses = analyze_usage(portfolio, portfolio_usage[:3] + portfolio_usage[7:], catalog)
        assert [a.subscription_id for a in analyses] == ["넷플릭스", "티빙", "웨이브"]

    def test_last_observation_wins(self, make_sub, catalog) -> None:
        sub = make_sub("테스트", 10000)
        observations = [
            UsageObservation(subscription_id="테스트", usage_value=0),
            UsageObservation(subscription_id="테스트", usage_value=600),
        ]
        assert analyze_usage([sub], observations, catalog)[0].grade == ROIGrade.A

    def test_family_plan_makes_sharing_available(self, make_sub, catalog) -> None:
        spotify = make_sub("스포티파이", 10900, category="music")
        assert is_sharing_available(spotify, catalog)
        assert not is_sharing_available(make_sub("스포티파이", 10900, category="music", is_shared=True), catalog)
        assert not is_sharing_available(make_sub("넷플릭스", 17000), catalog)

        analyses = analyze_usage([spotify], [UsageObservation(subscription_id="스포티파이", usage_value=120)], catalog)
        assert analyses[0].recommendation == RecommendAction.SHARE


class TestInputDegradation:
    def test_unparseable_price_becomes_zero(self) -> None:
        assert Subscription(id="x", name="x", price="abc").monthly_price == 0
        assert Subscription(id="x", name="x", price=float("nan")).monthly_price == 0
        assert Subscription(id="x", name="x", price=-500).monthly_price == 0

    def test_yearly_price_is_divided_and_rounded(self) -> None:
        sub = Subscription(id="x", name="x", price=139000, billing_cycle="yearly")
        assert sub.monthly_price == 11583

    def test_monthly_price_ignores_caller_value(self) -> None:
        sub = Subscription(id="x", name="x", price=9900, monthly_price=1)
        assert sub.monthly_price == 9900

    def test_unparseable_usage_becomes_zero(self) -> None:
        assert UsageObservation(subscription_id="x", usage_value="many").usage_value == 0
        assert UsageObservation(subscription_id="x", usage_value=float("inf")).usage_value == 0
