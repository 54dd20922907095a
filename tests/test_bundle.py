"""Tests for the bundle analyzer."""

from haedok.schemas.catalog import BundleDeal
from haedok.schemas.savings import SavingsAction
from haedok.services.bundle import (
    BundleRecommendationType,
    analyze_bundle_optimization,
    analyze_bundle_savings,
    calculate_bundle_savings,
    normalize_service_name,
    service_matches,
)


class TestMatching:
    def test_normalize_ignores_case_whitespace_and_plus(self) -> None:
        assert normalize_service_name("Disney +") == "disney플러스"
        assert normalize_service_name("Apple TV+") == normalize_service_name("apple tv 플러스")

    def test_substring_either_direction(self) -> None:
        assert service_matches("티빙 베이직", "티빙")
        assert service_matches("티빙", "티빙 베이직")
        assert service_matches("Apple TV 플러스", "Apple TV+")
        assert not service_matches("넷플릭스", "티빙")


class TestBundleOptimization:
    def test_cheaper_bundles_ranked_by_savings(self, make_sub, catalog) -> None:
        subs = [make_sub("티빙", 13500), make_sub("웨이브", 10900)]
        results = analyze_bundle_optimization(subs, catalog.bundles)

        assert [r.bundle.id for r in results] == ["naver-plus-tving", "tving-wavve-double"]
        assert results[0].monthly_savings == 8600
        assert results[1].monthly_savings == 8400
        assert all(r.type == BundleRecommendationType.SAVINGS for r in results)

    def test_skips_bundle_already_subscribed(self, make_sub, catalog) -> None:
        subs = [make_sub("티빙", 13500), make_sub("네이버플러스 멤버십", 4900, category="shopping")]
        results = analyze_bundle_optimization(subs, catalog.bundles)
        assert "naver-plus-tving" not in [r.bundle.id for r in results]

    def test_conditional_bundle_is_advisory_only(self, make_sub, catalog) -> None:
        subs = [make_sub("넷플릭스", 17000), make_sub("디즈니플러스", 9900)]
        results = analyze_bundle_optimization(subs, catalog.bundles)

        assert len(results) == 1
        assert results[0].bundle.id == "lgu-youdok"
        assert results[0].type == BundleRecommendationType.INFO
        assert results[0].monthly_savings == 0

    def test_conditional_bundle_needs_two_matches(self, make_sub, catalog) -> None:
        results = analyze_bundle_optimization([make_sub("넷플릭스", 17000)], catalog.bundles)
        assert results == []

    def test_pricier_bundle_with_two_matches_is_advisory(self, make_sub) -> None:
        bundle = BundleDeal(id="b", name="비싼 번들", provider="P", included_services=["A", "B"], price=50000)
        results = analyze_bundle_optimization([make_sub("A", 5000), make_sub("B", 5000)], [bundle])
        assert results[0].type == BundleRecommendationType.INFO

    def test_pricier_bundle_with_one_match_is_ignored(self, make_sub) -> None:
        bundle = BundleDeal(id="b", name="비싼 번들", provider="P", included_services=["A", "B"], price=50000)
        assert analyze_bundle_optimization([make_sub("A", 5000)], [bundle]) == []

    def test_inactive_subscriptions_are_ignored(self, make_sub, catalog) -> None:
        subs = [make_sub("티빙", 13500, status="cancelled")]
        assert analyze_bundle_optimization(subs, catalog.bundles) == []


class TestBundleSavingsItems:
    def test_items_and_advisories_are_split(self, make_sub, catalog) -> None:
        subs = [make_sub("티빙", 13500), make_sub("웨이브", 10900), make_sub("넷플릭스", 17000)]
        items, advisories = analyze_bundle_savings(subs, catalog.bundles)

        assert all(i.action == SavingsAction.USE_BUNDLE for i in items + advisories)
        assert all(i.savings_per_month > 0 for i in items)
        assert all(a.savings_per_month == 0 for a in advisories)

        double = next(i for i in items if i.subscription_names == ["티빙", "웨이브"])
        assert double.subscription_name == "티빙 + 웨이브"
        assert double.current_monthly_price == 24400
        assert double.source == "번들 할인 (티빙×웨이브)"

    def test_calculate_bundle_savings(self, make_sub, catalog) -> None:
        bundle = next(b for b in catalog.bundles if b.id == "tving-wavve-double")
        subs = [make_sub("티빙", 13500), make_sub("웨이브", 10900)]
        assert calculate_bundle_savings(subs, bundle) == (8400, 2)
        assert calculate_bundle_savings([make_sub("티빙", 5500)], bundle) == (0, 1)
