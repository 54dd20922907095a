"""Savings report: five independent analyzers, deduplication and the global cap."""
import logging
import math
from collections.abc import Iterable

from pydantic import BaseModel

from haedok.schemas.analysis import RecommendAction, ROIAnalysis
from haedok.schemas.catalog import Catalog, DiscountEvent, DiscountType, FamilyPlan, ServicePlan, ServicePreset
from haedok.schemas.savings import (
    InvestmentDataPoint,
    InvestmentSimulation,
    PurchaseAlternative,
    SavingsAction,
    SavingsItem,
    SavingsReport,
)
from haedok.schemas.subscription import Subscription, UsageObservation, active_subscriptions
from haedok.services.bundle import analyze_bundle_savings
from haedok.services.investment import (
    compute_investment_simulation,
    downsample_series,
    generate_investment_data_points,
)
from haedok.services.money import format_number, round_cents, round_won
from haedok.services.roi import analyze_usage

logger = logging.getLogger(__name__)

PURCHASE_ALTERNATIVES_CATALOG = [
    PurchaseAlternative(name="스타벅스 아메리카노", price=5000, emoji="☕"),
    PurchaseAlternative(name="맥도날드 빅맥세트", price=7500, emoji="🍔"),
    PurchaseAlternative(name="CGV 영화 관람", price=15000, emoji="🎬"),
    PurchaseAlternative(name="베스트셀러 책", price=18000, emoji="📚"),
    PurchaseAlternative(name="피자 한 판", price=25000, emoji="🍕"),
    PurchaseAlternative(name="헬스장 1개월", price=80000, emoji="🏋️"),
    PurchaseAlternative(name="제주도 왕복 항공권", price=100000, emoji="✈️"),
    PurchaseAlternative(name="에어팟 프로", price=359000, emoji="🎧"),
    PurchaseAlternative(name="아이폰 16", price=1250000, emoji="📱"),
    PurchaseAlternative(name="맥북 에어 M4", price=1790000, emoji="💻"),
]

DISCOUNT_TYPE_LABELS = {
    DiscountType.CARD: "카드 할인",
    DiscountType.TELECOM: "통신사 혜택",
    DiscountType.PROMOTION: "프로모션",
}


# ── Analyzers ─────────────────────────────────────────────────────────


def _event_savings(event: DiscountEvent, monthly_price: float) -> float:
    if event.discount_amount:
        savings = event.discount_amount
    elif event.discount_percent:
        savings = round_cents(monthly_price * event.discount_percent / 100)
    else:
        savings = 0.0
    return min(savings, monthly_price)


def analyze_discount_savings(subscriptions: list[Subscription], events: list[DiscountEvent]) -> list[SavingsItem]:
    """Best card, telecom or promotion discount per subscription."""
    active = active_subscriptions(subscriptions)
    best: dict[str, SavingsItem] = {}

    for event in events:
        if event.type not in DISCOUNT_TYPE_LABELS:
            continue
        for sub in active:
            if not any(target in sub.name or sub.name in target for target in event.target_services):
                continue
            savings = _event_savings(event, sub.monthly_price)
            if savings <= 0:
                continue
            existing = best.get(sub.id)
            if existing is not None and savings <= existing.savings_per_month:
                continue
            best[sub.id] = SavingsItem(
                subscription_name=sub.name,
                subscription_names=[sub.name],
                subscription_icon=sub.icon,
                current_monthly_price=sub.monthly_price,
                action=SavingsAction.USE_DISCOUNT,
                savings_per_month=savings,
                description=f"{event.title}: {event.description}",
                source=f"{DISCOUNT_TYPE_LABELS[event.type]} ({event.provider})",
            )

    return list(best.values())


class SharingOpportunity(BaseModel):
    subscription: Subscription
    family_plan: FamilyPlan
    individual_price: float
    price_per_person: float
    savings_per_person: float


def find_sharing_opportunities(subscriptions: list[Subscription], catalog: Catalog) -> list[SharingOpportunity]:
    opportunities = []
    for sub in active_subscriptions(subscriptions):
        if sub.is_shared:
            continue
        preset = catalog.find_preset(sub.name)
        if preset is None or preset.family_plan is None:
            continue
        family = preset.family_plan
        per_person = float(math.ceil(family.monthly_price / family.max_members))
        savings = sub.monthly_price - per_person
        if savings <= 0:
            continue
        opportunities.append(
            SharingOpportunity(
                subscription=sub,
                family_plan=family,
                individual_price=sub.monthly_price,
                price_per_person=per_person,
                savings_per_person=savings,
            )
        )
    return opportunities


def analyze_family_sharing_savings(subscriptions: list[Subscription], catalog: Catalog) -> list[SavingsItem]:
    return [
        SavingsItem(
            subscription_name=opp.subscription.name,
            subscription_names=[opp.subscription.name],
            subscription_icon=opp.subscription.icon,
            current_monthly_price=opp.individual_price,
            action=SavingsAction.SHARE,
            savings_per_month=opp.savings_per_person,
            description=(
                f"{opp.family_plan.name} 플랜을 {opp.family_plan.max_members}인과 공유하면 "
                f"인당 {format_number(opp.price_per_person)}원"
            ),
            source="패밀리 공유",
        )
        for opp in find_sharing_opportunities(subscriptions, catalog)
    ]


def _analyses_with_subscription(
    subscriptions: list[Subscription], analyses: list[ROIAnalysis], action: RecommendAction
) -> Iterable[tuple[ROIAnalysis, Subscription]]:
    by_id = {sub.id: sub for sub in subscriptions}
    for analysis in analyses:
        if analysis.recommendation != action:
            continue
        sub = by_id.get(analysis.subscription_id)
        if sub is not None:
            yield analysis, sub


def analyze_cancellation_savings(subscriptions: list[Subscription], analyses: list[ROIAnalysis]) -> list[SavingsItem]:
    return [
        SavingsItem(
            subscription_name=sub.name,
            subscription_names=[sub.name],
            subscription_icon=sub.icon,
            current_monthly_price=sub.monthly_price,
            action=SavingsAction.CANCEL,
            savings_per_month=sub.monthly_price,
            description=analysis.recommendation_reason,
            source=f"ROI 분석 (등급 {analysis.grade})",
        )
        for analysis, sub in _analyses_with_subscription(subscriptions, analyses, RecommendAction.CANCEL)
    ]


def _cheaper_plan(preset: ServicePreset, current_price: float) -> ServicePlan | None:
    cheaper = [plan for plan in preset.plans if plan.monthly_price < current_price]
    if not cheaper:
        return None
    # Most expensive plan still below the current price; first listed wins a tie
    return max(cheaper, key=lambda plan: plan.monthly_price)


def analyze_downgrade_savings(
    subscriptions: list[Subscription], analyses: list[ROIAnalysis], catalog: Catalog
) -> list[SavingsItem]:
    items = []
    for _, sub in _analyses_with_subscription(subscriptions, analyses, RecommendAction.DOWNGRADE):
        preset = catalog.find_preset(sub.name)
        if preset is None or len(preset.plans) <= 1:
            continue
        plan = _cheaper_plan(preset, sub.monthly_price)
        if plan is None:
            continue
        items.append(
            SavingsItem(
                subscription_name=sub.name,
                subscription_names=[sub.name],
                subscription_icon=sub.icon,
                current_monthly_price=sub.monthly_price,
                action=SavingsAction.DOWNGRADE,
                savings_per_month=sub.monthly_price - plan.monthly_price,
                description=f"{plan.name} 요금제({format_number(plan.monthly_price)}원/월)로 변경 추천",
                source="요금제 다운그레이드",
            )
        )
    return items


# ── Deduplication ─────────────────────────────────────────────────────


def _scale_to_budget(items: list[SavingsItem], budget: float) -> list[SavingsItem]:
    total = sum(item.savings_per_month for item in items)
    ratio = budget / total
    scaled = [
        item.model_copy(
            update={"savings_per_month": min(round_won(item.savings_per_month * ratio), item.current_monthly_price)}
        )
        for item in items
    ]
    # Rounding up may leave a few won above the budget; take them off the largest items first
    overshoot = sum(item.savings_per_month for item in scaled) - budget
    for i in sorted(range(len(scaled)), key=lambda i: scaled[i].savings_per_month, reverse=True):
        if overshoot <= 0:
            break
        cut = min(scaled[i].savings_per_month, overshoot)
        scaled[i] = scaled[i].model_copy(update={"savings_per_month": scaled[i].savings_per_month - cut})
        overshoot -= cut
    return scaled


def deduplicate_savings_items(items: list[SavingsItem], active: list[Subscription]) -> list[SavingsItem]:
    """Keep one savings method per subscription and cap the total at current spend.

    Bundles are accepted greedily by savings; a bundle that touches a
    subscription already claimed by a better bundle is dropped, and individual
    items for claimed subscriptions are dropped too.
    """
    bundles = [item for item in items if item.action == SavingsAction.USE_BUNDLE]
    singles = [item for item in items if item.action != SavingsAction.USE_BUNDLE]

    claimed: set[str] = set()
    selected: list[SavingsItem] = []
    for bundle in sorted(bundles, key=lambda item: item.savings_per_month, reverse=True):
        if any(name in claimed for name in bundle.subscription_names):
            continue
        selected.append(bundle)
        claimed.update(bundle.subscription_names)

    best_by_name: dict[str, SavingsItem] = {}
    for item in singles:
        if any(name in claimed for name in item.subscription_names):
            continue
        existing = best_by_name.get(item.subscription_name)
        if existing is None or item.savings_per_month > existing.savings_per_month:
            best_by_name[item.subscription_name] = item

    accepted = [
        item.model_copy(
            update={"savings_per_month": max(0.0, min(item.savings_per_month, item.current_monthly_price))}
        )
        for item in [*selected, *best_by_name.values()]
    ]

    total_spend = sum(sub.monthly_price for sub in active)
    total_savings = sum(item.savings_per_month for item in accepted)
    if total_savings > total_spend and total_savings > 0:
        logger.info("Scaling savings %.2f down to monthly spend %.2f", total_savings, total_spend)
        accepted = _scale_to_budget(accepted, total_spend)

    return sorted(accepted, key=lambda item: item.savings_per_month, reverse=True)


# ── Report ────────────────────────────────────────────────────────────


def compute_purchase_alternatives(yearly_savings: float) -> list[PurchaseAlternative]:
    if yearly_savings <= 0:
        return []
    alternatives = [
        item.model_copy(update={"count": int(yearly_savings // item.price)}) for item in PURCHASE_ALTERNATIVES_CATALOG
    ]
    return sorted((a for a in alternatives if a.count > 0), key=lambda a: a.count, reverse=True)


def _total(items: list[SavingsItem]) -> float:
    return sum(item.savings_per_month for item in items)


def generate_report_summary(
    monthly_savings: float,
    yearly_savings: float,
    items: list[SavingsItem],
    simulation: InvestmentSimulation,
) -> str:
    if not items:
        return "현재 구독 포트폴리오가 잘 최적화되어 있어요! 추가 절약 여지가 크지 않습니다."

    parts = [
        f"분석 결과, 월 {format_number(monthly_savings)}원(연 {format_number(yearly_savings)}원)을 "
        f"절약할 수 있는 {len(items)}가지 방법을 찾았어요."
    ]

    by_action: dict[SavingsAction, list[SavingsItem]] = {}
    for item in items:
        by_action.setdefault(item.action, []).append(item)

    if cancel := by_action.get(SavingsAction.CANCEL):
        parts.append(
            f"사용량이 적은 구독 {len(cancel)}건을 해지하면 월 {format_number(_total(cancel))}원을 절약할 수 있어요."
        )
    if share := by_action.get(SavingsAction.SHARE):
        parts.append(
            f"패밀리 공유를 활용하면 {len(share)}건에서 월 {format_number(_total(share))}원을 줄일 수 있어요."
        )
    if bundle := by_action.get(SavingsAction.USE_BUNDLE):
        parts.append(f"번들 상품으로 통합하면 월 {format_number(_total(bundle))}원을 절약할 수 있어요.")
    if discount := by_action.get(SavingsAction.USE_DISCOUNT):
        parts.append(f"카드/통신사 할인을 활용하면 월 {format_number(_total(discount))}원을 추가로 줄일 수 있어요.")
    if downgrade := by_action.get(SavingsAction.DOWNGRADE):
        parts.append(f"요금제를 다운그레이드할 수 있는 구독이 {len(downgrade)}건 있어요.")

    if monthly_savings > 0:
        parts.append(
            f"절약한 금액을 5년간 투자하면 KOSPI 기준 약 {format_number(round_won(simulation.kospi_return_5y))}원, "
            f"S&P500 기준 약 {format_number(round_won(simulation.sp500_return_5y))}원이 될 수 있어요."
        )

    return " ".join(parts)


def generate_savings_report(
    subscriptions: list[Subscription],
    roi_analyses: list[ROIAnalysis],
    catalog: Catalog,
) -> SavingsReport:
    active = active_subscriptions(subscriptions)
    if not active:
        return SavingsReport(
            monthly_savings=0,
            yearly_savings=0,
            savings_breakdown=[],
            purchase_alternatives=[],
            investment_simulation=compute_investment_simulation(0),
            report_summary="활성 구독이 없어 분석할 내용이 없습니다.",
        )

    bundle_items, advisories = analyze_bundle_savings(active, catalog.bundles)
    candidates = [
        *bundle_items,
        *analyze_discount_savings(active, catalog.discount_events),
        *analyze_family_sharing_savings(active, catalog),
        *analyze_cancellation_savings(active, roi_analyses),
        *analyze_downgrade_savings(active, roi_analyses, catalog),
    ]
    breakdown = deduplicate_savings_items(candidates, active)
    logger.debug("Kept %d of %d savings candidates", len(breakdown), len(candidates))

    monthly_savings = round_cents(_total(breakdown))
    yearly_savings = round_cents(monthly_savings * 12)
    simulation = compute_investment_simulation(monthly_savings)

    return SavingsReport(
        monthly_savings=monthly_savings,
        yearly_savings=yearly_savings,
        savings_breakdown=breakdown,
        advisories=advisories,
        purchase_alternatives=compute_purchase_alternatives(yearly_savings),
        investment_simulation=simulation,
        report_summary=generate_report_summary(monthly_savings, yearly_savings, breakdown, simulation),
    )


class AnalysisResult(BaseModel):
    analyses: list[ROIAnalysis]
    report: SavingsReport
    chart: list[InvestmentDataPoint]


def run_analysis(
    subscriptions: list[Subscription],
    observations: list[UsageObservation],
    catalog: Catalog,
    years: int = 5,
    max_points: int = 20,
) -> AnalysisResult:
    """Grade usage, build the savings report and the chart series in one pass."""
    analyses = analyze_usage(subscriptions, observations, catalog)
    report = generate_savings_report(subscriptions, analyses, catalog)
    points = generate_investment_data_points(report.monthly_savings, years)
    return AnalysisResult(analyses=analyses, report=report, chart=downsample_series(points, max_points))
