import re
from enum import StrEnum

from pydantic import BaseModel

from haedok.schemas.catalog import BundleDeal
from haedok.schemas.savings import SavingsAction, SavingsItem
from haedok.schemas.subscription import Subscription, active_subscriptions
from haedok.services.money import format_number


class BundleRecommendationType(StrEnum):
    SAVINGS = "savings"
    # Conditional perks, or bundles that are not cheaper; shown for reference only
    INFO = "info"


class BundleOptimization(BaseModel):
    bundle: BundleDeal
    matched_subscriptions: list[Subscription]
    current_total_cost: float
    bundle_cost: float
    monthly_savings: float
    explanation: str
    type: BundleRecommendationType


def normalize_service_name(name: str) -> str:
    return re.sub(r"\s+", "", name.lower()).replace("+", "플러스")


def service_matches(subscription_name: str, service_name: str) -> bool:
    return (
        service_name in subscription_name
        or subscription_name in service_name
        or normalize_service_name(subscription_name) == normalize_service_name(service_name)
    )


def find_matching_subscriptions(subscriptions: list[Subscription], bundle: BundleDeal) -> list[Subscription]:
    return [
        sub
        for sub in subscriptions
        if any(service_matches(sub.name, included) for included in bundle.included_services)
    ]


def analyze_bundle_optimization(
    subscriptions: list[Subscription], bundles: list[BundleDeal]
) -> list[BundleOptimization]:
    """Find bundles that save money or are worth knowing about.

    Bundles the user already pays for (a subscription named like the bundle)
    are skipped.
    """
    active = active_subscriptions(subscriptions)
    results: list[BundleOptimization] = []

    for bundle in bundles:
        matched = find_matching_subscriptions(active, bundle)
        if not matched:
            continue

        bundle_key = normalize_service_name(bundle.name)
        if any(normalize_service_name(sub.name) == bundle_key for sub in active):
            continue

        current_total = sum(sub.monthly_price for sub in matched)
        names = ", ".join(sub.name for sub in matched)

        if bundle.conditional:
            if len(matched) < 2:
                continue
            savings = 0.0
            kind = BundleRecommendationType.INFO
            explanation = f"{bundle.provider} 가입자라면 {names}을(를) {bundle.name} 혜택으로 이용할 수 있어요."
        elif bundle.price < current_total:
            savings = current_total - bundle.price
            kind = BundleRecommendationType.SAVINGS
            explanation = f"{names}을(를) {bundle.name}으로 통합하면 월 {format_number(savings)}원을 절약할 수 있어요."
        elif len(matched) >= 2:
            savings = 0.0
            kind = BundleRecommendationType.INFO
            explanation = f"{names}을(를) 포함하는 {bundle.name}도 있어요. 가족과 공유하면 더 저렴할 수 있어요."
        else:
            continue

        results.append(
            BundleOptimization(
                bundle=bundle,
                matched_subscriptions=matched,
                current_total_cost=current_total,
                bundle_cost=bundle.price,
                monthly_savings=savings,
                explanation=explanation,
                type=kind,
            )
        )

    # Savings first (largest first), then references by number of matches
    return sorted(
        results,
        key=lambda opt: (
            opt.type != BundleRecommendationType.SAVINGS,
            -opt.monthly_savings if opt.type == BundleRecommendationType.SAVINGS else -len(opt.matched_subscriptions),
        ),
    )


def calculate_bundle_savings(subscriptions: list[Subscription], bundle: BundleDeal) -> tuple[float, int]:
    """Return (monthly savings, number of replaced subscriptions) for one bundle."""
    matched = find_matching_subscriptions(subscriptions, bundle)
    current = sum(sub.monthly_price for sub in matched)
    return max(0.0, current - bundle.price), len(matched)


def _to_savings_item(opt: BundleOptimization) -> SavingsItem:
    names = [sub.name for sub in opt.matched_subscriptions]
    if opt.type == BundleRecommendationType.SAVINGS:
        description = f"{opt.bundle.name}({format_number(opt.bundle.price)}원/월)으로 통합하면 절약할 수 있어요"
    else:
        description = opt.explanation
    return SavingsItem(
        subscription_name=" + ".join(names),
        subscription_names=names,
        subscription_icon=opt.bundle.icon or opt.matched_subscriptions[0].icon,
        current_monthly_price=opt.current_total_cost,
        action=SavingsAction.USE_BUNDLE,
        savings_per_month=opt.monthly_savings,
        description=description,
        source=f"번들 할인 ({opt.bundle.provider})",
    )


def analyze_bundle_savings(
    subscriptions: list[Subscription], bundles: list[BundleDeal]
) -> tuple[list[SavingsItem], list[SavingsItem]]:
    """Split bundle findings into savings items and zero-value advisories."""
    items: list[SavingsItem] = []
    advisories: list[SavingsItem] = []
    for opt in analyze_bundle_optimization(subscriptions, bundles):
        if opt.monthly_savings > 0:
            items.append(_to_savings_item(opt))
        else:
            advisories.append(_to_savings_item(opt))
    return items, advisories
