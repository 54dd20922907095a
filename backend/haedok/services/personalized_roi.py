"""Membership calculators: how much a perk-style subscription gives back."""
from enum import StrEnum
from typing import assert_never

from pydantic import BaseModel

from haedok.services.money import format_krw

DELIVERY_FEE = 3000


class CalculatorName(StrEnum):
    TOSS_PRIME = "tossPrime"
    BAEMIN_CLUB = "baeminClub"
    COUPANG_WOW = "coupangWow"
    NAVER_PLUS = "naverPlus"
    SSG_MEMBERSHIP = "ssgMembership"
    KURLY_PASS = "kurlyPass"


class Verdict(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    BREAK_EVEN = "break_even"
    LOSS = "loss"


VERDICT_LABELS = {
    Verdict.EXCELLENT: "매우 이득",
    Verdict.GOOD: "이득",
    Verdict.BREAK_EVEN: "거의 본전",
    Verdict.LOSS: "손해",
}


class BreakdownItem(BaseModel):
    label: str
    amount: float


class PersonalizedROIResult(BaseModel):
    savings: float
    roi: float
    breakdown_items: list[BreakdownItem]
    verdict: Verdict
    verdict_label: str
    tip: str


def get_verdict(roi: float) -> Verdict:
    if roi >= 200:
        return Verdict.EXCELLENT
    if roi >= 100:
        return Verdict.GOOD
    if roi >= 80:
        return Verdict.BREAK_EVEN
    return Verdict.LOSS


def _result(savings: float, subscription_price: float, label: str, tip: str) -> PersonalizedROIResult:
    roi = savings / subscription_price * 100 if subscription_price > 0 else 0.0
    verdict = get_verdict(roi)
    return PersonalizedROIResult(
        savings=savings,
        roi=roi,
        breakdown_items=[BreakdownItem(label=label, amount=savings)],
        verdict=verdict,
        verdict_label=VERDICT_LABELS[verdict],
        tip=tip,
    )


def calculate_toss_prime(monthly_spending: float, subscription_price: float) -> PersonalizedROIResult:
    # 4% cashback up to 1,000,000 won, 1% above that
    if monthly_spending <= 1_000_000:
        savings = monthly_spending * 0.04
    else:
        savings = 1_000_000 * 0.04 + (monthly_spending - 1_000_000) * 0.01
    return _result(savings, subscription_price, "캐시백 적립", f"월 {format_krw(148_000)} 이상 결제하면 본전입니다")


def calculate_baemin_club(order_count: float, subscription_price: float) -> PersonalizedROIResult:
    return _result(order_count * DELIVERY_FEE, subscription_price, "배달비 절약", "월 2회 이상 주문하면 본전입니다")


def calculate_coupang_wow(order_count: float, subscription_price: float) -> PersonalizedROIResult:
    return _result(order_count * DELIVERY_FEE, subscription_price, "배송비 절약", "월 3회 이상 주문하면 본전입니다")


def calculate_naver_plus(monthly_spending: float, subscription_price: float) -> PersonalizedROIResult:
    return _result(
        monthly_spending * 0.04, subscription_price, "추가 적립", f"월 {format_krw(123_000)} 이상 결제하면 본전입니다"
    )


def calculate_ssg_membership(order_count: float, subscription_price: float) -> PersonalizedROIResult:
    return _result(order_count * DELIVERY_FEE, subscription_price, "배송비 절약", "월 2회 이상 주문하면 본전입니다")


def calculate_kurly_pass(order_count: float, subscription_price: float) -> PersonalizedROIResult:
    return _result(order_count * DELIVERY_FEE, subscription_price, "배송비 절약", "월 2회 이상 주문하면 본전입니다")


def calculate_personalized_roi(
    calculator_name: str, inputs: dict[str, float], subscription_price: float
) -> PersonalizedROIResult | None:
    try:
        name = CalculatorName(calculator_name)
    except ValueError:
        return None

    spending = inputs.get("monthlySpending", 0)
    orders = inputs.get("orderCount", 0)

    match name:
        case CalculatorName.TOSS_PRIME:
            return calculate_toss_prime(spending, subscription_price)
        case CalculatorName.BAEMIN_CLUB:
            return calculate_baemin_club(orders, subscription_price)
        case CalculatorName.COUPANG_WOW:
            return calculate_coupang_wow(orders, subscription_price)
        case CalculatorName.NAVER_PLUS:
            return calculate_naver_plus(spending, subscription_price)
        case CalculatorName.SSG_MEMBERSHIP:
            return calculate_ssg_membership(orders, subscription_price)
        case CalculatorName.KURLY_PASS:
            return calculate_kurly_pass(orders, subscription_price)
        case _:
            assert_never(name)
