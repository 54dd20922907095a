import math
from enum import StrEnum

from pydantic import BaseModel, field_validator, model_validator

from haedok.services.money import round_half_up


class SubscriptionCategory(StrEnum):
    VIDEO = "video"
    MUSIC = "music"
    CLOUD = "cloud"
    PRODUCTIVITY = "productivity"
    SHOPPING = "shopping"
    GAMING = "gaming"
    READING = "reading"
    OTHER = "other"


class BillingCycle(StrEnum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    TRIAL = "trial"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class UsageMetricType(StrEnum):
    TIME = "time"
    COUNT = "count"
    FREQUENCY = "frequency"


CATEGORY_LABELS: dict[SubscriptionCategory, str] = {
    SubscriptionCategory.VIDEO: "OTT",
    SubscriptionCategory.MUSIC: "음악",
    SubscriptionCategory.CLOUD: "클라우드",
    SubscriptionCategory.PRODUCTIVITY: "생산성",
    SubscriptionCategory.SHOPPING: "쇼핑/배달",
    SubscriptionCategory.GAMING: "게임",
    SubscriptionCategory.READING: "독서",
    SubscriptionCategory.OTHER: "기타",
}

# time: weekly minutes, count: monthly uses, frequency: days per week
CATEGORY_METRIC: dict[SubscriptionCategory, UsageMetricType] = {
    SubscriptionCategory.VIDEO: UsageMetricType.TIME,
    SubscriptionCategory.MUSIC: UsageMetricType.TIME,
    SubscriptionCategory.CLOUD: UsageMetricType.FREQUENCY,
    SubscriptionCategory.PRODUCTIVITY: UsageMetricType.FREQUENCY,
    SubscriptionCategory.SHOPPING: UsageMetricType.COUNT,
    SubscriptionCategory.GAMING: UsageMetricType.TIME,
    SubscriptionCategory.READING: UsageMetricType.FREQUENCY,
    SubscriptionCategory.OTHER: UsageMetricType.FREQUENCY,
}

ACTIVE_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL)


def coerce_amount(value: object) -> float:
    """Parse a numeric input, degrading anything unusable to 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def to_monthly_price(price: float, billing_cycle: BillingCycle) -> float:
    if billing_cycle == BillingCycle.YEARLY:
        return round_half_up(price / 12)
    return price


class Subscription(BaseModel):
    id: str
    name: str
    category: SubscriptionCategory = SubscriptionCategory.OTHER
    icon: str = ""
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    price: float = 0
    monthly_price: float = 0
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    is_shared: bool = False
    shared_count: int | None = None
    plan_name: str | None = None
    memo: str | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: object) -> float:
        return max(coerce_amount(value), 0.0)

    @model_validator(mode="after")
    def _derive_monthly_price(self) -> "Subscription":
        # monthly_price always follows price and cycle, whatever the caller sent
        self.monthly_price = to_monthly_price(self.price, self.billing_cycle)
        return self

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def metric_type(self) -> UsageMetricType:
        return CATEGORY_METRIC[self.category]


class UsageObservation(BaseModel):
    subscription_id: str
    metric_type: UsageMetricType | None = None
    usage_value: float = 0

    @field_validator("usage_value", mode="before")
    @classmethod
    def _parse_usage(cls, value: object) -> float:
        return coerce_amount(value)


def active_subscriptions(subscriptions: list[Subscription]) -> list[Subscription]:
    return [s for s in subscriptions if s.is_active]
