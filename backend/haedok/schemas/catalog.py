from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from haedok.schemas.subscription import BillingCycle, SubscriptionCategory, coerce_amount, to_monthly_price


class DiscountType(StrEnum):
    CARD = "card"
    TELECOM = "telecom"
    PROMOTION = "promotion"
    OTHER = "other"


class BundleDeal(BaseModel):
    id: str
    name: str
    provider: str
    icon: str = ""
    included_services: list[str]
    price: float
    conditional: bool = False
    description: str | None = None


class DiscountEvent(BaseModel):
    id: str
    title: str
    description: str = ""
    type: DiscountType = DiscountType.PROMOTION
    provider: str
    target_services: list[str]
    discount_amount: float | None = None
    discount_percent: float | None = None

    @field_validator("discount_amount", "discount_percent", mode="before")
    @classmethod
    def _parse_discount(cls, value: object) -> float | None:
        if value is None:
            return None
        return coerce_amount(value)


class ServicePlan(BaseModel):
    name: str
    price: float
    cycle: BillingCycle = BillingCycle.MONTHLY

    @property
    def monthly_price(self) -> float:
        return to_monthly_price(self.price, self.cycle)


class FamilyPlan(ServicePlan):
    max_members: int = Field(ge=1)


class ServicePreset(BaseModel):
    name: str
    category: SubscriptionCategory = SubscriptionCategory.OTHER
    icon: str = ""
    plans: list[ServicePlan] = []
    family_plan: FamilyPlan | None = None


class Catalog(BaseModel):
    bundles: list[BundleDeal] = []
    discount_events: list[DiscountEvent] = []
    service_presets: dict[str, ServicePreset] = {}

    def find_preset(self, service_name: str) -> ServicePreset | None:
        preset = self.service_presets.get(service_name)
        if preset is not None:
            return preset
        # Fall back to a case/whitespace-insensitive lookup
        wanted = "".join(service_name.lower().split())
        for name, candidate in self.service_presets.items():
            if "".join(name.lower().split()) == wanted:
                return candidate
        return None
