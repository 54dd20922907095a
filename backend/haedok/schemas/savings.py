from enum import StrEnum

from pydantic import BaseModel


class SavingsAction(StrEnum):
    CANCEL = "cancel"
    DOWNGRADE = "downgrade"
    SHARE = "share"
    SWITCH_PLAN = "switch_plan"
    USE_BUNDLE = "use_bundle"
    USE_DISCOUNT = "use_discount"


class SavingsItem(BaseModel):
    subscription_name: str
    # Every subscription the item claims; a bundle lists all of its members
    subscription_names: list[str]
    subscription_icon: str = ""
    current_monthly_price: float
    action: SavingsAction
    savings_per_month: float
    description: str
    source: str


class PurchaseAlternative(BaseModel):
    name: str
    price: float
    emoji: str
    count: int = 0


class InvestmentSimulation(BaseModel):
    # KOSPI200 ETF, 8.5% a year
    kospi_return_1y: float
    kospi_return_3y: float
    kospi_return_5y: float
    # S&P500, 10.5% a year
    sp500_return_1y: float
    sp500_return_3y: float
    sp500_return_5y: float
    # Savings account, 3.5% a year
    savings_return_1y: float
    savings_return_3y: float
    savings_return_5y: float


class InvestmentDataPoint(BaseModel):
    month: int
    label: str
    kospi: float
    sp500: float
    savings: float
    principal: float


class SavingsReport(BaseModel):
    monthly_savings: float
    yearly_savings: float
    savings_breakdown: list[SavingsItem]
    advisories: list[SavingsItem] = []
    purchase_alternatives: list[PurchaseAlternative]
    investment_simulation: InvestmentSimulation
    report_summary: str
