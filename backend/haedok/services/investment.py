"""Compound growth projections for monthly savings.

Deposits are made at the start of each month and compound monthly at
``(1 + annual_rate) ** (1 / 12) - 1``.
"""
import math
from typing import TypeVar

from pydantic import BaseModel

from haedok.schemas.savings import InvestmentDataPoint, InvestmentSimulation
from haedok.services.money import round_cents, round_won

T = TypeVar("T")

SAVINGS_ANNUAL_RATE = 0.035
KOSPI_ANNUAL_RATE = 0.085
SP500_ANNUAL_RATE = 0.105

PROJECTION_YEARS = (1, 3, 5)


def monthly_rate(annual_rate: float) -> float:
    return (1 + annual_rate) ** (1 / 12) - 1


def _grow(balance: float, monthly_amount: float, rate: float) -> float:
    return (balance + monthly_amount) * (1 + rate)


def calculate_compound_return(monthly_amount: float, annual_rate: float, years: int) -> float:
    """Future value of ``years`` of monthly deposits, rounded to 2 decimals."""
    rate = monthly_rate(annual_rate)
    balance = 0.0
    for _ in range(years * 12):
        balance = _grow(balance, monthly_amount, rate)
    return round_cents(balance)


def compute_investment_simulation(monthly_amount: float) -> InvestmentSimulation:
    figures: dict[str, float] = {}
    for prefix, annual_rate in (
        ("kospi", KOSPI_ANNUAL_RATE),
        ("sp500", SP500_ANNUAL_RATE),
        ("savings", SAVINGS_ANNUAL_RATE),
    ):
        for years in PROJECTION_YEARS:
            figures[f"{prefix}_return_{years}y"] = calculate_compound_return(monthly_amount, annual_rate, years)
    return InvestmentSimulation(**figures)


def month_label(month: int) -> str:
    if month == 0:
        return "시작"
    if month % 12 == 0:
        return f"{month // 12}년"
    return f"{month}개월"


def generate_investment_data_points(monthly_amount: float, years: int) -> list[InvestmentDataPoint]:
    """Month-by-month balances for all three profiles, starting at month 0."""
    kospi_rate = monthly_rate(KOSPI_ANNUAL_RATE)
    sp500_rate = monthly_rate(SP500_ANNUAL_RATE)
    savings_rate = monthly_rate(SAVINGS_ANNUAL_RATE)

    points = [InvestmentDataPoint(month=0, label=month_label(0), kospi=0, sp500=0, savings=0, principal=0)]

    kospi = sp500 = savings = 0.0
    for month in range(1, years * 12 + 1):
        kospi = _grow(kospi, monthly_amount, kospi_rate)
        sp500 = _grow(sp500, monthly_amount, sp500_rate)
        savings = _grow(savings, monthly_amount, savings_rate)
        points.append(
            InvestmentDataPoint(
                month=month,
                label=month_label(month),
                kospi=round_cents(kospi),
                sp500=round_cents(sp500),
                savings=round_cents(savings),
                principal=round_cents(monthly_amount * month),
            )
        )
    return points


def downsample_series(points: list[T], max_points: int = 20) -> list[T]:
    """Keep the first point, every Nth point and the last one."""
    total = len(points)
    if total <= max_points:
        return list(points)
    if max_points < 2:
        return list(points[-1:]) if max_points == 1 else []
    step = math.ceil((total - 1) / (max_points - 1))
    return [p for i, p in enumerate(points) if i % step == 0 or i == total - 1]


# ── Dollar-cost averaging over real price series ──────────────────────


class PricePoint(BaseModel):
    date: str  # YYYY-MM
    price: float


class PriceSeries(BaseModel):
    symbol: str
    name: str
    data: list[PricePoint]


class DCAPoint(BaseModel):
    date: str
    values: dict[str, float]
    principal: float


def simulate_dca(monthly_amount: float, series: list[PriceSeries]) -> list[DCAPoint]:
    """Buy ``monthly_amount`` of every series each month over their common window."""
    if not series or monthly_amount <= 0:
        return []
    window = min(len(s.data) for s in series)
    if window == 0:
        return []

    base = series[0].data[-window:]
    holdings = {s.name: 0.0 for s in series}
    results = []

    for i in range(window):
        values: dict[str, float] = {}
        for s in series:
            price = s.data[len(s.data) - window + i].price
            if price > 0:
                holdings[s.name] += monthly_amount / price
            values[s.name] = round_won(holdings[s.name] * price)
        results.append(DCAPoint(date=base[i].date, values=values, principal=monthly_amount * (i + 1)))
    return results
