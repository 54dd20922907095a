"""Shared fixtures for the savings engine tests."""

import sys
from pathlib import Path

# Ensure the backend/ layout is importable without installing the package.
_BACKEND_PATH = Path(__file__).parent.parent / "backend"
if str(_BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(_BACKEND_PATH))

from collections.abc import Callable

import pytest

from haedok.schemas.catalog import Catalog
from haedok.schemas.subscription import Subscription, UsageObservation
from haedok.services.catalog import build_default_catalog


@pytest.fixture
def catalog() -> Catalog:
    """The built-in reference catalogs."""
    return build_default_catalog()


@pytest.fixture
def empty_catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def make_sub() -> Callable[..., Subscription]:
    """Build a Subscription with sensible defaults; id defaults to the name."""

    def _make(name: str, price: float, category: str = "video", **kwargs) -> Subscription:
        kwargs.setdefault("id", name)
        return Subscription(name=name, price=price, category=category, **kwargs)

    return _make


@pytest.fixture
def portfolio(make_sub) -> list[Subscription]:
    """A realistic Korean subscription portfolio."""
    return [
        make_sub("넷플릭스", 17000),
        make_sub("티빙", 13500),
        make_sub("웨이브", 10900),
        make_sub("디즈니플러스", 9900),
        make_sub("스포티파이", 10900, category="music"),
        make_sub("쿠팡 와우 멤버십", 7890, category="shopping"),
        make_sub("마이크로소프트 365", 89000, category="productivity", billing_cycle="yearly"),
        make_sub("밀리의 서재", 9900, category="reading", status="paused"),
    ]


@pytest.fixture
def portfolio_usage() -> list[UsageObservation]:
    return [
        UsageObservation(subscription_id="넷플릭스", usage_value=60),
        UsageObservation(subscription_id="티빙", usage_value=0),
        UsageObservation(subscription_id="웨이브", usage_value=30),
        UsageObservation(subscription_id="디즈니플러스", usage_value=600),
        UsageObservation(subscription_id="스포티파이", usage_value=240),
        UsageObservation(subscription_id="쿠팡 와우 멤버십", usage_value=1),
        UsageObservation(subscription_id="마이크로소프트 365", usage_value=5),
        UsageObservation(subscription_id="밀리의 서재", usage_value=0),
    ]
