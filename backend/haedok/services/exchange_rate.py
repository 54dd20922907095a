import logging
import time

import httpx

from haedok.services.money import format_number, round_won

logger = logging.getLogger(__name__)

# Overseas digital services carry 10% VAT in Korea
VAT_RATE = 0.1

_cache: dict[str, tuple[float, float]] = {}


async def fetch_usd_to_krw(
    api_url: str,
    fallback_rate: float,
    cache_seconds: int = 24 * 60 * 60,
    client: httpx.AsyncClient | None = None,
) -> float:
    """USD/KRW rate from a free FX feed, cached in memory, falling back to a fixed rate."""
    cached = _cache.get(api_url)
    if cached and time.monotonic() - cached[1] < cache_seconds:
        return cached[0]

    own_client = client is None
    client = client or httpx.AsyncClient()
    try:
        resp = await client.get(api_url, timeout=5)
        resp.raise_for_status()
        rate = resp.json().get("rates", {}).get("KRW")
        if isinstance(rate, (int, float)) and rate > 0:
            _cache[api_url] = (float(rate), time.monotonic())
            return float(rate)
        logger.warning("Exchange rate response had no KRW rate, using fallback %s", fallback_rate)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Exchange rate fetch failed: {e}")
    finally:
        if own_client:
            await client.aclose()
    return fallback_rate


def clear_cache() -> None:
    _cache.clear()


def convert_usd_to_krw(usd_amount: float, rate: float) -> float:
    return round_won(usd_amount * rate * (1 + VAT_RATE))


def format_exchange_info(usd_price: float, krw_price: float, rate: float) -> str:
    return f"${usd_price:.2f} × {rate:.0f}원 + 부가세 10% = {format_number(krw_price)}원"
