from fastapi import APIRouter, Query

from haedok.config import settings
from haedok.services.exchange_rate import convert_usd_to_krw, fetch_usd_to_krw, format_exchange_info

router = APIRouter(prefix="/exchange-rate", tags=["exchange-rate"])


async def _current_rate() -> float:
    return await fetch_usd_to_krw(
        settings.EXCHANGE_RATE_API_URL,
        settings.FALLBACK_USD_KRW_RATE,
        cache_seconds=settings.EXCHANGE_RATE_CACHE_SECONDS,
    )


@router.get("/")
async def usd_to_krw():
    return {"base": "USD", "quote": "KRW", "rate": await _current_rate()}


@router.get("/convert")
async def convert(usd: float = Query(..., ge=0)):
    rate = await _current_rate()
    krw = convert_usd_to_krw(usd, rate)
    return {"usd": usd, "krw": krw, "rate": rate, "info": format_exchange_info(usd, krw, rate)}
