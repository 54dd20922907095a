import logging
from functools import lru_cache
from pathlib import Path

from haedok.config import settings
from haedok.schemas.catalog import BundleDeal, Catalog, DiscountEvent, ServicePreset

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE_DEALS = [
    {
        "id": "tving-wavve-double",
        "name": "티빙·웨이브 더블 이용권",
        "provider": "티빙×웨이브",
        "icon": "🎬",
        "included_services": ["티빙", "웨이브"],
        "price": 16000,
    },
    {
        "id": "naver-plus-tving",
        "name": "네이버플러스 멤버십",
        "provider": "네이버",
        "icon": "🟢",
        "included_services": ["티빙"],
        "price": 4900,
        "description": "티빙 광고형 스탠다드 포함",
    },
    {
        "id": "apple-one",
        "name": "Apple One",
        "provider": "Apple",
        "icon": "🍎",
        "included_services": ["애플 뮤직", "Apple TV+", "iCloud+", "Apple Arcade"],
        "price": 14900,
    },
    {
        "id": "youtube-premium",
        "name": "유튜브 프리미엄",
        "provider": "Google",
        "icon": "▶️",
        "included_services": ["유튜브 뮤직"],
        "price": 14900,
    },
    {
        "id": "skt-universe-pass",
        "name": "우주패스 all",
        "provider": "SKT",
        "icon": "🪐",
        "included_services": ["유튜브 프리미엄", "배달의민족", "구글 원"],
        "price": 9900,
        "conditional": True,
        "description": "SKT 요금제 가입자 전용",
    },
    {
        "id": "lgu-youdok",
        "name": "유독 구독",
        "provider": "LG U+",
        "icon": "📺",
        "included_services": ["넷플릭스", "디즈니플러스", "티빙"],
        "price": 9900,
        "conditional": True,
        "description": "LG U+ 요금제 가입자 전용",
    },
]

DEFAULT_DISCOUNT_EVENTS = [
    {
        "id": "hyundai-netflix",
        "title": "현대카드 넷플릭스 캐시백",
        "description": "현대카드로 결제 시 매월 3,000원 캐시백",
        "type": "card",
        "provider": "현대카드",
        "target_services": ["넷플릭스"],
        "discount_amount": 3000,
    },
    {
        "id": "samsung-digital",
        "title": "삼성카드 디지털 구독 할인",
        "description": "스트리밍 구독료 10% 청구 할인",
        "type": "card",
        "provider": "삼성카드",
        "target_services": ["넷플릭스", "유튜브 프리미엄", "멜론", "스포티파이"],
        "discount_percent": 10,
    },
    {
        "id": "skt-wavve",
        "title": "T멤버십 웨이브 할인",
        "description": "SKT 고객 웨이브 이용권 30% 할인",
        "type": "telecom",
        "provider": "SKT",
        "target_services": ["웨이브"],
        "discount_percent": 30,
    },
    {
        "id": "disney-yearly",
        "title": "디즈니플러스 연간 이용권",
        "description": "연간 결제 시 약 2개월 무료",
        "type": "promotion",
        "provider": "디즈니플러스",
        "target_services": ["디즈니플러스"],
        "discount_percent": 16,
    },
    {
        "id": "baemin-newcomer",
        "title": "배민클럽 첫 달 무료",
        "description": "신규 가입자 첫 달 무료 체험",
        "type": "other",
        "provider": "배달의민족",
        "target_services": ["배달의민족"],
        "discount_percent": 100,
    },
]

DEFAULT_SERVICE_PRESETS = [
    {
        "name": "넷플릭스",
        "category": "video",
        "plans": [
            {"name": "광고형 스탠다드", "price": 5500},
            {"name": "스탠다드", "price": 13500},
            {"name": "프리미엄", "price": 17000},
        ],
    },
    {
        "name": "티빙",
        "category": "video",
        "plans": [
            {"name": "광고형 스탠다드", "price": 5500},
            {"name": "베이직", "price": 9500},
            {"name": "스탠다드", "price": 13500},
            {"name": "프리미엄", "price": 17000},
        ],
    },
    {
        "name": "웨이브",
        "category": "video",
        "plans": [
            {"name": "베이직", "price": 7900},
            {"name": "스탠다드", "price": 10900},
            {"name": "프리미엄", "price": 13900},
        ],
    },
    {
        "name": "디즈니플러스",
        "category": "video",
        "plans": [
            {"name": "스탠다드", "price": 9900},
            {"name": "프리미엄", "price": 13900},
            {"name": "프리미엄 연간", "price": 139000, "cycle": "yearly"},
        ],
    },
    {
        "name": "유튜브 프리미엄",
        "category": "video",
        "plans": [{"name": "개인", "price": 14900}],
    },
    {
        "name": "스포티파이",
        "category": "music",
        "plans": [
            {"name": "Individual", "price": 10900},
            {"name": "Duo", "price": 16350},
        ],
        "family_plan": {"name": "Family", "price": 16900, "max_members": 6},
    },
    {
        "name": "애플 뮤직",
        "category": "music",
        "plans": [{"name": "개인", "price": 8900}],
        "family_plan": {"name": "가족", "price": 13500, "max_members": 6},
    },
    {
        "name": "멜론",
        "category": "music",
        "plans": [
            {"name": "모바일 스트리밍", "price": 7900},
            {"name": "스트리밍 클럽", "price": 10900},
        ],
    },
    {
        "name": "구글 원",
        "category": "cloud",
        "plans": [
            {"name": "100GB", "price": 2400},
            {"name": "2TB", "price": 11900},
        ],
        "family_plan": {"name": "2TB 가족 공유", "price": 11900, "max_members": 6},
    },
    {
        "name": "마이크로소프트 365",
        "category": "productivity",
        "plans": [{"name": "Personal", "price": 89000, "cycle": "yearly"}],
        "family_plan": {"name": "Family", "price": 119000, "cycle": "yearly", "max_members": 6},
    },
    {
        "name": "닌텐도 스위치 온라인",
        "category": "gaming",
        "plans": [{"name": "개인 12개월", "price": 19900, "cycle": "yearly"}],
        "family_plan": {"name": "패밀리 12개월", "price": 34900, "cycle": "yearly", "max_members": 8},
    },
    {
        "name": "쿠팡 와우 멤버십",
        "category": "shopping",
        "plans": [{"name": "와우", "price": 7890}],
    },
    {
        "name": "밀리의 서재",
        "category": "reading",
        "plans": [{"name": "월 구독", "price": 9900}],
    },
]


def build_default_catalog() -> Catalog:
    return Catalog(
        bundles=[BundleDeal.model_validate(b) for b in DEFAULT_BUNDLE_DEALS],
        discount_events=[DiscountEvent.model_validate(e) for e in DEFAULT_DISCOUNT_EVENTS],
        service_presets={p["name"]: ServicePreset.model_validate(p) for p in DEFAULT_SERVICE_PRESETS},
    )


def load_catalog(path: str = "") -> Catalog:
    """Load catalogs from a JSON file, or the built-in defaults when no path is set."""
    if not path:
        return build_default_catalog()
    catalog = Catalog.model_validate_json(Path(path).read_text(encoding="utf-8"))
    logger.info(
        "Loaded catalog from %s (%d bundles, %d discount events, %d presets)",
        path,
        len(catalog.bundles),
        len(catalog.discount_events),
        len(catalog.service_presets),
    )
    return catalog


@lru_cache
def _cached_catalog(path: str) -> Catalog:
    return load_catalog(path)


def get_catalog() -> Catalog:
    return _cached_catalog(settings.CATALOG_PATH)
