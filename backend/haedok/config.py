from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Haedok"
    DEBUG: bool = True
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Reference catalogs (bundles, discount events, service presets)
    CATALOG_PATH: str = ""

    # Exchange rate
    EXCHANGE_RATE_API_URL: str = "https://open.er-api.com/v6/latest/USD"
    FALLBACK_USD_KRW_RATE: float = 1450.0
    EXCHANGE_RATE_CACHE_SECONDS: int = 24 * 60 * 60

    # Investment chart
    CHART_MAX_POINTS: int = 20

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
