from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite:///data/lusevarsel.db"
    LOG_LEVEL: str = "INFO"
    # Empty means config/<name>.yaml at the repo root
    RISK_SCORING_CONFIG: str | None = None
    RISK_ZONES_CONFIG: str | None = None
    # Site feed (BarentsWatch fish health localities)
    SITES_FEED_URL: str = "https://www.barentswatch.no/bwapi/v1/geodata/fishhealth/localities"
    # Vessel feed (Kystverket AIS positions, REST)
    VESSELS_FEED_URL: str = "https://live.ais.barentswatch.no/v1/latest/combined"
    FEED_API_TOKEN: str | None = None
    FEED_TIMEOUT: float = 15.0
    # Backoff between retries (seconds) — keep short, callers wait on the fallback chain
    FEED_RETRY_DELAYS: list[float] = [1.0, 3.0]
    # Site cache — one slot, fresh for an hour, stale copy kept as last resort
    SITE_CACHE_TTL_SECONDS: int = 3600
    SITE_CACHE_KEY: str = "lusevarsel:sites"
    # Synthetic fallback dataset sizes
    SYNTHETIC_SITE_COUNT: int = 60
    SYNTHETIC_VESSEL_COUNT: int = 25
    # Mixed into the position-correction hash; changing it moves every corrected point
    CORRECTOR_SEED: str = ""
    # CORS origins (comma-separated string for env var support)
    CORS_ORIGINS: str = "http://localhost:5173"


settings = Settings()
