from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite:///./tipsheet.db"

    # JWT (cookie-based admin auth)
    JWT_SECRET: str
    JWT_ISS: str = "tipsheet-api"
    JWT_AUD: str = "tipsheet-admin"

    # Cookie
    COOKIE_DOMAIN: str | None = None
    COOKIE_SECURE: bool = True
    ACCESS_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 7  # 7 days
    DEVICE_COOKIE_TTL_SECONDS: int = 60 * 60 * 24 * 365 * 2

    # Google Places (optional; manual entry only when empty)
    GOOGLE_MAPS_API_KEY: str = ""
    PLACES_COUNTRY: str = "us"
    PLACES_TIMEOUT_SECONDS: float = 5.0

    # Venues added without a place pick land in this state
    DEFAULT_STATE: str = "NJ"

    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x.strip()]


settings = Settings()
