from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str

    # JWT Authentication
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Registration
    # Comma separated; accepted in addition to rows in the allowed_domains table.
    DEFAULT_ALLOWED_DOMAINS: str = "gmail.com"
    REQUIRE_EMAIL_VERIFICATION: bool = False

    # Recommendations
    RECOMMENDATION_CACHE_PATH: str = "data/recommendations.json"
    RECOMMENDATION_TTL_MINUTES: int = 10
    RECOMMENDATION_TOP_K: int = 20
    RECOMMENDATION_FALLBACK_LIMIT: int = 20

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def default_allowed_domains(self) -> List[str]:
        return [
            domain.strip().lower()
            for domain in self.DEFAULT_ALLOWED_DOMAINS.split(",")
            if domain.strip()
        ]


settings = Settings()
