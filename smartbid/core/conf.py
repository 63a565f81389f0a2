from functools import lru_cache
from typing import Any, Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smartbid.core.path_conf import BASE_PATH


class Settings(BaseSettings):
    """Global configuration"""

    model_config = SettingsConfigDict(
        env_file=f'{BASE_PATH}/.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True,
    )

    # .env current environment
    ENVIRONMENT: Literal['dev', 'prod'] = 'dev'

    # FastAPI
    FASTAPI_API_PATH: str = '/api'
    FASTAPI_TITLE: str = 'SmartBid'
    FASTAPI_DESCRIPTION: str = 'Bid compliance auditing backend'
    FASTAPI_DOCS_URL: str | None = '/docs'
    FASTAPI_OPENAPI_URL: str | None = '/openapi'

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = ['*']

    # Logging (console)
    LOG_STD_LEVEL: str = 'INFO'
    LOG_FORMAT: str = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'

    # Document store namespace: artifacts/{APP_ID}/...
    APP_ID: str = 'default-app-id'

    # .env Firestore service account (JSON string)
    FIREBASE_SERVICE_ACCOUNT: str = ''
    USAGE_TRANSACTION_MAX_ATTEMPTS: int = 5

    # --------------------------------------------------------------------------
    # Google Gemini Configuration
    # --------------------------------------------------------------------------
    GOOGLE_API_KEY: str = ''
    GEMINI_MODEL: str = 'gemini-2.0-flash'
    GEMINI_API_BASE_URL: str = 'https://generativelanguage.googleapis.com/v1beta'
    LLM_MAX_ATTEMPTS: int = 3
    LLM_RETRY_BASE_DELAY: float = 1.0  # seconds, doubles per attempt
    LLM_TIMEOUT_SECONDS: float = 120.0

    # --------------------------------------------------------------------------
    # Stripe Configuration
    # --------------------------------------------------------------------------
    STRIPE_SECRET_KEY: str = ''  # Stripe secret key (sk_...)
    STRIPE_WEBHOOK_SECRET: str = ''  # Webhook signing secret (whsec_...)
    STRIPE_WEBHOOK_TOLERANCE: int = 300  # 5 minutes
    STRIPE_PORTAL_RETURN_URL: str = 'https://smartbid-secure.onrender.com'

    # Billing Feature Flags
    BILLING_FREE_TRIAL_LIMIT: int = 3  # Free bidder checks before paywall

    @model_validator(mode='before')
    @classmethod
    def check_env(cls, values: Any) -> Any:
        """Check environment variables"""
        if values.get('ENVIRONMENT') == 'prod':
            values['FASTAPI_DOCS_URL'] = None
            values['FASTAPI_OPENAPI_URL'] = None

        return values

    @property
    def firestore_configured(self) -> bool:
        return bool(self.FIREBASE_SERVICE_ACCOUNT)

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def llm_configured(self) -> bool:
        return bool(self.GOOGLE_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """Get the global settings singleton"""
    return Settings()


# Global settings instance
settings = get_settings()
