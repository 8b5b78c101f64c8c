"""Payment settings, read from the environment (and ``.env`` when present)."""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_ENV_PATH = _PROJECT_ROOT / ".env"

SSLCOMMERZ_SANDBOX_URL = "https://sandbox.sslcommerz.com/gwprocess/v4/api.php"


class PaymentSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_PATH),
        env_ignore_empty=True,
        extra="ignore",
    )

    PAYMENT_GATEWAY: str = "fake"  # "fake" or "sslcommerz"

    # SSLCommerz credentials (sandbox by default)
    STORE_ID: str = "testbox"
    STORE_PASSWD: SecretStr = SecretStr("qwerty")
    SSLCOMMERZ_API_URL: str = SSLCOMMERZ_SANDBOX_URL
    GATEWAY_TIMEOUT: float = 15.0
    VERIFY_IPN_SIGNATURE: bool = False

    # Public origin the processor redirects the browser back to
    BASE_URL: str = "http://localhost:8000"

    CURRENCY: str = "BDT"
    TRANSACTION_PREFIX: str = "VV"
    PRODUCT_CATEGORY: str = "Food"

    DEFAULT_CUSTOMER_NAME: str = "Customer"
    DEFAULT_CUSTOMER_EMAIL: str = "customer@example.com"
    DEFAULT_CUSTOMER_CITY: str = "Dhaka"
    DEFAULT_CUSTOMER_COUNTRY: str = "Bangladesh"

    @field_validator("BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v

    @field_validator("PAYMENT_GATEWAY", mode="before")
    @classmethod
    def normalize_gateway_name(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("TRANSACTION_PREFIX")
    @classmethod
    def prefix_has_no_delimiter(cls, v: str) -> str:
        if not v or "_" in v:
            raise ValueError("TRANSACTION_PREFIX must be non-empty and must not contain '_'")
        return v


@lru_cache
def get_payment_settings() -> PaymentSettings:
    return PaymentSettings()
