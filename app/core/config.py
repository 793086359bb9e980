import logging
from typing import List
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEV_SESSION_SECRET = "dev-only-insecure-secret-change-this"
PLACEHOLDER_KEYS = {"your_razorpay_key_id", "your_razorpay_key_secret"}


class Settings(BaseSettings):
	# Required; accepts DATABASE_URL or database_url
	DATABASE_URL: str

	# development | production | test
	ENVIRONMENT: str = "development"

	SESSION_SECRET: str | None = None
	SESSION_COOKIE_NAME: str = "session"
	SESSION_MAX_AGE_MINUTES: int = 24 * 60
	ALGORITHM: str = "HS256"

	# Payment gateway
	RAZORPAY_KEY_ID: str | None = None
	RAZORPAY_KEY_SECRET: str | None = None
	RAZORPAY_BASE_URL: str = "https://api.razorpay.com/v1"
	PAYMENT_GATEWAY_TIMEOUT_SECONDS: float = 10.0
	PAYMENT_CURRENCY: str = "INR"
	# Billable wage units per job for daily/hourly wages
	PAYMENT_WAGE_MULTIPLIER: int = 3

	# Lifecycle policy
	AUTO_REJECT_COMPETING_APPLICATIONS: bool = False

	# Comma separated list of origins
	ALLOWED_ORIGINS: str = "http://localhost:5000,http://localhost:5173"

	# Observability / Telemetry flags
	ENABLE_REQUEST_LOGGING: bool = True
	ENABLE_OUTBOUND_LOGGING: bool = True
	LOG_SAMPLE_RATE: float = 1.0
	LOG_LEVEL: str = "INFO"

	@property
	def is_production(self) -> bool:
		return self.ENVIRONMENT.lower() == "production"

	@property
	def session_secret(self) -> str:
		return self.SESSION_SECRET or DEV_SESSION_SECRET

	@property
	def allowed_origins(self) -> List[str]:
		return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

	@property
	def has_gateway_credentials(self) -> bool:
		key_id = (self.RAZORPAY_KEY_ID or "").strip()
		key_secret = (self.RAZORPAY_KEY_SECRET or "").strip()
		if not key_id or not key_secret:
			return False
		return key_id not in PLACEHOLDER_KEYS and key_secret not in PLACEHOLDER_KEYS

	@model_validator(mode="after")
	def check_production_secrets(self) -> "Settings":
		if self.is_production and not self.SESSION_SECRET:
			raise ValueError("SESSION_SECRET environment variable must be set in production")
		if not self.SESSION_SECRET:
			logger.warning("SESSION_SECRET not set - using insecure default (development only)")
		return self

	# Pydantic v2 settings config
	model_config = SettingsConfigDict(
		env_file=".env",
		extra="ignore",
		case_sensitive=False,
	)

settings = Settings()
