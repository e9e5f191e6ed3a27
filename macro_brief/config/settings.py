"""Configuration settings for the macro brief."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv

from macro_brief.models import IndicatorSpec, Unit


load_dotenv()


# Tracked FRED indicators, keyed by the id the insight rules address
INDICATOR_SERIES: dict[str, IndicatorSpec] = {
    "CPI": IndicatorSpec("CPI", "CPIAUCSL", "Consumer Price Index", Unit.INDEX),
    "UNRATE": IndicatorSpec("UNRATE", "UNRATE", "Unemployment Rate", Unit.PERCENT),
    "DGS10": IndicatorSpec("DGS10", "DGS10", "10-Year Treasury", Unit.PERCENT),
    "DGS3MO": IndicatorSpec("DGS3MO", "DGS3MO", "3-Month Treasury", Unit.PERCENT),
    "MORTGAGE30US": IndicatorSpec(
        "MORTGAGE30US", "MORTGAGE30US", "30-Year Mortgage Rate", Unit.PERCENT
    ),
}

# FX quote currencies, all priced against the base currency
FX_BASE = "USD"
FX_SYMBOLS: tuple[str, ...] = ("NGN", "GBP", "EUR")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    return int(raw) if raw.strip() else default


def _env_list(name: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv("FRED_API_KEY", ""))
    fx_api_key: str = field(default_factory=lambda: os.getenv("FX_API_KEY", ""))
    fred_months: int = field(default_factory=lambda: _env_int("FRED_MONTHS", 60))
    fx_months: int = field(default_factory=lambda: _env_int("FX_MONTHS", 14))
    fred_cache_ttl: int = field(default_factory=lambda: _env_int("FRED_CACHE_TTL", 5 * 60))
    fx_cache_ttl: int = field(default_factory=lambda: _env_int("FX_CACHE_TTL", 60 * 60))
    insufficient_data_policy: str = field(
        default_factory=lambda: os.getenv("INSUFFICIENT_DATA_POLICY", "raise")
    )

    # Email digest (Resend API when a key is set, SMTP otherwise)
    resend_api_key: str = field(default_factory=lambda: os.getenv("RESEND_API_KEY", ""))
    smtp_host: str = field(default_factory=lambda: os.getenv("SMTP_HOST", "smtp.zoho.com"))
    smtp_port: int = field(default_factory=lambda: _env_int("SMTP_PORT", 587))
    smtp_user: str = field(default_factory=lambda: os.getenv("SMTP_USER", ""))
    smtp_password: str = field(default_factory=lambda: os.getenv("SMTP_PASS", ""))
    digest_from: str = field(
        default_factory=lambda: (
            os.getenv("DIGEST_FROM") or os.getenv("RESEND_FROM", "alerts@example.com")
        )
    )
    digest_to: list[str] = field(default_factory=lambda: _env_list("DAILY_DIGEST_TO"))
    timezone: str = field(default_factory=lambda: os.getenv("TIMEZONE", "America/New_York"))
    dashboard_url: str = field(
        default_factory=lambda: os.getenv("DASHBOARD_URL", "http://localhost:8501")
    )

    output_dir: Path = field(
        default_factory=lambda: Path(__file__).parent.parent.parent / "exports"
    )

    def validate(self) -> None:
        """Validate required settings."""
        if not self.fred_api_key:
            raise ValueError(
                "FRED_API_KEY not set. Get one at: "
                "https://fred.stlouisfed.org/docs/api/api_key.html"
            )

    @property
    def email_transport(self) -> str:
        """Digest transport: "api" when a Resend key is configured, else "smtp"."""
        return "api" if self.resend_api_key else "smtp"

    def validate_email(self, transport: str = "smtp") -> None:
        """Validate settings needed to deliver the digest over `transport`."""
        if transport == "api":
            if not self.resend_api_key:
                raise ValueError("RESEND_API_KEY must be set to send the digest via the API")
        elif not self.smtp_user or not self.smtp_password:
            raise ValueError("SMTP_USER and SMTP_PASS must be set to send the digest")
        if not self.digest_to:
            raise ValueError("No recipients in DAILY_DIGEST_TO")
