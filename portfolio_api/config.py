"""Application settings loaded from environment variables."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

# Configure logging
logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "1", "yes", "on"}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUE_VALUES


def _env_optional(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class Settings:
    """
    Process-wide configuration for the portfolio API.

    Built once at startup and handed to ``create_app``; routes read it from
    ``request.app.state.settings``.
    """

    database_url: str
    admin_key: Optional[str] = None
    contact_email: Optional[str] = None
    mail_api_key: Optional[str] = None
    mail_from: str = "noreply@adrianlumley.com"
    mail_server: str = "smtp.sendgrid.net"
    mail_port: int = 587
    mail_username: str = "apikey"
    dev_mode: bool = False
    trust_proxy: bool = False
    contact_rate_limit: int = 3
    contact_rate_window_seconds: int = 15 * 60
    name_app: str = "PortfolioAPI"
    log_file: Optional[str] = "portfolio_api.log"

    @property
    def admin_enabled(self) -> bool:
        return bool(self.admin_key)

    @property
    def mail_configured(self) -> bool:
        return bool(self.mail_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the current environment.

        Call ``load_dotenv()`` first to pick up a local ``.env`` file.

        Returns:
            Settings: Populated settings

        Raises:
            ValueError: If DATABASE_URL is missing or a numeric value is invalid
        """
        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL must be set in .env file")

        admin_key = _env_optional("ADMIN_KEY")
        if admin_key is None:
            logger.warning("ADMIN_KEY not configured, admin operations are disabled")

        log_file = os.getenv("LOG_FILE", "portfolio_api.log")

        return cls(
            database_url=database_url,
            admin_key=admin_key,
            contact_email=_env_optional("CONTACT_EMAIL"),
            mail_api_key=_env_optional("SENDGRID_API_KEY"),
            mail_from=os.getenv("SENDGRID_FROM_EMAIL", "noreply@adrianlumley.com"),
            mail_server=os.getenv("MAIL_SERVER", "smtp.sendgrid.net"),
            mail_port=int(os.getenv("MAIL_PORT", "587")),
            mail_username=os.getenv("MAIL_USERNAME", "apikey"),
            dev_mode=os.getenv("APP_ENV", "production").strip().lower() == "development",
            trust_proxy=_env_flag("TRUST_PROXY"),
            contact_rate_limit=int(os.getenv("CONTACT_RATE_LIMIT", "3")),
            contact_rate_window_seconds=int(os.getenv("CONTACT_RATE_WINDOW_SECONDS", "900")),
            name_app=os.getenv("NAME_APP", "PortfolioAPI"),
            log_file=log_file or None,
        )
