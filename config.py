import os
import logging
import sys
from typing import Optional

import structlog

logger = logging.getLogger("voting")


def get_logger(name: str = "voting"):
    """Get a structured logger instance

    Usage:
        logger = get_logger(__name__)
        logger = logger.bind(component="store", table="Votes")
        logger.info("appending vote", contestant_id=3)

    Args:
        name: Logger name (typically __name__ or module path)

    Returns:
        Structured logger instance with context binding support
    """
    return structlog.get_logger(name)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Configuration management for the voting service"""

    def __init__(self):
        # Google Sheets record store
        self.SHEET_ID = os.getenv("VOTING_SHEET_ID", os.getenv("GOOGLE_SHEET_ID", ""))
        self.GOOGLE_CREDENTIALS = os.getenv("GOOGLE_CREDENTIALS")  # Inline service account JSON
        self.GOOGLE_CREDENTIALS_FILE = os.getenv(
            "GOOGLE_CREDENTIALS_FILE",
            os.path.join(os.getcwd(), "config", "credentials.json"),
        )
        self.CONTESTANTS_SHEET = os.getenv("VOTING_CONTESTANTS_SHEET", "Contestants")
        self.VOTES_SHEET = os.getenv("VOTING_VOTES_SHEET", "Votes")

        # Vote workflow variant: guardian fields required and written
        self.REQUIRE_GUARDIAN = _env_flag("VOTING_REQUIRE_GUARDIAN", "true")
        # Compare header rows against the expected column titles on every read
        self.STRICT_HEADERS = _env_flag("VOTING_STRICT_HEADERS", "false")
        # Vote dates are stamped in this timezone
        self.TIMEZONE = os.getenv("VOTING_TIMEZONE", "Asia/Manila")

        # Admin authentication
        self.ADMIN_PASSWORD = os.getenv("VOTING_ADMIN_PASSWORD", "")
        self.ADMIN_TOKEN_SECRET = os.getenv("VOTING_ADMIN_TOKEN_SECRET", "")
        self.ADMIN_TOKEN_HOURS = int(os.getenv("VOTING_ADMIN_TOKEN_HOURS", "8"))

        # API configuration
        self.API_HOST = os.getenv("VOTING_HOST", "0.0.0.0")
        self.API_PORT = int(os.getenv("VOTING_PORT", "3000"))
        self.DEBUG = _env_flag("VOTING_DEBUG", "false")

        # Rate limiting (100 requests per 15 minutes per client)
        self.RATE_LIMIT_REQUESTS = int(os.getenv("VOTING_RATE_LIMIT_REQUESTS", "100"))
        self.RATE_LIMIT_WINDOW = int(os.getenv("VOTING_RATE_LIMIT_WINDOW", "900"))

        # CORS settings
        self.ALLOWED_ORIGINS = self._parse_origins(
            os.getenv("VOTING_ALLOWED_ORIGINS", "*")
        )

        # Logging
        self.LOG_LEVEL = os.getenv("VOTING_LOG_LEVEL", "INFO").upper()

        # Validate configuration
        self._validate()

    def _parse_origins(self, origins_str: str) -> list:
        """Parse comma-separated origins string"""
        if not origins_str:
            return []
        return [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    def _validate(self):
        """Validate configuration values"""
        if self.RATE_LIMIT_REQUESTS <= 0:
            raise ValueError("VOTING_RATE_LIMIT_REQUESTS must be positive")

        if self.RATE_LIMIT_WINDOW <= 0:
            raise ValueError("VOTING_RATE_LIMIT_WINDOW must be positive")

        if self.ADMIN_TOKEN_HOURS <= 0:
            raise ValueError("VOTING_ADMIN_TOKEN_HOURS must be positive")

        if self.API_PORT <= 0 or self.API_PORT > 65535:
            raise ValueError("VOTING_PORT must be between 1 and 65535")

        if not self.SHEET_ID:
            logger.warning("No spreadsheet id configured - store calls will fail")

    def has_inline_credentials(self) -> bool:
        return bool(self.GOOGLE_CREDENTIALS)

    def get_credentials_source(self) -> Optional[str]:
        """Describe where service account credentials come from (never the secret itself)"""
        if self.has_inline_credentials():
            return "env:GOOGLE_CREDENTIALS"
        if os.path.exists(self.GOOGLE_CREDENTIALS_FILE):
            return f"file:{self.GOOGLE_CREDENTIALS_FILE}"
        return None

    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.DEBUG or "localhost" in str(self.ALLOWED_ORIGINS)

    def summary(self) -> dict:
        """Get a summary of current configuration (excluding secrets)"""
        return {
            "sheet_configured": bool(self.SHEET_ID),
            "credentials_source": self.get_credentials_source(),
            "contestants_sheet": self.CONTESTANTS_SHEET,
            "votes_sheet": self.VOTES_SHEET,
            "require_guardian": self.REQUIRE_GUARDIAN,
            "strict_headers": self.STRICT_HEADERS,
            "timezone": self.TIMEZONE,
            "admin_login_enabled": bool(self.ADMIN_PASSWORD),
            "api_host": self.API_HOST,
            "api_port": self.API_PORT,
            "debug": self.DEBUG,
            "rate_limit_requests": self.RATE_LIMIT_REQUESTS,
            "rate_limit_window": self.RATE_LIMIT_WINDOW,
            "allowed_origins_count": len(self.ALLOWED_ORIGINS),
            "log_level": self.LOG_LEVEL,
            "is_development": self.is_development(),
        }


def configure_structlog(is_development: bool = False, log_level: str = "INFO"):
    """Configure structlog for structured logging

    Args:
        is_development: If True, use human-readable console output. If False, use JSON.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # No timestamp processor - the process supervisor stamps lines
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if is_development:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )


# Global configuration instance
config = Config()

# Use development mode if DEBUG=true or localhost in origins
configure_structlog(
    is_development=config.is_development(),
    log_level=config.LOG_LEVEL
)
