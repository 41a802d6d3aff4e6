"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field

# Values shipped in the sample Info.plist / .env; treated as "not configured"
PLACEHOLDER_SUPABASE_URL = "YOUR_SUPABASE_URL"
PLACEHOLDER_SUPABASE_KEY = "YOUR_SUPABASE_ANON_KEY"


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class GameConfig:
    """Round pacing and host-wide name defaults."""

    resolve_delay: float = field(
        default_factory=lambda: float(os.getenv("RESOLVE_DELAY", "1.0"))
    )
    think_delay: float = field(
        default_factory=lambda: float(os.getenv("COMPUTER_THINK_DELAY", "0.6"))
    )
    # Empty keeps last-used names in memory only
    preferences_path: str = field(
        default_factory=lambda: os.getenv("PREFERENCES_PATH", "")
    )


@dataclass(frozen=True)
class AnalyticsConfig:
    """Remote game-log configuration (Supabase REST)."""

    supabase_url: str = field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    supabase_key: str = field(default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""))
    table: str = "mem_game_logs"
    timeout: float = field(
        default_factory=lambda: float(os.getenv("ANALYTICS_TIMEOUT", "2.0"))
    )

    @property
    def enabled(self) -> bool:
        """Check if both URL and key are set to real values."""
        return bool(
            self.supabase_url
            and self.supabase_key
            and self.supabase_url != PLACEHOLDER_SUPABASE_URL
            and self.supabase_key != PLACEHOLDER_SUPABASE_KEY
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    session_ttl: int = 86400  # Session timeout in seconds

    redis: RedisConfig = field(default_factory=RedisConfig)
    game: GameConfig = field(default_factory=GameConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
