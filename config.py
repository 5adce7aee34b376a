"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from typing import Literal

from war.game.rules import RuleSet
from war.limiter import DEFAULT_COOLDOWN_MS


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _parse_forced_war_interval() -> int | None:
    """Parse WAR_FORCED_WAR_INTERVAL; 0 or empty disables forced wars."""
    value = os.getenv("WAR_FORCED_WAR_INTERVAL", "").strip()
    if not value or value == "0":
        return None
    return int(value)


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

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
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
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class GameConfig:
    """Default game configuration."""

    include_special_cards: bool = field(
        default_factory=lambda: _env_flag("WAR_SPECIAL_CARDS", "false")
    )
    war_policy: Literal["immediate", "chain"] = field(
        default_factory=lambda: os.getenv("WAR_POLICY", "immediate")  # type: ignore[arg-type,return-value]
    )
    nuke_threshold: int = field(
        default_factory=lambda: int(os.getenv("WAR_NUKE_THRESHOLD", "10"))
    )
    nuke_capture: int = field(default_factory=lambda: int(os.getenv("WAR_NUKE_CAPTURE", "10")))
    forced_war_interval: int | None = field(default_factory=_parse_forced_war_interval)
    cooldown_ms: int = field(
        default_factory=lambda: int(os.getenv("WAR_COOLDOWN_MS", DEFAULT_COOLDOWN_MS))
    )

    # Abort on conservation violations instead of reporting and continuing
    strict_invariants: bool = field(
        default_factory=lambda: _env_flag("STRICT_INVARIANTS", "true")
    )

    def rules(self) -> RuleSet:
        """Build the RuleSet for new games."""
        return RuleSet(
            include_special_cards=self.include_special_cards,
            war_policy=self.war_policy,
            nuke_threshold=self.nuke_threshold,
            nuke_capture=self.nuke_capture,
            forced_war_interval=self.forced_war_interval,
            cooldown_ms=self.cooldown_ms,
        )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    stats_ttl: int = 60 * 60 * 24 * 365  # Stats retention in seconds

    redis: RedisConfig = field(default_factory=RedisConfig)
    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()
