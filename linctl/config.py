"""Production settings read from LINCTL_* environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction

from .log import LogLevel, Logger, bool_field, duration_field, int_field, string_field


@dataclass
class RetryConfig:
    """Retry behaviour for failed requests."""

    max_attempts: int = 3
    initial_delay: timedelta = timedelta(seconds=1)
    max_delay: timedelta = timedelta(seconds=30)
    multiplier: float = 2.0
    jitter: bool = True


@dataclass
class RateLimitConfig:
    """Client-side rate limiting behaviour."""

    requests_per_second: float = 10.0
    burst: int = 20
    enabled: bool = True
    adaptive_mode: bool = True
    backoff_delay: timedelta = timedelta(seconds=5)


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "text"


@dataclass
class SecurityConfig:
    encrypt_tokens: bool = False
    audit_log: bool = True
    validate_input: bool = True


@dataclass
class MetricsConfig:
    enabled: bool = False
    export_path: str = "/tmp/linctl-metrics.json"


_VALID_LEVELS = ("debug", "info", "warn", "error")
_VALID_FORMATS = ("text", "json")

_LOG_LEVELS = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "error": LogLevel.ERROR,
}


@dataclass
class ProductionConfig:
    """All production settings together."""

    retry: RetryConfig = field(default_factory=RetryConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)

    def validate(self) -> None:
        """Raise ValueError describing the first invalid setting."""
        zero = timedelta(0)
        if self.retry.max_attempts <= 0:
            raise ValueError("retry max_attempts must be positive")
        if self.retry.initial_delay <= zero:
            raise ValueError("retry initial_delay must be positive")
        if self.retry.max_delay <= self.retry.initial_delay:
            raise ValueError("retry max_delay must be greater than initial_delay")
        if self.retry.multiplier <= 1.0:
            raise ValueError("retry multiplier must be greater than 1.0")

        if self.rate_limit.requests_per_second <= 0:
            raise ValueError("rate_limit requests_per_second must be positive")
        if self.rate_limit.burst <= 0:
            raise ValueError("rate_limit burst must be positive")
        if self.rate_limit.backoff_delay <= zero:
            raise ValueError("rate_limit backoff_delay must be positive")

        if self.logging.level.lower() not in _VALID_LEVELS:
            raise ValueError(f"logging level must be one of: [{' '.join(_VALID_LEVELS)}]")
        if self.logging.format.lower() not in _VALID_FORMATS:
            raise ValueError(f"logging format must be one of: [{' '.join(_VALID_FORMATS)}]")

    def log_level(self) -> LogLevel:
        """The configured level, falling back to INFO when unrecognised."""
        return _LOG_LEVELS.get(self.logging.level.lower(), LogLevel.INFO)

    def print_config(self, logger: Logger) -> None:
        """Log every setting as one structured info entry."""
        logger.info(
            "Production configuration loaded",
            int_field("retry_max_attempts", self.retry.max_attempts),
            duration_field("retry_initial_delay", self.retry.initial_delay),
            duration_field("retry_max_delay", self.retry.max_delay),
            string_field("retry_multiplier", f"{self.retry.multiplier:.1f}"),
            bool_field("retry_jitter", self.retry.jitter),
            string_field("rate_limit_rps", f"{self.rate_limit.requests_per_second:.1f}"),
            int_field("rate_limit_burst", self.rate_limit.burst),
            bool_field("rate_limit_enabled", self.rate_limit.enabled),
            bool_field("rate_limit_adaptive", self.rate_limit.adaptive_mode),
            duration_field("rate_limit_backoff", self.rate_limit.backoff_delay),
            string_field("log_level", self.logging.level),
            string_field("log_format", self.logging.format),
            bool_field("encrypt_tokens", self.security.encrypt_tokens),
            bool_field("audit_log", self.security.audit_log),
            bool_field("validate_input", self.security.validate_input),
            bool_field("metrics_enabled", self.metrics.enabled),
            string_field("metrics_export_path", self.metrics.export_path),
        )


def load_production_config() -> ProductionConfig:
    """Build the full configuration from the environment."""
    return ProductionConfig(
        retry=load_retry_config(),
        rate_limit=load_rate_limit_config(),
        logging=load_logging_config(),
        security=load_security_config(),
        metrics=load_metrics_config(),
    )


def load_retry_config() -> RetryConfig:
    config = RetryConfig()
    max_attempts = env_int("LINCTL_RETRY_MAX_ATTEMPTS", config.max_attempts)
    if max_attempts > 0:
        config.max_attempts = max_attempts
    initial_delay = env_duration("LINCTL_RETRY_INITIAL_DELAY", config.initial_delay)
    if initial_delay > timedelta(0):
        config.initial_delay = initial_delay
    max_delay = env_duration("LINCTL_RETRY_MAX_DELAY", config.max_delay)
    if max_delay > timedelta(0):
        config.max_delay = max_delay
    multiplier = env_float("LINCTL_RETRY_MULTIPLIER", config.multiplier)
    if multiplier > 1.0:
        config.multiplier = multiplier
    config.jitter = env_bool("LINCTL_RETRY_JITTER", config.jitter)
    return config


def load_rate_limit_config() -> RateLimitConfig:
    config = RateLimitConfig()
    rps = env_float("LINCTL_RATE_LIMIT_RPS", config.requests_per_second)
    if rps > 0:
        config.requests_per_second = rps
    burst = env_int("LINCTL_RATE_LIMIT_BURST", config.burst)
    if burst > 0:
        config.burst = burst
    config.enabled = env_bool("LINCTL_RATE_LIMIT_ENABLED", config.enabled)
    config.adaptive_mode = env_bool("LINCTL_RATE_LIMIT_ADAPTIVE", config.adaptive_mode)
    backoff = env_duration("LINCTL_RATE_LIMIT_BACKOFF", config.backoff_delay)
    if backoff > timedelta(0):
        config.backoff_delay = backoff
    return config


def load_logging_config() -> LoggingConfig:
    return LoggingConfig(
        level=env_string("LINCTL_LOG_LEVEL", "info"),
        format=env_string("LINCTL_LOG_FORMAT", "text"),
    )


def load_security_config() -> SecurityConfig:
    return SecurityConfig(
        encrypt_tokens=env_bool("LINCTL_ENCRYPT_TOKENS", False),
        audit_log=env_bool("LINCTL_AUDIT_LOG", True),
        validate_input=env_bool("LINCTL_VALIDATE_INPUT", True),
    )


def load_metrics_config() -> MetricsConfig:
    return MetricsConfig(
        enabled=env_bool("LINCTL_METRICS_ENABLED", False),
        export_path=env_string("LINCTL_METRICS_EXPORT_PATH", "/tmp/linctl-metrics.json"),
    )


_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d*)(?:\.(\d*))?(ns|us|µs|μs|ms|s|m|h)")
_INT_PATTERN = re.compile(r"[+-]?\d+")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as '1h30m', '1.5s' or '300ms'; raise ValueError if malformed."""
    rest = text
    negative = False
    if rest and rest[0] in "+-":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")
    total = Fraction(0)
    pos = 0
    while pos < len(rest):
        match = _DURATION_PART.match(rest, pos)
        if not match or not (match.group(1) or match.group(2)):
            raise ValueError(f"invalid duration {text!r}")
        whole, fraction, unit = match.groups()
        value = Fraction(int(whole or "0"))
        if fraction:
            value += Fraction(int(fraction), 10 ** len(fraction))
        total += value * _DURATION_UNITS[unit]
        pos = match.end()
    if negative:
        total = -total
    return timedelta(microseconds=round(total / 1000))


def env_string(key: str, default: str) -> str:
    return os.environ.get(key) or default


def env_int(key: str, default: int) -> int:
    value = os.environ.get(key, "")
    if value and _INT_PATTERN.fullmatch(value):
        return int(value)
    return default


def env_float(key: str, default: float) -> float:
    value = os.environ.get(key, "")
    if not value or value != value.strip() or "_" in value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def env_duration(key: str, default: timedelta) -> timedelta:
    value = os.environ.get(key, "")
    if not value:
        return default
    try:
        return parse_duration(value)
    except ValueError:
        return default


def environment_variables_help() -> str:
    """Describe every environment variable that shapes the configuration."""
    return """
Production Configuration Environment Variables:

Retry Configuration:
  LINCTL_RETRY_MAX_ATTEMPTS=3        # Maximum retry attempts
  LINCTL_RETRY_INITIAL_DELAY=1s      # Initial delay between retries
  LINCTL_RETRY_MAX_DELAY=30s         # Maximum delay between retries
  LINCTL_RETRY_MULTIPLIER=2.0        # Delay multiplier for exponential backoff
  LINCTL_RETRY_JITTER=true           # Add random jitter to delays

Rate Limiting Configuration:
  LINCTL_RATE_LIMIT_RPS=10.0         # Requests per second limit
  LINCTL_RATE_LIMIT_BURST=20         # Burst capacity
  LINCTL_RATE_LIMIT_ENABLED=true     # Enable rate limiting
  LINCTL_RATE_LIMIT_ADAPTIVE=true    # Enable adaptive rate limiting
  LINCTL_RATE_LIMIT_BACKOFF=5s       # Backoff delay for rate limit hits

Logging Configuration:
  LINCTL_LOG_LEVEL=info              # Log level (debug, info, warn, error)
  LINCTL_LOG_FORMAT=text             # Log format (text, json)

Security Configuration:
  LINCTL_ENCRYPT_TOKENS=false        # Encrypt tokens at rest
  LINCTL_AUDIT_LOG=true              # Enable audit logging
  LINCTL_VALIDATE_INPUT=true         # Enable input validation

Metrics Configuration:
  LINCTL_METRICS_ENABLED=false       # Enable metrics collection
  LINCTL_METRICS_EXPORT_PATH=/tmp/linctl-metrics.json  # Metrics export path

OAuth Configuration:
  LINEAR_CLIENT_ID=your-client-id    # OAuth client ID
  LINEAR_CLIENT_SECRET=your-secret   # OAuth client secret
  LINEAR_BASE_URL=https://api.example.com  # API base URL
  LINEAR_SCOPES=read,write           # OAuth scopes
  LINEAR_DEFAULT_ACTOR=Agent Name    # Default actor for attribution
  LINEAR_DEFAULT_AVATAR_URL=https://example.com/avatar.png  # Default avatar URL
"""