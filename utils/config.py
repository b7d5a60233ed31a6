"""
Configuration management.
"""

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Link shapes
    app_scheme: str = field(default_factory=lambda: os.getenv("APP_SCHEME", "domgomobile"))
    primary_domain: str = field(default_factory=lambda: os.getenv("PRIMARY_DOMAIN", "domgo.rs"))
    mirror_base: str = field(
        default_factory=lambda: os.getenv("MIRROR_BASE", "angstremoff.github.io/domgomobile")
    )
    require_uuid_ids: bool = field(default_factory=lambda: _env_flag("REQUIRE_UUID_IDS"))

    # Delivery
    grace_interval_ms: int = field(
        default_factory=lambda: int(os.getenv("GRACE_INTERVAL_MS", "500"))
    )

    # Listing backend
    property_source: str = field(default_factory=lambda: os.getenv("PROPERTY_SOURCE", "mock"))
    supabase_url: str = field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    supabase_anon_key: str = field(default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""))
    request_timeout: int = field(default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "10")))

    def __post_init__(self):
        """Validate configuration values."""
        if self.grace_interval_ms < 0:
            raise ValueError("grace_interval_ms must be non-negative")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.property_source not in ("mock", "supabase"):
            raise ValueError("property_source must be 'mock' or 'supabase'")

    @property
    def grace_interval_seconds(self) -> float:
        """Grace interval as seconds, for asyncio.sleep."""
        return self.grace_interval_ms / 1000

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary. The anon key is never exposed."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "app_scheme": self.app_scheme,
            "primary_domain": self.primary_domain,
            "mirror_base": self.mirror_base,
            "require_uuid_ids": self.require_uuid_ids,
            "grace_interval_ms": self.grace_interval_ms,
            "property_source": self.property_source,
            "supabase_url": self.supabase_url,
            "supabase_anon_key": "***" if self.supabase_anon_key else "",
            "request_timeout": self.request_timeout,
        }
