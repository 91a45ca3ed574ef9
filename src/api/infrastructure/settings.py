"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        CITYGATE_DB_HOST: Database host (default: localhost)
        CITYGATE_DB_PORT: Database port (default: 5432)
        CITYGATE_DB_DATABASE: Database name (default: citygate)
        CITYGATE_DB_USERNAME: Database user (default: citygate)
        CITYGATE_DB_PASSWORD: Database password (required in production)
        CITYGATE_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        CITYGATE_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="CITYGATE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="citygate", description="Database name")
    username: str = Field(default="citygate", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Tenant resolution settings.

    The set of hosts that may accept an explicit tenant override is
    deployment configuration. Nothing here is hardcoded to a particular
    production domain.

    Environment variables (list values are JSON arrays):
        CITYGATE_TENANCY_BASE_DOMAINS: Domains whose first label is a city
            subdomain, e.g. ["example.com"]
        CITYGATE_TENANCY_FALLBACK_HOSTS: Exact hosts allowed to take an
            override (default: ["localhost", "127.0.0.1"])
        CITYGATE_TENANCY_FALLBACK_HOST_SUFFIXES: Host suffixes allowed to
            take an override, e.g. [".vercel.app"] (default: [".localhost"])
        CITYGATE_TENANCY_RESERVED_SUBDOMAINS: Labels that never name a city
            (default: ["www", "app", "api"])
        CITYGATE_TENANCY_DEFAULT_TENANT: Tenant used on fallback hosts when
            no override is given (default: unset)
        CITYGATE_TENANCY_OVERRIDE_PARAM: Query parameter carrying the
            override (default: tenant)
        CITYGATE_TENANCY_TRUST_FORWARDED_HOST: Read X-Forwarded-Host before
            Host; enable only behind a proxy that sets it (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="CITYGATE_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_domains: list[str] = Field(
        default_factory=list,
        description="Domains whose leading label is a franchise subdomain",
    )
    fallback_hosts: list[str] = Field(
        default_factory=lambda: ["localhost", "127.0.0.1"],
        description="Exact hostnames that accept tenant overrides",
    )
    fallback_host_suffixes: list[str] = Field(
        default_factory=lambda: [".localhost"],
        description="Hostname suffixes that accept tenant overrides",
    )
    reserved_subdomains: list[str] = Field(
        default_factory=lambda: ["www", "app", "api"],
        description="Subdomains that are never franchise cities",
    )
    default_tenant: str | None = Field(
        default=None,
        description="Tenant used on fallback hosts without an override",
    )
    override_param: str = Field(
        default="tenant",
        description="Query parameter name for the tenant override",
        min_length=1,
    )
    trust_forwarded_host: bool = Field(
        default=False,
        description="Prefer X-Forwarded-Host over Host",
    )

    @field_validator(
        "base_domains",
        "fallback_hosts",
        "fallback_host_suffixes",
        "reserved_subdomains",
    )
    @classmethod
    def normalize_hosts(cls, value: list[str]) -> list[str]:
        """Lowercase and trim host entries, dropping blanks."""
        return [item.strip().lower() for item in value if item.strip()]

    @field_validator("default_tenant")
    @classmethod
    def normalize_default_tenant(cls, value: str | None) -> str | None:
        """Treat a blank default as unset."""
        if value is None:
            return None
        value = value.strip().lower()
        return value or None


class SessionSettings(BaseSettings):
    """Admin session settings.

    Environment variables:
        CITYGATE_SESSION_COOKIE_NAME: Cookie carrying the opaque token
        CITYGATE_SESSION_HEADER_NAME: Header alternative to the cookie
        CITYGATE_SESSION_TTL_MINUTES: Session lifetime (default: 480)
        CITYGATE_SESSION_COOKIE_SECURE: Mark the cookie Secure (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="CITYGATE_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cookie_name: str = Field(default="citygate_admin_session")
    header_name: str = Field(default="X-Admin-Session")
    ttl_minutes: int = Field(default=480, ge=1, le=60 * 24 * 30)
    cookie_secure: bool = Field(default=True)


class OIDCSettings(BaseSettings):
    """OIDC settings for business-owner bearer tokens.

    Environment variables:
        CITYGATE_OIDC_ISSUER_URL: Issuer URL of the identity provider
        CITYGATE_OIDC_AUDIENCE: Expected audience claim
        CITYGATE_OIDC_USER_ID_CLAIM: Claim holding the user ID (default: sub)
        CITYGATE_OIDC_USERNAME_CLAIM: Claim holding the username
    """

    model_config = SettingsConfigDict(
        env_prefix="CITYGATE_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(default="http://localhost:8080/realms/citygate")
    audience: str = Field(default="citygate-api")
    user_id_claim: str = Field(default="sub")
    username_claim: str = Field(default="preferred_username")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Citygate API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()


@lru_cache
def get_session_settings() -> SessionSettings:
    """Get cached admin session settings."""
    return SessionSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached OIDC settings."""
    return OIDCSettings()
