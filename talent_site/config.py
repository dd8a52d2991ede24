import os
from dataclasses import dataclass
from typing import Optional

# Optional: load a local .env file if present.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # If python-dotenv isn't installed or .env isn't present, that's fine.
    pass


# Documented fallback so a fresh clone can start. Never valid in production.
INSECURE_DEV_SECRET = "dev_change_me"


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Built once at process entry (see `load_config`) and handed to `create_app`.
    Provide secrets via environment variables or a .env file.
    """

    # -----------------
    # Server
    # -----------------
    HOST: str = os.environ.get("HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("PORT", "10000"))
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    # -----------------
    # Storage
    # -----------------
    # Postgres URL (postgres://...) or sqlite:///path. When unset the site runs in
    # demo mode: pages render, data endpoints answer storage_not_configured.
    DB_DSN: str | None = (os.environ.get("DATABASE_URL") or "").strip() or None
    DB_POOL_MAX: int = int(os.environ.get("DB_POOL_MAX", "10"))

    # -----------------
    # Admin account (single static login)
    # -----------------
    ADMIN_USERNAME: str = os.environ.get("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD: str = os.environ.get("ADMIN_PASSWORD", "")

    # -----------------
    # Auth (JWT in cookie)
    # -----------------
    AUTH_JWT_SECRET: str = os.environ.get("AUTH_JWT_SECRET") or INSECURE_DEV_SECRET
    AUTH_TOKEN_EXPIRE_MINUTES: int = int(os.environ.get("AUTH_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

    AUTH_COOKIE_NAME: str = os.environ.get("AUTH_COOKIE_NAME", "admin_token")
    AUTH_COOKIE_DOMAIN: str | None = (os.environ.get("AUTH_COOKIE_DOMAIN") or "").strip() or None
    AUTH_COOKIE_PATH: str = os.environ.get("AUTH_COOKIE_PATH", "/")
    # Only disable for plain-http local development.
    AUTH_COOKIE_SECURE: bool = _env_bool("AUTH_COOKIE_SECURE", True) is True

    @property
    def storage_configured(self) -> bool:
        return bool(self.DB_DSN)

    @property
    def uses_insecure_secret(self) -> bool:
        return self.AUTH_JWT_SECRET == INSECURE_DEV_SECRET

    @property
    def is_production(self) -> bool:
        return (self.ENVIRONMENT or "").strip().lower() == "production"


def load_config() -> Config:
    return Config()
