"""Admin authentication.

There is exactly one account: the admin credentials from configuration. A
successful login issues a JWT that lives in an httpOnly, SameSite=Strict, Secure
cookie for 24 hours. There are no user rows and no password hashes.
"""

from .deps import (
    get_admin_session,
    get_config,
    get_database,
    get_optional_admin_session,
    require_admin,
)
from .security import create_access_token, credentials_match, verify_access_token

__all__ = [
    "get_admin_session",
    "get_config",
    "get_database",
    "get_optional_admin_session",
    "require_admin",
    "create_access_token",
    "credentials_match",
    "verify_access_token",
]
