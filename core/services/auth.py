from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from core.auth import verify_access_token
from core.errors import Forbidden, Unauthenticated
from core.repositories import whitelist as whitelist_repo
from core.settings import get_settings

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass
class Identity:
    """Verified caller, enriched by :func:`authorize` with role and scope."""

    user_id: str
    email: str
    role: Optional[str] = None
    department: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def extract_bearer(authorization: str | None) -> str | None:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    return None


def authenticate(authorization: str | None) -> Identity:
    token = extract_bearer(authorization)
    if not token:
        raise Unauthenticated("No token provided")
    settings = get_settings()
    payload = verify_access_token(settings.jwt_secret, token, audience=settings.jwt_audience or None)
    if not payload:
        raise Unauthenticated("Invalid token")
    return Identity(user_id=str(payload["sub"]), email=str(payload.get("email") or "").strip().lower())


def has_trusted_domain(email: str) -> bool:
    domain = get_settings().trusted_email_domain
    if not domain or not email:
        return False
    return email.lower().endswith("@" + domain)


def authorize(session: Session, identity: Identity, role: str) -> Identity:
    """Check ``identity`` against ``role``; whitelist membership is re-read every call."""
    entry = whitelist_repo.find_by_email(session, identity.email) if identity.email else None
    if role == ROLE_ADMIN:
        if entry is None:
            raise Forbidden("Admin access required")
        identity.role = ROLE_ADMIN
        identity.department = entry.department or None
        return identity
    if role == ROLE_USER:
        if entry is not None or not has_trusted_domain(identity.email):
            raise Forbidden("User access required")
        identity.role = ROLE_USER
        return identity
    raise ValueError(f"unknown role: {role}")


def is_admin(session: Session, identity: Identity) -> bool:
    if identity.role == ROLE_ADMIN:
        return True
    if not identity.email:
        return False
    return whitelist_repo.find_by_email(session, identity.email) is not None
