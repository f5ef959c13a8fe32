"""Authentication context extraction and role guard utilities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from worklog.core.config import get_settings
from worklog.db.session import get_db_session
from worklog.models.entities import User, UserRole

ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


@dataclass(frozen=True)
class RequestUserContext:
    """Authenticated request actor resolved from headers and DB state."""

    user_id: UUID
    username: str
    email: str
    role: UserRole


def _require_identity_headers(x_username: str | None, x_email: str | None) -> tuple[str, str]:
    if not x_username or not x_username.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing identity headers. Expected X-USERNAME or enable development principal fallback.",
        )
    return x_username.strip(), (x_email or "").strip().lower()


def _resolve_identity(x_username: str | None, x_email: str | None) -> tuple[str, str]:
    settings = get_settings()
    if x_username:
        return _require_identity_headers(x_username, x_email)

    if settings.auth_allow_dev_principal:
        return settings.auth_dev_username.strip(), settings.auth_dev_email.strip().lower()

    return _require_identity_headers(x_username, x_email)


def _upsert_user(db: Session, *, username: str, email: str, role: UserRole | None = None) -> User:
    user = db.scalar(select(User).where(User.username == username))
    now = datetime.utcnow()

    if user is None:
        user = User(
            username=username,
            email=email,
            role=role or UserRole.EMPLOYEE,
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        db.flush()
        return user

    changed = False
    if email and user.email != email:
        user.email = email
        changed = True
    if role is not None and user.role is not role:
        user.role = role
        changed = True

    if changed:
        user.updated_at = now
        db.flush()
    return user


def ensure_user_principal(
    db: Session,
    *,
    username: str,
    email: str = "",
    role: UserRole | None = None,
) -> User:
    """Ensure user exists and return persisted row.

    Utility exported for tests and seed helpers. ``role`` is only written when
    given; identity headers never change a stored role.
    """

    user = _upsert_user(db, username=username.strip(), email=email.strip().lower(), role=role)
    db.commit()
    db.refresh(user)
    return user


def get_current_user_context(
    x_username: str | None = Header(default=None, alias="X-USERNAME"),
    x_email: str | None = Header(default=None, alias="X-EMAIL"),
    db: Session = Depends(get_db_session),
) -> RequestUserContext:
    """Resolve current request user and stored role.

    Header strategy:
    - Current phase: trusted headers set by the auth proxy / test clients.
    - Token validation is handled upstream and never reaches this service.
    """

    username, email = _resolve_identity(x_username, x_email)
    user = _upsert_user(db, username=username, email=email)
    db.commit()

    return RequestUserContext(
        user_id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
    )


def has_role(context: RequestUserContext, allowed_roles: set[UserRole] | frozenset[UserRole]) -> bool:
    """Check whether user has any of the allowed roles."""

    return context.role in allowed_roles


def require_roles(*roles: UserRole):
    """Dependency factory requiring at least one provided role."""

    allowed = set(roles)

    def dependency(context: RequestUserContext = Depends(get_current_user_context)) -> RequestUserContext:
        if not has_role(context, allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role permissions for this operation.",
            )
        return context

    return dependency
