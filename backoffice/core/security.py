from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from backoffice.core.access import Principal
from backoffice.core.config import Settings, get_settings


def create_access_token(
    principal: Principal,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token carrying the principal's session claims."""
    settings = settings or get_settings()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(principal.user_id),
        "email": principal.email,
        "name": principal.name,
        "role": getattr(principal.role, "value", principal.role),
        "primary_department": getattr(
            principal.primary_department, "value", principal.primary_department
        ),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_principal(token: str, settings: Optional[Settings] = None) -> Optional[Principal]:
    """Decode and validate a JWT token. Returns None for invalid or expired tokens."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    user_id = payload.get("sub")
    role = payload.get("role")
    if user_id is None or role is None or payload.get("type") != "access":
        return None

    # Role and department stay raw strings; AccessControl denies unknown values
    return Principal(
        user_id=user_id,
        email=payload.get("email") or "",
        role=role,
        primary_department=payload.get("primary_department"),
        name=payload.get("name"),
    )
