"""Actor tokens: HS256 JWTs carrying ``sub`` (the actor id) and ``role``."""
from datetime import datetime, timedelta, timezone
import jwt
from typing import Optional
from .core_settings import get_settings

ROLES = ("admin", "user")
TOKEN_TTL_MINUTES = 60

def create_access_token(subject: str, role: str = "user", expires_minutes: int = TOKEN_TTL_MINUTES) -> str:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    settings = get_settings()
    issued = datetime.now(timezone.utc)
    claims = {"sub": subject, "role": role, "iat": issued, "exp": issued + timedelta(minutes=expires_minutes)}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

def decode_access_token(token: str) -> Optional[dict]:
    """Verified claims, or None for a bad or expired token or an unknown role."""
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError:
        return None
    if claims.get("role") not in ROLES:
        return None
    return claims
