"""Scheduler authentication for job trigger endpoints."""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import jwt
from fastapi import Header

from app.core import settings, get_logger
from app.exceptions import AuthenticationError

logger = get_logger(__name__)

SCHEDULER_SUBJECT = "scheduler"


def create_scheduler_token(secret: str, expires_in: timedelta = timedelta(days=365)) -> str:
    """Mint a bearer token for the cron host that triggers the jobs."""
    now = datetime.now(timezone.utc)
    payload = {"sub": SCHEDULER_SUBJECT, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, secret, algorithm="HS256")


def verify_scheduler_token(token: str, secret: str) -> Optional[Dict[str, Any]]:
    """Return the token payload, or None if the token is unusable."""
    try:
        payload = jwt.decode(token, secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        logger.warning("Scheduler token has expired")
        return None
    except jwt.InvalidTokenError:
        logger.warning("Invalid scheduler token")
        return None
    if payload.get("sub") != SCHEDULER_SUBJECT:
        logger.warning(f"Scheduler token has unexpected subject: {payload.get('sub')}")
        return None
    return payload


def require_scheduler(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    """Dependency guarding the job endpoints."""
    secret = settings.scheduler_jwt_secret
    if not secret:
        if settings.environment == "development":
            return {"sub": "development"}
        raise AuthenticationError("Scheduler authentication is not configured")

    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthenticationError()

    payload = verify_scheduler_token(authorization[7:].strip(), secret)
    if not payload:
        raise AuthenticationError("Invalid or expired scheduler token")
    return payload
