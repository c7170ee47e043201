from fastapi import HTTPException, Header
from typing import Optional
import jwt
import logging
from lesson_planner.config import settings

logger = logging.getLogger(__name__)


async def verify_token(authorization: Optional[str] = Header(None)) -> dict:
    """Validate the bearer JWT and return the caller's user id."""

    # 1. Ensure Authorization header exists
    if not authorization:
        raise HTTPException(401, "Authorization header missing")

    # 2. Extract token from "Bearer <token>"
    if not authorization.startswith("Bearer "):
        raise HTTPException(401, "Invalid authorization header format")

    token = authorization.replace("Bearer ", "").strip()
    if not token:
        raise HTTPException(401, "Token missing")

    # 3. Ensure the signing secret is configured
    if not settings.jwt_secret:
        logger.error("JWT secret missing")
        raise HTTPException(500, "Authentication service not configured")

    # 4. Verify signature and expiry
    try:
        decoded = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(401, "Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"⚠️  Rejected token: {e}")
        raise HTTPException(401, "Invalid token")

    # 5. Extract user id
    user_id = decoded.get(settings.jwt_user_claim) or decoded.get("sub")
    if not user_id:
        raise HTTPException(401, "Invalid token: user ID missing")

    return {"user_id": str(user_id)}
