import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session

from .config import AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET
from .database import get_db
from .models import UserProfile

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the hosted auth provider.

    Tokens are HS256 JWTs signed with the project's JWT secret; the audience
    claim must match AUTH_JWT_AUDIENCE.
    """
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        payload = jose_jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"❌ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not payload.get("sub"):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


def resolve_profile(db: Session, claims: dict) -> UserProfile:
    """Find the profile for the token subject, creating it on first sight"""
    auth_uid = claims["sub"]
    email = (claims.get("email") or "").lower()
    metadata = claims.get("user_metadata") or {}
    name = metadata.get("full_name") or metadata.get("name")

    profile = db.query(UserProfile).filter(UserProfile.auth_uid == auth_uid).first()
    if profile:
        return profile

    # Same email registered under a different auth identity (e.g. switched to OAuth)
    if email:
        existing = db.query(UserProfile).filter(UserProfile.email == email).first()
        if existing:
            logger.info(f"🔄 Migrating profile {email} from auth uid {existing.auth_uid} to {auth_uid}")
            existing.auth_uid = auth_uid
            if name and not existing.full_name:
                existing.full_name = name
            db.commit()
            db.refresh(existing)
            return existing

    logger.info(f"🆕 Creating new profile: {email or auth_uid}")
    profile = UserProfile(auth_uid=auth_uid, email=email or f"{auth_uid}@users.invalid", full_name=name)
    db.add(profile)
    try:
        db.commit()
        db.refresh(profile)
    except Exception as e:
        db.rollback()
        if "unique" in str(e).lower() or "duplicate key" in str(e).lower():
            logger.error(f"❌ Email {email} was taken by another account (race condition)")
            raise HTTPException(
                status_code=409,
                detail="This email is already registered. Please sign in with your existing account.",
            ) from e
        raise
    return profile


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> UserProfile:
    """Get the current user's profile from the bearer token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = verify_access_token(credentials.credentials)
    user = resolve_profile(db, claims)
    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db),
) -> Optional[UserProfile]:
    """Like get_current_user, but anonymous requests get None instead of 401"""
    if not credentials:
        return None
    claims = verify_access_token(credentials.credentials)
    return resolve_profile(db, claims)
