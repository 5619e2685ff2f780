import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from . import config

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Clerk keeps the session token in this cookie for same-site requests
SESSION_COOKIE_NAME = "__session"

# Cache for Clerk's JSON Web Key Set
_cached_jwks: Optional[dict] = None


class AuthenticatedUser(BaseModel):
    """The Clerk user behind the current request"""

    user_id: str
    session_id: Optional[str] = None
    claims: dict = {}


async def get_clerk_jwks() -> Optional[dict]:
    """Fetch Clerk's public signing keys"""
    global _cached_jwks
    if _cached_jwks:
        logger.debug("✅ Using cached Clerk JWKS")
        return _cached_jwks

    if not config.CLERK_JWKS_URL:
        logger.error("❌ CLERK_JWKS_URL / CLERK_ISSUER not configured")
        return None

    try:
        async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as client:
            response = await client.get(config.CLERK_JWKS_URL)
            if response.status_code == 200:
                _cached_jwks = response.json()
                logger.info(f"✅ Fetched {len(_cached_jwks.get('keys', []))} Clerk signing keys")
                return _cached_jwks
            logger.error(f"❌ Failed to fetch Clerk JWKS: HTTP {response.status_code}")
    except Exception as e:
        logger.error(f"❌ Error fetching Clerk JWKS: {str(e)}")
    return None


def _find_key(jwks: Optional[dict], kid: str) -> Optional[dict]:
    if not jwks:
        return None
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


async def verify_clerk_token(token: str) -> dict:
    """
    Verify a Clerk session token (RS256 JWT) and return its claims.

    Checks the signature against Clerk's JWKS, expiry and not-before, the
    issuer when CLERK_ISSUER is set, and the `azp` claim when
    CLERK_AUTHORIZED_PARTIES is set.
    """
    global _cached_jwks

    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        logger.error(f"❌ Failed to decode token header: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token header") from e

    if header.get("alg") != "RS256":
        logger.error(f"❌ Invalid token algorithm: {header.get('alg')}")
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    kid = header.get("kid")
    if not kid:
        raise HTTPException(status_code=401, detail="Token missing key ID")

    key = _find_key(await get_clerk_jwks(), kid)
    if not key:
        logger.warning(f"⚠️ Key ID {kid} not in cached JWKS, invalidating cache and retrying")
        _cached_jwks = None
        key = _find_key(await get_clerk_jwks(), kid)
        if not key:
            logger.error(f"❌ Key ID {kid} not found in JWKS after retry")
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            issuer=config.CLERK_ISSUER or None,
            options={"verify_aud": False},
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.error(f"❌ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token") from e

    if config.CLERK_AUTHORIZED_PARTIES and claims.get("azp") not in config.CLERK_AUTHORIZED_PARTIES:
        logger.warning(f"⚠️ Token authorized party not allowed: {claims.get('azp')}")
        raise HTTPException(status_code=401, detail="Invalid token authorized party")

    return claims


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Get the current user from the Clerk session token (Bearer header or __session cookie)"""
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE_NAME)

    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized - Please sign in")

    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, length: {len(token)}")
        raise HTTPException(status_code=401, detail="Invalid token format. Expected a valid JWT token.")

    claims = await verify_clerk_token(token)

    user_id = claims.get("sub")
    if not user_id:
        logger.error(f"❌ Token missing subject. Available claims: {list(claims.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    logger.debug(f"✅ User authenticated: {user_id}")
    return AuthenticatedUser(user_id=user_id, session_id=claims.get("sid"), claims=claims)
