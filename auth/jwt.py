from __future__ import annotations

import time
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import JWTError

from core.settings import get_settings
from items.models import Member

bearer = HTTPBearer(auto_error=False)

_JWKS_CACHE: Dict[str, Any] = {"jwks": None, "fetched_at": 0}
_JWKS_TTL_SECONDS = 3600  # cache JWKS for 1 hour


async def _get_jwks(url: str) -> Dict[str, Any]:
    now = int(time.time())
    if _JWKS_CACHE["jwks"] and (now - _JWKS_CACHE["fetched_at"] < _JWKS_TTL_SECONDS):
        return _JWKS_CACHE["jwks"]

    async with httpx.AsyncClient(timeout=5.0) as client:
        r = await client.get(url)
        r.raise_for_status()
        jwks = r.json()

    _JWKS_CACHE["jwks"] = jwks
    _JWKS_CACHE["fetched_at"] = now
    return jwks


def _pick_key(jwks: Dict[str, Any], kid: str) -> Optional[Dict[str, Any]]:
    for k in jwks.get("keys", []):
        if k.get("kid") == kid and k.get("use", "sig") == "sig":
            return k
    return None


def _aud_ok(claims: Dict[str, Any], audience: str) -> bool:
    """
    Accept if no audience is configured, or:
      - aud == audience (string)
      - aud contains audience (list)
      - OR azp == audience
    """
    if not audience:
        return True
    aud = claims.get("aud")
    if isinstance(aud, str) and aud == audience:
        return True
    if isinstance(aud, list) and audience in aud:
        return True
    return claims.get("azp") == audience


async def get_current_member(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Member:
    """
    Resolve the acting member from a bearer token (subject claim).
    """
    if not creds or not creds.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )

    auth = get_settings().auth
    if not auth.jwks_url:
        raise HTTPException(status_code=401, detail="Token validation is not configured")

    token = creds.credentials
    try:
        header = jwt.get_unverified_header(token)
        kid = header.get("kid")
        if not kid:
            raise HTTPException(status_code=401, detail="Token missing kid")

        key = _pick_key(await _get_jwks(auth.jwks_url), kid)
        if not key:
            raise HTTPException(status_code=401, detail="Signing key not found")

        # Decode with signature validation, but we enforce issuer/audience ourselves
        claims = jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            options={"verify_aud": False, "verify_iss": False},
        )

        iss = (claims.get("iss") or "").rstrip("/")
        if auth.issuer and iss != auth.issuer:
            raise HTTPException(status_code=401, detail=f"Invalid issuer: {iss}")

        if not _aud_ok(claims, auth.audience):
            raise HTTPException(status_code=401, detail="Invalid token audience")

        sub = claims.get("sub")
        if not sub:
            raise HTTPException(status_code=401, detail="Token missing subject")

        return Member(id=str(sub), name=claims.get("preferred_username") or claims.get("name"))

    except HTTPException:
        raise
    except JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")
    except httpx.HTTPError as e:
        raise HTTPException(status_code=401, detail=f"Auth error: {str(e)}")
