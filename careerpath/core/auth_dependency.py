from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from careerpath.core.config import SUPABASE_JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE

# Tokens are issued by the identity provider; this API only verifies them
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    """
    Verify an identity provider access token.

    Raises:
        JWTError: If the token is invalid, expired, or has the wrong audience
    """
    if not SUPABASE_JWT_SECRET:
        raise JWTError("SUPABASE_JWT_SECRET not configured")
    return jwt.decode(token, SUPABASE_JWT_SECRET, algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """Get the current user id (`sub` claim) from the bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"})

    user_id: str = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    return user_id
