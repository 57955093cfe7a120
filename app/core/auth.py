from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from app.core.config import settings
from app.services.salon_service import get_salon_by_owner
import logging

logger = logging.getLogger(__name__)

# Tokens are minted by the identity provider; the tokenUrl only feeds the OpenAPI docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")

async def get_current_owner(token: str = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Get the salon owner identified by the bearer token.

    The token subject is the owner's id at the identity provider. Owners
    have no document of their own; salons reference them by `ownerId`.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        subject: Optional[str] = payload.get("sub")
        if subject is None:
            raise credentials_exception
    except JWTError as jwt_error:
        logger.info(f"JWT decode error: {jwt_error}")
        raise credentials_exception

    return {"_id": subject, "email": payload.get("email")}

async def get_current_salon(owner: Dict[str, Any] = Depends(get_current_owner)) -> Dict[str, Any]:
    """Resolve the salon of the authenticated owner."""
    salon = await get_salon_by_owner(owner["_id"])
    if not salon:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No salon found"
        )
    return salon
