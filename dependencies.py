# dependencies.py
"""
Shared FastAPI dependencies.

- verify_token: decode the identity provider's bearer JWT
- get_current_user / require_user / require_super_admin: the acting user's role record
- get_store / get_coordinator / get_lifecycle: per-request services
"""
import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from database import get_session
from schemas import UserRead
from services.access_scope import can_manage_users
from services.lease_lifecycle import LeaseLifecycle
from services.local_cache import LocalCache
from services.occupancy import OccupancyCoordinator
from services.store import EntityStore

# Load .env
load_dotenv()
SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
LOCAL_CACHE_DIR = os.getenv("LOCAL_CACHE_DIR")

logger = logging.getLogger(__name__)


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     if not SECRET_KEY:
          logger.error("JWT_SECRET is not set; cannot verify tokens")
          raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Authentication is not configured")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
          return payload
     except JWTError:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


@lru_cache(maxsize=1)
def get_cache() -> Optional[LocalCache]:
     """The local cache tier, when LOCAL_CACHE_DIR is configured."""
     if not LOCAL_CACHE_DIR:
          return None
     return LocalCache(LOCAL_CACHE_DIR)


def get_store(
     db: Session = Depends(get_session),
     cache: Optional[LocalCache] = Depends(get_cache)
) -> EntityStore:
     return EntityStore(db, cache=cache)


def get_lifecycle() -> LeaseLifecycle:
     return LeaseLifecycle()


def get_coordinator(
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle)
) -> OccupancyCoordinator:
     return OccupancyCoordinator(store, lifecycle)


def get_current_user(
     token: dict = Depends(verify_token),
     store: EntityStore = Depends(get_store)
) -> Optional[UserRead]:
     """
     The users record of the token's subject, or None when the account has
     no role record. Callers treat None as "sees nothing".
     """
     user_id = token.get("id") or token.get("sub")
     if not user_id:
          return None
     return store.users.get_by_id(str(user_id))


def require_user(user: Optional[UserRead] = Depends(get_current_user)) -> UserRead:
     if user is None:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No role assigned to this account")
     return user


def require_super_admin(user: UserRead = Depends(require_user)) -> UserRead:
     if not can_manage_users(user):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only super admins can do this")
     return user
