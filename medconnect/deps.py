# medconnect/deps.py
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from . import database, models
from .errors import AuthError, Unauthorized
from .security import TokenError, verify_token

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(database.get_db),
) -> models.User:
    if not creds:
        raise AuthError("Not authorized, no token")
    try:
        user_id = verify_token(creds.credentials)
    except TokenError as exc:
        logger.info("Rejected bearer token: %s", exc.kind)
        raise AuthError("Not authorized, token failed")
    user = db.get(models.User, user_id)
    if not user:
        raise AuthError("Not authorized, user not found")
    return user


def require_doctor(current: models.User = Depends(get_current_user)) -> models.User:
    if not current.is_doctor:
        raise Unauthorized("Not authorized as a doctor")
    return current


def require_admin(current: models.User = Depends(get_current_user)) -> models.User:
    if not current.is_admin:
        raise Unauthorized("Not authorized as an admin")
    return current
