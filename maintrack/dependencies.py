from fastapi import Depends, Request
from sqlalchemy.orm import Session

from maintrack.config import settings
from maintrack.database import get_db
from maintrack.models.user import User
from maintrack.utils.exceptions import UnauthorizedException, NotFoundException


# ─── Get Current User ─────────────────────────────────────────────────────────
def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the requesting user from the user-id header (settings.USER_ID_HEADER).
    Sign-in happens upstream; this only turns the id into a User row.
    Raises 401 if the header is missing or not an integer.
    Raises 404 if no such user exists.
    """
    raw = request.headers.get(settings.USER_ID_HEADER)
    if not raw:
        raise UnauthorizedException(f"Missing {settings.USER_ID_HEADER} header")
    try:
        user_id = int(raw)
    except ValueError:
        raise UnauthorizedException(f"Invalid {settings.USER_ID_HEADER} header")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundException("User")
    return user
