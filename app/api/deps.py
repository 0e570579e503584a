import jwt
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.users import Company, Influencer, User
from app.schemas.users import UserRole, UserStatus


def _extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    scheme, _, param = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer" or not param:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
        )
    return param.strip()


def _authenticate_token(raw_token: str, db: Session) -> User:
    try:
        payload = decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired",
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if user.status == UserStatus.suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is suspended",
        )
    return user


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    last_error: HTTPException | None = None

    # Header first, then the cookie set by /api/auth/login.
    for raw_token in (_extract_bearer_token(request), request.cookies.get("access_token")):
        if not raw_token:
            continue
        try:
            return _authenticate_token(raw_token, db)
        except HTTPException as exc:
            last_error = exc

    if last_error:
        raise last_error

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="The user is not an admin")
    return user


def get_current_company(user: User = Depends(get_current_user)) -> Company:
    if user.role != UserRole.company:
        raise HTTPException(status_code=403, detail="Company account required")
    if user.company is None:
        raise HTTPException(status_code=404, detail="Company profile not found")
    return user.company


def get_current_influencer(user: User = Depends(get_current_user)) -> Influencer:
    if user.role != UserRole.influencer:
        raise HTTPException(status_code=403, detail="Influencer account required")
    if user.influencer is None:
        raise HTTPException(status_code=404, detail="Influencer profile not found")
    return user.influencer
