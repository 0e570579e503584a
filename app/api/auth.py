from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import issue_access_token
from app.models.users import User
from app.schemas.users import LoginIn, UserOut
from app.services import registration_service

router = APIRouter(prefix="/api/auth", tags=["auth"])
settings = get_settings()


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = registration_service.authenticate_user(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )

    access = issue_access_token(user.id, str(user.role), user.email)

    resp = JSONResponse({"access_token": access, "token_type": "bearer"})
    resp.headers["Cache-Control"] = "no-store"
    resp.set_cookie(
        key="access_token",
        value=access,
        httponly=True,
        secure=settings.app_env == "production",
        samesite="lax",
        max_age=settings.access_min * 60,
        path="/",
    )
    return resp


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)


@router.post("/logout")
def logout():
    resp = JSONResponse({"message": "ok"})
    resp.headers["Cache-Control"] = "no-store"
    resp.delete_cookie(key="access_token", path="/")
    return resp
