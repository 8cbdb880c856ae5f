from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from simulafin.auth.dependencies import get_current_actor
from simulafin.auth.models import User
from simulafin.auth.schemas import Actor, TokenResponse, UserCreate, UserLogin, UserResponse
from simulafin.core.config import settings
from simulafin.core.database import get_db
from simulafin.core.logger import logger, audit_log
from simulafin.core.security import create_access_token, get_password_hash, verify_password

router = APIRouter()


def _issue_token(response: Response, user: User) -> TokenResponse:
    access_token = create_access_token(
        data={"sub": user.id, "name": user.name},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return TokenResponse(access_token=access_token, name=user.name)


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(response: Response, user_in: UserCreate, db: Session = Depends(get_db)):
    email = user_in.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="E-mail já cadastrado")

    user = User(
        name=user_in.name,
        email=email,
        hashed_password=get_password_hash(user_in.password)
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    audit_log(action="user_registered", user=user.id, resource=f"user_id={user.id}")
    logger.info(f"New user registered: {user.id}")

    # Auto-login after registration
    return _issue_token(response, user)


@router.post("/login", response_model=TokenResponse)
def login(response: Response, user_in: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == user_in.email.lower()).first()
    if not user or not verify_password(user_in.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Credenciais inválidas")

    return _issue_token(response, user)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie("access_token")
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def me(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == actor.user_id).first()
    return UserResponse(id=user.id, name=user.name, email=user.email, is_admin=actor.is_admin)
