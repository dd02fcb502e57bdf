from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from reality_bracket.core.database import get_db
from reality_bracket.core.security import hash_password, verify_password, create_access_token
from reality_bracket.core.config import get_settings
from reality_bracket.models.models import User
from reality_bracket.schemas.auth import (
    UserRegister, UserLogin, UserUpdate, TokenResponse, UserResponse,
)
from reality_bracket.api.deps import get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])
settings = get_settings()


def _token_response(user: User) -> TokenResponse:
    token = create_access_token(
        {"sub": str(user.id), "username": user.username, "is_admin": user.is_admin}
    )
    return TokenResponse(
        access_token=token,
        user_id=user.id,
        username=user.username,
        is_admin=user.is_admin,
    )


async def _authenticate(db: AsyncSession, username: str, password: str) -> User:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    return user


@router.post("/register", response_model=TokenResponse)
async def register(body: UserRegister, db: AsyncSession = Depends(get_db)):
    existing = await db.execute(
        select(User).where(or_(User.username == body.username, User.email == body.email))
    )
    if existing.scalars().first():
        raise HTTPException(status_code=409, detail="Username or email already taken")

    is_admin = body.admin_key is not None and body.admin_key == settings.admin_key

    user = User(
        email=body.email,
        username=body.username,
        password_hash=hash_password(body.password),
        is_admin=is_admin,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    user = await _authenticate(db, form_data.username, form_data.password)
    return _token_response(user)


@router.post("/login/json", response_model=TokenResponse)
async def login_json(body: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await _authenticate(db, body.username, body.password)
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if body.username != current_user.username:
        existing = await db.execute(select(User).where(User.username == body.username))
        if existing.scalar_one_or_none():
            raise HTTPException(status_code=409, detail="Username already taken")
        current_user.username = body.username
        await db.flush()
        await db.refresh(current_user)
    return current_user
