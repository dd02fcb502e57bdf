from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from jose import JWTError

from reality_bracket.core.database import get_db
from reality_bracket.core.security import decode_access_token
from reality_bracket.core.session import AuthSession
from reality_bracket.models.models import User, League, LeagueMember

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_session(token: str = Depends(oauth2_scheme)) -> AuthSession:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        return AuthSession.from_claims(decode_access_token(token))
    except (JWTError, ValueError, TypeError):
        raise credentials_exception


async def get_current_user(
    session: AuthSession = Depends(get_session),
    db: AsyncSession = Depends(get_db),
) -> User:
    result = await db.execute(select(User).where(User.id == session.user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def get_league_or_404(db: AsyncSession, league_id: int) -> League:
    result = await db.execute(select(League).where(League.id == league_id))
    league = result.scalar_one_or_none()
    if not league:
        raise HTTPException(status_code=404, detail="League not found")
    return league


async def require_membership(db: AsyncSession, league_id: int, user_id: int) -> LeagueMember:
    result = await db.execute(
        select(LeagueMember).where(
            LeagueMember.league_id == league_id,
            LeagueMember.user_id == user_id,
        )
    )
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(status_code=403, detail="Not a member of this league")
    return member
