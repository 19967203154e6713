from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from socialhub.config import Settings
from socialhub.schemas.auth_schema import TokenData
from socialhub.models.user import User
from socialhub.db.session import get_db
from socialhub.services.user_service import UserService
from socialhub.utils.exceptions import AuthenticationError, NotFoundError

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

class AuthService:
    """Issues and verifies signed, time-bounded bearer tokens"""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_hours: int = 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_hours = expire_hours

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.ALGORITHM,
            expire_hours=settings.ACCESS_TOKEN_EXPIRE_HOURS,
        )

    def issue_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token for the user"""
        expire = datetime.utcnow() + (expires_delta or timedelta(hours=self.expire_hours))

        to_encode = {
            "sub": user.id,
            "userId": user.id,
            "email": user.email,
            "name": user.name,
            "ver": user.token_version or 0,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenData:
        """Decode a token; malformed, forged and expired tokens all fail alike"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise AuthenticationError("Invalid token")

        user_id = payload.get("userId")
        email = payload.get("email")
        if user_id is None or email is None:
            raise AuthenticationError("Invalid token")

        return TokenData(
            user_id=user_id,
            email=email,
            name=payload.get("name") or "User",
            version=payload.get("ver", 0),
            exp=payload.get("exp"),
        )

def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth

async def get_token_data(
    token: Optional[str] = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenData:
    """Dependency to get the verified claims of the bearer token"""
    if not token:
        raise AuthenticationError("Access token required")
    return auth_service.verify_token(token)

async def get_current_user(
    token_data: TokenData = Depends(get_token_data),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency to get current authenticated user"""
    user = await UserService(db).get_user_by_id(token_data.user_id)

    if user is None:
        raise NotFoundError("User not found")

    if token_data.version != (user.token_version or 0):
        logger.info(f"Rejected stale token for user {user.id}")
        raise AuthenticationError("Token has been revoked")

    return user
