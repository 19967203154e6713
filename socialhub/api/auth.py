from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from socialhub.schemas.auth_schema import LoginRequest, RegisterRequest, AuthResponse
from socialhub.schemas.user_schema import UserEnvelope, UserResponse
from socialhub.services.auth_service import AuthService, get_auth_service, get_current_user
from socialhub.services.user_service import UserService
from socialhub.db.session import get_db
from socialhub.models.user import User
from socialhub.utils.exceptions import AppError, AuthenticationError, InternalError
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=AuthResponse)
async def register(
    user_data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new user and log them in"""
    try:
        user_service = UserService(db)

        user = await user_service.create_user(
            email=user_data.email,
            name=user_data.name,
            password=user_data.password
        )
        token = auth_service.issue_token(user)

        return AuthResponse(user=UserResponse.model_validate(user), token=token)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise InternalError("Registration failed")

@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Login user and return a token"""
    try:
        user_service = UserService(db)

        user = await user_service.verify_password(credentials.email, credentials.password)

        if not user:
            raise AuthenticationError("Invalid credentials")

        token = auth_service.issue_token(user)

        return AuthResponse(user=UserResponse.model_validate(user), token=token)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise InternalError("Login failed")

@router.get("/me", response_model=UserEnvelope)
async def me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user"""
    return UserEnvelope(user=UserResponse.model_validate(current_user))
