from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from socialhub.schemas.auth_schema import ChangePasswordRequest, PasswordChangedResponse
from socialhub.schemas.user_schema import UserUpdate, UserEnvelope, UserResponse, SuccessResponse
from socialhub.services.auth_service import AuthService, get_auth_service, get_current_user
from socialhub.services.user_service import UserService
from socialhub.db.session import get_db
from socialhub.models.user import User
from socialhub.utils.exceptions import (
    AppError,
    AuthenticationError,
    ConflictError,
    InternalError,
    PermissionDeniedError,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def _ensure_self(current_user: User, user_id: str) -> None:
    if current_user.id != user_id:
        raise PermissionDeniedError("You can only modify your own account")

@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update the authenticated user's profile"""
    try:
        _ensure_self(current_user, user_id)
        user_service = UserService(db)

        if user_update.email and user_update.email != current_user.email:
            existing = await user_service.get_user_by_email(user_update.email)
            if existing:
                raise ConflictError("Email already registered")

        user = await user_service.update_profile(
            user_id,
            name=user_update.name,
            email=user_update.email,
            profile_image=user_update.profile_image
        )
        return UserEnvelope(user=UserResponse.model_validate(user))
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Update user error: {e}")
        raise InternalError("Failed to update profile")

@router.put("/{user_id}/password", response_model=PasswordChangedResponse)
async def change_password(
    user_id: str,
    passwords: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Change password after proving knowledge of the current one"""
    try:
        _ensure_self(current_user, user_id)
        user_service = UserService(db)

        valid = await user_service.verify_password(current_user.email, passwords.current_password)
        if not valid:
            raise AuthenticationError("Current password is incorrect")

        user = await user_service.update_password(user_id, passwords.new_password)
        return PasswordChangedResponse(success=True, token=auth_service.issue_token(user))
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Change password error: {e}")
        raise InternalError("Failed to change password")

@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete the authenticated user and all of their posts"""
    try:
        _ensure_self(current_user, user_id)

        await UserService(db).delete_user_cascade(user_id)
        return SuccessResponse(success=True)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Delete user error: {e}")
        raise InternalError("Failed to delete account")
