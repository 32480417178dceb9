from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import UserRole
from ...api.deps import get_current_user, rate_limit_check, require_role
from ...services.auth_service import AuthService
from ...schemas.auth import (
    UserCreate, UserLogin, TokenResponse, UserResponse, DoctorResponse
)
from ...models.user import User

router = APIRouter(tags=["Authentication"])

@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """Create an admin, doctor or patient account."""
    auth_service = AuthService(db)
    user = auth_service.create_user(user_data)
    return UserResponse.model_validate(user)

@router.post("/auth/login", response_model=TokenResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate user and return an access token."""
    auth_service = AuthService(db)
    return auth_service.authenticate_user(login_data)

@router.get("/auth/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return UserResponse.model_validate(current_user)

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    _: User = Depends(require_role([UserRole.ADMIN]))
):
    """List all accounts (admin only)."""
    users = db.query(User).order_by(User.id).offset(skip).limit(limit).all()
    return [UserResponse.model_validate(user) for user in users]

@router.get("/doctors", response_model=List[DoctorResponse])
async def list_doctors(db: Session = Depends(get_db)):
    """Doctors available for the dashboard cards."""
    return AuthService(db).list_doctors()
