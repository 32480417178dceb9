from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from datetime import datetime
from typing import List
import re

from ..models.user import User
from ..core.exceptions import ConflictError
from ..core.security import (
    verify_password, get_password_hash, create_access_token, UserRole
)
from ..schemas.auth import UserCreate, UserLogin, TokenResponse, DoctorResponse

def doctor_display_name(login: str) -> str:
    """Readable name from a login: 'dr.ana.silva@x.com' -> 'Dr Ana Silva'."""
    local_part = login.split("@")[0]
    words = re.sub(r"[._]", " ", local_part).split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, user_data: UserCreate) -> User:
        """Create a new admin, doctor or patient account."""
        new_user = User(
            login=user_data.login,
            password_hash=get_password_hash(user_data.password),
            role=user_data.role,
            is_active=True
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Login already exists")
        self.db.refresh(new_user)

        return new_user

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate user and return an access token."""
        user = self.db.query(User).filter(
            User.login == login_data.login
        ).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is deactivated"
            )

        user.last_login = datetime.utcnow()
        self.db.commit()

        return TokenResponse(
            access_token=create_access_token(user.id, user.login, user.role),
            user_id=user.id,
            role=user.role
        )

    def list_doctors(self) -> List[DoctorResponse]:
        doctors = self.db.query(User).filter(
            User.role == UserRole.DOCTOR
        ).order_by(User.id).all()

        return [
            DoctorResponse(id=doctor.id, name=doctor_display_name(doctor.login))
            for doctor in doctors
        ]
