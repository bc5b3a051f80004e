from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..models.user import User
from ..core.exceptions import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from ..core.security import (
    AuthContext, UserRole, create_access_token, get_password_hash, verify_password
)
from ..schemas.auth import LoginResponse, UserResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        specialization: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> UserResponse:
        """Register a new doctor or patient."""
        if role == UserRole.DOCTOR:
            if not specialization or not specialization.strip():
                raise BadRequestError("Specialization is required for doctors")
            specialization = specialization.strip()
        else:
            specialization = None

        # Check if user already exists
        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise ConflictError("User already exists")

        new_user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            specialization=specialization,
            photo_url=photo_url,
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent registration with the same email
            self.db.rollback()
            raise ConflictError("User already exists")
        self.db.refresh(new_user)

        logger.info(f"Registered {role.value.lower()} {new_user.id}")
        return UserResponse.model_validate(new_user)

    def authenticate_user(self, email: str, password: str) -> LoginResponse:
        """Authenticate user and return a bearer token."""
        user = self.db.query(User).filter(User.email == email).first()

        # Unknown email and wrong password must look the same to the caller
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = create_access_token(user.id, user.email, user.role)

        logger.info(f"User {user.id} logged in")
        return LoginResponse(user=UserResponse.model_validate(user), token=token)

    def get_profile(self, actor: AuthContext) -> UserResponse:
        """Return the authenticated caller's public profile."""
        user = self.db.query(User).filter(User.id == actor.user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return UserResponse.model_validate(user)
