from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import func
from sqlalchemy.orm import Session

from contentplatform.api.deps import get_db, get_current_user
from contentplatform.api.schemas.auth import UserCreate, Token, UserResponse
from contentplatform.core.rbac import get_effective_permissions
from contentplatform.core.security import verify_password, create_access_token
from contentplatform.db.models import User
from contentplatform.services.accounts import register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    """Register a new user, either into a new organization or via invitation."""
    user = register_user(
        db,
        email=user_in.email,
        password=user_in.password,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        invitation_token=user_in.invitation_token,
    )
    return UserResponse.from_user(user)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Login and get an access token plus the effective permissions."""
    user = db.query(User).filter(func.lower(User.email) == form_data.username.lower()).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    # Update last login
    user.last_login = datetime.utcnow()
    db.commit()

    return Token(
        access_token=create_access_token(user.id),
        user_id=user.id,
        roles=user.role_names,
        permissions=sorted(get_effective_permissions(user)),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return UserResponse.from_user(current_user)
