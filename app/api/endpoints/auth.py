from typing import Optional

from fastapi import Depends, Response, status
from app.api.router import create_router
from sqlalchemy.orm import Session

from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_principal, get_optional_principal
from app.api.dependencies.services import get_auth_service, get_user_service
from app.core.config import settings
from app.core.security import Principal
from app.schemas.auth import AuthStatus, LoginResponse, MessageResponse, UserLogin
from app.schemas.user import UserCreate, UserRead, UserSummary
from app.services.auth_services import AuthService
from app.services.user_services import UserService

router = create_router(name="auth")


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
	"""Register a new user if the username is not already taken."""
	return auth_service.register_user(user_in, db)


@router.post("/login", response_model=LoginResponse)
def login(
    login_data: UserLogin,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
	"""Check credentials and start a cookie session."""
	user, token = auth_service.authenticate(login_data)
	response.set_cookie(
		key=settings.SESSION_COOKIE_NAME,
		value=token,
		max_age=settings.SESSION_MAX_AGE_MINUTES * 60,
		httponly=True,
		secure=settings.is_production,
		samesite="lax",
	)
	return LoginResponse(user=UserSummary.model_validate(user), message="Login successful")


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, principal: Principal = Depends(get_current_principal)):
	response.delete_cookie(
		key=settings.SESSION_COOKIE_NAME,
		httponly=True,
		secure=settings.is_production,
		samesite="lax",
	)
	return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserRead)
def me(
	principal: Principal = Depends(get_current_principal),
	user_service: UserService = Depends(get_user_service),
):
	return user_service.get_profile(principal.id)


@router.get("/status", response_model=AuthStatus)
def session_status(principal: Optional[Principal] = Depends(get_optional_principal)):
	if principal is None:
		return AuthStatus(authenticated=False)
	return AuthStatus(
		authenticated=True,
		user=UserSummary(id=principal.id, username=principal.username, role=principal.role),
	)
