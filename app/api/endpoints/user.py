# app/api/endpoints/user.py
from fastapi import Depends
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_principal
from app.api.dependencies.services import get_user_service
from app.core.security import Principal
from app.schemas.user import UserRead, UserUpdate
from app.services.user_services import UserService

router = create_router(name="user")

@router.get("/me", response_model=UserRead)
def read_users_me(
  principal: Principal = Depends(get_current_principal),
  user_service: UserService = Depends(get_user_service),
):
  return user_service.get_profile(principal.id)

@router.patch("/me", response_model=UserRead)
def update_users_me(
  user_in: UserUpdate,
  db: Session = Depends(get_db),
  principal: Principal = Depends(get_current_principal),
  user_service: UserService = Depends(get_user_service),
):
  return user_service.update_profile(principal, user_in, db)
