from typing import List

from fastapi import Depends, status
from app.api.router import create_router
from sqlalchemy.orm import Session
from app.api.dependencies.auth import get_current_principal
from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_message_service
from app.core.security import Principal
from app.services.message_services import MessageService
from app.schemas.message import MarkReadResponse, MessageCreate, MessageRead


router = create_router(name="message")


@router.get("/{user_id_1}/{user_id_2}", response_model=List[MessageRead])
def get_conversation(
	user_id_1: str,
	user_id_2: str,
	principal: Principal = Depends(get_current_principal),
	message_service: MessageService = Depends(get_message_service),
):
	return message_service.get_conversation(user_id_1, user_id_2, principal)


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_message(
	message_in: MessageCreate,
	db: Session = Depends(get_db),
	principal: Principal = Depends(get_current_principal),
	message_service: MessageService = Depends(get_message_service),
):
	return message_service.send_message(message_in, principal, db)


@router.patch("/{message_id}/read", response_model=MarkReadResponse)
def mark_message_read(
	message_id: str,
	db: Session = Depends(get_db),
	principal: Principal = Depends(get_current_principal),
	message_service: MessageService = Depends(get_message_service),
):
	message_service.mark_read(message_id, principal, db)
	return MarkReadResponse(success=True)
