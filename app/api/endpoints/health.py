import logging
from datetime import datetime, timezone

from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.router import create_router
from app.api.dependencies.database import get_db
from app.core.config import settings

logger = logging.getLogger(__name__)

router = create_router(name="health")


@router.get("/health")
def health(db: Session = Depends(get_db)):
	body = {
		"status": "healthy",
		"timestamp": datetime.now(timezone.utc).isoformat(),
		"environment": settings.ENVIRONMENT,
	}
	try:
		db.execute(text("SELECT 1"))
	except SQLAlchemyError as e:
		logger.error("Health check database query failed", extra={"error": str(e)})
		body["status"] = "unhealthy"
		return JSONResponse(status_code=503, content=body)
	return body
