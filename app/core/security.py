from dataclasses import dataclass
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of one request."""
    id: str
    role: str
    username: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def create_session_token(data: dict, expires_delta: int = None):
    """Sign a session token; the payload carries the user id in `sub` and the role."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_delta or settings.SESSION_MAX_AGE_MINUTES)
    to_encode.update({"exp": expire, "type": "session"})
    return jwt.encode(to_encode, settings.session_secret, algorithm=settings.ALGORITHM)

def decode_session_token(token: str):
    """Return the token payload, or None if the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "session" or not payload.get("sub"):
        return None
    return payload
