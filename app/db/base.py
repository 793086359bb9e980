# Import all models so Base.metadata and relationship() targets are complete
from app.db.base_class import Base  # noqa: F401
from app.db.models.user import User  # noqa: F401
from app.db.models.job import Job  # noqa: F401
from app.db.models.job_application import JobApplication  # noqa: F401
from app.db.models.message import Message  # noqa: F401
from app.db.models.payment import Payment  # noqa: F401
from app.db.models.request_log import RequestLog  # noqa: F401
