from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
	"""snake_case in Python, camelCase on the wire."""
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TimestampModel(CamelModel):
	created_at: datetime
	updated_at: datetime
