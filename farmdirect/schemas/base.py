from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

# Largest value a signed 64-bit INTEGER column holds
MAX_ID = 2**63 - 1

EntityId = Annotated[int, Field(gt=0, le=MAX_ID)]

class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

class TimestampSchema(BaseSchema):
    created_at: datetime
    updated_at: datetime
