from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from farmdirect.schemas.base import EntityId, TimestampSchema

class CertificationCreate(BaseModel):
    product_id: EntityId
    title: str = Field(min_length=2, max_length=150)
    issuer: Optional[str] = Field(default=None, min_length=2, max_length=150)
    valid_until: Optional[datetime] = None

class CertificationUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=150)
    issuer: Optional[str] = Field(default=None, min_length=2, max_length=150)
    # explicit null clears the date
    valid_until: Optional[datetime] = None

class Certification(TimestampSchema):
    id: int
    product_id: int
    title: str
    issuer: Optional[str] = None
    valid_until: Optional[datetime] = None
