from sqlalchemy import Column, String, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from farmdirect.models.base import BaseModel

class Certification(BaseModel):
    __tablename__ = "certifications"
    
    product_id = Column(Integer, ForeignKey('products.id'), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    issuer = Column(String(150))
    valid_until = Column(DateTime)
    
    product = relationship("Product", back_populates="certs")
