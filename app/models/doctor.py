from sqlalchemy import Column, Integer, String, ForeignKey, Boolean
from sqlalchemy.orm import relationship

from ..core.database import Base
from .user import generate_id

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Professional information
    specialization = Column(String(100), nullable=False)
    experience = Column(Integer, nullable=False)

    # Reputation, stored as text to keep the "4.9" formatting intact
    rating = Column(String(10), default="4.0")
    review_count = Column(Integer, default=0)

    # Availability
    available = Column(Boolean, default=True)

    # Relationships
    user = relationship("User", back_populates="doctor")

    def __repr__(self):
        return f"<Doctor(id={self.id}, user_id={self.user_id}, specialization='{self.specialization}')>"
