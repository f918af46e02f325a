"""Project model for the database."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from components.core.database import Base


class Project(Base):
    """Renovation project owning payments, items and quotes."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    owner_id = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    payments = relationship("Payment", back_populates="project")
    items = relationship("Item", back_populates="project")
    quotes = relationship("Quote", back_populates="project")
