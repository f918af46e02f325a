"""Item model for the database."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class Item(Base):
    """Estimated line of work or material of a project."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False, default=1)
    unit = Column(String(20), nullable=False, default="un")
    estimated_unit_price = Column(Numeric(14, 2), nullable=False, default=0)
    estimated_total = Column(Numeric(14, 2), nullable=False, default=0)
    category = Column(String(20), nullable=False, default="material")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="items")
    payments = relationship("Payment", back_populates="item")
