"""Quote model for the database."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import relationship

from components.core.database import Base


class Quote(Base):
    """A supplier's priced proposal for a project."""
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    supplier_id = Column(Integer, nullable=False, index=True)
    owner_id = Column(Integer, nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False, default=0)
    # Only ever written by the choose_quote procedure
    chosen = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime, nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="quotes")
