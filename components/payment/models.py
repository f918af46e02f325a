"""Payment and installment models for the database."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from components.core.database import Base


class Payment(Base):
    """A financial obligation of a project, paid in one or more installments."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(Integer, nullable=False, index=True)
    description = Column(String(255), nullable=False)
    category = Column(String(20), nullable=False, default="material")
    payment_method = Column(String(20), nullable=False, default="pix")
    total_amount = Column(Numeric(14, 2), nullable=False)
    is_installment = Column(Boolean, nullable=False, default=False)
    num_installments = Column(Integer, nullable=False, default=1)
    has_interest = Column(Boolean, nullable=False, default=False)
    interest_rate = Column(Numeric(6, 4), nullable=False, default=0)  # % per month
    total_with_interest = Column(Numeric(14, 2), nullable=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True, index=True)
    supplier_id = Column(Integer, nullable=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="payments")
    item = relationship("Item", back_populates="payments")
    installments = relationship(
        "Installment",
        back_populates="payment",
        order_by="Installment.installment_number",
        cascade="all, delete-orphan",
    )


class Installment(Base):
    """One dated slice of a payment schedule."""
    __tablename__ = "installments"
    __table_args__ = (
        UniqueConstraint("payment_id", "installment_number", name="uq_installment_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(Integer, nullable=False, index=True)
    installment_number = Column(Integer, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    paid_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    payment_method_used = Column(String(20), nullable=True)
    receipt_url = Column(Text, nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    payment = relationship("Payment", back_populates="installments")
