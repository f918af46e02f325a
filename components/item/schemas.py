"""Pydantic schemas for item data validation."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from components.payment.schemas import PaymentCategory


class ItemPaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class ItemBase(BaseModel):
    """Base item schema."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    quantity: Decimal = Field(Decimal("1"), gt=0)
    unit: str = "un"
    estimated_unit_price: Decimal = Field(Decimal("0"), ge=0)
    category: PaymentCategory = PaymentCategory.MATERIAL

    class Config:
        use_enum_values = True
        validate_default = True


class ItemCreate(ItemBase):
    """Schema for item creation; the total defaults to quantity x unit price."""
    estimated_total: Optional[Decimal] = Field(None, ge=0)


class Item(ItemBase):
    """Schema for item response."""
    id: int
    project_id: int
    quantity: Decimal
    estimated_total: Decimal
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True


class ItemPaymentSummary(Item):
    """Item with how much of its linked payments has been paid."""
    payment_count: int
    total_payment_amount: Decimal
    total_paid: Decimal
    payment_status: ItemPaymentStatus
