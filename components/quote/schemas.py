"""Pydantic schemas for quote data validation."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class QuoteBase(BaseModel):
    """Base quote schema."""
    supplier_id: int
    total_price: Decimal = Field(Decimal("0"), ge=0)
    expires_at: Optional[datetime] = None
    note: Optional[str] = None


class QuoteCreate(QuoteBase):
    """Schema for quote creation. New quotes are never chosen."""
    pass


class QuoteUpdate(BaseModel):
    """Editable quote fields. `chosen` is deliberately absent."""
    total_price: Optional[Decimal] = Field(None, ge=0)
    expires_at: Optional[datetime] = None
    note: Optional[str] = None


class Quote(QuoteBase):
    """Schema for quote response."""
    id: int
    project_id: int
    owner_id: int
    chosen: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
