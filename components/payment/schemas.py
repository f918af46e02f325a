"""Pydantic schemas for payment and installment data validation."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PIX = "pix"
    BOLETO = "boleto"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CHECK = "check"
    AUTO_DEBIT = "auto_debit"
    OTHER = "other"


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class PaymentCategory(str, Enum):
    MATERIAL = "material"
    LABOR = "labor"
    SERVICE = "service"
    OTHER = "other"


class PaymentBase(BaseModel):
    """Base payment schema."""
    description: str = Field(..., min_length=2, max_length=255)
    category: PaymentCategory = PaymentCategory.MATERIAL
    payment_method: PaymentMethod = PaymentMethod.PIX
    total_amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    is_installment: bool = False
    num_installments: int = Field(1, ge=1)
    has_interest: bool = False
    interest_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    total_with_interest: Optional[Decimal] = Field(None, ge=0)
    item_id: Optional[int] = None
    supplier_id: Optional[int] = None
    quote_id: Optional[int] = None
    note: Optional[str] = None

    class Config:
        use_enum_values = True
        validate_default = True


class PaymentCreate(PaymentBase):
    """Schema for payment creation together with its schedule."""
    first_due_date: date


class Payment(PaymentBase):
    """Schema for payment response."""
    id: int
    project_id: int
    owner_id: int
    # Stored rows are trusted; creation rules live on PaymentBase only
    description: str
    total_amount: Decimal
    num_installments: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True

    @property
    def payable_amount(self) -> Decimal:
        """Principal, or the total with interest when interest applies."""
        if self.has_interest and self.total_with_interest is not None:
            return self.total_with_interest
        return self.total_amount


class InstallmentCreate(BaseModel):
    """Schema for an installment ready for bulk insertion."""
    payment_id: int
    owner_id: int
    installment_number: int
    amount: Decimal
    due_date: date
    paid_date: Optional[date] = None
    status: InstallmentStatus = InstallmentStatus.PENDING
    payment_method_used: Optional[PaymentMethod] = None
    receipt_url: Optional[str] = None
    note: Optional[str] = None

    class Config:
        use_enum_values = True
        validate_default = True


class Installment(InstallmentCreate):
    """Schema for installment response."""
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True


class InstallmentUpdate(BaseModel):
    """Mutable installment fields; number and amount are fixed at creation."""
    status: Optional[InstallmentStatus] = None
    paid_date: Optional[date] = None
    payment_method_used: Optional[PaymentMethod] = None
    receipt_url: Optional[str] = None
    note: Optional[str] = None

    class Config:
        use_enum_values = True
        validate_default = True


class InstallmentPay(BaseModel):
    """Body for marking an installment as paid."""
    paid_date: Optional[date] = None
    payment_method_used: Optional[PaymentMethod] = None

    class Config:
        use_enum_values = True
        validate_default = True


class ScheduleRequest(BaseModel):
    """Body for materializing the schedule of an existing payment."""
    first_due_date: date


class PaymentWithInstallments(Payment):
    """Schema for a created payment and its schedule."""
    installments: List[Installment] = []


class FinancialSummary(BaseModel):
    """Project-wide financial snapshot, recomputed on every request."""
    total_cost: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    percent_paid: Decimal
    next_due_date: Optional[date] = None
    overdue_count: int
    months_remaining: int
    last_due_date: Optional[date] = None


class MonthlyPaymentData(BaseModel):
    """Due and paid totals of one calendar month (YYYY-MM)."""
    month: str
    due: Decimal
    paid: Decimal
