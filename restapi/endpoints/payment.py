"""Payment and installment endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status

from components.core.init_db import get_store
from components.ledger.store import LedgerStore
from components.payment import schemas
from components.payment.repository import PaymentRepository

router = APIRouter(
    tags=["payments"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/projects/{project_id}/payments",
    response_model=schemas.PaymentWithInstallments,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment(
    project_id: int,
    payment: schemas.PaymentCreate,
    store: LedgerStore = Depends(get_store),
):
    """
    Register a payment and generate its installments.

    The payable amount (principal, or total with interest) is split into
    `num_installments` monthly installments starting at `first_due_date`.
    The last installment absorbs the rounding difference.
    """
    return await PaymentRepository(store).create_payment(project_id, payment)


@router.get("/projects/{project_id}/payments", response_model=List[schemas.Payment])
async def read_payments(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get the payments of a project, newest first."""
    return await PaymentRepository(store).get_payments_by_project(project_id)


@router.post(
    "/payments/{payment_id}/installments",
    response_model=List[schemas.Installment],
    status_code=status.HTTP_201_CREATED,
)
async def create_installments(
    payment_id: int,
    schedule: schemas.ScheduleRequest,
    store: LedgerStore = Depends(get_store),
):
    """Generate the schedule of a payment that has none yet."""
    return await PaymentRepository(store).generate_installments(payment_id, schedule.first_due_date)


@router.get("/payments/{payment_id}/installments", response_model=List[schemas.Installment])
async def read_installments(
    payment_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get the installments of a payment in schedule order."""
    return await PaymentRepository(store).get_installments_by_payment(payment_id)


@router.patch("/installments/{installment_id}", response_model=schemas.Installment)
async def update_installment(
    installment_id: int,
    changes: schemas.InstallmentUpdate,
    store: LedgerStore = Depends(get_store),
):
    """Update status, paid date, payment method, receipt or note of an installment."""
    return await PaymentRepository(store).update_installment(installment_id, changes)


@router.post("/installments/{installment_id}/pay", response_model=schemas.Installment)
async def pay_installment(
    installment_id: int,
    payment: Optional[schemas.InstallmentPay] = Body(None),
    store: LedgerStore = Depends(get_store),
):
    """Mark an installment as paid (today unless a paid date is given)."""
    payment = payment or schemas.InstallmentPay()
    return await PaymentRepository(store).mark_installment_paid(
        installment_id,
        paid_date=payment.paid_date,
        payment_method_used=payment.payment_method_used,
    )


@router.get("/projects/{project_id}/financial-summary", response_model=schemas.FinancialSummary)
async def read_financial_summary(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """
    Get the financial summary of a project.

    Returns:
    - Total cost (payments plus items without a linked payment)
    - Total paid and total remaining
    - Percentage paid
    - Next due date and number of overdue installments
    - Months remaining until the last due date
    """
    return await PaymentRepository(store).get_financial_summary(project_id)


@router.get("/projects/{project_id}/monthly-payments", response_model=List[schemas.MonthlyPaymentData])
async def read_monthly_payments(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get due and paid installment totals per month."""
    return await PaymentRepository(store).get_monthly_payment_data(project_id)
