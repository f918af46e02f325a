"""Item endpoints for the API."""

from typing import List

from fastapi import APIRouter, Depends, status

from components.core.init_db import get_store
from components.item import schemas
from components.item.repository import ItemRepository
from components.ledger.store import LedgerStore
from components.payment import schemas as payment_schemas
from components.payment.repository import PaymentRepository

router = APIRouter(
    tags=["items"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/projects/{project_id}/items",
    response_model=schemas.Item,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    project_id: int,
    item: schemas.ItemCreate,
    store: LedgerStore = Depends(get_store),
):
    """Create an estimated item for a project."""
    return await ItemRepository(store).create(project_id, item)


@router.get("/projects/{project_id}/items", response_model=List[schemas.Item])
async def read_items(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get the items of a project."""
    return await ItemRepository(store).get_by_project(project_id)


@router.get(
    "/projects/{project_id}/items/payment-summary",
    response_model=List[schemas.ItemPaymentSummary],
)
async def read_items_payment_summary(
    project_id: int,
    store: LedgerStore = Depends(get_store),
):
    """
    Get every item of a project with its payment summary.

    Returns for each item:
    - Number of linked payments
    - Total amount of those payments
    - Amount already paid through installments
    - Payment status (unpaid, partial, paid)
    """
    return await ItemRepository(store).get_items_with_payment_summary(project_id)


@router.get("/items/{item_id}/payments", response_model=List[payment_schemas.Payment])
async def read_item_payments(
    item_id: int,
    store: LedgerStore = Depends(get_store),
):
    """Get the payments linked to an item, newest first."""
    return await PaymentRepository(store).get_payments_by_item(item_id)
